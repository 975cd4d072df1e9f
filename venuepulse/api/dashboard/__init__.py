"""Resource serving the live dashboard page."""

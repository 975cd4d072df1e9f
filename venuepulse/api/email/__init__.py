"""Resource for sending a test email."""

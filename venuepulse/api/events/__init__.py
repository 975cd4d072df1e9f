"""Report resources: fresh pipeline runs and the cached report."""

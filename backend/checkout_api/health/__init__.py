"""Health reporting and metrics exposition."""

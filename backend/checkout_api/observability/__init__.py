"""Logging, request correlation and metrics."""

"""Stale draft order cleanup sweep."""

"""Cursor Admin API clients."""

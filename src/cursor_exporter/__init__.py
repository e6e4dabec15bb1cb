"""Prometheus exporter for the Cursor Admin API."""

__version__ = "0.1.0"

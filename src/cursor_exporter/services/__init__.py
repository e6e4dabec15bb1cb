"""Metric collectors and wiring."""

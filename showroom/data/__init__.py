"""Packaged sample data."""

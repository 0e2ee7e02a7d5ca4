"""Geocode endpoint."""

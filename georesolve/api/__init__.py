"""HTTP API for the geocode service."""

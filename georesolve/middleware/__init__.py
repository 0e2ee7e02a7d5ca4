"""HTTP middleware for the geocode API."""

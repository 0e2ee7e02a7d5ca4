"""Version 1 of the geocode API."""

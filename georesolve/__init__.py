"""Address resolution service."""

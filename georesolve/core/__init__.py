"""Core configuration, logging, locality tables and lifecycle events."""

"""Shared test fixtures.

Contains fixtures for:
- Geocoding providers backed by ``httpx.MockTransport``
- The FastAPI application and its test clients
"""

"""Geocoding provider adapters."""

from georesolve.geocoding.providers.base import BaseGeocodingProvider, ProviderConfig
from georesolve.geocoding.providers.geoapify import GeoapifyProvider
from georesolve.geocoding.providers.google import (
    GoogleFindPlaceProvider,
    GoogleTextSearchProvider,
)
from georesolve.geocoding.providers.mapbox import MapboxProvider
from georesolve.geocoding.providers.nominatim import NominatimProvider
from georesolve.geocoding.providers.registry import (
    PROVIDER_CLASSES,
    build_providers,
    provider_config,
)

__all__ = [
    "BaseGeocodingProvider",
    "ProviderConfig",
    "GoogleFindPlaceProvider",
    "GoogleTextSearchProvider",
    "GeoapifyProvider",
    "MapboxProvider",
    "NominatimProvider",
    "PROVIDER_CLASSES",
    "build_providers",
    "provider_config",
]

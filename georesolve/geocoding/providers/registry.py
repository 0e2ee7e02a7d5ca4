"""Build the ordered adapter chain from settings."""

from typing import Optional

import httpx

from georesolve.core.config import Settings
from georesolve.core.logging import get_logger
from georesolve.geocoding.providers.base import BaseGeocodingProvider, ProviderConfig
from georesolve.geocoding.providers.geoapify import GeoapifyProvider
from georesolve.geocoding.providers.google import (
    GoogleFindPlaceProvider,
    GoogleTextSearchProvider,
)
from georesolve.geocoding.providers.mapbox import MapboxProvider
from georesolve.geocoding.providers.nominatim import NominatimProvider

logger = get_logger(__name__)

PROVIDER_CLASSES: dict[str, type[BaseGeocodingProvider]] = {
    "google_findplace": GoogleFindPlaceProvider,
    "geoapify": GeoapifyProvider,
    "mapbox": MapboxProvider,
    "google_text": GoogleTextSearchProvider,
    "nominatim": NominatimProvider,
}


def provider_config(name: str, settings: Settings) -> Optional[ProviderConfig]:
    """Return the configuration for one provider, or None if it is unavailable.

    Args:
        name: Provider name as listed in ``GEOCODING_PROVIDERS``
        settings: Application settings

    Returns:
        ProviderConfig, or None when the provider's credential is missing
        or it has been disabled
    """
    common = {
        "timeout": settings.GEOCODING_TIMEOUT,
        "candidate_limit": settings.GEOCODING_PROVIDER_CANDIDATE_LIMIT,
        "country_code": settings.GEOCODING_COUNTRY_CODE,
    }

    if name in ("google_findplace", "google_text"):
        if not settings.GOOGLE_MAPS_API_KEY:
            return None
        return ProviderConfig(
            name=name,
            base_url=settings.GOOGLE_PLACES_BASE_URL,
            api_key=settings.GOOGLE_MAPS_API_KEY,
            options={
                "region": settings.GEOCODING_COUNTRY_CODE,
                "bias_radius_m": settings.GEOCODING_BIAS_RADIUS_M,
            },
            **common,
        )
    if name == "geoapify":
        if not settings.GEOAPIFY_API_KEY:
            return None
        return ProviderConfig(
            name=name,
            base_url=settings.GEOAPIFY_BASE_URL,
            api_key=settings.GEOAPIFY_API_KEY,
            **common,
        )
    if name == "mapbox":
        if not settings.MAPBOX_TOKEN:
            return None
        return ProviderConfig(
            name=name,
            base_url=settings.MAPBOX_BASE_URL,
            api_key=settings.MAPBOX_TOKEN,
            **common,
        )
    if name == "nominatim":
        if not settings.NOMINATIM_ENABLED:
            return None
        return ProviderConfig(
            name=name,
            base_url=settings.NOMINATIM_BASE_URL,
            options={
                "user_agent": settings.NOMINATIM_USER_AGENT,
                "viewbox_pad": settings.NOMINATIM_VIEWBOX_PAD,
            },
            **common,
        )
    raise ValueError(f"Unknown geocoding provider: {name}")


def build_providers(
    settings: Settings, client: httpx.AsyncClient
) -> list[BaseGeocodingProvider]:
    """Instantiate the configured adapters in priority order.

    Providers without credentials are left out of the chain.
    """
    providers: list[BaseGeocodingProvider] = []
    skipped: list[str] = []
    for name in settings.GEOCODING_PROVIDERS:
        config = provider_config(name, settings)
        if config is None:
            skipped.append(name)
            continue
        providers.append(PROVIDER_CLASSES[name](config, client))

    logger.info(
        "geocode_providers_configured",
        active=[p.name for p in providers],
        skipped=skipped,
    )
    return providers

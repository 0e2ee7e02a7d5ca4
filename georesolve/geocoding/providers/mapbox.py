"""Mapbox geocoding adapter."""

from typing import Any, Optional
from urllib.parse import quote

from georesolve.geocoding.exceptions import AdapterFailure
from georesolve.geocoding.providers.base import BaseGeocodingProvider
from georesolve.geocoding.types import CanonicalMeta, Near

PRECISE_PLACE_TYPES = frozenset({"poi", "address", "street"})


class MapboxProvider(BaseGeocodingProvider):
    """Mapbox Geocoding v5 (``mapbox.places``)."""

    name = "mapbox"

    def build_request(
        self, query: str, near: Optional[Near], limit: int
    ) -> tuple[str, dict[str, str]]:
        params = {
            "access_token": self.config.api_key or "",
            "language": "en",
            "limit": str(limit),
        }
        if near:
            params["proximity"] = f"{near.lng},{near.lat}"
        url = f"{self.config.base_url}/{quote(query, safe='')}.json"
        return url, params

    def extract_entries(self, payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, dict):
            raise AdapterFailure(self.name, "unexpected payload shape")
        return list(payload.get("features") or [])

    def is_precise(self, entry: dict[str, Any]) -> bool:
        place_types = entry.get("place_type") or []
        return any(t in PRECISE_PLACE_TYPES for t in place_types)

    def extract_label(self, entry: dict[str, Any]) -> str:
        return entry.get("place_name") or ""

    def extract_coordinates(
        self, entry: dict[str, Any]
    ) -> tuple[Optional[float], Optional[float]]:
        center = entry.get("center") or []
        if len(center) < 2:
            return None, None
        # Mapbox orders coordinates lng, lat
        return center[1], center[0]

    def extract_meta(self, entry: dict[str, Any]) -> CanonicalMeta:
        city = region = code = country = None
        for context in entry.get("context") or []:
            context_id = context.get("id") or ""
            if context_id.startswith("place"):
                city = context.get("text")
            elif context_id.startswith("region"):
                region = context.get("text")
                # short_code looks like "US-NY"
                short_code = context.get("short_code") or ""
                if "-" in short_code:
                    code = short_code.split("-", 1)[1].upper() or None
            elif context_id.startswith("country"):
                country = (context.get("short_code") or "").lower() or None
        return CanonicalMeta(
            city=city, region=region, region_code=code, country_code=country
        )

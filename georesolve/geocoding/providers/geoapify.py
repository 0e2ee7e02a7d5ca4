"""Geoapify geocoding adapter."""

from typing import Any, Optional

from georesolve.core.locality import region_code
from georesolve.geocoding.exceptions import AdapterFailure
from georesolve.geocoding.providers.base import BaseGeocodingProvider
from georesolve.geocoding.types import CanonicalMeta, Near

PRECISE_RESULT_TYPES = frozenset({"amenity", "building", "house", "street"})


class GeoapifyProvider(BaseGeocodingProvider):
    """Geoapify forward geocoding (``/v1/geocode/search``)."""

    name = "geoapify"

    def build_request(
        self, query: str, near: Optional[Near], limit: int
    ) -> tuple[str, dict[str, str]]:
        params = {
            "text": query,
            "lang": "en",
            "limit": str(limit),
            "apiKey": self.config.api_key or "",
        }
        if near:
            params["bias"] = f"proximity:{near.lng},{near.lat}"
        return self.config.base_url, params

    def extract_entries(self, payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, dict):
            raise AdapterFailure(self.name, "unexpected payload shape")
        return [
            feature.get("properties") or {}
            for feature in payload.get("features") or []
            if isinstance(feature, dict)
        ]

    def is_precise(self, entry: dict[str, Any]) -> bool:
        if entry.get("result_type") in PRECISE_RESULT_TYPES:
            return True
        rank = entry.get("rank") or {}
        return bool(rank.get("house_number") or rank.get("street"))

    def extract_label(self, entry: dict[str, Any]) -> str:
        if entry.get("formatted"):
            return entry["formatted"]
        parts = [entry.get(key) for key in ("name", "street", "city", "state")]
        return ", ".join(p for p in parts if p)

    def extract_coordinates(
        self, entry: dict[str, Any]
    ) -> tuple[Optional[float], Optional[float]]:
        return entry.get("lat"), entry.get("lon")

    def extract_meta(self, entry: dict[str, Any]) -> CanonicalMeta:
        city = (
            entry.get("city")
            or entry.get("town")
            or entry.get("village")
            or entry.get("suburb")
        )
        region = entry.get("state")
        code = entry.get("state_code")
        country = entry.get("country_code")
        return CanonicalMeta(
            city=city,
            region=region,
            region_code=code.upper() if code else region_code(region),
            country_code=country.lower() if country else None,
        )

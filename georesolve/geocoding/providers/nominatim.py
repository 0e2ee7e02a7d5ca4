"""OpenStreetMap Nominatim adapter."""

from typing import Any, Optional

from georesolve.core.locality import region_code
from georesolve.geocoding.exceptions import AdapterFailure
from georesolve.geocoding.providers.base import BaseGeocodingProvider
from georesolve.geocoding.types import CanonicalMeta, Near

PRECISE_ADDRESS_TYPES = frozenset({"house", "building", "road"})
PRECISE_TYPES = frozenset(
    {"house", "building", "restaurant", "fuel", "pub", "convenience"}
)


class NominatimProvider(BaseGeocodingProvider):
    """Nominatim ``/search``; keyless, so it needs an identifying User-Agent."""

    name = "nominatim"
    requires_key = False

    def build_request(
        self, query: str, near: Optional[Near], limit: int
    ) -> tuple[str, dict[str, str]]:
        params = {
            "q": query,
            "format": "jsonv2",
            "addressdetails": "1",
            "limit": str(limit),
            "accept-language": "en",
        }
        if near:
            pad = float(self.config.options.get("viewbox_pad", 0.3))
            params["viewbox"] = (
                f"{near.lng - pad},{near.lat + pad},{near.lng + pad},{near.lat - pad}"
            )
            params["bounded"] = "0"
        return self.config.base_url, params

    def request_headers(self) -> dict[str, str]:
        user_agent = self.config.options.get("user_agent")
        return {"User-Agent": user_agent} if user_agent else {}

    def extract_entries(self, payload: Any) -> list[dict[str, Any]]:
        if not isinstance(payload, list):
            raise AdapterFailure(self.name, "unexpected payload shape")
        return payload

    def is_precise(self, entry: dict[str, Any]) -> bool:
        return (
            entry.get("class") == "amenity"
            or entry.get("addresstype") in PRECISE_ADDRESS_TYPES
            or entry.get("type") in PRECISE_TYPES
        )

    def extract_label(self, entry: dict[str, Any]) -> str:
        return entry.get("display_name") or ""

    def extract_coordinates(
        self, entry: dict[str, Any]
    ) -> tuple[Optional[float], Optional[float]]:
        # Nominatim returns coordinates as strings
        return entry.get("lat"), entry.get("lon")

    def extract_meta(self, entry: dict[str, Any]) -> CanonicalMeta:
        address = entry.get("address") or {}
        city = (
            address.get("city")
            or address.get("town")
            or address.get("village")
            or address.get("hamlet")
            or address.get("suburb")
        )
        region = address.get("state")
        country = address.get("country_code")
        return CanonicalMeta(
            city=city,
            region=region,
            region_code=region_code(region),
            country_code=country.lower() if country else None,
        )

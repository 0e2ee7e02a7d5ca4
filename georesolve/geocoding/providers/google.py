"""Google Places adapters: Find Place from Text and Text Search.

Both endpoints return only a formatted address string, so locality comes
from the best-effort address parser.
"""

from typing import Any, Optional

from georesolve.geocoding.address_parser import parse_formatted_address
from georesolve.geocoding.exceptions import AdapterFailure
from georesolve.geocoding.providers.base import BaseGeocodingProvider
from georesolve.geocoding.types import CanonicalMeta, Near

PRECISE_TYPES = frozenset(
    {
        "establishment",
        "point_of_interest",
        "street_address",
        "route",
        "premise",
    }
)

# Statuses that mean the request itself worked
_USABLE_STATUSES = {"OK", "ZERO_RESULTS"}


class GooglePlacesMixin:
    """Entry handling shared by the Google Places endpoints."""

    name: str

    def check_status(self, payload: Any) -> None:
        """Google answers 200 even for denied or over-quota requests."""
        if not isinstance(payload, dict):
            raise AdapterFailure(self.name, "unexpected payload shape")
        status = payload.get("status")
        if status and status not in _USABLE_STATUSES:
            message = payload.get("error_message") or status
            raise AdapterFailure(self.name, f"status {status}: {message}")

    def is_precise(self, entry: dict[str, Any]) -> bool:
        types = entry.get("types") or []
        return any(t in PRECISE_TYPES for t in types)

    def extract_label(self, entry: dict[str, Any]) -> str:
        return entry.get("formatted_address") or entry.get("name") or ""

    def extract_coordinates(
        self, entry: dict[str, Any]
    ) -> tuple[Optional[float], Optional[float]]:
        location = (entry.get("geometry") or {}).get("location") or {}
        return location.get("lat"), location.get("lng")

    def extract_meta(self, entry: dict[str, Any]) -> CanonicalMeta:
        return parse_formatted_address(entry.get("formatted_address"))


class GoogleFindPlaceProvider(GooglePlacesMixin, BaseGeocodingProvider):
    """Google Places Find Place from Text, best for business names."""

    name = "google_findplace"
    max_candidates = 5

    def build_request(
        self, query: str, near: Optional[Near], limit: int
    ) -> tuple[str, dict[str, str]]:
        params = {
            "input": query,
            "inputtype": "textquery",
            "fields": "name,formatted_address,geometry,types,plus_code",
            "region": self.config.options.get("region", "us"),
            "key": self.config.api_key or "",
        }
        if near:
            radius = self.config.options.get("bias_radius_m", 25000)
            params["locationbias"] = f"circle:{radius}@{near.lat},{near.lng}"
        return f"{self.config.base_url}/findplacefromtext/json", params

    def extract_entries(self, payload: Any) -> list[dict[str, Any]]:
        self.check_status(payload)
        return list(payload.get("candidates") or [])


class GoogleTextSearchProvider(GooglePlacesMixin, BaseGeocodingProvider):
    """Google Places Text Search, a broader fallback for free text."""

    name = "google_text"
    max_candidates = 5

    def build_request(
        self, query: str, near: Optional[Near], limit: int
    ) -> tuple[str, dict[str, str]]:
        params = {
            "query": query,
            "region": self.config.options.get("region", "us"),
            "language": "en",
            "key": self.config.api_key or "",
        }
        if near:
            params["location"] = f"{near.lat},{near.lng}"
        return f"{self.config.base_url}/textsearch/json", params

    def extract_entries(self, payload: Any) -> list[dict[str, Any]]:
        self.check_status(payload)
        return list(payload.get("results") or [])

"""Canonical records shared by the geocoding adapters, resolver and aggregator."""

import math
from dataclasses import dataclass, field, replace
from typing import Any, Optional, Union


def to_coordinate(value: Any) -> Optional[float]:
    """Convert a provider coordinate value to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def valid_coordinates(lat: Optional[float], lng: Optional[float]) -> bool:
    """Check that a latitude/longitude pair is finite and within range."""
    if lat is None or lng is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


@dataclass(frozen=True)
class Near:
    """Bias point used to prefer geographically close results."""

    lat: float
    lng: float

    @classmethod
    def from_values(cls, lat: Any, lng: Any) -> Optional["Near"]:
        """Build a bias point, or None when either value is unusable."""
        lat_value = to_coordinate(lat)
        lng_value = to_coordinate(lng)
        if not valid_coordinates(lat_value, lng_value):
            return None
        return cls(lat=lat_value, lng=lng_value)  # type: ignore[arg-type]


@dataclass(frozen=True)
class LocalityExpectation:
    """Caller supplied city/region constraint; absent fields do not constrain."""

    city: Optional[str] = None
    region_code: Optional[str] = None

    def __post_init__(self) -> None:
        # Blank strings mean "not supplied"
        if self.city is not None and not self.city.strip():
            object.__setattr__(self, "city", None)
        if self.region_code is not None and not self.region_code.strip():
            object.__setattr__(self, "region_code", None)

    @property
    def is_empty(self) -> bool:
        return self.city is None and self.region_code is None


@dataclass(frozen=True)
class CanonicalMeta:
    """Locality facts extracted from one provider entry."""

    city: Optional[str] = None
    region: Optional[str] = None
    region_code: Optional[str] = None
    country_code: Optional[str] = None

    def to_dict(self) -> dict[str, Optional[str]]:
        return {
            "city": self.city,
            "region": self.region,
            "regionCode": self.region_code,
            "countryCode": self.country_code,
        }


@dataclass(frozen=True)
class Hit:
    """A single authoritative answer."""

    provider: str
    label: str
    lat: float
    lng: float
    meta: CanonicalMeta = field(default_factory=CanonicalMeta)

    def __post_init__(self) -> None:
        if not self.label or not self.label.strip():
            raise ValueError("Hit label must not be empty")
        if not valid_coordinates(self.lat, self.lng):
            raise ValueError(f"Invalid coordinates: {self.lat}, {self.lng}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "address_text": self.label,
            "lat": self.lat,
            "lng": self.lng,
            "meta": self.meta.to_dict(),
        }


@dataclass(frozen=True)
class Candidate:
    """A rankable match returned in candidate mode."""

    provider: str
    label: str
    lat: float
    lng: float
    meta: CanonicalMeta = field(default_factory=CanonicalMeta)
    score: float = 0.0
    distance_km: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.label or not self.label.strip():
            raise ValueError("Candidate label must not be empty")
        if not valid_coordinates(self.lat, self.lng):
            raise ValueError(f"Invalid coordinates: {self.lat}, {self.lng}")

    def with_score(self, score: float) -> "Candidate":
        return replace(self, score=score)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "provider": self.provider,
            "label": self.label,
            "lat": self.lat,
            "lng": self.lng,
            "score": self.score,
            "meta": self.meta.to_dict(),
        }
        if self.distance_km is not None:
            data["distance_km"] = self.distance_km
        return data


# Tagged outcome of one adapter call in strict mode


@dataclass(frozen=True)
class Match:
    provider: str
    hit: Hit


@dataclass(frozen=True)
class NoMatch:
    provider: str
    reason: str = "no_precise_hit"


@dataclass(frozen=True)
class AdapterError:
    provider: str
    error_type: str
    message: str = ""


AdapterOutcome = Union[Match, NoMatch, AdapterError]

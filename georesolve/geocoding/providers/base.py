"""Base class and configuration for geocoding provider adapters."""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from georesolve.core.logging import get_logger
from georesolve.geocoding.exceptions import AdapterFailure
from georesolve.geocoding.matching import accept
from georesolve.geocoding.metrics import PROVIDER_DURATION, PROVIDER_OUTCOMES
from georesolve.geocoding.types import (
    AdapterError,
    AdapterOutcome,
    Candidate,
    CanonicalMeta,
    Hit,
    LocalityExpectation,
    Match,
    Near,
    NoMatch,
    to_coordinate,
    valid_coordinates,
)

logger = get_logger(__name__)


@dataclass
class ProviderConfig:
    """Per-provider configuration injected at construction.

    Adapters never read the environment themselves.
    """

    name: str
    base_url: str
    api_key: Optional[str] = None
    timeout: float = 8.0
    candidate_limit: int = 8
    strict_limit: int = 5
    country_code: str = "us"
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")
        if self.candidate_limit <= 0:
            raise ValueError(
                f"candidate_limit must be positive, got {self.candidate_limit}"
            )


class BaseGeocodingProvider(ABC):
    """Base class for geocoding provider adapters.

    Subclasses describe one external service: how to build its request,
    where the entries live in its payload, how to read label, coordinates
    and locality from an entry, and the precision test that tells a
    specific place (business, building, street address) from a coarse
    area match (city, region, country).
    """

    name: str = "base"
    requires_key: bool = True
    # Hard cap on candidates contributed by this provider, None means config
    max_candidates: Optional[int] = None

    def __init__(self, config: ProviderConfig, client: httpx.AsyncClient) -> None:
        """Initialize the adapter.

        Args:
            config: Provider configuration (credential, endpoint, limits)
            client: Shared HTTP client
        """
        if self.requires_key and not config.api_key:
            raise ValueError(f"{self.name} requires an API key")
        self.config = config
        self.client = client

    # Provider description

    @abstractmethod
    def build_request(
        self, query: str, near: Optional[Near], limit: int
    ) -> tuple[str, dict[str, str]]:
        """Return the request URL and query parameters."""
        raise NotImplementedError

    def request_headers(self) -> dict[str, str]:
        return {}

    @abstractmethod
    def extract_entries(self, payload: Any) -> list[dict[str, Any]]:
        """Return the result entries from a decoded response payload."""
        raise NotImplementedError

    @abstractmethod
    def is_precise(self, entry: dict[str, Any]) -> bool:
        """Precision test: True for a specific place, False for a coarse area."""
        raise NotImplementedError

    @abstractmethod
    def extract_label(self, entry: dict[str, Any]) -> str:
        raise NotImplementedError

    @abstractmethod
    def extract_coordinates(
        self, entry: dict[str, Any]
    ) -> tuple[Optional[float], Optional[float]]:
        """Return (lat, lng) exactly as the provider reports them."""
        raise NotImplementedError

    @abstractmethod
    def extract_meta(self, entry: dict[str, Any]) -> CanonicalMeta:
        raise NotImplementedError

    # Request flow

    async def fetch(self, query: str, near: Optional[Near], limit: int) -> Any:
        """Issue one request and decode its JSON payload.

        Raises:
            AdapterFailure: On a non-success status or an undecodable body
            httpx.HTTPError: On transport failures
        """
        url, params = self.build_request(query, near, limit)
        response = await self.client.get(
            url,
            params=params,
            headers=self.request_headers(),
            timeout=self.config.timeout,
        )
        if not response.is_success:
            raise AdapterFailure(self.name, f"HTTP {response.status_code}")
        try:
            return response.json()
        except ValueError as e:
            raise AdapterFailure(self.name, f"malformed JSON payload: {e}") from e

    def _coordinates(self, entry: dict[str, Any]) -> Optional[tuple[float, float]]:
        lat, lng = self.extract_coordinates(entry)
        lat_value, lng_value = to_coordinate(lat), to_coordinate(lng)
        if not valid_coordinates(lat_value, lng_value):
            return None
        return lat_value, lng_value  # type: ignore[return-value]

    def _precise_entries(self, payload: Any) -> list[dict[str, Any]]:
        return [
            entry
            for entry in self.extract_entries(payload)
            if isinstance(entry, dict) and self.is_precise(entry)
        ]

    async def find_hit(
        self,
        query: str,
        near: Optional[Near] = None,
        expect: Optional[LocalityExpectation] = None,
    ) -> Optional[Hit]:
        """Return the first precise entry as a Hit, if it is locality-accepted."""
        payload = await self.fetch(query, near, self.config.strict_limit)
        for entry in self._precise_entries(payload):
            coords = self._coordinates(entry)
            if coords is None:
                continue
            meta = self.extract_meta(entry)
            if expect is not None and not accept(meta, expect, self.config.country_code):
                return None
            label = (self.extract_label(entry) or "").strip() or query
            return Hit(
                provider=self.name,
                label=label,
                lat=coords[0],
                lng=coords[1],
                meta=meta,
            )
        return None

    async def find_candidates(
        self, query: str, near: Optional[Near] = None
    ) -> list[Candidate]:
        """Return every precise entry as a Candidate, capped per provider."""
        cap = self.config.candidate_limit
        if self.max_candidates is not None:
            cap = min(cap, self.max_candidates)

        payload = await self.fetch(query, near, self.config.candidate_limit)
        candidates: list[Candidate] = []
        for entry in self._precise_entries(payload):
            coords = self._coordinates(entry)
            label = (self.extract_label(entry) or "").strip()
            if coords is None or not label:
                continue
            candidates.append(
                Candidate(
                    provider=self.name,
                    label=label,
                    lat=coords[0],
                    lng=coords[1],
                    meta=self.extract_meta(entry),
                )
            )
            if len(candidates) >= cap:
                break
        return candidates

    # Failure boundaries

    async def resolve(
        self,
        query: str,
        near: Optional[Near] = None,
        expect: Optional[LocalityExpectation] = None,
    ) -> AdapterOutcome:
        """Run ``find_hit`` under a deadline and turn any failure into an outcome."""
        start = time.monotonic()
        try:
            hit = await asyncio.wait_for(
                self.find_hit(query, near, expect), timeout=self.config.timeout
            )
        except Exception as e:
            self._record_failure(e, start)
            return AdapterError(
                provider=self.name, error_type=type(e).__name__, message=str(e)
            )

        self._record(start, "match" if hit else "no_match")
        if hit is None:
            return NoMatch(provider=self.name)
        return Match(provider=self.name, hit=hit)

    async def collect_candidates(
        self, query: str, near: Optional[Near] = None
    ) -> list[Candidate]:
        """Run ``find_candidates`` under a deadline; failures contribute nothing."""
        start = time.monotonic()
        try:
            candidates = await asyncio.wait_for(
                self.find_candidates(query, near), timeout=self.config.timeout
            )
        except Exception as e:
            self._record_failure(e, start)
            return []

        self._record(start, "candidates" if candidates else "empty", len(candidates))
        return candidates

    def _record(self, start: float, outcome: str, count: int | None = None) -> None:
        elapsed = time.monotonic() - start
        PROVIDER_DURATION.labels(provider=self.name).observe(elapsed)
        PROVIDER_OUTCOMES.labels(provider=self.name, outcome=outcome).inc()
        logger.info(
            "geocode_provider_outcome",
            provider=self.name,
            outcome=outcome,
            count=count,
            elapsed_ms=round(elapsed * 1000, 1),
        )

    def _record_failure(self, exc: Exception, start: float) -> None:
        elapsed = time.monotonic() - start
        PROVIDER_DURATION.labels(provider=self.name).observe(elapsed)
        PROVIDER_OUTCOMES.labels(provider=self.name, outcome="error").inc()
        logger.warning(
            "geocode_provider_failed",
            provider=self.name,
            error_type=type(exc).__name__,
            error=str(exc),
            elapsed_ms=round(elapsed * 1000, 1),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

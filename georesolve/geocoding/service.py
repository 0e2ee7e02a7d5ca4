"""Request handling for the address resolution engine.

This module validates a geocode request, builds the provider query once,
and dispatches to either strict resolution or candidate aggregation:

- Strict mode returns one authoritative ``Hit`` or raises ``NotFoundError``
- Candidate mode returns a ranked list or raises ``NotFoundError``
- Unexpected failures surface as ``InternalError``
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

import httpx

from georesolve.core.config import Settings
from georesolve.core.logging import get_logger
from georesolve.geocoding.aggregator import CandidateAggregator, ScoringWeights
from georesolve.geocoding.exceptions import (
    GeocodeError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from georesolve.geocoding.metrics import RESOLUTIONS
from georesolve.geocoding.providers.base import BaseGeocodingProvider
from georesolve.geocoding.providers.registry import build_providers
from georesolve.geocoding.query import DEFAULT_SPECIFIC_LENGTH, build_query
from georesolve.geocoding.resolver import StrictResolver
from georesolve.geocoding.types import Candidate, Hit, LocalityExpectation, Near

logger = get_logger(__name__)

MISSING_QUERY = "Missing q"
NO_PRECISE_MATCH = "No precise match found in specified city/state"
NO_CANDIDATES = "No candidates"


@dataclass(frozen=True)
class GeocodeRequest:
    """One inbound resolution request."""

    q: Optional[str]
    near: Optional[Near] = None
    expect: LocalityExpectation = field(default_factory=LocalityExpectation)
    candidates: bool = False

    @property
    def mode(self) -> str:
        return "candidates" if self.candidates else "strict"


class GeocodeService:
    """Dispatch geocode requests to the strict resolver or the aggregator."""

    def __init__(
        self,
        providers: Sequence[BaseGeocodingProvider],
        weights: Optional[ScoringWeights] = None,
        max_candidates: int = 8,
        country_code: str = "us",
        query_specific_length: int = DEFAULT_SPECIFIC_LENGTH,
    ) -> None:
        self.providers = list(providers)
        self.resolver = StrictResolver(self.providers)
        self.aggregator = CandidateAggregator(
            self.providers,
            weights=weights,
            max_candidates=max_candidates,
            country_code=country_code,
        )
        self.query_specific_length = query_specific_length

    @classmethod
    def from_settings(
        cls, settings: Settings, client: httpx.AsyncClient
    ) -> "GeocodeService":
        """Build the service and its adapter chain from application settings."""
        return cls(
            build_providers(settings, client),
            weights=ScoringWeights(
                region_match=settings.GEOCODING_REGION_MATCH_WEIGHT,
                city_match=settings.GEOCODING_CITY_MATCH_WEIGHT,
            ),
            max_candidates=settings.GEOCODING_MAX_CANDIDATES,
            country_code=settings.GEOCODING_COUNTRY_CODE,
            query_specific_length=settings.GEOCODING_QUERY_SPECIFIC_LENGTH,
        )

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self.providers]

    def prepare_query(self, request: GeocodeRequest) -> str:
        """Validate the request and build the provider query.

        Raises:
            ValidationError: If the query text is missing or blank
        """
        text = (request.q or "").strip()
        if not text:
            RESOLUTIONS.labels(mode=request.mode, result="invalid").inc()
            raise ValidationError(MISSING_QUERY)
        return build_query(
            text,
            city=request.expect.city,
            region=request.expect.region_code,
            specific_length=self.query_specific_length,
        )

    async def resolve(self, request: GeocodeRequest) -> Hit:
        """Strict mode: one authoritative answer."""
        query = self.prepare_query(request)
        hit = await self._guarded(
            request, self.resolver.resolve(query, request.near, request.expect)
        )
        if hit is None:
            RESOLUTIONS.labels(mode="strict", result="not_found").inc()
            raise NotFoundError(NO_PRECISE_MATCH)
        RESOLUTIONS.labels(mode="strict", result="found").inc()
        return hit

    async def list_candidates(self, request: GeocodeRequest) -> list[Candidate]:
        """Candidate mode: ranked, deduplicated, capped list."""
        query = self.prepare_query(request)
        candidates = await self._guarded(
            request, self.aggregator.aggregate(query, request.near, request.expect)
        )
        if not candidates:
            RESOLUTIONS.labels(mode="candidates", result="not_found").inc()
            raise NotFoundError(NO_CANDIDATES)
        RESOLUTIONS.labels(mode="candidates", result="found").inc()
        return candidates

    async def handle(self, request: GeocodeRequest) -> dict[str, Any]:
        """Resolve ``request`` and return the response body."""
        if request.candidates:
            candidates = await self.list_candidates(request)
            return {"candidates": [c.to_dict() for c in candidates]}
        hit = await self.resolve(request)
        return hit.to_dict()

    async def _guarded(self, request: GeocodeRequest, work: Any) -> Any:
        try:
            return await work
        except GeocodeError:
            raise
        except Exception as e:
            RESOLUTIONS.labels(mode=request.mode, result="error").inc()
            logger.exception(
                "geocode_request_failed",
                mode=request.mode,
                error_type=type(e).__name__,
            )
            raise InternalError(str(e) or type(e).__name__) from e

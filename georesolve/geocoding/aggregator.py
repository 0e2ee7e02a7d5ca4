"""Candidate mode: concurrent fan-out, scoring, deduplication and ranking."""

import asyncio
import math
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from geopy.distance import geodesic

from georesolve.core.logging import get_logger
from georesolve.geocoding.matching import (
    city_matches,
    country_matches,
    normalize_text,
    region_matches,
)
from georesolve.geocoding.providers.base import BaseGeocodingProvider
from georesolve.geocoding.types import Candidate, LocalityExpectation, Near

logger = get_logger(__name__)

# 4 decimal places of a degree is roughly 11 m
DEDUP_PRECISION = 4
DEFAULT_MAX_CANDIDATES = 8


@dataclass(frozen=True)
class ScoringWeights:
    """Heuristic weights used to rank candidates."""

    base: float = 100.0
    region_match: float = 30.0
    city_match: float = 20.0


def _round_coordinate(value: float, precision: int = DEDUP_PRECISION) -> int:
    # Half-up rounding, independent of float banker's rounding
    return math.floor(value * 10**precision + 0.5)


def dedup_key(candidate: Candidate, precision: int = DEDUP_PRECISION) -> tuple[str, int, int]:
    """Normalized label plus coordinates rounded to ``precision`` decimals."""
    return (
        normalize_text(candidate.label),
        _round_coordinate(candidate.lat, precision),
        _round_coordinate(candidate.lng, precision),
    )


def dedupe(candidates: Sequence[Candidate]) -> list[Candidate]:
    """Keep the highest scoring candidate per dedup key, sorted by score.

    The sort is stable, so equal scores keep their incoming (priority) order.
    """
    ranked = sorted(candidates, key=lambda c: c.score, reverse=True)
    seen: set[tuple[str, int, int]] = set()
    unique: list[Candidate] = []
    for candidate in ranked:
        key = dedup_key(candidate)
        if key in seen:
            continue
        seen.add(key)
        unique.append(candidate)
    return unique


class CandidateAggregator:
    """Merge candidates from every adapter into one ranked list."""

    def __init__(
        self,
        providers: Sequence[BaseGeocodingProvider],
        weights: Optional[ScoringWeights] = None,
        max_candidates: int = DEFAULT_MAX_CANDIDATES,
        country_code: str = "us",
    ) -> None:
        self.providers = list(providers)
        self.weights = weights or ScoringWeights()
        self.max_candidates = max_candidates
        self.country_code = country_code

    async def gather(self, query: str, near: Optional[Near] = None) -> list[Candidate]:
        """Query every adapter concurrently and flatten in priority order."""
        buckets = await asyncio.gather(
            *(provider.collect_candidates(query, near) for provider in self.providers),
            return_exceptions=True,
        )

        flattened: list[Candidate] = []
        for provider, bucket in zip(self.providers, buckets):
            if isinstance(bucket, BaseException):
                logger.warning(
                    "geocode_candidates_failed",
                    provider=provider.name,
                    error_type=type(bucket).__name__,
                    error=str(bucket),
                )
                continue
            flattened.extend(bucket)
        return flattened

    def score(
        self,
        candidates: Sequence[Candidate],
        expect: Optional[LocalityExpectation] = None,
    ) -> list[Candidate]:
        """Assign rank scores: priority order first, then locality boosts.

        When a region is expected, candidates outside the supported country
        are dropped.
        """
        scored: list[Candidate] = []
        for index, candidate in enumerate(candidates):
            value = self.weights.base - index
            if expect is not None and expect.region_code:
                if not country_matches(candidate.meta.country_code, self.country_code):
                    continue
                if region_matches(candidate.meta, expect.region_code):
                    value += self.weights.region_match
            if expect is not None and expect.city:
                if city_matches(candidate.meta.city, expect.city):
                    value += self.weights.city_match
            scored.append(candidate.with_score(value))
        return scored

    def with_distances(
        self, candidates: Sequence[Candidate], near: Optional[Near]
    ) -> list[Candidate]:
        if near is None:
            return list(candidates)
        origin = (near.lat, near.lng)
        return [
            replace(c, distance_km=round(geodesic(origin, (c.lat, c.lng)).km, 3))
            for c in candidates
        ]

    async def aggregate(
        self,
        query: str,
        near: Optional[Near] = None,
        expect: Optional[LocalityExpectation] = None,
    ) -> list[Candidate]:
        """Return ranked, deduplicated and capped candidates for ``query``."""
        flattened = await self.gather(query, near)
        ranked = dedupe(self.score(flattened, expect))[: self.max_candidates]

        logger.info(
            "geocode_candidates_ranked",
            gathered=len(flattened),
            returned=len(ranked),
        )
        return self.with_distances(ranked, near)

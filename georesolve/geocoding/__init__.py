"""Address resolution engine.

This package turns a free-text place description into coordinates by
orchestrating several external geocoding providers:
- Provider adapters with per-provider precision tests
- Locality acceptance filter for expected city/region
- Strict resolution with ordered fallback and short-circuit
- Candidate aggregation with scoring and deduplication
"""

from georesolve.geocoding.aggregator import (
    CandidateAggregator,
    ScoringWeights,
    dedup_key,
    dedupe,
)
from georesolve.geocoding.exceptions import (
    AdapterFailure,
    GeocodeError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from georesolve.geocoding.matching import accept, normalize_text
from georesolve.geocoding.query import build_query
from georesolve.geocoding.resolver import StrictResolver
from georesolve.geocoding.service import GeocodeRequest, GeocodeService
from georesolve.geocoding.types import (
    AdapterError,
    Candidate,
    CanonicalMeta,
    Hit,
    LocalityExpectation,
    Match,
    Near,
    NoMatch,
)

__all__ = [
    "AdapterError",
    "AdapterFailure",
    "Candidate",
    "CandidateAggregator",
    "CanonicalMeta",
    "GeocodeError",
    "GeocodeRequest",
    "GeocodeService",
    "Hit",
    "InternalError",
    "LocalityExpectation",
    "Match",
    "Near",
    "NoMatch",
    "NotFoundError",
    "ScoringWeights",
    "StrictResolver",
    "ValidationError",
    "accept",
    "build_query",
    "dedup_key",
    "dedupe",
    "normalize_text",
]

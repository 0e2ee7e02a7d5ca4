"""Prometheus metrics for the address resolution engine."""

from prometheus_client import Counter, Histogram

# Adapter call outcomes
PROVIDER_OUTCOMES = Counter(
    "geocode_provider_outcomes_total",
    "Total number of geocoding adapter calls by outcome",
    ["provider", "outcome"],  # match, no_match, error, candidates, empty
)

PROVIDER_DURATION = Histogram(
    "geocode_provider_duration_seconds",
    "Time spent waiting on a geocoding provider",
    ["provider"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Request level results
RESOLUTIONS = Counter(
    "geocode_requests_total",
    "Total number of geocode requests by mode and result",
    ["mode", "result"],  # strict|candidates, found|not_found|invalid|error
)

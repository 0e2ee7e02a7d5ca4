"""Strict single-answer resolution over the ordered adapter chain."""

from typing import Optional, Sequence

from georesolve.core.logging import get_logger
from georesolve.geocoding.providers.base import BaseGeocodingProvider
from georesolve.geocoding.types import (
    AdapterError,
    Hit,
    LocalityExpectation,
    Match,
    Near,
)

logger = get_logger(__name__)


class StrictResolver:
    """Try adapters one at a time in priority order; the first accepted hit wins.

    Adapters are awaited sequentially so that priority, not response speed,
    decides the answer. A failing adapter counts as "no hit" and the chain
    moves on.
    """

    def __init__(self, providers: Sequence[BaseGeocodingProvider]) -> None:
        self.providers = list(providers)

    async def resolve(
        self,
        query: str,
        near: Optional[Near] = None,
        expect: Optional[LocalityExpectation] = None,
    ) -> Optional[Hit]:
        """Return the first accepted hit, or None when every adapter came up empty."""
        attempted: list[str] = []
        failed: list[str] = []

        for provider in self.providers:
            attempted.append(provider.name)
            outcome = await provider.resolve(query, near, expect)

            if isinstance(outcome, Match):
                logger.info(
                    "geocode_strict_resolved",
                    provider=outcome.provider,
                    attempted=attempted,
                    failed=failed,
                )
                return outcome.hit
            if isinstance(outcome, AdapterError):
                failed.append(outcome.provider)

        logger.info("geocode_strict_exhausted", attempted=attempted, failed=failed)
        return None

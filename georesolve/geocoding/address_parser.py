"""Best-effort locality extraction from a single formatted address string.

Used for providers that only return something like
``"81 Forest Ave, Glen Cove, NY 11542, USA"``. The parser is a heuristic:
any field it cannot find is left as None rather than guessed.
"""

import re
from typing import Optional

from georesolve.core.locality import (
    country_code_from_marker,
    is_valid_region_code,
    region_code,
    region_name,
)
from georesolve.geocoding.types import CanonicalMeta

_REGION_TOKEN = re.compile(r"\b([A-Z]{2})\b")
_POSTAL_TAIL = re.compile(r"\s+\d{5}(?:-\d{4})?$")


def _region_from_part(part: str) -> Optional[str]:
    """Find a region code in one comma-separated part ("NY 11542", "Texas")."""
    match = _REGION_TOKEN.search(part)
    if match:
        return match.group(1)
    without_postal = _POSTAL_TAIL.sub("", part).strip()
    return region_code(without_postal)


def parse_formatted_address(address: Optional[str]) -> CanonicalMeta:
    """Extract city, region and country from a formatted address.

    Args:
        address: Provider formatted address, comma separated

    Returns:
        CanonicalMeta with whatever could be recognized
    """
    if not address:
        return CanonicalMeta()

    parts = [p.strip() for p in address.split(",") if p.strip()]
    if not parts:
        return CanonicalMeta()

    country_code = country_code_from_marker(parts[-1])
    body = parts[:-1] if country_code else parts
    if not body:
        return CanonicalMeta(country_code=country_code)

    city: Optional[str] = None
    code: Optional[str] = None

    if len(body) >= 2 or country_code:
        code = _region_from_part(body[-1])
        if code:
            if len(body) >= 2:
                city = body[-2]
        elif len(body) >= 2:
            # No recognizable region, the last part is most likely the city
            city = body[-1]

    # A US region code followed by a ZIP code is enough to infer the country
    if (
        country_code is None
        and code
        and is_valid_region_code(code)
        and _POSTAL_TAIL.search(body[-1])
    ):
        country_code = "us"

    return CanonicalMeta(
        city=city,
        region=(region_name(code) or code) if code else None,
        region_code=code,
        country_code=country_code,
    )

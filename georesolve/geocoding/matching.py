"""Locality matching: text normalization and the hit acceptance filter."""

import re
from typing import Optional

from georesolve.core.locality import COUNTRY_MARKERS, region_code, region_name
from georesolve.geocoding.types import CanonicalMeta, LocalityExpectation

_NON_WORD = re.compile(r"[\W_]+")


def normalize_text(value: Optional[str]) -> str:
    """Lowercase, turn punctuation and whitespace runs into single spaces."""
    if not value:
        return ""
    return _NON_WORD.sub(" ", value.lower()).strip()


def country_matches(found: Optional[str], expected: str) -> bool:
    """Check a provider country code (or marker like "USA") against a code."""
    if not found:
        return False
    code = found.strip().lower()
    code = COUNTRY_MARKERS.get(code, code)
    return code == expected.strip().lower()


def region_matches(meta: CanonicalMeta, expected: Optional[str]) -> bool:
    """Match the hit's region by code (case-insensitive) or by full name.

    ``expected`` is normally a 2-letter code; a full region name works too.
    """
    if not expected or not expected.strip():
        return True

    wanted_code = region_code(expected) or expected.strip().upper()
    if meta.region_code and meta.region_code.strip().upper() == wanted_code:
        return True

    wanted_name = normalize_text(region_name(wanted_code) or expected)
    found_name = normalize_text(meta.region)
    if found_name and found_name == wanted_name:
        return True

    return False


def city_matches(found: Optional[str], expected: Optional[str]) -> bool:
    """Every token of the expected city must be a substring of the found city."""
    if not expected or not expected.strip():
        return True
    found_norm = normalize_text(found)
    wanted = normalize_text(expected)
    if not found_norm or not wanted:
        return False
    return all(token in found_norm for token in wanted.split())


def accept(
    meta: CanonicalMeta,
    expect: Optional[LocalityExpectation],
    country_code: str = "us",
) -> bool:
    """Decide whether a hit satisfies the caller's locality expectation.

    Args:
        meta: Locality facts of the hit
        expect: Caller expectation; None or empty means no constraint
        country_code: Country the expected region belongs to

    Returns:
        True when the country (if a region is expected), region and city
        constraints all hold
    """
    if expect is None or expect.is_empty:
        return True

    if expect.region_code:
        if not country_matches(meta.country_code, country_code):
            return False
        if not region_matches(meta, expect.region_code):
            return False

    return city_matches(meta.city, expect.city)

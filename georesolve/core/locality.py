"""Region code and name tables for the supported country.

The tables are built once at import time and never mutated.
"""

from types import MappingProxyType
from typing import Mapping, Optional

REGION_CODE_TO_NAME: Mapping[str, str] = MappingProxyType(
    {
        "AL": "Alabama",
        "AK": "Alaska",
        "AZ": "Arizona",
        "AR": "Arkansas",
        "CA": "California",
        "CO": "Colorado",
        "CT": "Connecticut",
        "DC": "District of Columbia",
        "DE": "Delaware",
        "FL": "Florida",
        "GA": "Georgia",
        "HI": "Hawaii",
        "IA": "Iowa",
        "ID": "Idaho",
        "IL": "Illinois",
        "IN": "Indiana",
        "KS": "Kansas",
        "KY": "Kentucky",
        "LA": "Louisiana",
        "MA": "Massachusetts",
        "MD": "Maryland",
        "ME": "Maine",
        "MI": "Michigan",
        "MN": "Minnesota",
        "MO": "Missouri",
        "MS": "Mississippi",
        "MT": "Montana",
        "NC": "North Carolina",
        "ND": "North Dakota",
        "NE": "Nebraska",
        "NH": "New Hampshire",
        "NJ": "New Jersey",
        "NM": "New Mexico",
        "NV": "Nevada",
        "NY": "New York",
        "OH": "Ohio",
        "OK": "Oklahoma",
        "OR": "Oregon",
        "PA": "Pennsylvania",
        "RI": "Rhode Island",
        "SC": "South Carolina",
        "SD": "South Dakota",
        "TN": "Tennessee",
        "TX": "Texas",
        "UT": "Utah",
        "VA": "Virginia",
        "VT": "Vermont",
        "WA": "Washington",
        "WI": "Wisconsin",
        "WV": "West Virginia",
        "WY": "Wyoming",
        # Territories
        "PR": "Puerto Rico",
        "VI": "U.S. Virgin Islands",
        "GU": "Guam",
        "AS": "American Samoa",
        "MP": "Northern Mariana Islands",
    }
)

VALID_REGION_CODES = frozenset(REGION_CODE_TO_NAME)

_NAME_ALIASES = {
    "WASHINGTON DC": "DC",
    "WASHINGTON D.C.": "DC",
    "D.C.": "DC",
    "VIRGIN ISLANDS": "VI",
    "US VIRGIN ISLANDS": "VI",
}

REGION_NAME_TO_CODE: Mapping[str, str] = MappingProxyType(
    {
        **{name.upper(): code for code, name in REGION_CODE_TO_NAME.items()},
        **_NAME_ALIASES,
    }
)

# Country markers seen at the tail of formatted address strings
COUNTRY_MARKERS: Mapping[str, str] = MappingProxyType(
    {
        "usa": "us",
        "us": "us",
        "u.s.a.": "us",
        "united states": "us",
        "united states of america": "us",
        "canada": "ca",
        "mexico": "mx",
        "méxico": "mx",
    }
)


def region_name(code: Optional[str]) -> Optional[str]:
    """Return the full region name for a region code, or None if unknown."""
    if not code:
        return None
    return REGION_CODE_TO_NAME.get(code.strip().upper())


def region_code(name_or_code: Optional[str]) -> Optional[str]:
    """
    Normalize a region string to its 2-letter region code.

    Args:
        name_or_code: Region name or code (full name, abbreviation or alias)

    Returns:
        2-letter region code if matched, None if unrecognizable
    """
    if not name_or_code:
        return None

    clean = name_or_code.strip().upper()
    if not clean:
        return None

    if clean in VALID_REGION_CODES:
        return clean

    if clean in REGION_NAME_TO_CODE:
        return REGION_NAME_TO_CODE[clean]

    # Remove periods from abbreviations ("N.Y.")
    no_periods = clean.replace(".", "")
    if no_periods in VALID_REGION_CODES:
        return no_periods
    if no_periods in REGION_NAME_TO_CODE:
        return REGION_NAME_TO_CODE[no_periods]

    return None


def country_code_from_marker(text: Optional[str]) -> Optional[str]:
    """Map a trailing country marker ("USA", "United States") to a country code."""
    if not text:
        return None
    marker = text.strip().lower()
    if marker in COUNTRY_MARKERS:
        return COUNTRY_MARKERS[marker]
    # "USA 10001" style tails
    head = marker.split(" ", 1)[0]
    if head in ("usa", "u.s.a."):
        return "us"
    return None


def is_valid_region_code(code: str) -> bool:
    """Check if a string is a known region code."""
    return code.strip().upper() in VALID_REGION_CODES

"""Build the query text sent to every provider."""

from typing import Optional

from georesolve.geocoding.matching import normalize_text

DEFAULT_SPECIFIC_LENGTH = 24


def looks_specific(text: str, specific_length: int = DEFAULT_SPECIFIC_LENGTH) -> bool:
    """A query with a comma, or longer than ``specific_length``, is sent as is."""
    return "," in text or len(text) > specific_length


def build_query(
    text: str,
    city: Optional[str] = None,
    region: Optional[str] = None,
    specific_length: int = DEFAULT_SPECIFIC_LENGTH,
) -> str:
    """Return the provider query for ``text``.

    Vague queries such as a bare business name get the caller's city and
    region appended so they resolve near the right place. Context already
    present in the text is not repeated.

    Args:
        text: Raw free text from the caller
        city: Optional expected city
        region: Optional expected region code or name
        specific_length: Length above which the text is considered specific

    Returns:
        The query string, identical for every provider in one request
    """
    query = " ".join(text.split())
    if not query or looks_specific(query, specific_length):
        return query

    parts = [query]
    seen = normalize_text(query)
    for context in (city, region):
        if not context or not context.strip():
            continue
        context_norm = normalize_text(context)
        if context_norm and f" {context_norm} " not in f" {seen} ":
            parts.append(context.strip())
            seen = f"{seen} {context_norm}"
    return ", ".join(parts)

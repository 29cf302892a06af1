"""Normalization of user-supplied city text."""

import re

_WHITESPACE = re.compile(r"\s+")


def normalize_city(value: str | None) -> str:
    """Trim and collapse internal whitespace. Returns "" for empty input."""
    if not value:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip()

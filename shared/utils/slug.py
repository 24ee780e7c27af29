"""Identifier slugging for continuous query table names."""

import re
import unicodedata

_NONLATIN = re.compile(r"[^\w-]", re.ASCII)
_WHITESPACE = re.compile(r"\s")


def to_slug(value: str) -> str:
    """Turn a report name into a lowercase identifier.

    Whitespace becomes ``_``, accents are stripped after NFD normalisation and
    anything outside ``[A-Za-z0-9_-]`` is dropped.

    >>> to_slug("Events by Collection")
    'events_by_collection'
    >>> to_slug("Café visits")
    'cafe_visits'
    """
    no_whitespace = _WHITESPACE.sub("_", value)
    normalized = unicodedata.normalize("NFD", no_whitespace)
    return _NONLATIN.sub("", normalized).lower()

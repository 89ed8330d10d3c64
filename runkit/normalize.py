"""Normalisation of parsed configuration data."""

from __future__ import annotations

from typing import Any

__all__ = ["NormalizeError", "normalize", "prefixed_by"]


class NormalizeError(ValueError):
    """Raised when a mapping holds a key that is not a string."""


def normalize(value: Any) -> Any:
    """Return ``value`` with every nested mapping keyed by strings.

    Dictionaries and lists are rebuilt recursively; any other value is
    returned as it is.
    """
    if isinstance(value, dict):
        result: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise NormalizeError(f"error parsing config field: {key}")
            result[key] = normalize(item)
        return result
    if isinstance(value, list):
        return [normalize(item) for item in value]
    return value


def _uncapitalize(text: str) -> str:
    return text[:1].lower() + text[1:]


def prefixed_by(value: Any, prefix: str) -> Any:
    """Select the entries whose keys start with ``prefix``.

    The prefix is stripped and the first letter of the rest lower-cased.
    Values that are not mappings are returned normalised but unfiltered.
    """
    normalized = normalize(value)
    if not isinstance(normalized, dict):
        return normalized
    return {
        _uncapitalize(key[len(prefix):]): item
        for key, item in normalized.items()
        if key.startswith(prefix)
    }
"""Lenient value resolution for partially-filled generated payloads."""

import math
import numbers
import re
from collections.abc import Mapping
from typing import Any

# Leading numeric part of a string, e.g. "3.5%" -> 3.5, "180 (est.)" -> 180
_LEADING_NUMBER = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?")

# Enumeration and bullet prefixes stripped from split lines: "1. ", "2) ", "- "
_ENUMERATION_PREFIX = re.compile(r"^[\d.\s\-*•)]*")


def usable_number(value: Any) -> float | None:
    """Return a finite float from a number or a string's leading numeric part.

    Booleans, NaN, infinities and non-numeric values are unusable (None).
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if not match:
            return None
        number = float(match.group())
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def resolve_metric(primary: Any, secondary: Any, default: float) -> float:
    """Pick the first usable number among primary and secondary, else default."""
    for candidate in (primary, secondary):
        number = usable_number(candidate)
        if number is not None:
            return number
    return float(default)


def first_present(data: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key that is present and not None."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def text_or_default(value: Any, default: str) -> str:
    """Stripped string form of a scalar, or default when empty."""
    if value is None or isinstance(value, (Mapping, list, tuple)):
        return default
    text = str(value).strip()
    return text or default


def clean_line(line: str) -> str:
    """Strip whitespace plus any leading enumeration or bullet marker."""
    return _ENUMERATION_PREFIX.sub("", line.strip()).strip()


def split_recommendation_text(text: str, min_length: int) -> list[str]:
    """Split a text block into lines, dropping enumeration and short lines."""
    lines = []
    for line in text.splitlines():
        cleaned = clean_line(line)
        if len(cleaned) >= min_length:
            lines.append(cleaned)
    return lines


def string_items(value: Any, min_length: int = 1) -> list[str]:
    """Normalize a string or a sequence of strings into a clean list.

    A bare string is split into lines. Sequence items are stringified and
    stripped, and items shorter than min_length are dropped.
    """
    if isinstance(value, str):
        return split_recommendation_text(value, min_length)
    if not isinstance(value, (list, tuple)):
        return []

    items = []
    for item in value:
        if item is None or isinstance(item, (Mapping, list, tuple)):
            continue
        text = str(item).strip()
        if len(text) >= min_length:
            items.append(text)
    return items

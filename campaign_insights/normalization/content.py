"""Tagged union for generated content entering the normalization pipeline.

Raw service output is classified once, at the boundary, into exactly one of
`Structured`, `RawText` or `Absent`. Downstream code dispatches on the
variant type and never re-inspects the raw value.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Structured:
    """Already-parsed mapping payload."""

    value: dict[str, Any]


@dataclass(frozen=True)
class RawText:
    """Free text that may embed JSON or labeled metrics."""

    text: str


@dataclass(frozen=True)
class Absent:
    """No usable content, with the reason it is missing."""

    reason: str = "no content"


Content = Structured | RawText | Absent


def as_content(raw: Any) -> Content:
    """Classify a raw value into the content union.

    Mappings become `Structured`, non-blank strings (and UTF-8 bytes) become
    `RawText`. None, blank text, empty mappings and any other type are
    `Absent`. Values that are already classified pass through unchanged.
    """
    if isinstance(raw, (Structured, RawText, Absent)):
        return raw
    if raw is None:
        return Absent("no content")

    if isinstance(raw, Mapping):
        if not raw:
            return Absent("empty payload")
        return Structured({str(key): value for key, value in raw.items()})

    if isinstance(raw, (bytes, bytearray)):
        raw = bytes(raw).decode("utf-8", errors="replace")
    if isinstance(raw, str):
        if not raw.strip():
            return Absent("blank text")
        return RawText(raw)

    return Absent(f"unsupported content type {type(raw).__name__}")

"""Scalar coercion helpers shared by the input models.

Every helper is total: malformed input maps to a default instead of raising.
"""

import math
import numbers
from datetime import date, datetime, time, timezone
from typing import Any

from pydantic import TypeAdapter, ValidationError

# Stripped before parsing; handles "1,250", "$ 40.00", "R$ 1.500"
CURRENCY_TOKENS = ("R$", "$", "₹", "€", "£", ",")

_DATETIME_ADAPTER = TypeAdapter(datetime)
_DATE_ADAPTER = TypeAdapter(date)


def parse_number(value: Any) -> float | None:
    """Parse a finite number from a number or numeric string.

    Returns:
        The parsed float, or None when the value is not numeric.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, numbers.Real):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        for token in CURRENCY_TOKENS:
            text = text.replace(token, "")
        text = text.strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None

    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_count(value: Any) -> float:
    """Coerce a non-negative numeric field, defaulting to 0."""
    number = parse_number(value)
    if number is None or number < 0:
        return 0.0
    return number


def coerce_optional_number(value: Any) -> float | None:
    """Coerce an optional non-negative numeric field, None when unusable."""
    number = parse_number(value)
    if number is None or number < 0:
        return None
    return number


def coerce_timestamp(value: Any) -> datetime | None:
    """Coerce datetimes, dates and ISO-8601 strings; None when unparsable."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and not value.strip():
        return None

    try:
        return _DATETIME_ADAPTER.validate_python(value)
    except ValidationError:
        pass

    try:
        return datetime.combine(_DATE_ADAPTER.validate_python(value), time.min)
    except ValidationError:
        return None


def to_utc_day(timestamp: datetime) -> date:
    """Truncate a timestamp to its calendar day (UTC for aware timestamps)."""
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(timezone.utc)
    return timestamp.date()

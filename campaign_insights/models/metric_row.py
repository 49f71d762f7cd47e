"""Pydantic model for a single advertising delivery record."""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .coercion import (
    coerce_count,
    coerce_optional_number,
    coerce_timestamp,
    to_utc_day,
)


class MetricRow(BaseModel):
    """One delivery record: impressions, clicks, conversions, cost, tags, time.

    Numeric fields are coerced rather than validated strictly: absent,
    negative or non-numeric values become 0, so construction never fails on
    a malformed cell. Rows are immutable once built.
    """

    model_config = ConfigDict(frozen=True)

    impressions: float = 0.0
    clicks: float = 0.0
    conversions: float = 0.0
    cost: float = 0.0
    approved_budget: float = 0.0
    revenue_estimate: float | None = None  # Explicit revenue overrides the estimate
    dimension_tags: dict[str, str] = Field(default_factory=dict)
    timestamp: datetime | None = None

    @field_validator(
        "impressions", "clicks", "conversions", "cost", "approved_budget", mode="before"
    )
    @classmethod
    def _coerce_counts(cls, value: Any) -> float:
        return coerce_count(value)

    @field_validator("revenue_estimate", mode="before")
    @classmethod
    def _coerce_revenue(cls, value: Any) -> float | None:
        return coerce_optional_number(value)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> datetime | None:
        return coerce_timestamp(value)

    @field_validator("dimension_tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> dict[str, str]:
        if not isinstance(value, Mapping):
            return {}
        tags: dict[str, str] = {}
        for key, tag in value.items():
            if tag is None:
                continue
            text = str(tag).strip()
            if text:
                tags[str(key)] = text
        return tags

    @property
    def report_day(self) -> date | None:
        """Calendar day of the record, None when the row has no timestamp."""
        if self.timestamp is None:
            return None
        return to_utc_day(self.timestamp)

    def tag(self, key: str, default: str = "Unknown") -> str:
        """Dimension tag value for grouping."""
        return self.dimension_tags.get(key, default)

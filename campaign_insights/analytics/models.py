"""Output models for KPI aggregation."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any


def _r(value: float | None, digits: int = 2) -> float | None:
    return round(value, digits) if value is not None else None


@dataclass(frozen=True)
class BasicKPI:
    """Totals and derived metrics for a set of rows.

    ctr, conversion_rate and roi are percentages (2.5 = 2.5%).
    Every ratio is 0 when its denominator is 0.
    """

    impressions: float = 0.0
    clicks: float = 0.0
    conversions: float = 0.0
    cost: float = 0.0
    revenue: float = 0.0
    ctr: float = 0.0  # clicks / impressions * 100
    conversion_rate: float = 0.0  # conversions / clicks * 100
    cpc: float = 0.0  # cost / clicks
    cpa: float = 0.0  # cost / conversions
    roi: float = 0.0  # (revenue - cost) / cost * 100

    def to_dict(self) -> dict[str, float]:
        return {
            "impressions": self.impressions,
            "clicks": self.clicks,
            "conversions": self.conversions,
            "cost": _r(self.cost),
            "revenue": _r(self.revenue),
            "ctr": _r(self.ctr),
            "conversion_rate": _r(self.conversion_rate),
            "cpc": _r(self.cpc),
            "cpa": _r(self.cpa),
            "roi": _r(self.roi),
        }


@dataclass(frozen=True)
class DimensionKPI:
    """Metrics for one value of a dimension tag (e.g. one channel)."""

    dimension: str
    metrics: BasicKPI
    efficiency: float  # roi / max(cpc, 1), ranking score

    def to_dict(self) -> dict[str, Any]:
        return {
            "dimension": self.dimension,
            **self.metrics.to_dict(),
            "efficiency": _r(self.efficiency, 4),
        }


@dataclass(frozen=True)
class BudgetKPI:
    """Approved vs spent budget."""

    total_budget: float = 0.0
    spent_budget: float = 0.0
    remaining_budget: float = 0.0
    budget_utilization_pct: float = 0.0  # spent / total * 100, 0 when no budget
    revenue_per_spent_unit: float = 0.0  # revenue / spent

    def to_dict(self) -> dict[str, float]:
        return {
            "total_budget": _r(self.total_budget),
            "spent_budget": _r(self.spent_budget),
            "remaining_budget": _r(self.remaining_budget),
            "budget_utilization_pct": _r(self.budget_utilization_pct),
            "revenue_per_spent_unit": _r(self.revenue_per_spent_unit, 4),
        }


@dataclass(frozen=True)
class AdvancedKPI:
    """Dimension-sliced and budget metrics."""

    grouping_key: str
    by_dimension: list[DimensionKPI] = field(default_factory=list)  # Full, by efficiency
    slices: dict[str, list[DimensionKPI]] = field(default_factory=dict)  # Top-N per key
    budget_efficiency: BudgetKPI = field(default_factory=BudgetKPI)

    def to_dict(self) -> dict[str, Any]:
        return {
            "grouping_key": self.grouping_key,
            "by_dimension": [d.to_dict() for d in self.by_dimension],
            "slices": {
                key: [d.to_dict() for d in values] for key, values in self.slices.items()
            },
            "budget_efficiency": self.budget_efficiency.to_dict(),
        }


@dataclass(frozen=True)
class DailyKPI:
    """Aggregated metrics for a single calendar day."""

    day: date
    metrics: BasicKPI

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.day.isoformat(), **self.metrics.to_dict()}


@dataclass(frozen=True)
class TrendSeries:
    """Daily series plus first-to-last percentage deltas.

    Deltas are None unless at least two distinct days exist.
    """

    daily: list[DailyKPI] = field(default_factory=list)
    ctr_trend: float | None = None
    cost_trend: float | None = None
    conversion_trend: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "daily": [d.to_dict() for d in self.daily],
            "ctr_trend": _r(self.ctr_trend),
            "cost_trend": _r(self.cost_trend),
            "conversion_trend": _r(self.conversion_trend),
        }


@dataclass(frozen=True)
class KPISet:
    """Complete KPI rollup for a collection of MetricRows."""

    basic: BasicKPI
    advanced: AdvancedKPI
    trends: TrendSeries

    @property
    def has_data(self) -> bool:
        """True when the rollup covers any delivered impressions."""
        return self.basic.impressions > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict (values rounded for display)."""
        return {
            "basic": self.basic.to_dict(),
            "advanced": self.advanced.to_dict(),
            "trends": self.trends.to_dict(),
        }

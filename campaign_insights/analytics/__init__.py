"""Analytics module for advertising campaign KPI aggregation."""

from .calculator import KPIAggregator, aggregate
from .insights import Insight, InsightEngine, InsightThresholds, Priority
from .models import (
    AdvancedKPI,
    BasicKPI,
    BudgetKPI,
    DailyKPI,
    DimensionKPI,
    KPISet,
    TrendSeries,
)
from .stats import detect_trend

__all__ = [
    "AdvancedKPI",
    "BasicKPI",
    "BudgetKPI",
    "DailyKPI",
    "DimensionKPI",
    "Insight",
    "InsightEngine",
    "InsightThresholds",
    "KPIAggregator",
    "KPISet",
    "Priority",
    "TrendSeries",
    "aggregate",
    "detect_trend",
]

"""Shared fixtures for campaign insights tests."""

from typing import Any

import pytest

from campaign_insights.analytics import KPIAggregator, KPISet
from campaign_insights.models import ModelParameters


@pytest.fixture
def sample_rows() -> list[dict[str, Any]]:
    """Four delivery rows across three channels and three days.

    Totals: 4500 impressions, 120 clicks, 10 conversions, 240 cost,
    1000 revenue (10 conversions * 100), 500 approved budget.
    The display row has no timestamp and no creative.
    """
    return [
        {
            "impressions": 1000,
            "clicks": 30,
            "conversions": 3,
            "cost": 60.0,
            "approved_budget": 200.0,
            "dimension_tags": {"channel": "search", "creative": "c1"},
            "timestamp": "2024-01-03T09:00:00",
        },
        {
            "impressions": 1000,
            "clicks": 50,
            "conversions": 5,
            "cost": 100.0,
            "approved_budget": 200.0,
            "dimension_tags": {"channel": "search", "creative": "c1"},
            "timestamp": "2024-01-01T10:00:00",
        },
        {
            "impressions": 2000,
            "clicks": 40,
            "conversions": 2,
            "cost": 80.0,
            "approved_budget": 100.0,
            "dimension_tags": {"channel": "social", "creative": "c2"},
            "timestamp": "2024-01-02T10:00:00",
        },
        {
            "impressions": 500,
            "clicks": 0,
            "conversions": 0,
            "cost": 0.0,
            "dimension_tags": {"channel": "display"},
        },
    ]


@pytest.fixture
def raw_records() -> list[dict[str, Any]]:
    """Record-store rows using raw column names."""
    return [
        {
            "impressions": "1,000",
            "clicks": 50,
            "conversions": 5,
            "media_cost_usd": "$100.00",
            "approved_budget": 200,
            "channel_name": "search",
            "creative_id": 17,
            "time": "2024-01-01T10:00:00Z",
        },
        {
            "impressions": 2000,
            "clicks": 40,
            "conversions": 2,
            "media_cost_usd": 80,
            "estimated_revenue": 500,
            "channel_name": "social",
            "time": "2024-01-02",
        },
    ]


@pytest.fixture
def aggregator() -> KPIAggregator:
    return KPIAggregator()


@pytest.fixture
def kpis(aggregator: KPIAggregator, sample_rows: list[dict[str, Any]]) -> KPISet:
    return aggregator.aggregate(sample_rows)


@pytest.fixture
def parameters() -> ModelParameters:
    return ModelParameters()


@pytest.fixture
def make_kpis():
    """Factory for single-row KPISets with a given CTR and ROI (percent).

    Rows use 10000 impressions, 100 cost and a 10% conversion rate.
    """

    def _make(ctr_pct: float, roi_pct: float) -> KPISet:
        clicks = 10000 * ctr_pct / 100
        revenue = 100 * (1 + roi_pct / 100)
        return KPIAggregator().aggregate(
            [
                {
                    "impressions": 10000,
                    "clicks": clicks,
                    "conversions": clicks * 0.1,
                    "cost": 100.0,
                    "revenue_estimate": revenue,
                    "dimension_tags": {"channel": "search"},
                }
            ]
        )

    return _make

"""KPI aggregator - folds MetricRows into a KPISet."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

import polars as pl

from ..models.metric_row import MetricRow
from .expressions import (
    budget_derived_expr,
    budget_totals_expr,
    derived_kpi_expr,
    efficiency_expr,
    totals_expr,
)
from .models import (
    AdvancedKPI,
    BasicKPI,
    BudgetKPI,
    DailyKPI,
    DimensionKPI,
    KPISet,
    TrendSeries,
)

logger = logging.getLogger(__name__)

DEFAULT_GROUPING_KEY = "channel"

ROW_SCHEMA: dict[str, pl.DataType] = {
    "impressions": pl.Float64,
    "clicks": pl.Float64,
    "conversions": pl.Float64,
    "cost": pl.Float64,
    "revenue": pl.Float64,
    "approved_budget": pl.Float64,
    "report_day": pl.Date,
}


def _tag_col(key: str) -> str:
    # Prefixed so tag keys never collide with metric columns
    return f"tag:{key}"


def _basic_from_row(row: dict) -> BasicKPI:
    return BasicKPI(
        impressions=row["impressions"],
        clicks=row["clicks"],
        conversions=row["conversions"],
        cost=row["cost"],
        revenue=row["revenue"],
        ctr=row["ctr"],
        conversion_rate=row["conversion_rate"],
        cpc=row["cpc"],
        cpa=row["cpa"],
        roi=row["roi"],
    )


def _pct_change(first: float, last: float) -> float:
    """First-to-last change in percent; a zero baseline divides by 1."""
    baseline = first if first != 0 else 1.0
    return (last - first) / abs(baseline) * 100


@dataclass
class KPIAggregator:
    """Rolls delivery rows up into basic, per-dimension, budget and trend KPIs.

    All methods are pure - the same rows always produce the same KPISet.

    Attributes:
        unit_value: Revenue credited per conversion when a row has no
            explicit revenue (default 100)
        slice_limits: Extra tag keys to slice by, mapped to how many top
            groups to keep (None keeps all). The grouping key passed to
            aggregate() is always kept in full.
    """

    unit_value: float = 100.0
    slice_limits: dict[str, int | None] = field(default_factory=lambda: {"creative": 10})

    def aggregate(
        self,
        rows: Iterable[MetricRow | Mapping],
        grouping_key: str = DEFAULT_GROUPING_KEY,
    ) -> KPISet:
        """Compute the full KPISet.

        Args:
            rows: MetricRows (mappings are validated into MetricRows)
            grouping_key: Dimension tag for the primary breakdown

        Returns:
            KPISet; all zeros with empty breakdowns when rows is empty.

        Raises:
            TypeError: If rows is not iterable
        """
        metric_rows = [
            row if isinstance(row, MetricRow) else MetricRow.model_validate(row)
            for row in rows
        ]

        if not metric_rows:
            return self.empty(grouping_key)

        slice_keys = [key for key in self.slice_limits if key != grouping_key]
        df = self.to_frame(metric_rows, [grouping_key, *slice_keys])

        advanced = AdvancedKPI(
            grouping_key=grouping_key,
            by_dimension=self.get_dimension_kpis(df, grouping_key),
            slices={
                key: self.get_dimension_kpis(df, key, top_n=self.slice_limits[key])
                for key in slice_keys
            },
            budget_efficiency=self.get_budget_kpis(df),
        )

        kpis = KPISet(
            basic=self.get_basic_kpis(df),
            advanced=advanced,
            trends=self.get_trends(df),
        )
        logger.debug(
            "Aggregated %d rows into %d %s groups",
            len(metric_rows),
            len(advanced.by_dimension),
            grouping_key,
        )
        return kpis

    def empty(self, grouping_key: str = DEFAULT_GROUPING_KEY) -> KPISet:
        """KPISet for no input rows."""
        return KPISet(
            basic=BasicKPI(),
            advanced=AdvancedKPI(grouping_key=grouping_key),
            trends=TrendSeries(),
        )

    def to_frame(self, rows: list[MetricRow], tag_keys: list[str]) -> pl.DataFrame:
        """Build the working DataFrame, resolving per-row revenue."""
        data: dict[str, list] = {
            "impressions": [r.impressions for r in rows],
            "clicks": [r.clicks for r in rows],
            "conversions": [r.conversions for r in rows],
            "cost": [r.cost for r in rows],
            "revenue": [
                r.revenue_estimate
                if r.revenue_estimate is not None
                else r.conversions * self.unit_value
                for r in rows
            ],
            "approved_budget": [r.approved_budget for r in rows],
            "report_day": [r.report_day for r in rows],
        }
        schema = dict(ROW_SCHEMA)
        for key in tag_keys:
            data[_tag_col(key)] = [r.tag(key) for r in rows]
            schema[_tag_col(key)] = pl.Utf8

        return pl.DataFrame(data, schema=schema)

    # =========================================================================
    # BASIC KPIs
    # =========================================================================

    def get_basic_kpis(self, df: pl.DataFrame) -> BasicKPI:
        """Campaign-wide totals and derived metrics."""
        row = df.select(totals_expr()).with_columns(derived_kpi_expr()).to_dicts()[0]
        return _basic_from_row(row)

    # =========================================================================
    # DIMENSION SLICING
    # =========================================================================

    def get_dimension_kpis(
        self,
        df: pl.DataFrame,
        key: str,
        top_n: int | None = None,
    ) -> list[DimensionKPI]:
        """Per-tag-value metrics ranked by efficiency.

        Args:
            df: Working DataFrame from to_frame()
            key: Dimension tag key
            top_n: Keep only the best N groups (None keeps all)

        Returns:
            DimensionKPIs sorted by efficiency descending, then name.
        """
        col = _tag_col(key)
        grouped = (
            df.group_by(col)
            .agg(totals_expr())
            .with_columns(derived_kpi_expr())
            .with_columns(efficiency_expr())
            .sort(["efficiency", col], descending=[True, False])
        )
        if top_n is not None:
            grouped = grouped.head(top_n)

        return [
            DimensionKPI(
                dimension=row[col],
                metrics=_basic_from_row(row),
                efficiency=row["efficiency"],
            )
            for row in grouped.to_dicts()
        ]

    # =========================================================================
    # BUDGET EFFICIENCY
    # =========================================================================

    def get_budget_kpis(self, df: pl.DataFrame) -> BudgetKPI:
        """Approved budget utilization and revenue yield."""
        row = (
            df.select(budget_totals_expr()).with_columns(budget_derived_expr()).to_dicts()[0]
        )
        return BudgetKPI(
            total_budget=row["total_budget"],
            spent_budget=row["spent_budget"],
            remaining_budget=row["remaining_budget"],
            budget_utilization_pct=row["budget_utilization_pct"],
            revenue_per_spent_unit=row["revenue_per_spent_unit"],
        )

    # =========================================================================
    # TRENDS
    # =========================================================================

    def get_trends(self, df: pl.DataFrame) -> TrendSeries:
        """Daily series sorted by date, with first-to-last deltas.

        Rows without a timestamp are left out of the series.
        """
        daily_df = (
            df.filter(pl.col("report_day").is_not_null())
            .group_by("report_day")
            .agg(totals_expr())
            .with_columns(derived_kpi_expr())
            .sort("report_day")
        )

        daily = [
            DailyKPI(day=row["report_day"], metrics=_basic_from_row(row))
            for row in daily_df.to_dicts()
        ]

        if len(daily) < 2:
            return TrendSeries(daily=daily)

        first, last = daily[0].metrics, daily[-1].metrics
        return TrendSeries(
            daily=daily,
            ctr_trend=_pct_change(first.ctr, last.ctr),
            cost_trend=_pct_change(first.cost, last.cost),
            conversion_trend=_pct_change(first.conversions, last.conversions),
        )


def aggregate(
    rows: Iterable[MetricRow | Mapping],
    grouping_key: str = DEFAULT_GROUPING_KEY,
    unit_value: float = 100.0,
) -> KPISet:
    """Aggregate rows with a default-configured KPIAggregator."""
    return KPIAggregator(unit_value=unit_value).aggregate(rows, grouping_key)

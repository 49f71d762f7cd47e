"""Reusable Polars expressions for KPI calculations."""

import polars as pl

TOTAL_COLUMNS = ("impressions", "clicks", "conversions", "cost", "revenue")


def safe_div_expr(numerator: pl.Expr, denominator: pl.Expr) -> pl.Expr:
    """Divide, yielding 0 wherever the denominator is 0."""
    return pl.when(denominator != 0).then(numerator / denominator).otherwise(0.0)


# =============================================================================
# AGGREGATIONS
# =============================================================================


def totals_expr() -> list[pl.Expr]:
    """Summed delivery totals, usable in select() or group_by().agg()."""
    return [pl.col(c).sum().alias(c) for c in TOTAL_COLUMNS]


def budget_totals_expr() -> list[pl.Expr]:
    """Approved budget vs spend totals."""
    return [
        pl.col("approved_budget").sum().alias("total_budget"),
        pl.col("cost").sum().alias("spent_budget"),
        pl.col("revenue").sum().alias("revenue"),
    ]


# =============================================================================
# DERIVED METRICS (applied after aggregation)
# =============================================================================


def derived_kpi_expr() -> list[pl.Expr]:
    """Rates and unit costs from aggregated totals.

    CTR = clicks / impressions * 100 (clipped to 0-100)
    Conversion rate = conversions / clicks * 100 (clipped to 0-100)
    CPC = cost / clicks
    CPA = cost / conversions
    ROI = (revenue - cost) / cost * 100
    """
    return [
        (safe_div_expr(pl.col("clicks"), pl.col("impressions")) * 100)
        .clip(0.0, 100.0)
        .alias("ctr"),
        (safe_div_expr(pl.col("conversions"), pl.col("clicks")) * 100)
        .clip(0.0, 100.0)
        .alias("conversion_rate"),
        safe_div_expr(pl.col("cost"), pl.col("clicks")).alias("cpc"),
        safe_div_expr(pl.col("cost"), pl.col("conversions")).alias("cpa"),
        (safe_div_expr(pl.col("revenue") - pl.col("cost"), pl.col("cost")) * 100).alias(
            "roi"
        ),
    ]


def efficiency_expr() -> pl.Expr:
    """Ranking score: roi / max(cpc, 1)."""
    return (pl.col("roi") / pl.max_horizontal(pl.col("cpc"), pl.lit(1.0))).alias(
        "efficiency"
    )


def budget_derived_expr() -> list[pl.Expr]:
    """Utilization and revenue yield of the approved budget."""
    return [
        (pl.col("total_budget") - pl.col("spent_budget")).alias("remaining_budget"),
        (safe_div_expr(pl.col("spent_budget"), pl.col("total_budget")) * 100)
        .clip(lower_bound=0.0)
        .alias("budget_utilization_pct"),
        safe_div_expr(pl.col("revenue"), pl.col("spent_budget"))
        .clip(lower_bound=0.0)
        .alias("revenue_per_spent_unit"),
    ]

"""Fallback models used when no generated content can be extracted."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..analytics.insights import InsightEngine, InsightThresholds, Priority
from ..analytics.models import KPISet
from ..analytics.stats import mean_or_zero
from ..models.campaign import CampaignInput
from ..models.parameters import ModelParameters
from ..models.results import (
    AnalysisResult,
    BudgetAllocation,
    Confidence,
    Outlook,
    PerformanceAnalysis,
    PredictionMetrics,
    PredictionResult,
    Recommendation,
    Source,
)
from . import defaults
from .resolve import resolve_metric, usable_number

logger = logging.getLogger(__name__)


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    low, high = bounds
    return max(low, min(high, value))


# =============================================================================
# PREDICTIONS
# =============================================================================


class StatisticalModel:
    """Forecast from historical averages scaled by the planned budget."""

    def __init__(self, parameters: ModelParameters | None = None):
        self.parameters = parameters or ModelParameters()

    def predict(
        self,
        campaign: CampaignInput,
        historical: Iterable[Any] | None,
    ) -> PredictionResult | None:
        """Forecast from usable historical items.

        Args:
            campaign: Planned campaign (budget and impressions drive scaling)
            historical: KPISets, stored predictions (`{"results": {...}}`) or
                KPISet.to_dict() mappings. Other items are ignored.

        Returns:
            PredictionResult with source statistical_model, or None when no
            historical item is usable.
        """
        samples = [
            sample
            for sample in (self.sample(item) for item in self._items(historical))
            if sample is not None
        ]
        if not samples:
            logger.info("No usable historical data for statistical forecast")
            return None

        p = self.parameters
        budget = campaign.budget
        budget_factor = budget / p.budget_scale

        mean_ctr = mean_or_zero([s[0] for s in samples])
        mean_conversion = mean_or_zero([s[1] for s in samples])
        mean_roi = mean_or_zero([s[2] for s in samples])

        ctr_intercept, ctr_slope = p.ctr_budget_weights
        roi_intercept, roi_slope = p.roi_budget_weights
        ctr = _clamp(mean_ctr * (ctr_intercept + budget_factor * ctr_slope), p.ctr_range)
        conversion_rate = _clamp(mean_conversion, p.conversion_rate_range)
        roi = _clamp(mean_roi * (roi_intercept + budget_factor * roi_slope), p.roi_range)

        clicks = campaign.impressions * ctr
        conversions = clicks * conversion_rate
        cpa = _clamp(budget / conversions if conversions > 0 else budget, p.cpa_range)

        count = len(samples)
        logger.debug("Statistical forecast from %d historical samples", count)
        return PredictionResult(
            predictions=PredictionMetrics(
                ctr=ctr,
                conversion_rate=conversion_rate,
                roi=roi,
                cpa=cpa,
                estimated_revenue=budget * roi / 100 + budget,
                estimated_clicks=clicks,
                estimated_conversions=conversions,
            ),
            confidence_factors={
                "data_quality": "high" if count >= p.high_quality_min_samples else "medium",
                "similarity": "medium",
                "market_conditions": "stable",
            },
            recommendations=list(defaults.STATISTICAL_RECOMMENDATIONS),
            source=Source.STATISTICAL_MODEL,
            confidence=(
                Confidence.MEDIUM
                if count >= p.medium_confidence_min_samples
                else Confidence.LOW
            ),
            note=defaults.STATISTICAL_NOTE.format(count=count),
        )

    @staticmethod
    def _items(historical: Any) -> list[Any]:
        if historical is None or isinstance(historical, (str, bytes, Mapping)):
            return []
        if isinstance(historical, KPISet):
            return [historical]
        try:
            return list(historical)
        except TypeError:
            logger.warning(
                "Ignoring non-iterable historical data of type %s", type(historical).__name__
            )
            return []

    @staticmethod
    def sample(item: Any) -> tuple[float, float, float] | None:
        """(ctr, conversion_rate, roi) with rates as fractions, or None."""
        if isinstance(item, KPISet):
            if not item.has_data:
                return None
            basic = item.basic
            return basic.ctr / 100, basic.conversion_rate / 100, basic.roi

        if not isinstance(item, Mapping):
            return None

        results = item.get("results")
        if isinstance(results, Mapping):
            # Stored predictions already hold fractional rates
            return (
                resolve_metric(results.get("ctr"), results.get("ctr_esperado"), 0.0),
                resolve_metric(
                    results.get("conversion_rate"), results.get("taxa_conversao"), 0.0
                ),
                resolve_metric(results.get("roi"), results.get("roi_estimado"), 0.0),
            )

        basic = item.get("basic")
        if isinstance(basic, Mapping):
            impressions = usable_number(basic.get("impressions"))
            if not impressions or impressions <= 0:
                return None
            return (
                resolve_metric(basic.get("ctr"), None, 0.0) / 100,
                resolve_metric(basic.get("conversion_rate"), None, 0.0) / 100,
                resolve_metric(basic.get("roi"), None, 0.0),
            )

        return None


class BaselineModel:
    """Industry-average forecast. Always succeeds."""

    def __init__(self, parameters: ModelParameters | None = None):
        self.parameters = parameters or ModelParameters()

    def predict(self, campaign: CampaignInput) -> PredictionResult:
        p = self.parameters
        clicks = campaign.impressions * p.default_ctr
        conversions = clicks * p.default_conversion_rate

        logger.info("Using industry baseline forecast")
        return PredictionResult(
            predictions=PredictionMetrics(
                ctr=p.default_ctr,
                conversion_rate=p.default_conversion_rate,
                roi=p.default_roi,
                cpa=p.default_cpa,
                estimated_revenue=campaign.budget * p.default_roi / 100 + campaign.budget,
                estimated_clicks=clicks,
                estimated_conversions=conversions,
            ),
            confidence_factors=dict(defaults.BASELINE_CONFIDENCE_FACTORS),
            recommendations=list(defaults.BASELINE_RECOMMENDATIONS),
            source=Source.INDUSTRY_BASELINE,
            confidence=Confidence.LOW,
            note=defaults.BASELINE_NOTE,
        )


# =============================================================================
# ANALYSES
# =============================================================================


class KPIAnalysisModel:
    """Rule-based analysis of a KPISet, or a baseline when there is no data."""

    def __init__(
        self,
        parameters: ModelParameters | None = None,
        thresholds: InsightThresholds | None = None,
    ):
        self.parameters = parameters or ModelParameters()
        self.thresholds = thresholds or InsightThresholds()

    def analyze(self, kpis: KPISet | None) -> AnalysisResult:
        if kpis is None or not kpis.has_data:
            return self.baseline()

        engine = InsightEngine(kpis, self.thresholds)
        insights = engine.generate_all_insights()
        groups = len(kpis.advanced.by_dimension)

        return AnalysisResult(
            performance_analysis=PerformanceAnalysis(
                summary=(
                    f"Analysis of {kpis.basic.impressions:,.0f} impressions across "
                    f"{groups} {kpis.advanced.grouping_key} group(s)"
                ),
                strengths=engine.identify_strengths(),
                weaknesses=engine.identify_weaknesses(),
                overall_score=engine.calculate_score(),
                alerts=[i.message for i in insights if i.priority == Priority.HIGH],
            ),
            strategic_insights=[i.message for i in insights]
            or list(defaults.KPI_ANALYSIS_INSIGHTS),
            recommendations=[
                Recommendation(
                    action=action["action"],
                    impact=action["impact"],
                    effort=action["effort"],
                    timeline=defaults.DEFAULT_TIMELINE,
                    expected_improvement=action["expected_improvement"],
                )
                for action in engine.recommended_actions()
            ],
            outlook=Outlook(
                next_30_days=defaults.OUTLOOK_NEXT_30_DAYS,
                confidence=defaults.OUTLOOK_CONFIDENCE,
                key_metrics=list(defaults.OUTLOOK_KEY_METRICS),
            ),
            confidence_factors=dict(defaults.DEFAULT_CONFIDENCE_FACTORS),
            source=Source.STATISTICAL_MODEL,
            confidence=Confidence.MEDIUM,
            note=defaults.KPI_ANALYSIS_NOTE,
        )

    def baseline(self) -> AnalysisResult:
        logger.info("No KPI data available, using baseline analysis")
        return AnalysisResult(
            performance_analysis=PerformanceAnalysis(
                summary=defaults.BASELINE_ANALYSIS_SUMMARY,
                strengths=list(defaults.ANALYSIS_STRENGTHS),
                weaknesses=list(defaults.BASELINE_WEAKNESSES),
                overall_score=self.parameters.default_overall_score,
                alerts=[],
            ),
            strategic_insights=list(defaults.ANALYSIS_INSIGHTS),
            recommendations=[
                Recommendation(*fields) for fields in defaults.ANALYSIS_RECOMMENDATIONS
            ],
            outlook=Outlook(
                next_30_days=defaults.OUTLOOK_NEXT_30_DAYS,
                confidence=defaults.OUTLOOK_CONFIDENCE,
                key_metrics=list(defaults.OUTLOOK_KEY_METRICS),
            ),
            confidence_factors=dict(defaults.BASELINE_CONFIDENCE_FACTORS),
            source=Source.INDUSTRY_BASELINE,
            confidence=Confidence.LOW,
            note=defaults.BASELINE_ANALYSIS_NOTE,
        )


# =============================================================================
# BUDGET
# =============================================================================


class BalancedBudgetModel:
    """Equal split across the current channels or the standard channel set."""

    def allocate(self, current_allocation: Mapping[str, Any] | None = None) -> BudgetAllocation:
        if isinstance(current_allocation, Mapping) and current_allocation:
            channels = [str(channel) for channel in current_allocation]
        else:
            channels = list(defaults.DEFAULT_BUDGET_CHANNELS)

        share = 100 / len(channels)
        logger.info("Using balanced budget split across %d channels", len(channels))
        return BudgetAllocation(
            allocation={channel: share for channel in channels},
            expected_roi_improvement=defaults.BALANCED_ROI_IMPROVEMENT,
            rationale=defaults.BALANCED_RATIONALE,
            source=Source.BALANCED_MODEL,
        )

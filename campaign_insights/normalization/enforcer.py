"""Structure enforcer - fills every missing field of a partial result.

`ensure_*` methods are total over any input (including `{}` and
non-mappings) and idempotent: feeding a result's `to_dict()` back in yields
an equal result.
"""

import logging
from collections.abc import Mapping
from typing import Any

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
from .extraction import PREDICTION_WRAPPERS, RECOMMENDATION_KEYS
from .resolve import first_present, resolve_metric, string_items, text_or_default

logger = logging.getLogger(__name__)


def parse_source(value: Any, default: Source = Source.GENERATIVE) -> Source:
    """Source enum from a label; unknown labels map to the default."""
    if isinstance(value, Source):
        return value
    try:
        return Source(str(value).strip().lower())
    except ValueError:
        return default


def parse_confidence(value: Any, default: Confidence = Confidence.MEDIUM) -> Confidence:
    """Confidence enum from a label; unknown labels map to the default."""
    if isinstance(value, Confidence):
        return value
    try:
        return Confidence(str(value).strip().lower())
    except ValueError:
        return default


def confidence_factors(value: Any, default: Mapping[str, str]) -> dict[str, str]:
    """Non-empty mapping with stringified values, else a copy of the default."""
    if isinstance(value, Mapping) and value:
        return {str(key): str(item) for key, item in value.items()}
    return dict(default)


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


class StructureEnforcer:
    """Guarantees fully populated canonical results.

    Attributes:
        parameters: Defaults and minimum recommendation lengths
    """

    def __init__(self, parameters: ModelParameters | None = None):
        self.parameters = parameters or ModelParameters()

    # =========================================================================
    # PREDICTIONS
    # =========================================================================

    def ensure_prediction(
        self,
        partial: Any,
        campaign: CampaignInput | Mapping | None = None,
    ) -> PredictionResult:
        """Build a PredictionResult from a partial prediction.

        Metrics resolve primary key, then Portuguese alias, then default.
        Estimated clicks and conversions are derived from the campaign when
        absent.
        """
        p = self.parameters
        data = _as_mapping(partial)
        metrics = first_present(data, *PREDICTION_WRAPPERS)
        if not isinstance(metrics, Mapping):
            metrics = data
        campaign_input = CampaignInput.coerce(campaign)

        ctr = resolve_metric(metrics.get("ctr"), metrics.get("ctr_esperado"), p.default_ctr)
        conversion_rate = resolve_metric(
            metrics.get("conversion_rate"),
            metrics.get("taxa_conversao"),
            p.default_conversion_rate,
        )
        roi = resolve_metric(metrics.get("roi"), metrics.get("roi_estimado"), p.default_roi)
        cpa = resolve_metric(
            metrics.get("cpa"), metrics.get("custo_por_aquisicao"), p.default_cpa
        )
        revenue = resolve_metric(
            metrics.get("estimated_revenue"),
            metrics.get("receita_estimada"),
            p.default_estimated_revenue,
        )
        clicks = resolve_metric(
            metrics.get("estimated_clicks"), None, campaign_input.impressions * ctr
        )
        conversions = resolve_metric(
            metrics.get("estimated_conversions"), None, clicks * conversion_rate
        )

        recommendations = string_items(
            first_present(data, *RECOMMENDATION_KEYS), p.min_recommendation_length
        )
        if not recommendations:
            logger.debug("No usable recommendations, using defaults")
            recommendations = list(defaults.PREDICTION_RECOMMENDATIONS)

        return PredictionResult(
            predictions=PredictionMetrics(
                ctr=ctr,
                conversion_rate=conversion_rate,
                roi=roi,
                cpa=cpa,
                estimated_revenue=revenue,
                estimated_clicks=clicks,
                estimated_conversions=conversions,
            ),
            confidence_factors=confidence_factors(
                data.get("confidence_factors"), defaults.DEFAULT_CONFIDENCE_FACTORS
            ),
            recommendations=recommendations,
            source=parse_source(data.get("source")),
            confidence=parse_confidence(data.get("confidence")),
            note=text_or_default(data.get("note"), defaults.PREDICTION_NOTE),
        )

    # =========================================================================
    # ANALYSES
    # =========================================================================

    def ensure_analysis(self, partial: Any) -> AnalysisResult:
        """Build an AnalysisResult from a partial analysis.

        Performance fields are read from `performance_analysis` when present,
        else from the top level. The outlook may arrive as `outlook` or
        `predictions`.
        """
        p = self.parameters
        data = _as_mapping(partial)
        performance = _as_mapping(data.get("performance_analysis")) or data

        insights = string_items(
            first_present(data, "strategic_insights", "insights"), p.min_recommendation_length
        )
        if not insights:
            insights = list(defaults.ANALYSIS_INSIGHTS)

        recommendations = self.ensure_recommendations(
            first_present(data, *RECOMMENDATION_KEYS)
        )

        score = resolve_metric(
            performance.get("overall_score"),
            first_present(performance, "score") or data.get("score"),
            p.default_overall_score,
        )

        return AnalysisResult(
            performance_analysis=PerformanceAnalysis(
                summary=text_or_default(performance.get("summary"), defaults.ANALYSIS_SUMMARY),
                strengths=string_items(performance.get("strengths"))
                or list(defaults.ANALYSIS_STRENGTHS),
                weaknesses=string_items(performance.get("weaknesses"))
                or list(defaults.ANALYSIS_WEAKNESSES),
                overall_score=min(100.0, max(0.0, score)),
                alerts=string_items(first_present(performance, "alerts", "alertas")),
            ),
            strategic_insights=insights,
            recommendations=recommendations,
            outlook=self.ensure_outlook(first_present(data, "outlook", "predictions")),
            confidence_factors=confidence_factors(
                data.get("confidence_factors"), defaults.DEFAULT_CONFIDENCE_FACTORS
            ),
            source=parse_source(data.get("source")),
            confidence=parse_confidence(data.get("confidence")),
            note=text_or_default(data.get("note"), defaults.ANALYSIS_NOTE),
        )

    def ensure_recommendations(self, value: Any) -> list[Recommendation]:
        """Structured recommendations from strings, mappings or a text block.

        Falls back to the default list when nothing usable remains.
        """
        min_length = self.parameters.min_recommendation_length
        if isinstance(value, str):
            items: list[Any] = string_items(value, min_length)
        elif isinstance(value, (list, tuple)):
            items = list(value)
        else:
            items = []

        recommendations = []
        for item in items:
            if isinstance(item, Mapping):
                recommendations.append(self._recommendation_from_mapping(item))
            elif isinstance(item, str) and len(item.strip()) >= min_length:
                recommendations.append(
                    Recommendation(
                        action=item.strip(),
                        impact=defaults.DEFAULT_IMPACT,
                        effort=defaults.DEFAULT_EFFORT,
                        timeline=defaults.DEFAULT_TIMELINE,
                        expected_improvement=defaults.DEFAULT_IMPROVEMENT,
                    )
                )

        if not recommendations:
            return [Recommendation(*fields) for fields in defaults.ANALYSIS_RECOMMENDATIONS]
        return recommendations

    @staticmethod
    def _recommendation_from_mapping(item: Mapping[str, Any]) -> Recommendation:
        return Recommendation(
            action=text_or_default(
                first_present(item, "action", "title", "acao"), defaults.RECOMMENDED_ACTION
            ),
            impact=text_or_default(
                first_present(item, "impact", "priority", "impacto"), defaults.DEFAULT_IMPACT
            ),
            effort=text_or_default(
                first_present(item, "effort", "dificuldade"), defaults.DEFAULT_EFFORT
            ),
            timeline=text_or_default(
                first_present(item, "timeline", "prazo"), defaults.DEFAULT_TIMELINE
            ),
            expected_improvement=text_or_default(
                first_present(item, "expected_improvement", "roi_esperado"),
                defaults.DEFAULT_IMPROVEMENT,
            ),
        )

    @staticmethod
    def ensure_outlook(value: Any) -> Outlook:
        data = _as_mapping(value)
        return Outlook(
            next_30_days=text_or_default(
                data.get("next_30_days"), defaults.OUTLOOK_NEXT_30_DAYS
            ),
            confidence=text_or_default(data.get("confidence"), defaults.OUTLOOK_CONFIDENCE),
            key_metrics=string_items(data.get("key_metrics"))
            or list(defaults.OUTLOOK_KEY_METRICS),
        )

    # =========================================================================
    # BUDGET ALLOCATION
    # =========================================================================

    def ensure_budget(self, partial: Any) -> BudgetAllocation | None:
        """BudgetAllocation from a partial, None without a usable allocation."""
        data = _as_mapping(partial)
        allocation: dict[str, float] = {}
        for channel, value in _as_mapping(data.get("allocation")).items():
            share = resolve_metric(value, None, -1.0)
            if share >= 0:
                allocation[str(channel)] = share

        if not allocation:
            return None
        return BudgetAllocation(
            allocation=allocation,
            expected_roi_improvement=text_or_default(
                data.get("expected_roi_improvement"), defaults.BUDGET_ROI_IMPROVEMENT
            ),
            rationale=text_or_default(data.get("rationale"), defaults.BUDGET_RATIONALE),
            source=parse_source(data.get("source")),
        )

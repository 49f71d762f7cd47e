"""Insight service - wires the generative client, aggregator and pipeline."""

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol

import polars as pl

from ..analytics import (
    Insight,
    InsightEngine,
    InsightThresholds,
    KPIAggregator,
    KPISet,
    detect_trend,
)
from ..ingestion import RecordLoader
from ..models import (
    DEFAULT_PARAMETERS_PATH,
    AnalysisResult,
    BudgetAllocation,
    CampaignInput,
    MetricRow,
    ModelParameters,
    PredictionResult,
)
from ..normalization import Absent, Content, NormalizationPipeline, as_content

logger = logging.getLogger(__name__)

TREND_WINDOW_DAYS = 7
TOP_CHANNELS = 3


@dataclass
class GenerationResponse:
    """Reply from a generative text service."""

    success: bool
    content: Any = None
    usage: dict[str, Any] | None = None


class GenerativeClient(Protocol):
    """Anything that turns a prompt into a GenerationResponse."""

    def generate(self, prompt: str) -> GenerationResponse: ...


def content_from_response(response: Any) -> Content:
    """Classify a client response; unsuccessful replies are Absent."""
    if not getattr(response, "success", False):
        return Absent("generation unsuccessful")
    return as_content(getattr(response, "content", None))


@dataclass
class ProjectAnalysis:
    """Consolidated output from analyze_project()."""

    kpis: KPISet
    data_summary: dict[str, Any]
    analysis: AnalysisResult
    insights: list[Insight] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kpis": self.kpis.to_dict(),
            "data_summary": self.data_summary,
            "analysis": self.analysis.to_dict(),
            "insights": InsightEngine(self.kpis).to_dict(self.insights),
        }


class CampaignInsightService:
    """Service for KPI rollups, project analyses, forecasts and budget splits.

    Orchestrates:
    1. Mapping raw records to MetricRows
    2. KPI aggregation
    3. Prompting the generative client (optional)
    4. Normalizing whatever comes back into canonical results

    Client failures never propagate: they are treated as absent content and
    the pipeline falls back to its statistical or baseline models.

    Usage:
        service = CampaignInsightService(client=my_client)
        result = service.predict_campaign({"budget": 2000}, historical=[kpis])
    """

    def __init__(
        self,
        client: GenerativeClient | None = None,
        parameters: ModelParameters | None = None,
        thresholds: InsightThresholds | None = None,
        schema_path: Path | None = None,
        parameters_path: Path | None = None,
    ):
        """Initialize service.

        Args:
            client: Generative text client. Without one, every result comes
                from the fallback models.
            parameters: Model constants. Takes precedence over parameters_path.
            thresholds: Insight rule thresholds.
            schema_path: Path to schema_registry.yaml. Defaults to bundled config.
            parameters_path: Path to model_parameters.yaml. Defaults to bundled config.
        """
        self.client = client
        self.parameters = parameters or ModelParameters.from_yaml(
            parameters_path or DEFAULT_PARAMETERS_PATH
        )
        self.thresholds = thresholds or InsightThresholds()
        self.loader = RecordLoader(schema_path)
        self.aggregator = KPIAggregator(unit_value=self.parameters.conversion_value)
        self.pipeline = NormalizationPipeline(self.parameters, self.thresholds)

    # =========================================================================
    # KPIs
    # =========================================================================

    def compute_kpis(
        self,
        records: Iterable[MetricRow | Mapping[str, Any]] | pl.DataFrame,
        grouping_key: str = "channel",
    ) -> KPISet:
        """Aggregate raw records, a DataFrame or MetricRows into a KPISet."""
        if isinstance(records, pl.DataFrame):
            rows = self.loader.load(records)
        else:
            items = list(records)
            raw = [item for item in items if not isinstance(item, MetricRow)]
            rows = [item for item in items if isinstance(item, MetricRow)]
            rows.extend(self.loader.load(raw))
        return self.aggregator.aggregate(rows, grouping_key)

    def optimization_recommendations(self, kpis: KPISet) -> list[Insight]:
        """Rule-based optimization insights for a KPISet."""
        return InsightEngine(kpis, self.thresholds).generate_all_insights()

    # =========================================================================
    # PROJECT ANALYSIS
    # =========================================================================

    def analyze_project(
        self,
        records: Iterable[MetricRow | Mapping[str, Any]] | pl.DataFrame,
        objective: str | None = None,
    ) -> ProjectAnalysis:
        """Aggregate a project's rows and produce a canonical analysis."""
        kpis = self.compute_kpis(records)
        summary = self.data_summary(kpis)
        prompt = self.build_analysis_prompt(summary, objective)
        analysis = self.pipeline.normalize_analysis(self._generate(prompt), kpis)
        return ProjectAnalysis(
            kpis=kpis,
            data_summary=summary,
            analysis=analysis,
            insights=self.optimization_recommendations(kpis),
        )

    def data_summary(self, kpis: KPISet) -> dict[str, Any]:
        """Compact KPI summary with the top channels and recent trends."""
        return {
            "metrics": kpis.basic.to_dict(),
            "budget": kpis.advanced.budget_efficiency.to_dict(),
            "top_channels": [
                {
                    "name": d.dimension,
                    "roi": round(d.metrics.roi, 2),
                    "conversions": d.metrics.conversions,
                }
                for d in kpis.advanced.by_dimension[:TOP_CHANNELS]
            ],
            "trends": self.recent_trends(kpis),
            "days": len(kpis.trends.daily),
        }

    def recent_trends(self, kpis: KPISet) -> dict[str, str]:
        """Trend direction of daily CTR and conversions over the last week."""
        recent = kpis.trends.daily[-TREND_WINDOW_DAYS:]
        return {
            "ctr": detect_trend([d.metrics.ctr for d in recent]),
            "conversions": detect_trend([d.metrics.conversions for d in recent]),
        }

    def build_analysis_prompt(self, summary: dict[str, Any], objective: str | None) -> str:
        return "\n".join(
            [
                "Analyze the advertising project below.",
                f"Objective: {objective or 'improve overall performance'}",
                "Data summary:",
                json.dumps(summary, indent=2, default=str),
                "Return JSON with performance_analysis, strategic_insights, "
                "recommendations and outlook.",
            ]
        )

    # =========================================================================
    # PREDICTION
    # =========================================================================

    def predict_campaign(
        self,
        campaign: CampaignInput | Mapping[str, Any] | None,
        historical: Iterable[Any] | None = None,
    ) -> PredictionResult:
        """Forecast a planned campaign."""
        campaign_input = CampaignInput.coerce(campaign)
        history = list(historical) if isinstance(historical, (list, tuple)) else []
        prompt = "\n".join(
            [
                "Forecast the performance of this campaign.",
                "Campaign:",
                json.dumps(campaign_input.model_dump(), indent=2, default=str),
                f"Historical campaigns ({len(history)}):",
                json.dumps(
                    [h.to_dict() if isinstance(h, KPISet) else h for h in history],
                    default=str,
                ),
                "Return JSON with predictions (ctr, conversion_rate, roi, cpa, "
                "estimated_revenue) and recommendations.",
            ]
        )
        return self.pipeline.normalize_prediction(
            self._generate(prompt), historical, campaign_input
        )

    # =========================================================================
    # BUDGET
    # =========================================================================

    def optimize_budget(
        self,
        allocation: Mapping[str, Any] | None,
        constraints: Mapping[str, Any] | None = None,
    ) -> BudgetAllocation:
        """Recommend a channel split for the budget."""
        prompt = "\n".join(
            [
                "Suggest an optimized budget allocation.",
                "Current allocation:",
                json.dumps(allocation or {}, indent=2, default=str),
                "Constraints:",
                json.dumps(constraints or {}, indent=2, default=str),
                "Return JSON with allocation (channel -> percent), "
                "expected_roi_improvement and rationale.",
            ]
        )
        return self.pipeline.normalize_budget(self._generate(prompt), allocation)

    def _generate(self, prompt: str) -> Content:
        if self.client is None:
            return Absent("no generative client configured")
        try:
            response = self.client.generate(prompt)
        except Exception:
            logger.exception("Generative client call failed")
            return Absent("client error")
        return content_from_response(response)

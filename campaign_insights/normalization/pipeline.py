"""Normalization pipeline - generated content to canonical results.

State machine per call:

    content present -> EXTRACT -> ENFORCE -> generative / text_analysis
    otherwise       -> STATISTICAL (usable history) -> statistical_model
    otherwise       -> BASELINE -> industry_baseline

Exceptions raised while extracting or enforcing are logged and routed to
the fallback models, so data-quality problems never reach the caller.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ..analytics.insights import InsightThresholds
from ..analytics.models import KPISet
from ..models.campaign import CampaignInput
from ..models.parameters import ModelParameters
from ..models.results import AnalysisResult, BudgetAllocation, PredictionResult
from .content import Absent, Content, as_content
from .enforcer import StructureEnforcer
from .extraction import KINDS, ExtractionChain
from .fallback import BalancedBudgetModel, BaselineModel, KPIAnalysisModel, StatisticalModel

logger = logging.getLogger(__name__)


class NormalizationPipeline:
    """Turns generated content into fully populated results.

    Usage:
        pipeline = NormalizationPipeline(ModelParameters())
        result = pipeline.normalize_prediction(content, historical, campaign)
    """

    def __init__(
        self,
        parameters: ModelParameters | None = None,
        thresholds: InsightThresholds | None = None,
    ):
        self.parameters = parameters or ModelParameters()
        self.enforcer = StructureEnforcer(self.parameters)
        self.statistical = StatisticalModel(self.parameters)
        self.baseline = BaselineModel(self.parameters)
        self.kpi_analysis = KPIAnalysisModel(self.parameters, thresholds)
        self.balanced = BalancedBudgetModel()
        self.chains = {kind: ExtractionChain.for_kind(kind, self.parameters) for kind in KINDS}

    def normalize_prediction(
        self,
        content: Any,
        historical: Iterable[Any] | None = None,
        campaign: CampaignInput | Mapping | None = None,
    ) -> PredictionResult:
        """Canonical forecast from content, history or industry baseline."""
        campaign_input = CampaignInput.coerce(campaign)

        partial = self._extract("prediction", as_content(content))
        if partial is not None:
            try:
                return self.enforcer.ensure_prediction(partial, campaign_input)
            except Exception:
                logger.exception("Failed to enforce prediction structure, using fallback")

        statistical = self.statistical.predict(campaign_input, historical)
        if statistical is not None:
            return statistical
        return self.baseline.predict(campaign_input)

    def normalize_analysis(self, content: Any, kpis: KPISet | None = None) -> AnalysisResult:
        """Canonical analysis from content, else rule-based KPI analysis."""
        partial = self._extract("analysis", as_content(content))
        if partial is not None:
            try:
                return self.enforcer.ensure_analysis(partial)
            except Exception:
                logger.exception("Failed to enforce analysis structure, using fallback")

        return self.kpi_analysis.analyze(kpis)

    def normalize_budget(
        self,
        content: Any,
        current_allocation: Mapping[str, Any] | None = None,
    ) -> BudgetAllocation:
        """Budget split from content, else an equal split of current channels."""
        partial = self._extract("budget", as_content(content))
        if partial is not None:
            try:
                allocation = self.enforcer.ensure_budget(partial)
            except Exception:
                logger.exception("Failed to enforce budget structure, using fallback")
            else:
                if allocation is not None:
                    return allocation

        return self.balanced.allocate(current_allocation)

    def _extract(self, kind: str, content: Content) -> dict[str, Any] | None:
        if isinstance(content, Absent):
            logger.info("No generated %s content (%s), using fallback", kind, content.reason)
            return None

        try:
            return self.chains[kind].extract(content)
        except Exception:
            logger.exception("Extraction of %s content failed, using fallback", kind)
            return None


def normalize(
    raw: Any,
    historical: Iterable[Any] | None = None,
    campaign_input: CampaignInput | Mapping | None = None,
    *,
    kind: str = "prediction",
    kpis: KPISet | None = None,
    current_allocation: Mapping[str, Any] | None = None,
    parameters: ModelParameters | None = None,
) -> PredictionResult | AnalysisResult | BudgetAllocation:
    """Normalize raw generated output with a default-configured pipeline.

    Args:
        raw: Service output (mapping, text, bytes or None)
        historical: Historical items for the statistical forecast
        campaign_input: Planned campaign for predictions
        kind: "prediction", "analysis" or "budget"
        kpis: KPISet for the analysis fallback
        current_allocation: Current channel split for the budget fallback
        parameters: Optional ModelParameters overrides

    Raises:
        ValueError: If kind is unknown
    """
    if kind not in KINDS:
        raise ValueError(f"Unknown result kind: {kind!r}. Expected one of {KINDS}")

    content = as_content(raw)
    pipeline = NormalizationPipeline(parameters)
    if kind == "analysis":
        return pipeline.normalize_analysis(content, kpis)
    if kind == "budget":
        return pipeline.normalize_budget(content, current_allocation)
    return pipeline.normalize_prediction(content, historical, campaign_input)

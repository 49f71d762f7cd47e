"""KPI aggregation and generated-content normalization for ad campaigns."""

from .analytics import KPIAggregator, KPISet, aggregate
from .models import (
    AnalysisResult,
    BudgetAllocation,
    CampaignInput,
    Confidence,
    MetricRow,
    ModelParameters,
    PredictionResult,
    Source,
)
from .normalization import NormalizationPipeline, normalize
from .services import CampaignInsightService, GenerationResponse, GenerativeClient

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "BudgetAllocation",
    "CampaignInput",
    "CampaignInsightService",
    "Confidence",
    "GenerationResponse",
    "GenerativeClient",
    "KPIAggregator",
    "KPISet",
    "MetricRow",
    "ModelParameters",
    "NormalizationPipeline",
    "PredictionResult",
    "Source",
    "aggregate",
    "normalize",
]

from .campaign import CampaignInput
from .metric_row import MetricRow
from .parameters import DEFAULT_PARAMETERS_PATH, ModelParameters
from .results import (
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

__all__ = [
    "AnalysisResult",
    "BudgetAllocation",
    "CampaignInput",
    "Confidence",
    "DEFAULT_PARAMETERS_PATH",
    "MetricRow",
    "ModelParameters",
    "Outlook",
    "PerformanceAnalysis",
    "PredictionMetrics",
    "PredictionResult",
    "Recommendation",
    "Source",
]

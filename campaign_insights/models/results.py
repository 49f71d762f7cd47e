"""Canonical result models handed to callers.

Every result is frozen and fully populated. `to_dict()` output can be fed
back through the structure enforcer and yields an equal result.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Source(str, Enum):
    """Provenance of a canonical result."""

    GENERATIVE = "generative"  # Structured payload from the generative service
    TEXT_ANALYSIS = "text_analysis"  # Pattern-extracted from free text
    STATISTICAL_MODEL = "statistical_model"  # Historical averages / KPI rules
    INDUSTRY_BASELINE = "industry_baseline"  # Fixed industry constants
    BALANCED_MODEL = "balanced_model"  # Equal budget split


class Confidence(str, Enum):
    """Confidence level attached to a result."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


@dataclass(frozen=True)
class PredictionMetrics:
    """Forecast metrics. Rates are fractions (0.035 = 3.5%), ROI is a percent."""

    ctr: float
    conversion_rate: float
    roi: float
    cpa: float
    estimated_revenue: float
    estimated_clicks: float
    estimated_conversions: float

    def to_dict(self) -> dict[str, float]:
        return {
            "ctr": self.ctr,
            "conversion_rate": self.conversion_rate,
            "roi": self.roi,
            "cpa": self.cpa,
            "estimated_revenue": self.estimated_revenue,
            "estimated_clicks": self.estimated_clicks,
            "estimated_conversions": self.estimated_conversions,
        }


@dataclass(frozen=True)
class PredictionResult:
    """Canonical campaign performance forecast."""

    predictions: PredictionMetrics
    confidence_factors: dict[str, str]
    recommendations: list[str]
    source: Source
    confidence: Confidence
    note: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "predictions": self.predictions.to_dict(),
            "confidence_factors": dict(self.confidence_factors),
            "recommendations": list(self.recommendations),
            "source": self.source.value,
            "confidence": self.confidence.value,
            "note": self.note,
        }


@dataclass(frozen=True)
class Recommendation:
    """Single actionable recommendation in an analysis."""

    action: str
    impact: str
    effort: str
    timeline: str
    expected_improvement: str

    def to_dict(self) -> dict[str, str]:
        return {
            "action": self.action,
            "impact": self.impact,
            "effort": self.effort,
            "timeline": self.timeline,
            "expected_improvement": self.expected_improvement,
        }


@dataclass(frozen=True)
class PerformanceAnalysis:
    """Strengths, weaknesses and overall score of a project."""

    summary: str
    strengths: list[str]
    weaknesses: list[str]
    overall_score: float  # 0-100
    alerts: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "strengths": list(self.strengths),
            "weaknesses": list(self.weaknesses),
            "overall_score": self.overall_score,
            "alerts": list(self.alerts),
        }


@dataclass(frozen=True)
class Outlook:
    """Qualitative 30-day outlook."""

    next_30_days: str
    confidence: str
    key_metrics: list[str]

    def to_dict(self) -> dict[str, Any]:
        return {
            "next_30_days": self.next_30_days,
            "confidence": self.confidence,
            "key_metrics": list(self.key_metrics),
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Canonical project performance analysis."""

    performance_analysis: PerformanceAnalysis
    strategic_insights: list[str]
    recommendations: list[Recommendation]
    outlook: Outlook
    confidence_factors: dict[str, str]
    source: Source
    confidence: Confidence
    note: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "performance_analysis": self.performance_analysis.to_dict(),
            "strategic_insights": list(self.strategic_insights),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "outlook": self.outlook.to_dict(),
            "confidence_factors": dict(self.confidence_factors),
            "source": self.source.value,
            "confidence": self.confidence.value,
            "note": self.note,
        }


@dataclass(frozen=True)
class BudgetAllocation:
    """Recommended budget split, channel -> percent of total."""

    allocation: dict[str, float]
    expected_roi_improvement: str
    rationale: str
    source: Source

    def to_dict(self) -> dict[str, Any]:
        return {
            "allocation": dict(self.allocation),
            "expected_roi_improvement": self.expected_roi_improvement,
            "rationale": self.rationale,
            "source": self.source.value,
        }

"""Normalization of generated content into canonical results."""

from .content import Absent, Content, RawText, Structured, as_content
from .enforcer import StructureEnforcer
from .extraction import (
    EmbeddedBlockTier,
    ExtractionChain,
    FreeTextTier,
    StructuredPayloadTier,
)
from .fallback import BalancedBudgetModel, BaselineModel, KPIAnalysisModel, StatisticalModel
from .pipeline import NormalizationPipeline, normalize
from .resolve import resolve_metric

__all__ = [
    "Absent",
    "BalancedBudgetModel",
    "BaselineModel",
    "Content",
    "EmbeddedBlockTier",
    "ExtractionChain",
    "FreeTextTier",
    "KPIAnalysisModel",
    "NormalizationPipeline",
    "RawText",
    "StatisticalModel",
    "Structured",
    "StructureEnforcer",
    "StructuredPayloadTier",
    "as_content",
    "normalize",
    "resolve_metric",
]

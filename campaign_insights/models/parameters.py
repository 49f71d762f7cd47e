"""Named, overridable constants for the fallback and normalization models."""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from ..exceptions import ParameterLoadError

DEFAULT_PARAMETERS_PATH = Path(__file__).parent.parent / "config" / "model_parameters.yaml"

# Fields holding (low, high) or (intercept, slope) pairs
_PAIR_FIELDS = {
    "ctr_budget_weights",
    "roi_budget_weights",
    "ctr_range",
    "conversion_rate_range",
    "roi_range",
    "cpa_range",
}


@dataclass
class ModelParameters:
    """Constants used when generated content is missing or incomplete.

    Rates are fractions (0.035 = 3.5%); ROI is a percent (180 = 180%).
    """

    # Industry averages, also used as per-metric defaults
    default_ctr: float = 0.035
    default_conversion_rate: float = 0.025
    default_roi: float = 180.0
    default_cpa: float = 40.0
    default_estimated_revenue: float = 2800.0

    # Analysis scores (0-100)
    default_overall_score: float = 65.0
    text_analysis_score: float = 70.0

    # Revenue estimate for free-text predictions: base * roi/100 + base
    revenue_base: float = 1000.0

    # Value of one conversion when a row carries no explicit revenue
    conversion_value: float = 100.0

    # Statistical model: adjusted = mean * (intercept + budget/budget_scale * slope)
    budget_scale: float = 1000.0
    ctr_budget_weights: tuple[float, float] = (0.9, 0.2)
    roi_budget_weights: tuple[float, float] = (0.8, 0.4)

    # Output clamps for the statistical model
    ctr_range: tuple[float, float] = (0.01, 0.15)
    conversion_rate_range: tuple[float, float] = (0.005, 0.1)
    roi_range: tuple[float, float] = (50.0, 500.0)
    cpa_range: tuple[float, float] = (10.0, 200.0)

    # Sample-count thresholds
    medium_confidence_min_samples: int = 5
    high_quality_min_samples: int = 11

    # Recommendation filters (characters)
    min_recommendation_length: int = 12
    min_text_recommendation_length: int = 20

    @classmethod
    def from_yaml(cls, path: Path) -> "ModelParameters":
        """Load parameter overrides from YAML.

        Keys absent from the file keep their defaults.

        Raises:
            ParameterLoadError: If the file cannot be read or holds unknown keys.
        """
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except Exception as e:
            raise ParameterLoadError(f"Failed to load parameters from {path}: {e}") from e

        if not isinstance(data, dict):
            raise ParameterLoadError(f"Expected a mapping in {path}, got {type(data).__name__}")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ParameterLoadError(f"Unknown parameters in {path}: {unknown}")

        overrides: dict[str, Any] = {}
        for key, value in data.items():
            if key in _PAIR_FIELDS:
                if not isinstance(value, (list, tuple)) or len(value) != 2:
                    raise ParameterLoadError(f"Parameter {key} must be a pair, got {value!r}")
                value = (float(value[0]), float(value[1]))
            overrides[key] = value

        return cls(**overrides)

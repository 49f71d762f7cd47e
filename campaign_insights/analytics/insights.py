"""Rule-based optimization insights over a KPISet."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .models import KPISet


class Priority(str, Enum):
    """Insight priority levels."""

    HIGH = "high"  # Act now
    MEDIUM = "medium"  # Plan for next iteration
    LOW = "low"


@dataclass(frozen=True)
class Insight:
    """Single optimization insight with suggested actions."""

    rule_id: str
    message: str
    priority: Priority
    actions: list[str]
    metrics: dict[str, Any] | None = None


@dataclass
class InsightThresholds:
    """Configurable thresholds for insight rules.

    Rates and ROI are percentages as in BasicKPI (2.0 = 2%).
    """

    # Optimization triggers
    ctr_benchmark_pct: float = 2.0  # Industry CTR reference
    conversion_benchmark_pct: float = 3.0
    cpa_ceiling: float = 50.0

    # Strengths
    strong_ctr_pct: float = 3.0
    strong_roi_pct: float = 200.0
    strong_conversion_pct: float = 5.0

    # Weaknesses
    weak_ctr_pct: float = 1.0
    weak_conversion_pct: float = 2.0  # Landing page action below this

    # Score bonuses (base 50, capped at 100)
    score_ctr_pct: float = 2.0
    score_roi_pct: float = 150.0
    score_conversion_pct: float = 3.0
    score_cpa: float = 30.0


class InsightEngine:
    """Rule-based insight generator.

    Applies business rules to the aggregated KPIs to flag optimization
    opportunities and summarize strengths and weaknesses.

    Usage:
        engine = InsightEngine(kpis, thresholds=InsightThresholds())
        insights = engine.generate_all_insights()
    """

    def __init__(
        self,
        kpis: KPISet,
        thresholds: InsightThresholds | None = None,
    ):
        self.kpis = kpis
        self.thresholds = thresholds or InsightThresholds()

    def generate_all_insights(self) -> list[Insight]:
        """Run all insight rules and return detected insights."""
        insights: list[Insight] = []

        if not self.kpis.has_data:
            return insights

        insights.extend(self._check_ctr())
        insights.extend(self._check_conversion_rate())
        insights.extend(self._check_cpa())
        insights.extend(self._check_channel_allocation())

        return insights

    def _check_ctr(self) -> list[Insight]:
        """CTR below the industry benchmark."""
        ctr = self.kpis.basic.ctr
        if ctr >= self.thresholds.ctr_benchmark_pct:
            return []
        return [
            Insight(
                rule_id="ctr_optimization",
                message=(
                    f"CTR ({ctr:.2f}%) is below the industry average "
                    f"({self.thresholds.ctr_benchmark_pct:.0f}%). "
                    "Consider optimizing creatives and targeting."
                ),
                priority=Priority.HIGH,
                actions=[
                    "Test different creatives",
                    "Refine audience segmentation",
                    "Optimize copy and call-to-action",
                ],
                metrics={"ctr": round(ctr, 2)},
            )
        ]

    def _check_conversion_rate(self) -> list[Insight]:
        """Conversion rate below benchmark."""
        rate = self.kpis.basic.conversion_rate
        if rate >= self.thresholds.conversion_benchmark_pct:
            return []
        return [
            Insight(
                rule_id="conversion_optimization",
                message=f"Conversion rate ({rate:.2f}%) can be improved.",
                priority=Priority.HIGH,
                actions=[
                    "Optimize landing pages",
                    "Simplify the conversion funnel",
                    "Implement remarketing",
                ],
                metrics={"conversion_rate": round(rate, 2)},
            )
        ]

    def _check_cpa(self) -> list[Insight]:
        """Cost per acquisition above ceiling."""
        cpa = self.kpis.basic.cpa
        if cpa <= self.thresholds.cpa_ceiling:
            return []
        return [
            Insight(
                rule_id="cost_optimization",
                message=f"Cost per acquisition ({cpa:.2f}) is high.",
                priority=Priority.MEDIUM,
                actions=[
                    "Review bidding strategy",
                    "Focus on more efficient channels",
                    "Negotiate better rates with networks",
                ],
                metrics={"cpa": round(cpa, 2)},
            )
        ]

    def _check_channel_allocation(self) -> list[Insight]:
        """Shift budget from the least to the most efficient channel."""
        ranked = self.kpis.advanced.by_dimension
        if len(ranked) < 2:
            return []

        best, worst = ranked[0], ranked[-1]
        return [
            Insight(
                rule_id="channel_optimization",
                message=(
                    f"Allocate more budget to {best.dimension} "
                    f"(ROI: {best.metrics.roi:.2f}%)"
                ),
                priority=Priority.MEDIUM,
                actions=[
                    f"Increase investment in {best.dimension}",
                    f"Reduce or optimize {worst.dimension}",
                    "Test strategies similar to the best performing channels",
                ],
                metrics={
                    "best": best.dimension,
                    "best_roi": round(best.metrics.roi, 2),
                    "worst": worst.dimension,
                    "worst_roi": round(worst.metrics.roi, 2),
                },
            )
        ]

    def identify_strengths(self) -> list[str]:
        """Metrics beating their strength thresholds."""
        basic = self.kpis.basic
        strengths: list[str] = []
        if basic.ctr > self.thresholds.strong_ctr_pct:
            strengths.append("CTR above industry average")
        if basic.roi > self.thresholds.strong_roi_pct:
            strengths.append("Excellent ROI")
        if basic.conversion_rate > self.thresholds.strong_conversion_pct:
            strengths.append("Strong conversion rate")
        return strengths or ["Solid base for growth"]

    def identify_weaknesses(self) -> list[str]:
        """Metrics missing their targets."""
        basic = self.kpis.basic
        weaknesses: list[str] = []
        if basic.ctr < self.thresholds.weak_ctr_pct:
            weaknesses.append("CTR needs optimization")
        if basic.cpa > self.thresholds.cpa_ceiling:
            weaknesses.append("High cost per acquisition")
        known_channels = [
            d for d in self.kpis.advanced.by_dimension if d.dimension != "Unknown"
        ]
        if not known_channels:
            weaknesses.append("Limited channel data")
        return weaknesses or ["Optimization opportunities identified"]

    def calculate_score(self) -> float:
        """Overall score from 50, plus bonuses per metric, capped at 100."""
        basic = self.kpis.basic
        score = 50.0
        if basic.ctr > self.thresholds.score_ctr_pct:
            score += 10
        if basic.roi > self.thresholds.score_roi_pct:
            score += 20
        if basic.conversion_rate > self.thresholds.score_conversion_pct:
            score += 10
        if 0 < basic.cpa < self.thresholds.score_cpa:
            score += 10
        return min(100.0, score)

    def recommended_actions(self) -> list[dict[str, str]]:
        """Quick-win actions for weak CTR or conversion rate.

        Always returns at least one action.
        """
        basic = self.kpis.basic
        actions: list[dict[str, str]] = []
        if basic.ctr < self.thresholds.ctr_benchmark_pct:
            actions.append(
                {
                    "action": "Optimize ad titles and descriptions",
                    "impact": "High",
                    "effort": "Low",
                    "expected_improvement": "CTR +30-50%",
                }
            )
        if basic.conversion_rate < self.thresholds.weak_conversion_pct:
            actions.append(
                {
                    "action": "Improve landing pages and call-to-action",
                    "impact": "High",
                    "effort": "Medium",
                    "expected_improvement": "Conversions +20-40%",
                }
            )
        return actions or [
            {
                "action": "Review the overall campaign strategy",
                "impact": "Medium",
                "effort": "Low",
                "expected_improvement": "Overall performance +15%",
            }
        ]

    def to_dict(self, insights: list[Insight]) -> list[dict[str, Any]]:
        """Convert insights list to JSON-serializable format."""
        return [
            {
                "rule_id": i.rule_id,
                "message": i.message,
                "priority": i.priority.value,
                "actions": list(i.actions),
                "metrics": i.metrics,
            }
            for i in insights
        ]

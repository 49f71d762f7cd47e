"""Tests for the rule-based insight engine."""

import pytest

from campaign_insights.analytics import (
    InsightEngine,
    InsightThresholds,
    KPISet,
    Priority,
    aggregate,
)


class TestGenerateInsights:
    """Tests for generate_all_insights()."""

    def test_channel_optimization(self, kpis: KPISet) -> None:
        insights = InsightEngine(kpis).generate_all_insights()
        assert [i.rule_id for i in insights] == ["channel_optimization"]
        assert insights[0].metrics["best"] == "search"
        assert insights[0].metrics["worst"] == "display"
        assert "search" in insights[0].message

    def test_low_ctr(self, make_kpis) -> None:
        insights = InsightEngine(make_kpis(1.5, 100)).generate_all_insights()
        assert [i.rule_id for i in insights] == ["ctr_optimization"]
        assert insights[0].priority == Priority.HIGH

    def test_high_cpa(self) -> None:
        kpis = aggregate(
            [
                {
                    "impressions": 1000,
                    "clicks": 10,
                    "conversions": 1,
                    "cost": 80,
                    "dimension_tags": {"channel": "display"},
                }
            ]
        )
        insights = InsightEngine(kpis).generate_all_insights()
        by_rule = {i.rule_id: i for i in insights}
        assert "cost_optimization" in by_rule
        assert by_rule["cost_optimization"].priority == Priority.MEDIUM

    def test_low_conversion_rate(self) -> None:
        kpis = aggregate([{"impressions": 1000, "clicks": 100, "conversions": 1, "cost": 10}])
        rule_ids = [i.rule_id for i in InsightEngine(kpis).generate_all_insights()]
        assert "conversion_optimization" in rule_ids

    def test_no_data_no_insights(self) -> None:
        assert InsightEngine(aggregate([])).generate_all_insights() == []

    def test_custom_thresholds(self, kpis: KPISet) -> None:
        thresholds = InsightThresholds(ctr_benchmark_pct=5.0)
        rule_ids = [i.rule_id for i in InsightEngine(kpis, thresholds).generate_all_insights()]
        assert "ctr_optimization" in rule_ids

    def test_to_dict(self, kpis: KPISet) -> None:
        engine = InsightEngine(kpis)
        data = engine.to_dict(engine.generate_all_insights())
        assert data[0]["priority"] == "medium"
        assert len(data[0]["actions"]) == 3


class TestStrengthsAndWeaknesses:
    """Tests for identify_strengths() and identify_weaknesses()."""

    def test_strengths(self, kpis: KPISet) -> None:
        assert InsightEngine(kpis).identify_strengths() == [
            "Excellent ROI",
            "Strong conversion rate",
        ]

    def test_default_strength(self, make_kpis) -> None:
        assert InsightEngine(make_kpis(2.5, 100)).identify_strengths() == [
            "Strong conversion rate"
        ]
        assert InsightEngine(aggregate([])).identify_strengths() == ["Solid base for growth"]

    def test_weak_ctr(self, make_kpis) -> None:
        assert "CTR needs optimization" in InsightEngine(make_kpis(0.5, 50)).identify_weaknesses()

    def test_default_weakness(self, kpis: KPISet) -> None:
        assert InsightEngine(kpis).identify_weaknesses() == [
            "Optimization opportunities identified"
        ]

    def test_limited_channel_data(self) -> None:
        kpis = aggregate([{"impressions": 1000, "clicks": 30, "conversions": 3, "cost": 30}])
        assert "Limited channel data" in InsightEngine(kpis).identify_weaknesses()


class TestScore:
    """Tests for calculate_score()."""

    def test_max_score(self, kpis: KPISet) -> None:
        assert InsightEngine(kpis).calculate_score() == 100.0

    def test_partial_score(self, make_kpis) -> None:
        # ctr 1.5 (no bonus), roi 100 (no bonus), conversion 10% (+10), cpa 6.67 (+10)
        assert InsightEngine(make_kpis(1.5, 100)).calculate_score() == 70.0

    def test_no_data_score(self) -> None:
        assert InsightEngine(aggregate([])).calculate_score() == 50.0


class TestRecommendedActions:
    """Tests for recommended_actions()."""

    def test_ctr_action(self, make_kpis) -> None:
        actions = InsightEngine(make_kpis(1.5, 100)).recommended_actions()
        assert [a["action"] for a in actions] == ["Optimize ad titles and descriptions"]

    def test_fallback_action(self, kpis: KPISet) -> None:
        actions = InsightEngine(kpis).recommended_actions()
        assert len(actions) == 1
        assert actions[0]["impact"] == "Medium"

    @pytest.mark.parametrize("field", ["action", "impact", "effort", "expected_improvement"])
    def test_action_fields(self, make_kpis, field: str) -> None:
        for action in InsightEngine(make_kpis(0.5, 50)).recommended_actions():
            assert action[field]

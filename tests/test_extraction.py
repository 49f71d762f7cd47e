"""Tests for content classification and extraction tiers."""

import pytest

from campaign_insights.exceptions import ExtractionError
from campaign_insights.normalization import (
    Absent,
    EmbeddedBlockTier,
    ExtractionChain,
    FreeTextTier,
    RawText,
    Structured,
    StructuredPayloadTier,
    as_content,
    resolve_metric,
)
from campaign_insights.normalization.extraction import (
    find_json_block,
    find_metric,
    prediction_shape,
)
from campaign_insights.normalization.resolve import split_recommendation_text


# =============================================================================
# CONTENT
# =============================================================================


class TestAsContent:
    """Tests for as_content()."""

    def test_mapping_is_structured(self) -> None:
        assert as_content({"ctr": 0.05}) == Structured({"ctr": 0.05})

    def test_text_is_raw(self) -> None:
        assert as_content("CTR 3%") == RawText("CTR 3%")

    def test_bytes_decoded(self) -> None:
        assert as_content(b"ROI 200%") == RawText("ROI 200%")

    @pytest.mark.parametrize("raw", [None, "", "   \n", {}, 42, ["a"]])
    def test_absent(self, raw) -> None:
        assert isinstance(as_content(raw), Absent)

    def test_already_classified_passes_through(self) -> None:
        content = RawText("x")
        assert as_content(content) is content


# =============================================================================
# RESOLVE
# =============================================================================


class TestResolveMetric:
    """Tests for resolve_metric()."""

    def test_primary_wins(self) -> None:
        assert resolve_metric(0.05, 0.07, 0.035) == 0.05

    def test_secondary_alias(self) -> None:
        assert resolve_metric(None, "0.07", 0.035) == 0.07

    def test_default(self) -> None:
        assert resolve_metric(None, None, 0.035) == 0.035

    def test_leading_numeric_string(self) -> None:
        assert resolve_metric("3.5%", None, 1.0) == 3.5
        assert resolve_metric("180 (estimated)", None, 1.0) == 180.0

    def test_zero_is_usable(self) -> None:
        assert resolve_metric(0, None, 5.0) == 0.0

    @pytest.mark.parametrize("value", [True, False, float("nan"), float("inf"), "abc", [1], {}])
    def test_unusable_values(self, value) -> None:
        assert resolve_metric(value, None, 40.0) == 40.0

    def test_unusable_primary_falls_to_secondary(self) -> None:
        assert resolve_metric("n/a", 200, 180.0) == 200.0


class TestSplitRecommendationText:
    """Tests for split_recommendation_text()."""

    def test_strips_enumeration(self) -> None:
        text = "1. Increase budget on search\n2) Test new creatives weekly\n- Pause weak ads now"
        assert split_recommendation_text(text, 12) == [
            "Increase budget on search",
            "Test new creatives weekly",
            "Pause weak ads now",
        ]

    def test_drops_short_lines(self) -> None:
        assert split_recommendation_text("ok\nx too short\nA long enough line", 12) == [
            "A long enough line"
        ]


# =============================================================================
# TIERS 1-2
# =============================================================================


class TestPredictionShape:
    """Tests for prediction_shape()."""

    def test_wrapped_and_flat_equivalent(self) -> None:
        wrapped = prediction_shape({"predictions": {"ctr": 0.05}, "recommendations": ["a"]})
        flat = prediction_shape({"ctr": 0.05, "recommendations": ["a"]})
        assert wrapped["predictions"]["ctr"] == flat["predictions"]["ctr"] == 0.05
        assert wrapped["recommendations"] == flat["recommendations"] == ["a"]

    def test_portuguese_wrappers(self) -> None:
        partial = prediction_shape(
            {
                "previsao_detalhada": {"ctr_esperado": 0.04},
                "recomendacoes_otimizacao": ["Aumentar o investimento"],
            }
        )
        assert partial["predictions"] == {"ctr_esperado": 0.04}
        assert partial["recommendations"] == ["Aumentar o investimento"]


class TestStructuredPayloadTier:
    """Tests for StructuredPayloadTier."""

    def test_ignores_text(self) -> None:
        assert StructuredPayloadTier(prediction_shape).extract(RawText("{}")) is None

    def test_extracts_mapping(self) -> None:
        partial = StructuredPayloadTier(prediction_shape).extract(Structured({"roi": 210}))
        assert partial["predictions"] == {"roi": 210}


class TestFindJsonBlock:
    """Tests for find_json_block()."""

    def test_fenced_json(self) -> None:
        text = 'Here you go:\n```json\n{"ctr": 0.04}\n```\nThanks'
        assert find_json_block(text) == '{"ctr": 0.04}'

    def test_fenced_without_language(self) -> None:
        assert find_json_block('```\n{"roi": 200}\n```') == '{"roi": 200}'

    def test_fenced_with_other_language_tag(self) -> None:
        text = "Sure:\n```javascript\n{\"ctr\": 0.04}\n```"
        assert find_json_block(text) == '{"ctr": 0.04}'

    def test_balanced_span(self) -> None:
        text = 'Result: {"a": {"b": 1}} and {"c": 2}'
        assert find_json_block(text) == '{"a": {"b": 1}}'

    def test_braces_inside_strings(self) -> None:
        text = 'Answer {"note": "use } carefully", "roi": 150} done'
        assert find_json_block(text) == '{"note": "use } carefully", "roi": 150}'

    def test_no_object(self) -> None:
        assert find_json_block("no json here") is None

    def test_unbalanced(self) -> None:
        assert find_json_block('{"ctr": 0.04') is None


class TestEmbeddedBlockTier:
    """Tests for EmbeddedBlockTier."""

    def test_parses_fenced_block(self) -> None:
        tier = EmbeddedBlockTier(prediction_shape)
        partial = tier.extract(RawText('Forecast:\n```json\n{"ctr": 0.04, "roi": 200}\n```'))
        assert partial["predictions"] == {"ctr": 0.04, "roi": 200}

    def test_parses_block_with_any_language_tag(self) -> None:
        tier = EmbeddedBlockTier(prediction_shape)
        partial = tier.extract(RawText('```python\n{"ctr": 0.05, "roi": 190}\n```'))
        assert partial["predictions"] == {"ctr": 0.05, "roi": 190}

    def test_invalid_json_raises(self) -> None:
        tier = EmbeddedBlockTier(prediction_shape)
        with pytest.raises(ExtractionError) as exc_info:
            tier.extract(RawText("Expect {roughly} 200% ROI"))
        assert exc_info.value.tier == "embedded_block"

    def test_non_object_raises(self) -> None:
        tier = EmbeddedBlockTier(prediction_shape)
        with pytest.raises(ExtractionError, match="expected an object"):
            tier.extract(RawText("```json\n[1, {\"a\": 2}]\n```"))

    def test_no_block(self) -> None:
        assert EmbeddedBlockTier(prediction_shape).extract(RawText("plain prose")) is None


# =============================================================================
# TIER 3
# =============================================================================


class TestFindMetric:
    """Tests for find_metric()."""

    def test_number_before_keyword(self) -> None:
        assert find_metric("Expect a 3.2% CTR overall", "ctr") == (3.2, True)

    def test_keyword_before_number(self) -> None:
        assert find_metric("ROI of 210% expected", "roi") == (210.0, True)

    def test_mixed_sentence(self) -> None:
        text = "We forecast 3.2% CTR and ROI of 210%."
        assert find_metric(text, "ctr") == (3.2, True)
        assert find_metric(text, "roi") == (210.0, True)

    def test_portuguese(self) -> None:
        assert find_metric("Taxa de conversão de 2,5%", "conversion_rate") == (2.5, True)
        assert find_metric("Custo por aquisição: 45", "cpa") == (45.0, False)

    def test_gap_cannot_span_lines(self) -> None:
        assert find_metric("ROI\n210%", "roi") is None

    def test_not_mentioned(self) -> None:
        assert find_metric("Nothing to see", "cpa") is None

    def test_labeled_list_on_one_line(self) -> None:
        text = "Forecast - CTR: 3.2%, Conversion rate: 2.5%, ROI: 210%, CPA: $40"
        assert find_metric(text, "ctr") == (3.2, True)
        assert find_metric(text, "conversion_rate") == (2.5, True)
        assert find_metric(text, "roi") == (210.0, True)
        assert find_metric(text, "cpa") == (40.0, False)

    def test_number_does_not_cross_list_separator(self) -> None:
        assert find_metric("ROI: 210%, CPA: $40", "cpa") == (40.0, False)
        assert find_metric("Reached 210%; CPA unknown", "cpa") is None

    def test_thousands_separator(self) -> None:
        assert find_metric("Expected CPA of $1,250 per customer", "cpa") == (1250.0, False)
        assert find_metric("CPA: 12,345.50", "cpa") == (12345.5, False)

    def test_decimal_comma_needs_one_or_two_digits(self) -> None:
        assert find_metric("ROI de 2,75%", "roi") == (2.75, True)


class TestFreeTextTier:
    """Tests for FreeTextTier."""

    def test_prediction_metrics(self) -> None:
        partial = FreeTextTier("prediction").extract(
            RawText("We forecast 3.2% CTR and ROI of 210%.")
        )
        predictions = partial["predictions"]
        assert predictions["ctr"] == pytest.approx(0.032)
        assert predictions["roi"] == 210.0
        assert predictions["conversion_rate"] == 0.025
        assert predictions["cpa"] == 40.0
        assert predictions["estimated_revenue"] == pytest.approx(1000 * 2.1 + 1000)
        assert partial["source"] == "text_analysis"

    def test_bare_rate_above_one_scaled(self) -> None:
        partial = FreeTextTier("prediction").extract(RawText("CTR: 4"))
        assert partial["predictions"]["ctr"] == pytest.approx(0.04)

    def test_bare_fraction_kept(self) -> None:
        partial = FreeTextTier("prediction").extract(RawText("CTR: 0.04"))
        assert partial["predictions"]["ctr"] == pytest.approx(0.04)

    def test_recommendation_lines(self) -> None:
        text = "\n".join(
            [
                "ROI of 150%",
                "Recommendations:",
                "Shift spend toward high-intent search terms",
                "- bullets are skipped by this parser",
                "short line",
                "Refresh creatives every two weeks for fatigue",
            ]
        )
        partial = FreeTextTier("prediction").extract(RawText(text))
        assert partial["recommendations"] == [
            "Shift spend toward high-intent search terms",
            "Refresh creatives every two weeks for fatigue",
        ]

    def test_default_text_recommendations(self) -> None:
        partial = FreeTextTier("prediction").extract(RawText("CTR 3%"))
        assert len(partial["recommendations"]) >= 3

    def test_nothing_matched(self) -> None:
        assert FreeTextTier("prediction").extract(RawText("Hello there")) is None

    def test_labeled_list_on_one_line(self) -> None:
        text = "Forecast - CTR: 3.2%, Conversion rate: 2.5%, ROI: 210%, CPA: $40"
        predictions = FreeTextTier("prediction").extract(RawText(text))["predictions"]
        assert predictions["ctr"] == pytest.approx(0.032)
        assert predictions["conversion_rate"] == pytest.approx(0.025)
        assert predictions["roi"] == 210.0
        assert predictions["cpa"] == 40.0

    def test_cpa_with_thousands_separator(self) -> None:
        partial = FreeTextTier("prediction").extract(
            RawText("Expected CPA of $1,250 per customer")
        )
        assert partial["predictions"]["cpa"] == 1250.0

    def test_ignores_structured(self) -> None:
        assert FreeTextTier("prediction").extract(Structured({"ctr": 1})) is None

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            FreeTextTier("forecast")

    def test_analysis_sections(self) -> None:
        text = "\n".join(
            [
                "## Strengths",
                "- Search campaigns deliver strong returns",
                "## Weaknesses:",
                "1. Display spend converts poorly overall",
                "## Recommendations",
                "Move display budget into search campaigns",
                "## Insights",
                "Weekend traffic converts better than weekday traffic",
            ]
        )
        partial = FreeTextTier("analysis").extract(RawText(text))
        performance = partial["performance_analysis"]
        assert performance["strengths"] == ["Search campaigns deliver strong returns"]
        assert performance["weaknesses"] == ["Display spend converts poorly overall"]
        assert performance["overall_score"] == 70
        assert partial["recommendations"] == ["Move display budget into search campaigns"]
        assert partial["strategic_insights"] == [
            "Weekend traffic converts better than weekday traffic"
        ]

    def test_analysis_nothing_matched(self) -> None:
        assert FreeTextTier("analysis").extract(RawText("Just a sentence.")) is None

    def test_budget_lines(self) -> None:
        text = "Search: 45%\nSocial should get 30%\nDisplay 15%\nVideo 10%"
        partial = FreeTextTier("budget").extract(RawText(text))
        assert partial["allocation"] == {
            "search": 45.0,
            "social": 30.0,
            "display": 15.0,
            "video": 10.0,
        }


# =============================================================================
# CHAIN
# =============================================================================


class TestExtractionChain:
    """Tests for ExtractionChain ordering and fall-through."""

    def test_structured_first(self) -> None:
        chain = ExtractionChain.for_kind("prediction")
        partial = chain.extract(Structured({"ctr": 0.05}))
        assert partial["predictions"] == {"ctr": 0.05}

    def test_embedded_before_free_text(self) -> None:
        chain = ExtractionChain.for_kind("prediction")
        partial = chain.extract(RawText('CTR 9%\n```json\n{"ctr": 0.04}\n```'))
        assert partial["predictions"] == {"ctr": 0.04}

    def test_parse_failure_falls_through(self) -> None:
        chain = ExtractionChain.for_kind("prediction")
        partial = chain.extract(RawText("Expect {roughly} a 210% ROI"))
        assert partial["source"] == "text_analysis"
        assert partial["predictions"]["roi"] == 210.0

    def test_absent_gives_none(self) -> None:
        assert ExtractionChain.for_kind("analysis").extract(Absent()) is None

    def test_unknown_kind(self) -> None:
        with pytest.raises(ValueError):
            ExtractionChain.for_kind("report")

"""Fixed fallback content used when a generated field is missing."""

# =============================================================================
# CONFIDENCE FACTORS
# =============================================================================

DEFAULT_CONFIDENCE_FACTORS = {
    "data_quality": "medium",
    "similarity": "medium",
    "market_conditions": "stable",
}

BASELINE_CONFIDENCE_FACTORS = {
    "data_quality": "low",
    "similarity": "unknown",
    "market_conditions": "average",
}

# =============================================================================
# PREDICTIONS
# =============================================================================

PREDICTION_RECOMMENDATIONS = (
    "Set up conversion tracking to collect detailed data",
    "Run A/B tests on creatives and messaging",
    "Monitor performance daily during the first weeks",
    "Segment the target audience to increase ad relevance",
)

TEXT_PREDICTION_RECOMMENDATIONS = (
    "Implement comprehensive conversion tracking",
    "Run A/B tests on different campaign elements",
    "Monitor metrics daily to make quick adjustments",
)

STATISTICAL_RECOMMENDATIONS = (
    "Monitor performance during the first 48 hours",
    "Adjust bids based on the observed CTR",
    "Test different audiences and creatives",
)

BASELINE_RECOMMENDATIONS = (
    "Implement complete conversion tracking",
    "Start with a conservative budget and scale gradually",
    "Test multiple targeting strategies",
    "Monitor metrics daily for quick optimizations",
    "Collect campaign-specific data to improve future forecasts",
)

PREDICTION_NOTE = "Forecast based on the provided data and market patterns"
TEXT_PREDICTION_NOTE = "Forecast extracted from free-text analysis"
STATISTICAL_NOTE = "Forecast based on {count} historical campaigns"
BASELINE_NOTE = (
    "Forecast based on industry averages. Collect campaign-specific data "
    "to improve accuracy."
)

# =============================================================================
# ANALYSES
# =============================================================================

ANALYSIS_SUMMARY = "Project performance analysis"
TEXT_ANALYSIS_SUMMARY = "Analysis generated from the project data"
BASELINE_ANALYSIS_SUMMARY = "No delivery data available, industry baseline analysis"

ANALYSIS_STRENGTHS = ("High ROI indicating good efficiency",)
ANALYSIS_WEAKNESSES = ("Conversion volume needs to increase",)
BASELINE_WEAKNESSES = ("Limited data for a deeper analysis",)

ANALYSIS_INSIGHTS = (
    "Focus on improving the conversion rate by optimizing landing pages",
    "Increase the budget to expand campaign reach",
    "Implement remarketing strategies to improve ROI",
)

KPI_ANALYSIS_INSIGHTS = (
    "Optimize the best performing channels",
    "Focus on traffic quality over quantity",
    "Test different creatives to improve CTR",
)

# action, impact, effort, timeline, expected_improvement
ANALYSIS_RECOMMENDATIONS = (
    (
        "Optimize campaigns to improve the conversion rate",
        "High",
        "Medium",
        "2-3 weeks",
        "Conversions +25-40%",
    ),
    (
        "Increase investment in the best performing channels",
        "High",
        "Low",
        "1-2 weeks",
        "ROI +15-25%",
    ),
    (
        "Run A/B tests on creatives and landing pages",
        "Medium",
        "Medium",
        "3-4 weeks",
        "CTR +20-30%",
    ),
)

RECOMMENDED_ACTION = "Recommended action"
DEFAULT_IMPACT = "Medium"
DEFAULT_EFFORT = "Medium"
DEFAULT_TIMELINE = "2-3 weeks"
DEFAULT_IMPROVEMENT = "Expected improvement"

OUTLOOK_NEXT_30_DAYS = "Moderate growth expected with optimizations applied"
OUTLOOK_CONFIDENCE = "Medium, based on historical data"
OUTLOOK_KEY_METRICS = ("ROI", "Conversions", "CTR")

TEXT_OUTLOOK_NEXT_30_DAYS = "Growth expected once the recommendations are implemented"
TEXT_OUTLOOK_CONFIDENCE = "High, based on the analyzed data"
TEXT_OUTLOOK_KEY_METRICS = ("ROI", "Conversions", "CTR", "CPA")

ANALYSIS_NOTE = "Analysis based on the provided project data"
TEXT_ANALYSIS_NOTE = "Analysis processed from a free-text response"
KPI_ANALYSIS_NOTE = "Analysis generated from rule-based KPI checks"
BASELINE_ANALYSIS_NOTE = "No project data available. Load delivery rows for a full analysis."

# =============================================================================
# BUDGET ALLOCATION
# =============================================================================

DEFAULT_BUDGET_CHANNELS = ("search", "social", "display", "video")

BUDGET_ROI_IMPROVEMENT = "15-25%"
BUDGET_RATIONALE = "Optimization based on performance analysis"
TEXT_BUDGET_RATIONALE = "Optimization based on the generated analysis"
BALANCED_ROI_IMPROVEMENT = "10-20%"
BALANCED_RATIONALE = "Balanced split for initial testing"

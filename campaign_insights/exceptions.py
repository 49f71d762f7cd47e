"""Custom exceptions for campaign insights."""


class CampaignInsightsError(Exception):
    """Base exception for campaign insights errors."""

    pass


class SchemaLoadError(CampaignInsightsError):
    """Failed to load schema configuration."""

    pass


class ParameterLoadError(CampaignInsightsError):
    """Failed to load model parameter overrides."""

    pass


class ColumnMappingError(CampaignInsightsError):
    """Required column not found in source records."""

    def __init__(self, missing_columns: list[str], available_columns: list[str]):
        self.missing_columns = missing_columns
        self.available_columns = available_columns
        super().__init__(
            f"Missing required columns: {missing_columns}. "
            f"Available: {available_columns[:10]}..."
        )


class ExtractionError(CampaignInsightsError):
    """An extraction tier could not interpret generated content.

    Raised inside a tier and absorbed by the extraction chain, which moves on
    to the next tier.
    """

    def __init__(self, tier: str, reason: str):
        self.tier = tier
        self.reason = reason
        super().__init__(f"{tier}: {reason}")

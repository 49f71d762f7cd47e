from .insight_service import (
    CampaignInsightService,
    GenerationResponse,
    GenerativeClient,
    ProjectAnalysis,
    content_from_response,
)

__all__ = [
    "CampaignInsightService",
    "GenerationResponse",
    "GenerativeClient",
    "ProjectAnalysis",
    "content_from_response",
]

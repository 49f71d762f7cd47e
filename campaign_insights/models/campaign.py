"""Input model describing a campaign to be forecast."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from .coercion import parse_number

logger = logging.getLogger(__name__)

DEFAULT_BUDGET = 1000.0
DEFAULT_IMPRESSIONS = 10000.0
DEFAULT_CHANNEL = "google_ads"
DEFAULT_AUDIENCE = "general"


class CampaignInput(BaseModel):
    """Planned campaign parameters.

    Missing, zero or non-numeric budget/impressions fall back to the defaults.
    Unknown keys sent by the caller (targeting notes, objectives, ...) are kept
    so they can be forwarded to the generative prompt.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    budget: float = DEFAULT_BUDGET
    impressions: float = DEFAULT_IMPRESSIONS
    channel: str = DEFAULT_CHANNEL
    audience: str = DEFAULT_AUDIENCE

    @field_validator("budget", mode="before")
    @classmethod
    def _coerce_budget(cls, value: Any) -> float:
        number = parse_number(value)
        return number if number and number > 0 else DEFAULT_BUDGET

    @field_validator("impressions", mode="before")
    @classmethod
    def _coerce_impressions(cls, value: Any) -> float:
        number = parse_number(value)
        return number if number and number > 0 else DEFAULT_IMPRESSIONS

    @field_validator("channel", mode="before")
    @classmethod
    def _coerce_channel(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        return text or DEFAULT_CHANNEL

    @field_validator("audience", mode="before")
    @classmethod
    def _coerce_audience(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        return text or DEFAULT_AUDIENCE

    @classmethod
    def coerce(cls, value: Any) -> "CampaignInput":
        """Build a CampaignInput from anything, falling back to defaults."""
        if isinstance(value, CampaignInput):
            return value
        if not isinstance(value, Mapping):
            if value is not None:
                logger.warning(
                    "Invalid campaign input of type %s, using defaults",
                    type(value).__name__,
                )
            return cls()
        return cls.model_validate({str(key): item for key, item in value.items()})

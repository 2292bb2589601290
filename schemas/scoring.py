"""Completion-service output schemas: lead classification and job ad draft."""
import math
from datetime import date
from enum import Enum
from typing import List

from pydantic import BaseModel, Field, HttpUrl, field_validator


class LeadClassification(str, Enum):
    VALID_LEAD = "valid_lead"
    INVALID_LEAD = "invalid_lead"
    LIKELY_CANDIDATE = "likely_candidate"
    LIKELY_SPAM = "likely_spam"


class LeadScore(BaseModel):
    lead_score: int = Field(ge=1, le=100)
    role_category: str
    classification: LeadClassification
    key_requirements: List[str]
    ai_reasoning: str = Field(min_length=1)

    @field_validator("lead_score", mode="before")
    @classmethod
    def _round_fractional_score(cls, value):
        """A fractional score inside 1-100 is rounded half-up to an integer."""
        if isinstance(value, float) and 1 <= value <= 100:
            return int(math.floor(value + 0.5))
        return value


class JobAdDraft(BaseModel):
    title: str = Field(min_length=1)
    company: str = Field(min_length=1)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1)
    category: str = Field(min_length=1)
    external_url: HttpUrl
    posted_date: date

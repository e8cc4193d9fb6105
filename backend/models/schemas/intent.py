"""Intent and deterministic-extraction results for a single form field."""

from enum import Enum

from pydantic import BaseModel


class IntentType(str, Enum):
    SKILL_LIST = "skill_list"
    EXPERIENCE_SUMMARY = "experience_summary"
    EDUCATION_INSTITUTION = "education_institution"
    EDUCATION_DEGREE = "education_degree"
    EDUCATION_YEAR = "education_year"
    MOTIVATION = "motivation"
    AVAILABILITY = "availability"
    TIMELINE = "timeline"
    PORTFOLIO_URL = "portfolio_url"
    GITHUB_URL = "github_url"
    LINKEDIN_URL = "linkedin_url"
    GENERIC_URL = "generic_url"
    ACADEMIC_STATUS = "academic_status"
    HEAR_ABOUT = "hear_about"
    COVER_LETTER = "cover_letter"
    TEXT = "text"
    UNKNOWN = "unknown"

    @property
    def display_name(self) -> str:
        return self.value


URL_INTENTS = frozenset({
    IntentType.GITHUB_URL,
    IntentType.LINKEDIN_URL,
    IntentType.PORTFOLIO_URL,
    IntentType.GENERIC_URL,
})

EDUCATION_INTENTS = frozenset({
    IntentType.EDUCATION_INSTITUTION,
    IntentType.EDUCATION_DEGREE,
    IntentType.EDUCATION_YEAR,
})


class IntentResult(BaseModel):
    model_config = {"frozen": True}

    type: IntentType
    confidence: float
    rationale: str


class ExtractedValue(BaseModel):
    """Deterministic answer. An empty ``value`` means no answer, whatever the confidence."""
    model_config = {"frozen": True}

    value: str = ""
    confidence: float = 0.0
    reasoning: str = ""

    @property
    def has_value(self) -> bool:
        return bool(self.value)

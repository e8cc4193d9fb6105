"""Decide whether a deterministic answer is enough or a model call is worth it.

Deterministic rules are precise for unambiguous fields but cannot summarize
or infer, so each intent carries the confidence a deterministic answer must
reach. Below it, the model is only consulted when the resume actually has a
section that could answer the field.
"""

import logging
from enum import Enum

from models.responses import ResolvedField
from models.schemas.intent import EDUCATION_INTENTS, URL_INTENTS, ExtractedValue, IntentType
from models.schemas.resume import StructuredResume

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    USE_DETERMINISTIC = "use_deterministic"
    ESCALATE = "escalate"
    NO_DATA = "no_data"


DEFAULT_REQUIRED_CONFIDENCE = 0.80

_REQUIRED_CONFIDENCE: dict[IntentType, float] = {
    **{intent: 0.60 for intent in URL_INTENTS},
    **{intent: 0.75 for intent in EDUCATION_INTENTS},
    IntentType.EXPERIENCE_SUMMARY: 0.75,
    IntentType.MOTIVATION: 0.85,
    IntentType.AVAILABILITY: 0.85,
    IntentType.TIMELINE: 0.85,
    IntentType.HEAR_ABOUT: 0.85,
}

# No resume section models these, so a model could only invent an answer.
UNSUPPORTED_INTENTS = frozenset({
    IntentType.AVAILABILITY,
    IntentType.TIMELINE,
    IntentType.HEAR_ABOUT,
})


def required_confidence(intent: IntentType) -> float:
    return _REQUIRED_CONFIDENCE.get(intent, DEFAULT_REQUIRED_CONFIDENCE)


def _not_blank(value: str | None) -> bool:
    return bool(value and value.strip())


def has_resume_support(intent: IntentType, resume: StructuredResume | None) -> bool:
    """True when the resume holds data that could answer a field of this intent."""
    if resume is None:
        return False
    if intent in UNSUPPORTED_INTENTS:
        return False

    info = resume.personal_info
    if intent is IntentType.SKILL_LIST:
        return bool(resume.skills)
    if intent is IntentType.EXPERIENCE_SUMMARY:
        return bool(resume.experience)
    if intent in EDUCATION_INTENTS:
        return bool(resume.education)
    if intent is IntentType.GITHUB_URL:
        return info is not None and _not_blank(info.github)
    if intent in (IntentType.LINKEDIN_URL, IntentType.PORTFOLIO_URL):
        return info is not None and _not_blank(info.linkedin)
    if intent is IntentType.MOTIVATION:
        return bool(resume.experience) or bool(resume.skills)
    return True


def decide(intent: IntentType, extracted: ExtractedValue, resume: StructuredResume | None) -> Decision:
    if extracted.has_value and extracted.confidence >= required_confidence(intent):
        return Decision.USE_DETERMINISTIC
    if not has_resume_support(intent, resume):
        return Decision.NO_DATA
    return Decision.ESCALATE


def deterministic_response(extracted: ExtractedValue) -> ResolvedField:
    return ResolvedField(
        suggested_value=extracted.value,
        confidence=extracted.confidence,
        reasoning=extracted.reasoning,
        matched_source="simple_extraction",
    )


def no_data_response(intent: IntentType) -> ResolvedField:
    return ResolvedField(
        suggested_value="",
        confidence=0.1,
        reasoning=f"No relevant resume data for intent {intent.display_name}",
        matched_source="no_data",
    )

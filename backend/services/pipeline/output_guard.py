"""Post-processing of the model's autofill answer.

The model's JSON answer is checked before it reaches the caller:
1. a null answer becomes an ``llm_error``
2. the ``EMPTY`` marker becomes an empty ``no_data`` answer
3. answers that repeat most of the resume's skills under a non-skill
   intent are discarded (``intent_guard``)
4. URL intents get an ``https://`` scheme when none is present
"""

import logging

from models.responses import ModelAnswer, ResolvedField
from models.schemas.intent import URL_INTENTS, IntentType
from models.schemas.resume import StructuredResume

logger = logging.getLogger(__name__)

EMPTY_MARKER = "EMPTY"
MIN_SKILL_DUMP_MATCHES = 3


def normalize_url(value: str) -> str:
    trimmed = value.strip()
    if not trimmed:
        return trimmed
    if not trimmed.startswith(("http://", "https://")):
        return "https://" + trimmed
    return trimmed


def skill_dump_threshold(skill_count: int) -> int:
    return max(MIN_SKILL_DUMP_MATCHES, skill_count // 2)


def looks_like_skill_dump(value: str, resume: StructuredResume | None) -> bool:
    """True when ``value`` contains at least half (and at least 3) of the resume skills."""
    if not value or resume is None or not resume.skills:
        return False

    lower = value.lower()
    matches = sum(1 for skill in resume.skills if skill and skill.lower() in lower)
    if matches == 0:
        return False
    return matches >= skill_dump_threshold(len(resume.skills))


def guard(intent: IntentType, answer: ModelAnswer | None, resume: StructuredResume | None) -> ResolvedField:
    if answer is None:
        return ResolvedField(
            suggested_value="",
            confidence=0.0,
            reasoning="Model returned null response",
            matched_source="llm_error",
        )

    trimmed = (answer.suggested_value or "").strip()

    if trimmed.upper() == EMPTY_MARKER:
        return ResolvedField(
            suggested_value="",
            confidence=0.1,
            reasoning=answer.reasoning or "Model indicated no relevant data",
            matched_source=answer.field_matched or "no_data",
        )

    if intent is not IntentType.SKILL_LIST and looks_like_skill_dump(trimmed, resume):
        logger.warning("Discarding AI output for intent %s due to skill spillover", intent.display_name)
        return ResolvedField(
            suggested_value="",
            confidence=0.0,
            reasoning="Discarded AI output that did not match intent",
            matched_source="intent_guard",
        )

    if intent in URL_INTENTS and trimmed:
        trimmed = normalize_url(trimmed)

    return ResolvedField(
        suggested_value=trimmed,
        confidence=answer.confidence,
        reasoning=answer.reasoning or "",
        matched_source=answer.field_matched,
    )

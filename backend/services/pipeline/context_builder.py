"""Intent-focused resume context for autofill prompts.

Sending only the sections relevant to a field keeps the prompt short and
stops the model from reaching for unrelated data (most often the skills
list). Intents without a dedicated mapping get the full resume.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel

from models.schemas.intent import EDUCATION_INTENTS, IntentType
from models.schemas.resume import StructuredResume

logger = logging.getLogger(__name__)


def _dump_list(items: list[BaseModel]) -> list[dict[str, Any]]:
    return [item.model_dump(mode="json") for item in items]


def _personal(resume: StructuredResume, field: str) -> str:
    if resume.personal_info is None:
        return ""
    return getattr(resume.personal_info, field) or ""


def focused_sections(intent: IntentType, resume: StructuredResume) -> dict[str, Any]:
    """Sections relevant to ``intent``; empty when the intent has no mapping."""
    if intent is IntentType.SKILL_LIST:
        return {"skills": list(resume.skills)}
    if intent is IntentType.EXPERIENCE_SUMMARY:
        return {"experience": _dump_list(resume.experience)}
    if intent in EDUCATION_INTENTS:
        return {"education": _dump_list(resume.education)}
    if intent is IntentType.GITHUB_URL:
        return {"profile": {"github": _personal(resume, "github")}}
    if intent in (IntentType.LINKEDIN_URL, IntentType.PORTFOLIO_URL):
        return {"profile": {"linkedin": _personal(resume, "linkedin")}}
    if intent is IntentType.MOTIVATION:
        return {
            "experience_highlights": _dump_list(resume.experience),
            "skills": list(resume.skills),
        }
    return {}


def _has_content(value: Any) -> bool:
    if isinstance(value, dict):
        return any(_has_content(v) for v in value.values())
    if isinstance(value, list):
        return len(value) > 0
    return bool(value)


def build_context(intent: IntentType, resume: StructuredResume | None) -> str:
    """Pretty-printed JSON context for ``intent``."""
    if resume is None:
        return "{}"

    context = focused_sections(intent, resume)
    if not _has_content(context):
        logger.debug("No focused context for intent %s, using full snapshot", intent.display_name)
        context = {"resume_snapshot": resume.model_dump(mode="json")}

    return json.dumps(context, indent=2, ensure_ascii=False)


def resume_snapshot(resume: StructuredResume | None) -> str:
    if resume is None:
        return "{}"
    return resume.to_json(indent=2)

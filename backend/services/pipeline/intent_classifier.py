"""Offline heuristic classifier mapping a form field to an intent bucket.

Rules are evaluated in order against the lower-cased label, name and
placeholder; the first rule with a matching keyword wins. Order matters:
link keywords ("github", "linkedin") are checked before "skill" so a
"GitHub skills" field still classifies as a link, and every keyword rule
runs before the URL-type fallback.
"""

import logging
from typing import NamedTuple

from models.requests import FieldQuery
from models.schemas.intent import IntentResult, IntentType

logger = logging.getLogger(__name__)


class IntentRule(NamedTuple):
    keywords: tuple[str, ...]
    intent: IntentType
    confidence: float
    rationale: str

    def matches(self, haystack: str) -> bool:
        return any(keyword in haystack for keyword in self.keywords)


INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(("github",), IntentType.GITHUB_URL, 0.95, "Detected GitHub keyword"),
    IntentRule(("linkedin",), IntentType.LINKEDIN_URL, 0.95, "Detected LinkedIn keyword"),
    IntentRule(
        ("skill", "tech stack", "competenc", "expertise"),
        IntentType.SKILL_LIST, 0.95, "Detected skill keywords",
    ),
    IntentRule(
        ("portfolio", "website", "site url", "personal site"),
        IntentType.PORTFOLIO_URL, 0.85, "Detected portfolio keyword",
    ),
    IntentRule(
        ("college", "university", "institution", "school"),
        IntentType.EDUCATION_INSTITUTION, 0.85, "Detected education institution keyword",
    ),
    IntentRule(
        ("degree", "course", "program", "major"),
        IntentType.EDUCATION_DEGREE, 0.8, "Detected education degree keyword",
    ),
    IntentRule(
        ("graduation", "grad year", "passing year", "passout", "year of completion"),
        IntentType.EDUCATION_YEAR, 0.8, "Detected education year keyword",
    ),
    IntentRule(
        ("experience", "work history", "professional summary"),
        IntentType.EXPERIENCE_SUMMARY, 0.75, "Detected experience keyword",
    ),
    IntentRule(("cover letter",), IntentType.COVER_LETTER, 0.8, "Detected cover letter keyword"),
    IntentRule(
        ("why", "motivation", "excite", "statement of purpose"),
        IntentType.MOTIVATION, 0.85, "Detected motivation keyword",
    ),
    IntentRule(
        ("join", "availability", "notice period", "start date"),
        IntentType.AVAILABILITY, 0.85, "Detected availability keyword",
    ),
    IntentRule(("timeline", "time frame"), IntentType.TIMELINE, 0.7, "Detected timeline keyword"),
    IntentRule(
        ("how did you hear", "where did you hear"),
        IntentType.HEAR_ABOUT, 0.85, "Detected referral keyword",
    ),
    IntentRule(
        ("are you currently in college", "which year are you", "current year", "still in college"),
        IntentType.ACADEMIC_STATUS, 0.75, "Detected academic status keyword",
    ),
)


def classify(query: FieldQuery | None) -> IntentResult:
    """Classify a field. Never calls a model."""
    if query is None:
        return IntentResult(type=IntentType.UNKNOWN, confidence=0.0, rationale="No field metadata provided")

    haystack = " ".join(
        (part or "").lower() for part in (query.label, query.name, query.placeholder)
    ).strip()
    field_type = (query.type or "").strip().lower()

    if not haystack and not field_type:
        return IntentResult(type=IntentType.UNKNOWN, confidence=0.0, rationale="No field metadata provided")

    for rule in INTENT_RULES:
        if rule.matches(haystack):
            return IntentResult(type=rule.intent, confidence=rule.confidence, rationale=rule.rationale)

    if field_type == "url":
        return IntentResult(type=IntentType.GENERIC_URL, confidence=0.5, rationale="Field type is URL")

    return IntentResult(type=IntentType.TEXT, confidence=0.2, rationale="Defaulting to generic text intent")

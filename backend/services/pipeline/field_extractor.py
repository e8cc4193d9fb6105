"""Deterministic field extraction straight from the structured resume.

Models are good at fuzzy matching but unreliable at copying simple values
(names, e-mails, links), so those are answered here without a model call.
``EXTRACTION_RULES`` is evaluated top to bottom against
``f"{label} {name}".lower()`` and the first applicable rule answers. Each
rule's confidence reflects how unambiguous that kind of field is; the
confidence gate decides whether it is enough for the field's intent.
"""

import logging
import re
from typing import Callable, NamedTuple

from models.schemas.intent import ExtractedValue
from models.schemas.resume import StructuredResume

logger = logging.getLogger(__name__)

NO_MATCH = ExtractedValue(value="", confidence=0.0, reasoning="No matching field detected")

# Country fields get this when nothing better is known. Its confidence is
# below the generic text threshold, so plain "Country" fields escalate; it
# still passes intents with a threshold at or below 0.75 (e.g. "College
# country" classifies as an education institution).
DEFAULT_COUNTRY = "India"


class ExtractionRule(NamedTuple):
    name: str
    applies: Callable[[str, StructuredResume], bool]
    extract: Callable[[StructuredResume], str]
    confidence: float
    reasoning: str


def _has(haystack: str, *needles: str) -> bool:
    return any(n in haystack for n in needles)


def _has_all(haystack: str, *needles: str) -> bool:
    return all(n in haystack for n in needles)


def _personal(resume: StructuredResume, field: str) -> str:
    if resume.personal_info is None:
        return ""
    return getattr(resume.personal_info, field) or ""


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

def first_name(full_name: str | None) -> str:
    parts = (full_name or "").split()
    return parts[0] if parts else ""


def last_name(full_name: str | None) -> str:
    parts = (full_name or "").split()
    return parts[-1] if len(parts) > 1 else ""


def phone_digits(phone: str | None) -> str:
    return re.sub(r"[^0-9]", "", phone or "")


def country_code(phone: str | None) -> str:
    """Leading "+91"-style token, only when the number carries a "+"."""
    if not phone or "+" not in phone:
        return ""
    head = phone.split(" ")[0]
    return head if head.startswith("+") else ""


def city(resume: StructuredResume) -> str:
    """First comma segment of the most recent experience, else education, location."""
    for section in (resume.experience, resume.education):
        if section and section[0].location:
            return section[0].location.split(",")[0].strip()
    return ""


def experience_summary(resume: StructuredResume) -> str:
    if not resume.experience:
        return ""
    exp = resume.experience[0]
    return f"{exp.title or ''} at {exp.company or ''} ({exp.duration or ''})"


def education_summary(resume: StructuredResume) -> str:
    if not resume.education:
        return ""
    edu = resume.education[0]
    return f"{edu.degree or ''} from {edu.institution or ''} ({edu.year or ''})"


def _latest_education(resume: StructuredResume, field: str) -> str:
    if not resume.education:
        return ""
    return getattr(resume.education[0], field) or ""


def _is_graduation_label(h: str) -> bool:
    return _has(h, "graduation", "passing", "passout") or (
        "year" in h and _has(h, "grad", "completion", "passing")
    )


# ---------------------------------------------------------------------------
# Rule table (order is precedence)
# ---------------------------------------------------------------------------

EXTRACTION_RULES: tuple[ExtractionRule, ...] = (
    # Links
    ExtractionRule(
        "github", lambda h, r: "github" in h,
        lambda r: _personal(r, "github"), 0.95, "Used personal_info.github",
    ),
    ExtractionRule(
        "linkedin", lambda h, r: "linkedin" in h,
        lambda r: _personal(r, "linkedin"), 0.95, "Used personal_info.linkedin",
    ),
    # No dedicated portfolio field exists in the resume schema; LinkedIn
    # stands in for it.
    ExtractionRule(
        "portfolio", lambda h, r: _has(h, "portfolio", "website") or _has_all(h, "url", "site"),
        lambda r: _personal(r, "linkedin"), 0.60, "Using LinkedIn as closest portfolio link",
    ),
    # Names
    ExtractionRule(
        "first_name", lambda h, r: _has_all(h, "first", "name"),
        lambda r: first_name(_personal(r, "name")), 0.99, "Extracted first name from personal_info.name",
    ),
    ExtractionRule(
        "last_name", lambda h, r: _has_all(h, "last", "name"),
        lambda r: last_name(_personal(r, "name")), 0.99, "Extracted last name from personal_info.name",
    ),
    ExtractionRule(
        "given_name", lambda h, r: _has_all(h, "given", "name"),
        lambda r: first_name(_personal(r, "name")), 0.99, "Extracted given name from personal_info.name",
    ),
    ExtractionRule(
        "family_name", lambda h, r: _has(h, "family", "surname") and "name" in h,
        lambda r: last_name(_personal(r, "name")), 0.99, "Extracted family name from personal_info.name",
    ),
    ExtractionRule(
        "full_name", lambda h, r: _has_all(h, "full", "name") and not _has(h, "first", "last"),
        lambda r: _personal(r, "name"), 0.99, "Used full name from personal_info.name",
    ),
    # Contact
    ExtractionRule(
        "email", lambda h, r: _has(h, "email", "e-mail"),
        lambda r: _personal(r, "email"), 0.99, "Used personal_info.email",
    ),
    ExtractionRule(
        "phone", lambda h, r: "phone" in h and not _has(h, "code", "extension"),
        lambda r: phone_digits(_personal(r, "phone")), 0.99, "Extracted phone number (digits only)",
    ),
    ExtractionRule(
        "country_code", lambda h, r: _has_all(h, "country", "code"),
        lambda r: country_code(_personal(r, "phone")), 0.99, "Extracted country code from phone",
    ),
    ExtractionRule(
        "phone_extension", lambda h, r: "extension" in h,
        lambda r: "", 0.99, "Extension not available in resume",
    ),
    # Address
    ExtractionRule(
        "address_line", lambda h, r: _has_all(h, "address", "line"),
        city, 0.85, "Extracted address from resume",
    ),
    ExtractionRule("city", lambda h, r: "city" in h, city, 0.95, "Extracted city from address"),
    ExtractionRule(
        "postal_code", lambda h, r: _has(h, "postal", "zip", "pin"),
        lambda r: "", 0.85, "Postal code not consistently available",
    ),
    ExtractionRule(
        "country", lambda h, r: "country" in h,
        lambda r: DEFAULT_COUNTRY, 0.75, f"Assuming {DEFAULT_COUNTRY} (not in resume)",
    ),
    ExtractionRule(
        "state", lambda h, r: _has(h, "state", "province", "region"),
        lambda r: "", 0.70, "State not clearly available",
    ),
    # Resume sections
    ExtractionRule(
        "skills", lambda h, r: _has(h, "skill", "technical", "competenc", "expertise"),
        lambda r: ", ".join(r.skills), 0.95, "Joined skills array with commas",
    ),
    ExtractionRule(
        "experience", lambda h, r: _has(h, "experience", "work") and bool(r.experience),
        experience_summary, 0.85, "Summarized experience",
    ),
    ExtractionRule(
        "institution", lambda h, r: _has(h, "college", "university", "institution", "school") and bool(r.education),
        lambda r: _latest_education(r, "institution"), 0.95, "Used most recent institution",
    ),
    ExtractionRule(
        "degree", lambda h, r: _has(h, "degree", "course", "program", "major") and bool(r.education),
        lambda r: _latest_education(r, "degree"), 0.9, "Used most recent degree",
    ),
    ExtractionRule(
        "graduation_year", lambda h, r: _is_graduation_label(h) and bool(r.education),
        lambda r: _latest_education(r, "year"), 0.9, "Used most recent graduation year",
    ),
    ExtractionRule(
        "education", lambda h, r: _has(h, "education", "qualification", "degree") and bool(r.education),
        education_summary, 0.85, "Used most recent education",
    ),
)


def extract_value(
    label: str | None,
    name: str | None,
    field_type: str | None,
    resume: StructuredResume | None,
) -> ExtractedValue:
    """Answer a field from the resume alone.

    Returns ``NO_MATCH`` when no rule applies or the matched resume value is
    empty. ``field_type`` is accepted for callers' convenience; rules key on
    the label and name only.
    """
    if resume is None:
        return ExtractedValue(value="", confidence=0.0, reasoning="Resume data unavailable")

    haystack = f"{label or ''} {name or ''}".lower()
    for rule in EXTRACTION_RULES:
        if not rule.applies(haystack, resume):
            continue
        value = rule.extract(resume)
        if not value:
            logger.debug("Rule '%s' matched but resume has no value", rule.name)
            return NO_MATCH
        return ExtractedValue(value=value, confidence=rule.confidence, reasoning=rule.reasoning)

    return NO_MATCH

"""Normalization of the model's raw resume-extraction JSON.

Models routinely answer ``"year": ["2025"]`` where a string was asked for,
or nest skill groups as arrays inside ``skills``. This pass rewrites those
shapes before the text is bound to ``StructuredResume``:

- listed string fields holding an array become the element text (one
  element) or the elements joined with ", " (several); an empty array
  becomes null
- ``skills`` is flattened one level and non-string entries are dropped

It never raises. Input that cannot be parsed (including nesting too deep
to decode), or whose root is not an object, is returned unchanged. So is
input that no rule changes, whatever its formatting. Rewritten documents
come back as compact JSON. The pass is idempotent.
"""

import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

SANITIZER_VERSION = 1

EDUCATION_STRING_FIELDS = ("year", "score", "location")
EXPERIENCE_STRING_FIELDS = ("title", "company", "duration", "description", "location")
PERSONAL_INFO_STRING_FIELDS = ("name", "email", "phone", "linkedin", "github")


def sanitize(raw_json: str) -> str:
    """Return ``raw_json`` normalized to the structured-resume shape."""
    try:
        tree = json.loads(raw_json)
    except (TypeError, ValueError, RecursionError) as e:
        logger.warning("Failed to sanitize JSON, returning original: %s", e)
        return raw_json

    if not isinstance(tree, dict):
        logger.warning("Sanitizer expected a JSON object, got %s", type(tree).__name__)
        return raw_json

    if not _apply_rules(tree):
        return raw_json

    try:
        sanitized = json.dumps(tree, ensure_ascii=False, separators=(",", ":"))
    except RecursionError as e:
        logger.warning("Failed to serialize sanitized JSON, returning original: %s", e)
        return raw_json
    logger.debug("Sanitized JSON (v%d): %s", SANITIZER_VERSION, sanitized)
    return sanitized


def sanitize_tree(tree: dict[str, Any]) -> dict[str, Any]:
    """Apply all rules to an already-parsed document, in place."""
    _apply_rules(tree)
    return tree


def _apply_rules(tree: dict[str, Any]) -> bool:
    """Rewrite ``tree`` in place; True when any rule changed something."""
    changed = False
    for entry in _objects_in(tree.get("education")):
        changed |= _collapse_string_fields(entry, EDUCATION_STRING_FIELDS)

    for entry in _objects_in(tree.get("experience")):
        changed |= _collapse_string_fields(entry, EXPERIENCE_STRING_FIELDS)

    personal_info = tree.get("personal_info")
    if isinstance(personal_info, dict):
        changed |= _collapse_string_fields(personal_info, PERSONAL_INFO_STRING_FIELDS)

    skills = tree.get("skills")
    if isinstance(skills, list) and not all(isinstance(s, str) for s in skills):
        tree["skills"] = flatten_skills(skills)
        changed = True

    return changed


def flatten_skills(skills: list[Any]) -> list[str]:
    flat: list[str] = []
    for skill in skills:
        if isinstance(skill, list):
            flat.extend(s for s in skill if isinstance(s, str))
        elif isinstance(skill, str):
            flat.append(skill)
    return flat


def _objects_in(section: Any) -> list[dict[str, Any]]:
    if not isinstance(section, list):
        return []
    return [entry for entry in section if isinstance(entry, dict)]


def _collapse_string_fields(node: dict[str, Any], field_names: tuple[str, ...]) -> bool:
    changed = False
    for field_name in field_names:
        value = node.get(field_name)
        if not isinstance(value, list):
            continue
        if not value:
            node[field_name] = None
        elif len(value) == 1:
            node[field_name] = _as_text(value[0])
        else:
            node[field_name] = ", ".join(_as_text(v) for v in value)
        changed = True
        logger.debug("Converted field '%s' from array to %r", field_name, node[field_name])
    return changed


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    # null and nested containers carry no usable text
    return ""

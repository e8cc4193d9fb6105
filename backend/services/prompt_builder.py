"""All prompt templates for Ollama chat calls."""

from models.requests import FieldQuery
from models.schemas.intent import IntentResult


def build_extraction_prompt(resume_text: str) -> str:
    """Upstream extraction: raw resume text -> structured resume JSON."""
    return f"""You are a resume parser. Extract information and return ONLY valid JSON.

CRITICAL RULES:
1. Return ONLY the JSON object, no markdown, no code blocks, no explanation
2. ALL string fields must be strings (use "" for empty, not arrays)
3. Use null for missing data

Required JSON structure:
{{
  "personal_info": {{
    "name": "string",
    "email": "string",
    "phone": "string",
    "linkedin": "string or null",
    "github": "string or null"
  }},
  "education": [
    {{
      "degree": "string",
      "institution": "string",
      "year": "string",
      "score": "string or null",
      "location": "string or null"
    }}
  ],
  "experience": [
    {{
      "title": "string",
      "company": "string",
      "duration": "string",
      "description": "string",
      "location": "string or null"
    }}
  ],
  "skills": ["string1", "string2"]
}}

List education and experience most recent first.

Resume text:
---
{resume_text}
---

Return ONLY the JSON object."""


def build_autofill_prompt(
    query: FieldQuery,
    intent: IntentResult,
    focused_context: str,
    resume_json: str,
) -> str:
    """Field resolution: one form field + intent-focused context -> four-field answer."""
    return f"""You are filling a job application form field.

Field Label: {query.label or ""}
Field Name: {query.name or ""}
Field Type: {query.type or ""}
Field Intent: {intent.type.display_name}

Resume Context (intent focused):
{focused_context}

Full Resume JSON:
{resume_json}

Instructions:
1. Use only information from the resume that matches the field intent.
2. Do NOT repeat technical skills unless Field Intent = skill_list.
3. If no relevant data exists, respond with the exact string EMPTY.
4. Keep the response concise and aligned with the field intent.
5. Set confidence to 0.0 when returning EMPTY.

Return ONLY JSON in this format:
{{
    "suggested_value": "value or EMPTY",
    "confidence": 0.0,
    "reasoning": "short explanation referencing resume",
    "field_matched": "which resume section you used"
}}"""

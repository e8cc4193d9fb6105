"""Upstream extraction: raw resume text -> ``StructuredResume`` via the model."""

import logging

from pydantic import ValidationError

from models.schemas.resume import StructuredResume
from services import prompt_builder
from services.errors import MalformedModelOutputError
from services.ollama_client import OllamaGateway
from services.sanitizer import sanitize

logger = logging.getLogger(__name__)


def parse_structured_resume(raw_json: str) -> StructuredResume:
    """Sanitize and bind the model's extraction output."""
    sanitized = sanitize(raw_json)
    try:
        return StructuredResume.model_validate_json(sanitized)
    except ValidationError as e:
        logger.error("Extraction output did not match the resume schema: %s", e)
        raise MalformedModelOutputError(f"Model output did not match the resume schema: {e}") from e


async def extract_structured_resume(gateway: OllamaGateway, resume_text: str) -> StructuredResume:
    """Gateway errors propagate; non-conforming output raises ``MalformedModelOutputError``."""
    logger.info("Starting resume extraction with Ollama (model: %s)", gateway.active_model.get())

    content = await gateway.chat(prompt_builder.build_extraction_prompt(resume_text))
    resume = parse_structured_resume(content)

    logger.info(
        "Extracted structured resume: %d education, %d experience, %d skills",
        len(resume.education), len(resume.experience), len(resume.skills),
    )
    return resume

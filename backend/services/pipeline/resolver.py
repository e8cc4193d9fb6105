"""Field resolver: wires the autofill pipeline together.

Flow:
    FieldQuery + StructuredResume
      ├─ classify(query)                  → IntentResult
      ├─ extract_value(label, name, ...)  → ExtractedValue
      ├─ decide(intent, extracted)        → USE_DETERMINISTIC | NO_DATA  (return early)
      │                                     ESCALATE ↓
      ├─ build_context + build_autofill_prompt
      ├─ gateway.chat(prompt)             → raw JSON text
      └─ guard(intent, answer, resume)    → ResolvedField

Model-path failures never propagate: they come back as an empty answer
with source ``llm_error``.
"""

import asyncio
import json
import logging

from pydantic import ValidationError

from models.requests import FieldQuery
from models.responses import ModelAnswer, ResolvedField
from models.schemas.resume import StructuredResume
from services import prompt_builder
from services.errors import GatewayError, MalformedModelOutputError
from services.ollama_client import OllamaGateway
from services.pipeline.confidence_gate import (
    Decision,
    decide,
    deterministic_response,
    no_data_response,
)
from services.pipeline.context_builder import build_context, resume_snapshot
from services.pipeline.field_extractor import extract_value
from services.pipeline.intent_classifier import classify
from services.pipeline.output_guard import guard

logger = logging.getLogger(__name__)


def parse_model_answer(content: str) -> ModelAnswer | None:
    """Bind the model's four-field JSON. A literal JSON ``null`` yields None."""
    try:
        data = json.loads(content)
    except ValueError as e:
        raise MalformedModelOutputError(f"Model answer is not JSON: {e}") from e
    except RecursionError as e:
        raise MalformedModelOutputError("Model answer is nested too deeply to decode") from e
    if data is None:
        return None
    try:
        return ModelAnswer.model_validate(data)
    except ValidationError as e:
        raise MalformedModelOutputError(f"Model answer has the wrong shape: {e}") from e


def llm_error_response(reason: str) -> ResolvedField:
    return ResolvedField(
        suggested_value="",
        confidence=0.0,
        reasoning=f"Failed to map field: {reason}",
        matched_source="llm_error",
    )


class FieldResolver:
    def __init__(
        self,
        gateway: OllamaGateway,
        timeout: float | None = None,
        batch_concurrency: int = 4,
    ) -> None:
        self.gateway = gateway
        self.timeout = timeout
        self.batch_concurrency = max(1, batch_concurrency)

    async def resolve(self, query: FieldQuery, resume: StructuredResume | None) -> ResolvedField:
        logger.info("Mapping field: %s (name: %s)", query.label, query.name)

        if resume is None:
            logger.warning("Structured resume is null; returning empty value for field %s", query.label)
            return ResolvedField(
                suggested_value="",
                confidence=0.0,
                reasoning="Structured resume unavailable",
                matched_source="no_resume",
            )

        intent = classify(query)
        logger.debug("Detected field intent %s (confidence: %s)", intent.type.display_name, intent.confidence)

        extracted = extract_value(query.label, query.name, query.type, resume)
        decision = decide(intent.type, extracted, resume)

        if decision is Decision.USE_DETERMINISTIC:
            logger.info("Using simple extraction: %s (confidence: %s)", extracted.value, extracted.confidence)
            return deterministic_response(extracted)

        if decision is Decision.NO_DATA:
            logger.info("No resume data found for intent %s. Returning empty value.", intent.type.display_name)
            return no_data_response(intent.type)

        prompt = prompt_builder.build_autofill_prompt(
            query,
            intent,
            build_context(intent.type, resume),
            resume_snapshot(resume),
        )

        try:
            content = await self.gateway.chat(prompt, timeout=self.timeout)
            answer = parse_model_answer(content)
        except (GatewayError, MalformedModelOutputError) as e:
            logger.error("Failed to map field %s with Ollama: %s", query.label, e)
            return llm_error_response(str(e))

        resolved = guard(intent.type, answer, resume)
        logger.info("Autofill result for intent %s: %s", intent.type.display_name, resolved.suggested_value)
        return resolved

    async def resolve_batch(
        self,
        fields: dict[str, FieldQuery],
        resume: StructuredResume | None,
    ) -> dict[str, ResolvedField]:
        """Resolve every field independently; one failing field never affects the others."""
        semaphore = asyncio.Semaphore(self.batch_concurrency)

        async def _resolve_one(query: FieldQuery) -> ResolvedField:
            async with semaphore:
                return await self.resolve(query, resume)

        field_ids = list(fields)
        outcomes = await asyncio.gather(
            *(_resolve_one(fields[field_id]) for field_id in field_ids),
            return_exceptions=True,
        )

        results: dict[str, ResolvedField] = {}
        for field_id, outcome in zip(field_ids, outcomes):
            if isinstance(outcome, BaseException):
                logger.error("Failed to autofill field %s: %s", field_id, outcome)
                outcome = llm_error_response(str(outcome))
            results[field_id] = outcome
        return results

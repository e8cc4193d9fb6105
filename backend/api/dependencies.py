"""Shared dependencies for API routes."""

from fastapi import Depends

from config import settings
from services.ollama_client import OllamaGateway, get_gateway
from services.pipeline.resolver import FieldResolver
from services.resume_store import ResumeStore, get_store


def get_ollama_gateway() -> OllamaGateway:
    return get_gateway()


def get_resume_store() -> ResumeStore:
    return get_store()


def get_field_resolver(gateway: OllamaGateway = Depends(get_ollama_gateway)) -> FieldResolver:
    return FieldResolver(
        gateway,
        timeout=settings.ollama_timeout_seconds,
        batch_concurrency=settings.batch_concurrency,
    )

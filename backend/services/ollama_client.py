"""Ollama chat API wrapper with bounded timeouts and typed errors."""

import asyncio
import logging
import threading

import httpx
from pydantic import ValidationError

from config import settings
from models.responses import ModelSummary
from models.schemas.ollama import ChatMessage, ChatRequest, ChatResponse, TagsResponse
from services.errors import (
    GatewayEmptyResponseError,
    GatewayError,
    GatewayNotFoundError,
    GatewayTimeoutError,
    ModelSwapConflictError,
)

logger = logging.getLogger(__name__)


class ActiveModel:
    """Holder for the name of the model used by outbound chat requests.

    Every read returns a complete name. A ``set`` or successful
    ``compare_and_swap`` is visible to every ``get`` that starts after it
    returns; requests that already read the old name keep using it.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._lock = threading.Lock()

    def get(self) -> str:
        with self._lock:
            return self._name

    def set(self, name: str) -> str:
        """Replace the active model, returning the previous one."""
        with self._lock:
            previous, self._name = self._name, name
            return previous

    def compare_and_swap(self, expected: str, name: str) -> bool:
        with self._lock:
            if self._name != expected:
                return False
            self._name = name
            return True


class OllamaGateway:
    def __init__(
        self,
        base_url: str,
        active_model: ActiveModel,
        timeout: float = 120.0,
        probe_timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.active_model = active_model
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self._transport = transport

    async def _request(self, method: str, path: str, timeout: float, **kwargs) -> httpx.Response:
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(timeout),
                transport=self._transport,
            ) as client:
                return await asyncio.wait_for(client.request(method, path, **kwargs), timeout)
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            raise GatewayTimeoutError(f"Ollama did not answer {path} within {timeout:g}s") from e
        except httpx.HTTPError as e:
            raise GatewayError(f"Ollama request to {path} failed: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str) -> None:
        if response.is_error:
            raise GatewayError(f"Ollama returned HTTP {response.status_code} for {path}")

    async def chat(self, prompt: str, timeout: float | None = None) -> str:
        """Send one user message and return the raw ``message.content`` text."""
        # Captured once so a concurrent model switch cannot affect this call.
        model = self.active_model.get()
        request = ChatRequest(
            model=model,
            messages=[ChatMessage(role="user", content=prompt)],
            stream=False,
            format="json",
        )

        logger.debug("Sending chat request to %s (model: %s)", self.base_url, model)
        response = await self._request(
            "POST", "/api/chat", timeout or self.timeout, json=request.model_dump()
        )
        if response.status_code == 404:
            raise GatewayNotFoundError(model)
        self._raise_for_status(response, "/api/chat")

        try:
            body = ChatResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise GatewayEmptyResponseError(f"Unreadable response from Ollama: {e}") from e

        if body.message is None or not body.message.content.strip():
            raise GatewayEmptyResponseError("Empty response from Ollama")
        return body.message.content

    async def list_models(self) -> list[ModelSummary]:
        response = await self._request("GET", "/api/tags", self.probe_timeout)
        self._raise_for_status(response, "/api/tags")

        try:
            tags = TagsResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise GatewayEmptyResponseError(f"Unreadable model list from Ollama: {e}") from e

        return [
            ModelSummary(
                name=entry.name,
                family=entry.family,
                size_bytes=entry.size,
                modified_at=entry.modified_at,
            )
            for entry in tags.models
        ]

    async def is_model_available(self, name: str) -> bool:
        response = await self._request("POST", "/api/show", self.probe_timeout, json={"model": name})
        if response.status_code == 404:
            logger.warning("Model '%s' not found in Ollama", name)
            return False
        self._raise_for_status(response, "/api/show")
        return True

    async def switch_model(self, name: str, expected: str | None = None) -> str:
        """Make ``name`` the active model after checking it exists. Returns the previous name.

        With ``expected``, the switch only happens if ``expected`` is still
        the active model once the probe finishes.
        """
        if not await self.is_model_available(name):
            raise GatewayNotFoundError(name)

        if expected is None:
            previous = self.active_model.set(name)
        elif self.active_model.compare_and_swap(expected, name):
            previous = expected
        else:
            raise ModelSwapConflictError(expected, self.active_model.get())

        logger.info("Switched Ollama model from %s to %s", previous, name)
        return previous


_gateway: OllamaGateway | None = None


def get_gateway() -> OllamaGateway:
    global _gateway
    if _gateway is None:
        _gateway = OllamaGateway(
            settings.ollama_base_url,
            ActiveModel(settings.ollama_model),
            timeout=settings.ollama_timeout_seconds,
            probe_timeout=settings.ollama_probe_timeout_seconds,
        )
        logger.info("Ollama gateway initialized: %s @ %s", settings.ollama_model, settings.ollama_base_url)
    return _gateway

"""Wire contract of the Ollama chat and model-listing endpoints."""

from typing import Literal

from pydantic import BaseModel

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    role: Role
    content: str = ""


class ChatRequest(BaseModel):
    model: str
    messages: list[ChatMessage]
    stream: bool = False
    format: str | None = "json"

    model_config = {"protected_namespaces": ()}


class ChatResponse(BaseModel):
    model: str = ""
    message: ChatMessage | None = None

    model_config = {"protected_namespaces": ()}


class TagDetails(BaseModel):
    family: str | None = None
    families: list[str] | None = None


class TagEntry(BaseModel):
    name: str
    size: int = 0
    modified_at: str | None = None
    details: TagDetails | None = None

    @property
    def family(self) -> str | None:
        if self.details is None:
            return None
        if self.details.families:
            return self.details.families[0]
        return self.details.family


class TagsResponse(BaseModel):
    models: list[TagEntry] = []

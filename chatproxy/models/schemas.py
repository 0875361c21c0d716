from pydantic import BaseModel, ConfigDict
from typing import Any


# Chat Models
class ChatTurn(BaseModel):
    # Extra keys (images, tool_calls, ...) and any role Ollama knows pass through untouched
    model_config = ConfigDict(frozen=True, extra="allow")

    role: str
    content: str


class ChatRequest(BaseModel):
    message: str | None = None
    messages: list[ChatTurn] | None = None
    model: str | None = None
    # Accepted for compatibility; never forwarded to Ollama
    system: str | None = None
    # Accepted for compatibility; completions are always non-streaming
    stream: bool = False

    def turns(self) -> list[ChatTurn]:
        """Conversation to forward: ``messages`` verbatim, else ``message`` as one user turn."""
        if self.messages:
            return list(self.messages)
        if self.message:
            return [ChatTurn(role="user", content=self.message)]
        return []


class ChatCompletionResult(BaseModel):
    """Non-streaming /api/chat reply from Ollama."""

    model_config = ConfigDict(frozen=True)

    model: str
    message: dict[str, Any] | None = None
    done: bool = False
    created_at: str | None = None
    total_duration: int | None = None
    load_duration: int | None = None
    prompt_eval_count: int | None = None
    prompt_eval_duration: int | None = None
    eval_count: int | None = None
    eval_duration: int | None = None

    @property
    def response_text(self) -> str:
        message = self.message or {}
        content = message.get("content")
        if content is None:
            return str(message)
        return content


class ChatResponse(BaseModel):
    success: bool = True
    model: str
    response: str
    done: bool
    created_at: str | None = None
    total_duration: int | None = None
    load_duration: int | None = None
    prompt_eval_count: int | None = None
    prompt_eval_duration: int | None = None
    eval_count: int | None = None
    eval_duration: int | None = None


# Model listing
class ModelDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    modified_at: str | None = None
    size: int | None = None
    digest: str | None = None


class ModelsResponse(BaseModel):
    success: bool = True
    models: list[ModelDescriptor]


# Health
class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: str


# Error Models
class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: str | None = None
    host: str | None = None

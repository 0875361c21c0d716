from .schemas import (
    ChatTurn,
    ChatRequest,
    ChatCompletionResult,
    ChatResponse,
    ModelDescriptor,
    ModelsResponse,
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    "ChatTurn",
    "ChatRequest",
    "ChatCompletionResult",
    "ChatResponse",
    "ModelDescriptor",
    "ModelsResponse",
    "HealthResponse",
    "ErrorResponse",
]

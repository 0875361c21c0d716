from fastapi import APIRouter, Request

from ..config import get_settings
from ..log_sink import get_log_sink
from ..models.schemas import ChatRequest, ChatResponse
from ..responses import error_response
from ..services.error_kinds import ErrorKind, classify_error
from ..services.ollama_client import ollama_client

router = APIRouter(prefix="/api", tags=["chat"])


def _request_context(request: Request, **extra) -> dict:
    return {
        "endpoint": request.url.path,
        "method": request.method,
        "request_id": getattr(request.state, "request_id", None),
        **extra,
    }


@router.post("/chat", response_model=ChatResponse)
async def chat(request: Request, payload: ChatRequest | None = None):
    """
    Forward a chat to Ollama and return its reply.

    Takes either a single ``message`` or a full ``messages`` history. The
    completion is always requested non-streaming and ``system`` is not
    forwarded.
    """
    log_sink = get_log_sink()
    payload = payload or ChatRequest()

    turns = payload.turns()
    if not turns:
        log_sink.warn(
            ErrorKind.VALIDATION.label,
            {"request_id": getattr(request.state, "request_id", None), "path": request.url.path},
        )
        return error_response(ErrorKind.VALIDATION)

    model = payload.model or get_settings().default_model

    try:
        result = await ollama_client.chat(model, turns)
    except Exception as e:
        message = str(e) or type(e).__name__
        kind = classify_error(message)
        log_sink.error(
            "Error calling Ollama",
            e,
            _request_context(request, model=model, kind=kind.name),
            status_code=kind.status_code,
        )
        if kind is ErrorKind.UNAVAILABLE:
            return error_response(kind, message, host=ollama_client.base_url)
        return error_response(kind, message)

    return ChatResponse(
        model=model,
        response=result.response_text,
        done=result.done,
        created_at=result.created_at,
        total_duration=result.total_duration,
        load_duration=result.load_duration,
        prompt_eval_count=result.prompt_eval_count,
        prompt_eval_duration=result.prompt_eval_duration,
        eval_count=result.eval_count,
        eval_duration=result.eval_duration,
    )

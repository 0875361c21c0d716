import re
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from ..log_sink import get_log_sink
from ..models.schemas import ModelsResponse
from ..responses import error_response
from ..services.error_kinds import ErrorKind
from ..services.ollama_client import ollama_client

router = APIRouter(prefix="/api", tags=["models"])

_FRACTION = re.compile(r"\.(\d+)")


def normalize_timestamp(value: str | None) -> str | None:
    """
    Rewrite an RFC 3339 timestamp as UTC ISO-8601 with milliseconds.

    Ollama reports nanosecond precision with a local offset, e.g.
    ``2024-05-01T10:22:33.123456789-07:00`` becomes
    ``2024-05-01T17:22:33.123Z``. Values that don't parse are returned as-is.
    """
    if not value:
        return value

    text = value.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    # fromisoformat wants exactly 6 fractional digits
    text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return value

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@router.get("/models", response_model=ModelsResponse)
async def list_models(request: Request):
    """List the models Ollama has available."""
    try:
        models = await ollama_client.list_models()
    except Exception as e:
        message = str(e) or type(e).__name__
        get_log_sink().error(
            "Error fetching models",
            e,
            {
                "endpoint": request.url.path,
                "method": request.method,
                "request_id": getattr(request.state, "request_id", None),
            },
            status_code=500,
        )
        return error_response(ErrorKind.UPSTREAM, message, error="Error fetching models")

    return ModelsResponse(
        models=[
            model.model_copy(update={"modified_at": normalize_timestamp(model.modified_at)})
            for model in models
        ]
    )

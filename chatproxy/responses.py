import json

from fastapi.responses import JSONResponse

from .models.schemas import ErrorResponse
from .services.error_kinds import ErrorKind


class PrettyJSONResponse(JSONResponse):
    def render(self, content) -> bytes:
        return json.dumps(content, indent=2, ensure_ascii=False).encode("utf-8")


def error_response(
    kind: ErrorKind,
    message: str | None = None,
    error: str | None = None,
    host: str | None = None,
) -> PrettyJSONResponse:
    """``{success: false, error, message?}`` with the status the error kind maps to."""
    body = ErrorResponse(error=error or kind.label, message=message, host=host)
    return PrettyJSONResponse(
        status_code=kind.status_code,
        content=body.model_dump(exclude_none=True),
    )

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from ..log_sink import LogSink, get_log_sink
from ..responses import error_response
from ..services.error_kinds import ErrorKind


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn any exception a route lets escape into a 500 JSON error."""

    def __init__(self, app, log_sink: LogSink | None = None):
        super().__init__(app)
        self.log_sink = log_sink or get_log_sink()

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            self.log_sink.error(
                "Unhandled error",
                exc,
                {
                    "endpoint": request.url.path,
                    "method": request.method,
                    "request_id": getattr(request.state, "request_id", None),
                },
                status_code=500,
            )
            return error_response(ErrorKind.INTERNAL, str(exc) or type(exc).__name__)

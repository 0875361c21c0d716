import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..log_sink import LogSink, get_log_sink


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request twice: when it arrives and when its response is ready.

    Also assigns the request ID. If the client sends an X-Request-Id header,
    use that; otherwise generate a new UUID. The ID is echoed back on the
    response and attached to both log entries.
    """

    def __init__(self, app, log_sink: LogSink | None = None):
        super().__init__(app)
        self.log_sink = log_sink or get_log_sink()

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-Id")
        if not request_id:
            request_id = str(uuid.uuid4())

        # Store request_id in request state for use in endpoints
        request.state.request_id = request_id

        started = time.perf_counter()
        self.on_request(request, request_id)

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        response.headers["X-Request-Id"] = request_id
        self.on_response(request, response, request_id, duration_ms)

        return response

    def on_request(self, request: Request, request_id: str) -> None:
        self.log_sink.info(
            f"{request.method} {request.url.path}",
            {
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "ip": request.client.host if request.client else None,
                "user_agent": request.headers.get("user-agent"),
                "content_type": request.headers.get("content-type"),
            },
        )

    def on_response(
        self, request: Request, response: Response, request_id: str, duration_ms: float
    ) -> None:
        message = f"{request.method} {request.url.path} - {response.status_code} ({duration_ms}ms)"

        if response.status_code >= 400:
            self.log_sink.error(
                message,
                request_context={
                    "endpoint": request.url.path,
                    "method": request.method,
                    "request_id": request_id,
                    "duration_ms": duration_ms,
                },
                status_code=response.status_code,
            )
        else:
            self.log_sink.info(
                message,
                {
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": duration_ms,
                },
            )

"""
Ollama Chat Proxy

A thin proxy that sits between a browser chat UI and a local Ollama daemon:
- POST /api/chat forwards a conversation and returns the completion as JSON
- GET /api/models lists the models Ollama has pulled
- GET /health for liveness checks
- /ui/ serves the single-page chat client
"""

import asyncio
import sys
import uvicorn
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from chatproxy.config import STATIC_DIR, get_settings
from chatproxy.log_sink import get_log_sink
from chatproxy.middleware import (
    CORSHeadersMiddleware,
    ErrorHandlerMiddleware,
    RequestLoggingMiddleware,
)
from chatproxy.responses import PrettyJSONResponse, error_response
from chatproxy.routers import chat_router, health_router, models_router
from chatproxy.services.error_kinds import ErrorKind
from chatproxy.services.ollama_client import ollama_client

settings = get_settings()
log_sink = get_log_sink()


def _log_task_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """Log exceptions nobody awaited; the server keeps running."""
    exc = context.get("exception")
    log_sink.error(
        f"Unhandled exception in background task: {context.get('message', '')}",
        exc,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown."""
    await ollama_client.startup()
    asyncio.get_running_loop().set_exception_handler(_log_task_exception)

    base = f"http://localhost:{settings.port}"
    log_sink.info(
        f"Server is running on {base}",
        {
            "health": f"{base}/health",
            "chat": f"POST {base}/api/chat",
            "models": f"GET {base}/api/models",
            "ui": f"{base}/ui/" if settings.serve_ui else None,
            "ollama": ollama_client.base_url,
            "logs": str(log_sink.current_path),
        },
    )

    yield

    await ollama_client.shutdown()
    log_sink.info("Shutting down...")


app = FastAPI(
    title="Ollama Chat Proxy",
    description="JSON proxy and chat UI for a local Ollama daemon",
    version="1.0.0",
    lifespan=lifespan,
    default_response_class=PrettyJSONResponse,
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Unknown routes (and known paths hit with the wrong method) are a plain 404."""
    if exc.status_code in (404, 405):
        log_sink.warn(
            f"Route {request.method} {request.url.path} not found",
            {"request_id": getattr(request.state, "request_id", None)},
        )
        return error_response(
            ErrorKind.ROUTE_NOT_FOUND,
            f"Route {request.method} {request.url.path} not found",
        )
    return PrettyJSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed JSON or wrongly typed fields in the request body."""
    message = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    log_sink.warn(
        "Invalid request body",
        {"request_id": getattr(request.state, "request_id", None), "errors": message},
    )
    return PrettyJSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request body", "message": message},
    )


# Middleware runs outermost-last-added: logging wraps CORS wraps error handling
app.add_middleware(ErrorHandlerMiddleware, log_sink=log_sink)
app.add_middleware(CORSHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware, log_sink=log_sink)

# Include routers
app.include_router(health_router)
app.include_router(chat_router)
app.include_router(models_router)

# Mount the chat UI
if settings.serve_ui:
    app.mount("/ui", StaticFiles(directory=STATIC_DIR, html=True), name="ui")


def _log_uncaught(exc_type, exc, tb):
    log_sink.error("Uncaught exception, shutting down", exc.with_traceback(tb))
    sys.__excepthook__(exc_type, exc, tb)


def run():
    sys.excepthook = _log_uncaught
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
    )


if __name__ == "__main__":
    run()

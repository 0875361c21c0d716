import httpx
from pydantic import ValidationError

from ..config import get_settings
from ..models.schemas import ChatCompletionResult, ChatTurn, ModelDescriptor

settings = get_settings()


class OllamaError(Exception):
    """
    Failure talking to Ollama.

    ``message`` is what the daemon (or the transport) said; callers classify
    on it. ``status_code`` is the daemon's HTTP status, or None when no
    response was received.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class OllamaClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.ollama_base_url).rstrip("/")
        # No proxy-side deadline unless one is configured
        self.timeout = httpx.Timeout(timeout if timeout is not None else settings.ollama_timeout)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def startup(self):
        """Open the shared HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def shutdown(self):
        """Close the shared HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, json: dict | None = None) -> dict:
        await self.startup()
        url = f"{self.base_url}{path}"

        try:
            response = await self._client.request(method, url, json=json)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            raise OllamaError(
                self._error_text(e.response),
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            reason = str(e) or type(e).__name__
            raise OllamaError(f"Failed to connect to Ollama at {self.base_url}: {reason}") from e
        except ValueError as e:
            raise OllamaError(f"Invalid JSON in Ollama response: {e}") from e

    @staticmethod
    def _error_text(response: httpx.Response) -> str:
        """Pull Ollama's ``{"error": "..."}`` text out of a failed response."""
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        if error:
            return str(error)
        if response.text:
            return response.text
        return f"Ollama request failed: {response.status_code}"

    async def chat(self, model: str, messages: list[ChatTurn]) -> ChatCompletionResult:
        """Send a non-streaming chat request to Ollama."""
        payload = {
            "model": model,
            "messages": [turn.model_dump() for turn in messages],
            "stream": False,
        }
        data = await self._request("POST", "/api/chat", json=payload)

        try:
            return ChatCompletionResult.model_validate({**data, "model": data.get("model") or model})
        except ValidationError as e:
            raise OllamaError(f"Unexpected chat response from Ollama: {e}") from e

    async def list_models(self) -> list[ModelDescriptor]:
        """List the models the daemon has pulled (GET /api/tags)."""
        data = await self._request("GET", "/api/tags")

        models = []
        for model in data.get("models") or []:
            models.append(
                ModelDescriptor(
                    name=model.get("name") or model.get("model", ""),
                    modified_at=model.get("modified_at"),
                    size=model.get("size"),
                    digest=model.get("digest"),
                )
            )
        return models


# Singleton instance
ollama_client = OllamaClient()

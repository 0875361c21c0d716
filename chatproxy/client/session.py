"""
Client-side chat state, the same state machine the browser UI runs.

The whole conversation lives in memory; nothing is persisted and the proxy
never sees more than the latest message.
"""

from dataclasses import dataclass, field

import httpx

from ..config import FALLBACK_MODELS
from ..models.schemas import ChatTurn


def connectivity_error(base_url: str) -> str:
    return f"""Cannot connect to API server at {base_url}.

Possible issues:
- Server is not running
- CORS is blocking the request
- Network connectivity issue
- Firewall blocking the connection

Please check:
1. The proxy server is running on {base_url}
2. CORS is enabled on the server
3. Your network allows connections to this address"""


def _json_or_empty(response: httpx.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


@dataclass
class ChatSession:
    api_base_url: str
    model: str = "llama3.1"
    turns: list[ChatTurn] = field(default_factory=list)
    input: str = ""
    loading: bool = False
    error: str | None = None
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    def api_url(self, endpoint: str) -> str:
        return f"{self.api_base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def _client(self) -> httpx.AsyncClient:
        # The proxy applies no deadline to chats, so neither do we
        return httpx.AsyncClient(transport=self.transport, timeout=None)

    async def send(self) -> ChatTurn | None:
        """
        Send the input buffer as the next user turn.

        Returns the assistant's turn, or None when nothing was sent or the
        request failed (``error`` then says why). Ignored while a previous
        send is still in flight.
        """
        text = self.input.strip()
        if not text or self.loading:
            return None

        self.turns.append(ChatTurn(role="user", content=text))
        self.input = ""
        self.loading = True
        self.error = None

        try:
            async with self._client() as client:
                response = await client.post(
                    self.api_url("/api/chat"),
                    json={"message": text, "model": self.model},
                )

            if not response.is_success:
                body = _json_or_empty(response)
                self.error = (
                    body.get("message")
                    or body.get("error")
                    or f"Server error: {response.status_code} {response.reason_phrase}"
                )
                return None

            data = _json_or_empty(response)
            if data.get("success") and data.get("response"):
                reply = ChatTurn(role="assistant", content=data["response"])
                self.turns.append(reply)
                return reply

            self.error = data.get("error") or data.get("message") or "Failed to get response"
            return None

        except httpx.RequestError:
            self.error = connectivity_error(self.api_base_url)
            return None
        finally:
            self.loading = False

    def clear(self) -> None:
        """Forget the conversation. A send already in flight still completes."""
        self.turns = []
        self.error = None

    async def available_models(self) -> list[str]:
        """Model names from the proxy, or the fallback list if it can't say."""
        try:
            async with self._client() as client:
                response = await client.get(self.api_url("/api/models"))
        except httpx.RequestError:
            return list(FALLBACK_MODELS)

        body = _json_or_empty(response)
        names = [m.get("name") for m in body.get("models") or [] if m.get("name")]
        if not response.is_success or not names:
            return list(FALLBACK_MODELS)
        return names

"""
Tests for the client-side chat session.

Run with: pytest tests/test_session.py -v
"""

import asyncio
import json

import httpx

from chatproxy.client import ChatSession
from chatproxy.config import FALLBACK_MODELS
from chatproxy.models.schemas import ChatTurn

BASE_URL = "http://192.168.1.20:3000"


def session_with(handler, **kwargs) -> ChatSession:
    return ChatSession(api_base_url=BASE_URL, transport=httpx.MockTransport(handler), **kwargs)


def ok_reply(text="Hi!"):
    return httpx.Response(200, json={"success": True, "model": "llama3.1", "response": text})


def test_send_appends_both_turns():
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["body"] = json.loads(request.content)
        return ok_reply("Hello there")

    session = session_with(handler, model="mistral")
    session.input = "  hi  "

    reply = asyncio.run(session.send())

    assert seen["url"] == f"{BASE_URL}/api/chat"
    assert seen["body"] == {"message": "hi", "model": "mistral"}
    assert reply == ChatTurn(role="assistant", content="Hello there")
    assert session.turns == [
        ChatTurn(role="user", content="hi"),
        ChatTurn(role="assistant", content="Hello there"),
    ]
    assert session.input == ""
    assert session.loading is False
    assert session.error is None


def test_blank_input_ignored():
    def handler(request):
        raise AssertionError("should not be called")

    session = session_with(handler)
    session.input = "   "

    assert asyncio.run(session.send()) is None
    assert session.turns == []


def test_send_ignored_while_loading():
    def handler(request):
        raise AssertionError("should not be called")

    session = session_with(handler)
    session.input = "hi"
    session.loading = True

    assert asyncio.run(session.send()) is None
    assert session.turns == []
    assert session.input == "hi"


def test_error_status_uses_message():
    def handler(request):
        return httpx.Response(404, json={"success": False, "error": "Model not found", "message": "model x not found"})

    session = session_with(handler)
    session.input = "hi"

    assert asyncio.run(session.send()) is None
    assert session.error == "model x not found"
    assert session.turns == [ChatTurn(role="user", content="hi")]
    assert session.loading is False


def test_error_status_falls_back_to_error_field():
    session = session_with(lambda request: httpx.Response(400, json={"success": False, "error": "Missing"}))
    session.input = "hi"

    asyncio.run(session.send())

    assert session.error == "Missing"


def test_error_status_without_body():
    session = session_with(lambda request: httpx.Response(502, text="Bad gateway"))
    session.input = "hi"

    asyncio.run(session.send())

    assert session.error == "Server error: 502 Bad Gateway"


def test_success_without_response():
    session = session_with(lambda request: httpx.Response(200, json={"success": True, "response": ""}))
    session.input = "hi"

    asyncio.run(session.send())

    assert session.error == "Failed to get response"
    assert len(session.turns) == 1


def test_network_failure():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    session = session_with(handler)
    session.input = "hi"

    assert asyncio.run(session.send()) is None
    assert f"Cannot connect to API server at {BASE_URL}" in session.error
    assert "Server is not running" in session.error
    assert "CORS" in session.error
    assert "Firewall" in session.error
    assert session.loading is False


def test_new_send_clears_previous_error():
    replies = iter([httpx.Response(500, json={"message": "boom"}), ok_reply()])
    session = session_with(lambda request: next(replies))

    session.input = "first"
    asyncio.run(session.send())
    assert session.error == "boom"

    session.input = "second"
    asyncio.run(session.send())
    assert session.error is None


def test_clear():
    session = session_with(lambda request: ok_reply())
    session.input = "hi"
    asyncio.run(session.send())
    session.error = "stale"

    session.clear()

    assert session.turns == []
    assert session.error is None


def test_api_url_joins_cleanly():
    session = ChatSession(api_base_url="http://localhost:3000/")
    assert session.api_url("/api/chat") == "http://localhost:3000/api/chat"
    assert session.api_url("api/models") == "http://localhost:3000/api/models"


def test_available_models():
    reply = {"success": True, "models": [{"name": "llama3.1:latest"}, {"name": "mistral:latest"}]}
    session = session_with(lambda request: httpx.Response(200, json=reply))

    assert asyncio.run(session.available_models()) == ["llama3.1:latest", "mistral:latest"]


def test_available_models_fallback():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    assert asyncio.run(session_with(handler).available_models()) == FALLBACK_MODELS
    failing = session_with(lambda request: httpx.Response(500, json={"success": False}))
    assert asyncio.run(failing.available_models()) == FALLBACK_MODELS

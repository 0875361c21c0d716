"""
Tests for classifying Ollama failures by message text.

Run with: pytest tests/test_error_kinds.py -v
"""

import pytest

from chatproxy.services.error_kinds import ErrorKind, classify_error


@pytest.mark.parametrize(
    "message",
    [
        "connect ECONNREFUSED 127.0.0.1:11434",
        "ECONNREFUSED",
        "TypeError: fetch failed",
        "Failed to connect to Ollama at http://localhost:11434: [Errno 111] Connection refused",
        # Connection keywords win even when the model is mentioned
        "could not connect while loading model llama3.1",
    ],
)
def test_unavailable(message):
    assert classify_error(message) is ErrorKind.UNAVAILABLE


@pytest.mark.parametrize(
    "message",
    [
        'model "llama9" not found, try pulling it first',
        "model is required",
        # Known weakness: unrelated text mentioning "model" is still not-found
        "failed to load model weights: out of memory",
    ],
)
def test_model_not_found(message):
    assert classify_error(message) is ErrorKind.MODEL_NOT_FOUND


@pytest.mark.parametrize("message", ["out of memory", "", "Model crashed", "Connection reset"])
def test_everything_else_is_upstream(message):
    # Matching is case-sensitive
    assert classify_error(message) is ErrorKind.UPSTREAM


def test_kinds_carry_status_and_label():
    assert (ErrorKind.UNAVAILABLE.status_code, ErrorKind.UNAVAILABLE.label) == (503, "Ollama service unavailable")
    assert (ErrorKind.MODEL_NOT_FOUND.status_code, ErrorKind.MODEL_NOT_FOUND.label) == (404, "Model not found")
    assert (ErrorKind.UPSTREAM.status_code, ErrorKind.UPSTREAM.label) == (500, "Error calling Ollama")
    assert ErrorKind.VALIDATION.status_code == 400
    assert ErrorKind.ROUTE_NOT_FOUND.label == "Not found"
    assert ErrorKind.INTERNAL.label == "Internal server error"

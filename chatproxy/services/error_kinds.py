from enum import Enum

# Substrings of an upstream error message that mean Ollama couldn't be reached
CONNECTION_MARKERS = ("connect", "ECONNREFUSED", "fetch failed")


class ErrorKind(Enum):
    """Coarse failure category, carrying the HTTP status and label it maps to."""

    VALIDATION = (400, "Missing required field: message or messages")
    UNAVAILABLE = (503, "Ollama service unavailable")
    MODEL_NOT_FOUND = (404, "Model not found")
    UPSTREAM = (500, "Error calling Ollama")
    ROUTE_NOT_FOUND = (404, "Not found")
    INTERNAL = (500, "Internal server error")

    def __init__(self, status_code: int, label: str):
        self.status_code = status_code
        self.label = label


def classify_error(message: str) -> ErrorKind:
    """
    Classify an Ollama failure by its message text.

    Connection problems win over everything else; any other message that
    mentions "model" is treated as an unknown model, even when the failure
    is unrelated.
    """
    if any(marker in message for marker in CONNECTION_MARKERS):
        return ErrorKind.UNAVAILABLE
    if "model" in message:
        return ErrorKind.MODEL_NOT_FOUND
    return ErrorKind.UPSTREAM

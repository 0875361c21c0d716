from .cors import CORSHeadersMiddleware
from .errors import ErrorHandlerMiddleware
from .request_logging import RequestLoggingMiddleware

__all__ = ["CORSHeadersMiddleware", "ErrorHandlerMiddleware", "RequestLoggingMiddleware"]

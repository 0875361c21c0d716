from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Authorization", "X-Requested-With", "X-Request-Id"]


class CORSHeadersMiddleware(BaseHTTPMiddleware):
    """
    Allow cross-origin calls from any origin.

    Every OPTIONS request is answered here with an empty 200, whether or not
    it is a real preflight, so it never reaches a route.
    """

    def __init__(
        self,
        app,
        allow_origin: str = "*",
        allow_methods: list[str] | None = None,
        allow_headers: list[str] | None = None,
    ):
        super().__init__(app)
        self.cors_headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ", ".join(allow_methods or ALLOWED_METHODS),
            "Access-Control-Allow-Headers": ", ".join(allow_headers or ALLOWED_HEADERS),
        }

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)

        response.headers.update(self.cors_headers)
        return response

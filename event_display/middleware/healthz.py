"""Health check middleware."""

from starlette.responses import Response
from starlette.types import ASGIApp, Receive, Scope, Send

# HTTP path of the health endpoint used for probing the service.
HEALTHZ_PATH = "/healthz"


def request_target(scope: Scope) -> str:
    """Return the raw request target: the undecoded path plus query string."""
    raw_path = scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = scope.get("path", "")
    query = scope.get("query_string", b"")
    if query:
        return f"{path}?{query.decode('latin-1')}"
    return path


class HealthzMiddleware:
    """Answer health checks on the health path with 204 before any other middleware runs."""

    def __init__(self, app: ASGIApp, path: str = HEALTHZ_PATH):
        self.app = app
        self.path = path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and request_target(scope) == self.path:
            response = Response(status_code=204)
            await response(scope, receive, send)
            return
        await self.app(scope, receive, send)

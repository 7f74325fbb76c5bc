"""Request logging middleware.

Not recommended for production: request bodies may contain sensitive data.
"""

import logging

from starlette.middleware import Middleware
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..models import LoggableRequest
from .healthz import request_target

# Headers Go-style servers lift out of the header map into dedicated fields.
_LIFTED_HEADERS = ("host", "transfer-encoding")


class BodyReadError(Exception):
    """Raised when the client disconnects before the body was fully read."""

    def __init__(self, partial: bytes):
        super().__init__(f"client disconnected after {len(partial)} body bytes")
        self.partial = partial


def canonical_header_name(name: str) -> str:
    """Canonicalize a header name: ``content-type`` -> ``Content-Type``."""
    return "-".join(part.capitalize() for part in name.split("-"))


async def read_body(receive: Receive) -> bytes:
    """
    Drain all ``http.request`` messages into memory.

    Raises:
        BodyReadError: If the client disconnects first.
    """
    chunks: list[bytes] = []
    while True:
        message = await receive()
        if message["type"] == "http.disconnect":
            raise BodyReadError(b"".join(chunks))
        chunks.append(message.get("body", b""))
        if not message.get("more_body", False):
            return b"".join(chunks)


def replay_receive(body: bytes, receive: Receive) -> Receive:
    """
    Return a receive callable that yields ``body`` once, then defers to ``receive``.

    Disconnect notifications from the original channel still reach the app
    after the buffered body has been consumed.
    """
    replayed = False

    async def replay() -> Message:
        nonlocal replayed
        if not replayed:
            replayed = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return replay


def to_loggable_request(scope: Scope, body: bytes) -> LoggableRequest:
    """Capture a snapshot of the request described by an ASGI scope."""
    headers: dict[str, list[str]] = {}
    lifted: dict[str, list[str]] = {}
    for raw_name, raw_value in scope.get("headers", []):
        name = raw_name.decode("latin-1").lower()
        value = raw_value.decode("latin-1")
        target = lifted if name in _LIFTED_HEADERS else headers
        target.setdefault(canonical_header_name(name), []).append(value)

    transfer_encoding = [
        encoding.strip().lower()
        for value in lifted.get("Transfer-Encoding", [])
        for encoding in value.split(",")
        if encoding.strip()
    ]
    content_length = _content_length(headers, transfer_encoding, body)

    trailer = {
        canonical_header_name(name.strip()): []
        for value in headers.get("Trailer", [])
        for name in value.split(",")
        if name.strip()
    }

    http_version = scope.get("http_version", "1.1")
    major, _, minor = http_version.partition(".")
    client = scope.get("client")
    target = request_target(scope)

    return LoggableRequest(
        method=scope.get("method", ""),
        url=target,
        proto=f"HTTP/{http_version}",
        proto_major=int(major or 0),
        proto_minor=int(minor or 0),
        headers=headers,
        body=body.decode("utf-8", errors="replace"),
        content_length=content_length,
        transfer_encoding=transfer_encoding,
        host=(lifted.get("Host") or [""])[0],
        trailer=trailer,
        remote_addr=f"{client[0]}:{client[1]}" if client else "",
        request_uri=target,
    )


def _content_length(
    headers: dict[str, list[str]], transfer_encoding: list[str], body: bytes
) -> int:
    """Declared Content-Length; -1 when unknown (chunked), 0 when there is no body."""
    declared = headers.get("Content-Length")
    if declared:
        try:
            return int(declared[0])
        except ValueError:
            pass
    if transfer_encoding or body:
        return -1
    return 0


class RequestLoggingMiddleware:
    """Log a snapshot of every request, then hand the app an unread copy of the body."""

    def __init__(self, app: ASGIApp, logger: logging.Logger):
        self.app = app
        self.logger = logger

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        try:
            body = await read_body(receive)
        except BodyReadError as exc:
            self.logger.warning("failed to read request body: %s", exc)
            body = exc.partial

        self.log_request(scope, body)
        await self.app(scope, replay_receive(body, receive), send)

    def log_request(self, scope: Scope, body: bytes) -> None:
        """Serialize the request snapshot and log it."""
        try:
            rendered = to_loggable_request(scope, body).render()
        except (TypeError, ValueError) as exc:
            self.logger.warning("failed to marshal request: %s", exc)
            return
        self.logger.info(rendered)


def request_logging_middleware(
    enabled: bool, logger: logging.Logger
) -> Middleware | None:
    """Return the request logging middleware, or None when disabled."""
    if not enabled:
        return None
    return Middleware(RequestLoggingMiddleware, logger=logger)

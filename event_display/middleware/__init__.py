"""Receiver middleware."""

from .chain import build_middleware, compose
from .healthz import HEALTHZ_PATH, HealthzMiddleware, request_target
from .request_logging import (
    RequestLoggingMiddleware,
    request_logging_middleware,
    to_loggable_request,
)

__all__ = [
    "HEALTHZ_PATH",
    "HealthzMiddleware",
    "RequestLoggingMiddleware",
    "build_middleware",
    "compose",
    "request_logging_middleware",
    "request_target",
    "to_loggable_request",
]

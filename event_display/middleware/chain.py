"""Ordered middleware composition."""

import logging
from collections.abc import Sequence

from starlette.middleware import Middleware
from starlette.types import ASGIApp

from .healthz import HealthzMiddleware
from .request_logging import request_logging_middleware


def build_middleware(
    logger: logging.Logger, request_logging_enabled: bool
) -> list[Middleware]:
    """
    Build the receiver's middleware list, outermost first.

    The health filter always comes first so health checks never pay for request
    logging. The request logger is left out entirely when disabled.
    """
    middleware = [Middleware(HealthzMiddleware)]
    logging_middleware = request_logging_middleware(request_logging_enabled, logger)
    if logging_middleware is not None:
        middleware.append(logging_middleware)
    return middleware


def compose(app: ASGIApp, middleware: Sequence[Middleware]) -> ASGIApp:
    """Wrap app so that middleware[0] is the outermost layer."""
    for entry in reversed(middleware):
        app = entry.cls(app, *entry.args, **entry.kwargs)
    return app

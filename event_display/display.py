"""Rendering of received events to the log stream."""

import logging
from typing import Callable

from .models import CloudEvent

EventHandler = Callable[[CloudEvent], None]

LINE_FORMAT = '{"data": %s, "type": %s, "extensions": %s}'


def display(event: CloudEvent, logger: logging.Logger) -> None:
    """
    Log the event's data, type and extensions as a single line.

    Data is echoed verbatim. If the extensions cannot be serialized the
    line is still logged, with nothing in their place.
    """
    try:
        extensions = event.extensions_json()
    except (TypeError, ValueError) as exc:
        logger.warning("Failed to serialize extensions of event %s: %s", event.id, exc)
        extensions = ""

    data = event.data.decode("utf-8", errors="replace") if event.data else ""
    logger.info(LINE_FORMAT, data, event.type, extensions)


def make_display(logger: logging.Logger) -> EventHandler:
    """Bind display to a logger, producing a receiver handler."""

    def handler(event: CloudEvent) -> None:
        display(event, logger)

    return handler

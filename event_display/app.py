"""Application bootstrap and lifecycle management."""

import asyncio
import logging
import signal
from typing import Protocol

from .config import Settings
from .receiver import EventReceiver
from .tracing import read_tracing_config, setup_publishing

REQUEST_LOGGING_WARNING = (
    "Request logging enabled, request logging is not recommended for production "
    "since it might log sensitive information"
)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def run(self, cancel: asyncio.Event) -> None:
        """Serve events until cancel is set."""
        ...


class Application:
    """Wires tracing and the receiver together for one process lifetime."""

    def __init__(self, settings: Settings, logger: logging.Logger):
        self._settings = settings
        self._logger = logger
        self._receiver: EventReceiver | None = None

    async def run(self, cancel: asyncio.Event) -> None:
        """
        Serve events until cancel is set.

        The tracer is shut down on every exit path, including failures
        while building or running the receiver.

        Raises:
            TracingSetupError: If the tracer cannot be constructed.
            ReceiverError: If the listener fails at runtime.
        """
        if self._settings.request_logging_enabled:
            self._logger.info(REQUEST_LOGGING_WARNING)

        tracing_config = read_tracing_config(self._settings.tracing_config, self._logger)
        with setup_publishing(tracing_config, self._settings.service_name) as tracer:
            self._receiver = EventReceiver(self._settings, self._logger, tracer=tracer)
            await self._receiver.start(cancel)

    @property
    def receiver(self) -> EventReceiver:
        """Get receiver instance."""
        if not self._receiver:
            raise RuntimeError("Application not started")
        return self._receiver


async def serve_until_signalled(settings: Settings, logger: logging.Logger) -> None:
    """Run the application, cancelling it on SIGINT or SIGTERM."""
    cancel = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, cancel.set)
    try:
        app: IApplication = Application(settings, logger)
        await app.run(cancel)
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)

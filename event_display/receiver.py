"""HTTP receiver turning requests into CloudEvents for a handler."""

import asyncio
import contextlib
import logging
from collections.abc import Iterator

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse
from opentelemetry import propagate, trace
from opentelemetry.trace import SpanKind, Tracer

from .codec import decode_event
from .config import Settings
from .display import EventHandler, make_display
from .exceptions import EventDecodeError, ReceiverError
from .middleware import build_middleware

RECEIVE_SPAN_NAME = "cloudevents.receive"


class _Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to the caller."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        yield

    def install_signal_handlers(self) -> None:
        return


class EventReceiver:
    """Owns the HTTP listener and dispatches decoded events to a handler."""

    def __init__(
        self,
        settings: Settings,
        logger: logging.Logger,
        tracer: Tracer | None = None,
        handler: EventHandler | None = None,
    ):
        self._settings = settings
        self._logger = logger
        self._tracer = tracer or trace.NoOpTracer()
        self._handler = handler or make_display(logger)
        self.app = self._create_app()

    def _create_app(self) -> FastAPI:
        """Create the FastAPI app with the middleware chain and the event route."""
        app = FastAPI(
            title="Event Display",
            description="Logs received CloudEvents",
            middleware=build_middleware(
                self._logger, self._settings.request_logging_enabled
            ),
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )

        @app.post("/{path:path}")
        async def receive_event(request: Request) -> Response:
            """Decode the request into an event and hand it to the handler."""
            body = await request.body()
            try:
                event = decode_event(request.headers, body)
            except EventDecodeError as e:
                self._logger.debug("Rejected malformed event: %s", e)
                return PlainTextResponse(str(e), status_code=400)

            try:
                with self._tracer.start_as_current_span(
                    RECEIVE_SPAN_NAME,
                    context=propagate.extract(request.headers),
                    kind=SpanKind.SERVER,
                    attributes={
                        "cloudevents.id": event.id,
                        "cloudevents.source": event.source,
                        "cloudevents.type": event.type,
                        "cloudevents.specversion": event.specversion,
                    },
                ):
                    self._handler(event)
            except Exception as e:
                self._logger.error("Error handling event %s: %s", event.id, e)
                raise HTTPException(status_code=500, detail=str(e))

            return Response(status_code=200)

        return app

    async def start(self, cancel: asyncio.Event) -> None:
        """
        Serve until cancel is set.

        Raises:
            ReceiverError: If the listener stops on its own (bind failure,
                server crash) instead of being cancelled.
        """
        config = uvicorn.Config(
            self.app,
            host=self._settings.host,
            port=self._settings.port,
            log_level="warning",
            access_log=False,
            lifespan="off",
        )
        server = _Server(config)
        serve_task = asyncio.create_task(self._serve(server))
        cancel_task = asyncio.create_task(cancel.wait())
        try:
            await asyncio.wait(
                {serve_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
            if cancel.is_set():
                server.should_exit = True
            await serve_task
        finally:
            cancel_task.cancel()

        if not cancel.is_set():
            raise ReceiverError("Error during receiver's runtime: listener stopped unexpectedly")

    @staticmethod
    async def _serve(server: uvicorn.Server) -> None:
        # uvicorn exits the interpreter when it cannot bind.
        try:
            await server.serve()
        except SystemExit as e:
            raise ReceiverError(
                f"Error during receiver's runtime: listener exited with status {e.code}"
            ) from e

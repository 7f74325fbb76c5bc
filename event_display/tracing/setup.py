"""Tracer construction and shutdown."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from urllib.parse import urlparse

from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.zipkin.json import ZipkinExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON, ParentBased, Sampler, TraceIdRatioBased
from opentelemetry.trace import Tracer

from ..exceptions import TracingConfigError, TracingSetupError
from .config import TracingBackend, TracingConfig, json_to_tracing_config

INSTRUMENTATION_NAME = "event_display"


def read_tracing_config(raw: str, logger: logging.Logger) -> TracingConfig:
    """Parse K_CONFIG_TRACING, falling back to the no-op config with a warning."""
    try:
        return json_to_tracing_config(raw)
    except TracingConfigError as exc:
        logger.warning("Failed to read tracing config, using the no-op default: %s", exc)
        return TracingConfig.noop()


def build_sampler(config: TracingConfig) -> Sampler:
    """Sample everything in debug mode, otherwise by trace id ratio."""
    if config.debug:
        return ALWAYS_ON
    return ParentBased(TraceIdRatioBased(config.sample_rate))


def build_exporter(config: TracingConfig) -> SpanExporter | None:
    """
    Create the span exporter for the configured backend.

    Raises:
        TracingSetupError: If the backend's endpoint is not an http(s) URL.
    """
    if config.backend is TracingBackend.ZIPKIN:
        return ZipkinExporter(endpoint=_require_http_url(config.zipkin_endpoint))
    if config.backend is TracingBackend.OTLP:
        return OTLPSpanExporter(endpoint=_require_http_url(config.otlp_endpoint))
    return None


def _require_http_url(endpoint: str) -> str:
    parsed = urlparse(endpoint)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise TracingSetupError(f"invalid exporter endpoint: {endpoint!r}")
    return endpoint


@contextmanager
def setup_publishing(config: TracingConfig, service_name: str) -> Iterator[Tracer]:
    """
    Yield a tracer publishing to the configured backend.

    The provider is shut down, flushing pending spans, exactly once when
    the block exits, however it exits.

    Raises:
        TracingSetupError: If the tracer cannot be constructed.
    """
    try:
        provider = TracerProvider(
            resource=Resource.create({SERVICE_NAME: service_name}),
            sampler=build_sampler(config),
            shutdown_on_exit=False,
        )
        exporter = build_exporter(config)
    except (ValueError, TracingSetupError) as exc:
        raise TracingSetupError(f"Failed to initialize tracing: {exc}") from exc

    if exporter is not None:
        provider.add_span_processor(BatchSpanProcessor(exporter))

    try:
        yield provider.get_tracer(INSTRUMENTATION_NAME)
    finally:
        provider.shutdown()

"""Tracing module."""

from .config import TracingBackend, TracingConfig, json_to_tracing_config
from .setup import read_tracing_config, setup_publishing

__all__ = [
    "TracingBackend",
    "TracingConfig",
    "json_to_tracing_config",
    "read_tracing_config",
    "setup_publishing",
]

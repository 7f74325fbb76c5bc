"""Data models for the event display service."""

from .event import CONTEXT_ATTRIBUTES, SUPPORTED_SPEC_VERSIONS, CloudEvent, ExtensionValue
from .request import LoggableRequest

__all__ = [
    # Events
    "CloudEvent",
    "ExtensionValue",
    "CONTEXT_ATTRIBUTES",
    "SUPPORTED_SPEC_VERSIONS",
    # Request logging
    "LoggableRequest",
]

"""Exceptions raised by the event display service.

Per-request errors (the sender gets an error response):
    - EventDecodeError: the request is not a valid CloudEvent

Non-fatal startup errors (a default is substituted):
    - TracingConfigError: K_CONFIG_TRACING could not be parsed

Fatal errors (the process exits):
    - TracingSetupError: the tracer could not be constructed
    - ReceiverError: the HTTP listener stopped unexpectedly
"""


class EventDisplayError(Exception):
    """Base class for all event display errors."""


class EventDecodeError(EventDisplayError):
    """Raised when inbound bytes cannot be decoded into a CloudEvent."""


class TracingConfigError(EventDisplayError):
    """Raised when the tracing configuration cannot be parsed."""


class TracingSetupError(EventDisplayError):
    """Raised when the tracer cannot be constructed from its configuration."""


class ReceiverError(EventDisplayError):
    """Raised when the receiver's listener fails during its runtime."""

"""Event display: a diagnostic CloudEvents receiver."""

from .app import Application, IApplication
from .codec import decode_event
from .config import Settings
from .display import display, make_display
from .exceptions import (
    EventDecodeError,
    EventDisplayError,
    ReceiverError,
    TracingConfigError,
    TracingSetupError,
)
from .models import CloudEvent, ExtensionValue, LoggableRequest
from .receiver import EventReceiver

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "CloudEvent",
    "ExtensionValue",
    "LoggableRequest",
    # Components
    "EventReceiver",
    "decode_event",
    "display",
    "make_display",
    # Errors
    "EventDisplayError",
    "EventDecodeError",
    "TracingConfigError",
    "TracingSetupError",
    "ReceiverError",
]

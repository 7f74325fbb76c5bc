"""Process configuration read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

DEFAULT_LOG_PATH = Path("/var/log/app.log")
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_SERVICE_NAME = "event-display"

PathLike = Union[str, Path]

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(value: str) -> bool:
    """Parse a boolean the way Kubernetes manifests usually spell them.

    Raises:
        ValueError: If the value is not one of the accepted spellings.
    """
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def env_bool(key: str, fallback: bool = False) -> bool:
    """Read a boolean env var, falling back on missing or invalid values."""
    try:
        return parse_bool(os.getenv(key, ""))
    except ValueError:
        return fallback


def resolve_log_path(env_value: PathLike | None = None) -> Path:
    """Resolve LOG_FILE_PATH, defaulting to /var/log/app.log."""
    if not env_value:
        return DEFAULT_LOG_PATH
    return Path(env_value)


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the event display service."""

    log_file_path: Path = DEFAULT_LOG_PATH
    log_level: str = "INFO"
    log_format: str = "text"
    request_logging_enabled: bool = False
    tracing_config: str = ""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    service_name: str = DEFAULT_SERVICE_NAME

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ValueError: If PORT is not an integer.
        """
        return cls(
            log_file_path=resolve_log_path(os.getenv("LOG_FILE_PATH")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LOG_FORMAT", "text").lower(),
            request_logging_enabled=env_bool("REQUEST_LOGGING_ENABLED"),
            tracing_config=os.getenv("K_CONFIG_TRACING", ""),
            host=os.getenv("HOST", DEFAULT_HOST),
            port=int(os.getenv("PORT", str(DEFAULT_PORT))),
            service_name=os.getenv("SERVICE_NAME", DEFAULT_SERVICE_NAME),
        )

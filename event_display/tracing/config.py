"""Tracing configuration parsed from K_CONFIG_TRACING."""

import json
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..config import parse_bool
from ..exceptions import TracingConfigError


class TracingBackend(str, Enum):
    """Where finished spans are exported."""

    NONE = "none"
    ZIPKIN = "zipkin"
    OTLP = "otlp"


class TracingConfig(BaseModel):
    """Tracing exporter settings."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    backend: TracingBackend = TracingBackend.NONE
    zipkin_endpoint: str = Field("", alias="zipkin-endpoint")
    otlp_endpoint: str = Field("", alias="otlp-endpoint")
    debug: bool = False
    sample_rate: float = Field(0.1, alias="sample-rate", ge=0.0, le=1.0)

    @field_validator("debug", mode="before")
    @classmethod
    def parse_debug(cls, value: object) -> object:
        """Accept the same boolean spellings as the other env settings."""
        if isinstance(value, str):
            return parse_bool(value)
        return value

    @model_validator(mode="after")
    def check_endpoint(self) -> "TracingConfig":
        """A publishing backend needs somewhere to publish to."""
        if self.backend is TracingBackend.ZIPKIN and not self.zipkin_endpoint:
            raise ValueError("zipkin-endpoint is required for the zipkin backend")
        if self.backend is TracingBackend.OTLP and not self.otlp_endpoint:
            raise ValueError("otlp-endpoint is required for the otlp backend")
        return self

    @classmethod
    def noop(cls) -> "TracingConfig":
        """Configuration that records nothing and exports nowhere."""
        return cls()


def json_to_tracing_config(raw: str) -> TracingConfig:
    """
    Parse a JSON object of string values into a TracingConfig.

    Values that parse but do not validate yield the no-op config.

    Raises:
        TracingConfigError: If the input is empty, not JSON, or not an
            object of strings.
    """
    if not raw:
        raise TracingConfigError("empty json tracing config")
    try:
        values = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise TracingConfigError(f"invalid json tracing config: {exc}") from exc
    if not isinstance(values, dict):
        raise TracingConfigError("tracing config must be a JSON object")
    for key, value in values.items():
        if not isinstance(value, str):
            raise TracingConfigError(f"tracing config value for {key!r} must be a string")

    try:
        return TracingConfig.model_validate(values)
    except ValidationError:
        return TracingConfig.noop()

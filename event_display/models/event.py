"""CloudEvent envelope model."""

import base64
import json
import re
from datetime import datetime
from typing import Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictBytes,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

SUPPORTED_SPEC_VERSIONS = ("1.0", "0.3")

# Context attributes defined by the CloudEvents spec; anything else is an extension.
CONTEXT_ATTRIBUTES = frozenset(
    {
        "specversion",
        "id",
        "source",
        "type",
        "subject",
        "time",
        "datacontenttype",
        "dataschema",
    }
)

_EXTENSION_NAME = re.compile(r"^[a-z0-9]+$")

ExtensionValue = Union[StrictBool, StrictInt, StrictFloat, StrictStr, StrictBytes]


def _encode_extension(value: object) -> str:
    """JSON fallback for extension values json cannot encode natively."""
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    raise TypeError(f"unsupported extension value type: {type(value).__name__}")


class CloudEvent(BaseModel):
    """A decoded CloudEvent. Immutable once decoded."""

    model_config = ConfigDict(frozen=True)

    specversion: Literal["1.0", "0.3"]
    id: str = Field(min_length=1)
    source: str = Field(min_length=1)
    type: str = Field(min_length=1)
    subject: str | None = None
    time: datetime | None = None
    datacontenttype: str | None = None
    dataschema: str | None = None
    data: bytes | None = None
    extensions: dict[str, ExtensionValue] = Field(default_factory=dict)

    @field_validator("extensions")
    @classmethod
    def check_extension_names(
        cls, value: dict[str, ExtensionValue]
    ) -> dict[str, ExtensionValue]:
        """Extension names are lowercase alphanumerics and never shadow context attributes."""
        for name in value:
            if not _EXTENSION_NAME.match(name):
                raise ValueError(f"invalid extension name: {name!r}")
            if name in CONTEXT_ATTRIBUTES:
                raise ValueError(f"extension name {name!r} is a context attribute")
        return value

    def extensions_json(self) -> str:
        """
        Serialize the extension map as compact JSON with sorted keys.

        Bytes values are base64-encoded.

        Raises:
            ValueError: If a value has no JSON form (e.g. NaN).
            TypeError: If a value has an unsupported type.
        """
        return json.dumps(
            self.extensions,
            separators=(",", ":"),
            sort_keys=True,
            allow_nan=False,
            default=_encode_extension,
        )

"""Snapshot of an inbound HTTP request for request logging."""

import json

from pydantic import BaseModel, ConfigDict, Field

# Rendered even when empty.
ALWAYS_RENDERED = ("remoteAddr", "requestURI")


class LoggableRequest(BaseModel):
    """Request fields captured by the request logger."""

    model_config = ConfigDict(populate_by_name=True)

    method: str = ""
    url: str = Field("", alias="URL")
    proto: str = ""
    proto_major: int = Field(0, alias="protoMajor")
    proto_minor: int = Field(0, alias="protoMinor")
    headers: dict[str, list[str]] = Field(default_factory=dict)
    body: str = ""
    content_length: int = Field(0, alias="contentLength")
    transfer_encoding: list[str] = Field(default_factory=list, alias="transferEncoding")
    host: str = ""
    trailer: dict[str, list[str]] = Field(default_factory=dict)
    remote_addr: str = Field("", alias="remoteAddr")
    request_uri: str = Field("", alias="requestURI")

    def render(self) -> str:
        """Render as indented JSON, omitting empty fields."""
        fields = self.model_dump(by_alias=True)
        rendered = {
            key: value
            for key, value in fields.items()
            if value or key in ALWAYS_RENDERED
        }
        return json.dumps(rendered, indent=2)

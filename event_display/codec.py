"""Decoding of CloudEvents from the HTTP protocol binding.

Two content modes are understood:

* structured: the whole event is a JSON document sent with
  ``Content-Type: application/cloudevents+json``;
* binary: context attributes travel in ``ce-*`` headers and the body is the
  event data, typed by ``Content-Type``.

Batched events are rejected.
"""

import base64
import binascii
import json
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import unquote

from pydantic import ValidationError

from .exceptions import EventDecodeError
from .models import CONTEXT_ATTRIBUTES, SUPPORTED_SPEC_VERSIONS, CloudEvent

STRUCTURED_CONTENT_TYPE = "application/cloudevents+json"
BATCH_CONTENT_TYPE = "application/cloudevents-batch+json"
BINARY_HEADER_PREFIX = "ce-"

# Attribute names that only exist in the structured JSON format.
_JSON_ONLY_ATTRIBUTES = frozenset(
    {"data", "data_base64", "datacontentencoding", "schemaurl"}
)

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_DECODER = json.JSONDecoder()


def _media_type(content_type: str | None) -> str:
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def is_json_content_type(content_type: str | None) -> bool:
    """Whether data with this content type is carried as a JSON value."""
    media_type = _media_type(content_type)
    return (
        not media_type
        or media_type in ("application/json", "text/json")
        or media_type.endswith("+json")
    )


def decode_event(headers: Mapping[str, str], body: bytes) -> CloudEvent:
    """
    Decode an HTTP request into a CloudEvent.

    Args:
        headers: Request headers. Lookups are done on lowercased names.
        body: Raw request body.

    Returns:
        The decoded event.

    Raises:
        EventDecodeError: If the request is not a valid CloudEvent.
    """
    lowered = {name.lower(): value for name, value in headers.items()}
    media_type = _media_type(lowered.get("content-type"))

    if media_type == BATCH_CONTENT_TYPE:
        raise EventDecodeError("batched events are not supported")
    if media_type == STRUCTURED_CONTENT_TYPE:
        return decode_structured(body)
    if f"{BINARY_HEADER_PREFIX}specversion" in lowered:
        return decode_binary(lowered, body)
    raise EventDecodeError("unknown message encoding")


def decode_structured(body: bytes) -> CloudEvent:
    """Decode a structured-mode JSON event."""
    try:
        text = body.decode("utf-8")
        document = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise EventDecodeError(f"invalid JSON event: {exc}") from exc
    if not isinstance(document, dict):
        raise EventDecodeError("structured event must be a JSON object")
    raw_data = raw_members(text).get("data")

    specversion = _check_specversion(document.get("specversion"))
    attributes: dict[str, Any] = {}
    extensions: dict[str, Any] = {}
    for name, value in document.items():
        if name in _JSON_ONLY_ATTRIBUTES or value is None:
            continue
        if name in CONTEXT_ATTRIBUTES:
            attributes[name] = _check_string(name, value)
        elif isinstance(value, (dict, list)):
            raise EventDecodeError(f"extension {name!r} must be a scalar value")
        else:
            extensions[name] = value

    if specversion == "0.3" and document.get("schemaurl") is not None:
        attributes["dataschema"] = _check_string("schemaurl", document["schemaurl"])
    attributes["data"] = _structured_data(specversion, document, attributes, raw_data)
    return _build_event(attributes, extensions)


def raw_members(text: str) -> dict[str, str]:
    """
    Map each member of a top-level JSON object to its value's source text.

    The input must already be known to be a valid JSON object. Later
    duplicates win, as with json.loads.
    """
    members: dict[str, str] = {}
    pos = _WHITESPACE.match(text, 0).end() + 1  # past "{"
    pos = _WHITESPACE.match(text, pos).end()
    if text[pos] == "}":
        return members
    while True:
        name, pos = _DECODER.raw_decode(text, pos)
        pos = _WHITESPACE.match(text, pos).end() + 1  # past ":"
        start = _WHITESPACE.match(text, pos).end()
        _, end = _DECODER.raw_decode(text, start)
        members[name] = text[start:end]
        pos = _WHITESPACE.match(text, end).end()
        if text[pos] == "}":
            return members
        pos = _WHITESPACE.match(text, pos + 1).end()  # past ","


def decode_binary(headers: Mapping[str, str], body: bytes) -> CloudEvent:
    """Decode a binary-mode event from lowercased headers and the body."""
    specversion = _check_specversion(headers.get(f"{BINARY_HEADER_PREFIX}specversion"))
    attributes: dict[str, Any] = {}
    extensions: dict[str, Any] = {}
    for name, value in headers.items():
        if not name.startswith(BINARY_HEADER_PREFIX):
            continue
        attribute = name[len(BINARY_HEADER_PREFIX):]
        value = unquote(value)
        if specversion == "0.3" and attribute == "schemaurl":
            attributes["dataschema"] = value
        elif attribute in CONTEXT_ATTRIBUTES:
            attributes[attribute] = value
        elif attribute in _JSON_ONLY_ATTRIBUTES:
            raise EventDecodeError(f"attribute {attribute!r} is not allowed in a header")
        else:
            extensions[attribute] = value

    if "content-type" in headers:
        attributes["datacontenttype"] = headers["content-type"]
    attributes["data"] = body or None
    return _build_event(attributes, extensions)


def _check_specversion(value: Any) -> str:
    if value is None or value == "":
        raise EventDecodeError("specversion: missing required attribute")
    if value not in SUPPORTED_SPEC_VERSIONS:
        raise EventDecodeError(f"specversion: unsupported version {value!r}")
    return value


def _check_string(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise EventDecodeError(f"{name}: expected a string, got {type(value).__name__}")
    return value


def _structured_data(
    specversion: str,
    document: dict[str, Any],
    attributes: dict[str, Any],
    raw_data: str | None,
) -> bytes | None:
    """Extract the encoded data of a structured event.

    JSON data is kept exactly as it appeared in the document.
    """
    if specversion == "1.0" and document.get("data_base64") is not None:
        if "data" in document:
            raise EventDecodeError("data and data_base64 are mutually exclusive")
        return _b64decode(document["data_base64"])

    data = document.get("data")
    if data is None:
        return None
    if specversion == "0.3" and document.get("datacontentencoding") == "base64":
        return _b64decode(data)
    if isinstance(data, str) and not is_json_content_type(
        attributes.get("datacontenttype")
    ):
        return data.encode("utf-8")
    return raw_data.encode("utf-8")


def _b64decode(value: Any) -> bytes:
    if not isinstance(value, str):
        raise EventDecodeError("base64 data must be a string")
    try:
        return base64.b64decode(value, validate=True)
    except binascii.Error as exc:
        raise EventDecodeError(f"invalid base64 data: {exc}") from exc


def _build_event(attributes: dict[str, Any], extensions: dict[str, Any]) -> CloudEvent:
    try:
        return CloudEvent(**attributes, extensions=extensions)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'event'}: {error['msg']}"
            for error in exc.errors()
        )
        raise EventDecodeError(problems) from exc

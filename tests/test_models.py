"""Tests for data models."""

import json
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from event_display.models import CloudEvent, LoggableRequest


def make_event(**overrides) -> CloudEvent:
    fields = {
        "specversion": "1.0",
        "id": "evt-1",
        "source": "/samples",
        "type": "sample.created",
    }
    fields.update(overrides)
    return CloudEvent(**fields)


class TestCloudEvent:
    """Tests for CloudEvent model."""

    def test_create_minimal_event(self):
        """Test creating an event with only required attributes."""
        event = make_event()
        assert event.type == "sample.created"
        assert event.time is None
        assert event.data is None
        assert event.extensions == {}

    def test_parses_time(self):
        """Test RFC 3339 time parsing."""
        event = make_event(time="2019-10-18T15:23:20Z")
        assert event.time == datetime(2019, 10, 18, 15, 23, 20, tzinfo=timezone.utc)

    def test_is_immutable(self):
        """Test that a decoded event cannot be changed."""
        event = make_event()
        with pytest.raises(ValidationError):
            event.type = "other"

    @pytest.mark.parametrize("missing", ["specversion", "id", "source", "type"])
    def test_required_attributes(self, missing):
        """Test that each required attribute is enforced."""
        fields = {
            "specversion": "1.0",
            "id": "evt-1",
            "source": "/samples",
            "type": "sample.created",
        }
        del fields[missing]
        with pytest.raises(ValidationError):
            CloudEvent(**fields)

    def test_empty_type_rejected(self):
        """Test that required attributes must be non-empty."""
        with pytest.raises(ValidationError):
            make_event(type="")

    def test_unknown_specversion_rejected(self):
        """Test that only known spec versions are accepted."""
        with pytest.raises(ValidationError):
            make_event(specversion="2.0")

    @pytest.mark.parametrize("name", ["Priority", "has-dash", "has_underscore", ""])
    def test_invalid_extension_names(self, name):
        """Test that extension names are lowercase alphanumerics."""
        with pytest.raises(ValidationError):
            make_event(extensions={name: "x"})

    def test_extension_cannot_shadow_context_attribute(self):
        """Test that an extension named like a context attribute is rejected."""
        with pytest.raises(ValidationError):
            make_event(extensions={"subject": "x"})

    def test_extension_values_keep_their_type(self):
        """Test that variant values are not coerced."""
        event = make_event(
            extensions={"flag": True, "count": 3, "ratio": 0.5, "name": "a", "raw": b"\x00"}
        )
        assert event.extensions["flag"] is True
        assert event.extensions["count"] == 3 and not isinstance(event.extensions["count"], bool)
        assert event.extensions["ratio"] == 0.5
        assert event.extensions["name"] == "a"
        assert event.extensions["raw"] == b"\x00"

    def test_extension_value_must_be_scalar(self):
        """Test that nested extension values are rejected."""
        with pytest.raises(ValidationError):
            make_event(extensions={"nested": {"a": 1}})


class TestExtensionsJson:
    """Tests for CloudEvent.extensions_json()."""

    def test_empty(self):
        """Test that no extensions serialize to an empty object."""
        assert make_event().extensions_json() == "{}"

    def test_compact_and_sorted(self):
        """Test compact separators and sorted keys."""
        event = make_event(extensions={"the": 42, "heart": "yes", "beats": True})
        assert event.extensions_json() == '{"beats":true,"heart":"yes","the":42}'

    def test_bytes_are_base64(self):
        """Test that bytes values serialize as base64 text."""
        event = make_event(extensions={"raw": b"hello"})
        assert json.loads(event.extensions_json()) == {"raw": "aGVsbG8="}

    def test_nan_is_not_serializable(self):
        """Test that values with no JSON form raise."""
        event = make_event(extensions={"ratio": float("nan")})
        with pytest.raises(ValueError):
            event.extensions_json()


class TestLoggableRequest:
    """Tests for LoggableRequest model."""

    def test_render_omits_empty_fields(self):
        """Test that empty and zero fields are left out."""
        request = LoggableRequest(method="POST", proto="HTTP/1.1", proto_major=1)
        rendered = json.loads(request.render())
        assert rendered == {
            "method": "POST",
            "proto": "HTTP/1.1",
            "protoMajor": 1,
            "remoteAddr": "",
            "requestURI": "",
        }

    def test_render_uses_wire_names(self):
        """Test the rendered key names."""
        request = LoggableRequest(
            method="POST",
            url="/?a=1",
            headers={"Content-Type": ["application/json"]},
            body='{"id": 2}',
            content_length=9,
            transfer_encoding=["chunked"],
            host="example.com",
            remote_addr="10.0.0.1:5555",
            request_uri="/?a=1",
        )
        rendered = json.loads(request.render())
        assert rendered["URL"] == "/?a=1"
        assert rendered["headers"] == {"Content-Type": ["application/json"]}
        assert rendered["body"] == '{"id": 2}'
        assert rendered["contentLength"] == 9
        assert rendered["transferEncoding"] == ["chunked"]
        assert rendered["host"] == "example.com"
        assert rendered["remoteAddr"] == "10.0.0.1:5555"
        assert rendered["requestURI"] == "/?a=1"

    def test_render_is_indented(self):
        """Test that rendering is indented with two spaces."""
        rendered = LoggableRequest(method="GET").render()
        assert rendered.startswith('{\n  "method": "GET"')

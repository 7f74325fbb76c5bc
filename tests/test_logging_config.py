"""Tests for the log sink."""

import json
import logging
from dataclasses import replace

import pytest

from event_display.logging_config import JSONFormatter, build_formatter, open_log_sink


class TestBuildFormatter:
    """Tests for build_formatter."""

    def test_text_is_message_only(self):
        """Test that text lines carry no timestamp or level."""
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "hello %s", ("world",), None)
        assert build_formatter("text").format(record) == "hello world"

    def test_json(self):
        """Test JSON format."""
        formatter = build_formatter("json")
        assert isinstance(formatter, JSONFormatter)

        record = logging.LogRecord("x", logging.WARNING, __file__, 7, "careful", (), None)
        data = json.loads(formatter.format(record))
        assert data["level"] == "WARNING"
        assert data["logger"] == "x"
        assert data["message"] == "careful"
        assert data["line"] == 7


class TestOpenLogSink:
    """Tests for open_log_sink."""

    def test_writes_to_file_and_stdout(self, settings, capsys):
        """Test that every line goes to both destinations."""
        with open_log_sink(settings, name="test.sink.both") as logger:
            logger.info("first line")
            logger.info("second line")

        assert settings.log_file_path.read_text(encoding="utf-8") == "first line\nsecond line\n"
        assert capsys.readouterr().out == "first line\nsecond line\n"

    def test_appends_to_existing_file(self, settings):
        """Test that an existing log file is appended to."""
        settings.log_file_path.write_text("earlier\n", encoding="utf-8")

        with open_log_sink(settings, name="test.sink.append") as logger:
            logger.info("later")

        assert settings.log_file_path.read_text(encoding="utf-8") == "earlier\nlater\n"

    def test_creates_parent_directories(self, settings, tmp_path):
        """Test that missing parent directories are created."""
        nested = replace(settings, log_file_path=tmp_path / "a" / "b" / "app.log")

        with open_log_sink(nested, name="test.sink.nested") as logger:
            logger.info("hello")

        assert nested.log_file_path.exists()

    def test_does_not_propagate(self, settings, caplog):
        """Test that sink lines are not duplicated through the root logger."""
        with open_log_sink(settings, name="test.sink.isolated") as logger:
            logger.info("isolated")

        assert "isolated" not in caplog.text

    def test_handlers_closed_on_exit(self, settings):
        """Test that handlers are detached when the block exits."""
        with open_log_sink(settings, name="test.sink.closed") as logger:
            assert len(logger.handlers) == 2

        assert logger.handlers == []

    def test_handlers_closed_on_error(self, settings):
        """Test that handlers are detached when the block raises."""
        with pytest.raises(RuntimeError):
            with open_log_sink(settings, name="test.sink.error") as logger:
                raise RuntimeError("boom")

        assert logger.handlers == []

    def test_unopenable_file_raises(self, settings, tmp_path):
        """Test that a log path which is a directory fails to open."""
        directory = tmp_path / "not-a-file"
        directory.mkdir()

        with pytest.raises(OSError):
            with open_log_sink(replace(settings, log_file_path=directory)):
                pass

    def test_level_filters(self, settings):
        """Test that the configured level applies."""
        quiet = replace(settings, log_level="WARNING")

        with open_log_sink(quiet, name="test.sink.level") as logger:
            logger.info("dropped")
            logger.warning("kept")

        assert quiet.log_file_path.read_text(encoding="utf-8") == "kept\n"

"""Tests for structured logging."""

import json

import pytest

from techspec.errors import InvalidConfigError
from techspec.logging import LogContext, bind_context, clear_context, configure_logging, get_logger


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_format=True)

        get_logger("techspec.test").info("section_rendered", section="risk")

        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["event"] == "section_rendered"
        assert record["section"] == "risk"
        assert record["level"] == "info"
        assert record["service"] == "techspec"
        assert record["logger_name"] == "techspec.test"
        assert "timestamp" in record

    def test_level_filtering(self, capsys):
        configure_logging(level="WARNING", json_format=True)

        get_logger().info("hidden")

        assert capsys.readouterr().err == ""

    def test_unknown_level(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            configure_logging(level="LOUD")

        assert exc_info.value.key == "log_level"

    def test_module_logger_follows_later_configuration(self, capsys):
        """Test that loggers created at import time use the current configuration."""
        from techspec.converter.converter import MarkupConverter

        configure_logging(level="WARNING", json_format=True)
        MarkupConverter().convert("```\ncode\n")

        captured = capsys.readouterr()
        record = json.loads(captured.err.strip().splitlines()[-1])
        assert record["event"] == "unclosed_code_fence"
        assert record["logger_name"] == "techspec.converter.converter"
        assert captured.out == ""


class TestLogContext:
    """Tests for bound context."""

    def test_scoped_context(self, capsys):
        configure_logging(level="INFO", json_format=True, add_timestamp=False)
        logger = get_logger()

        with LogContext(content_file="spec.yaml"):
            logger.info("inside")
        logger.info("outside")

        inside, outside = (json.loads(line) for line in capsys.readouterr().err.strip().splitlines())
        assert inside["content_file"] == "spec.yaml"
        assert "content_file" not in outside
        assert "timestamp" not in inside

    def test_bind_and_clear(self, capsys):
        configure_logging(level="INFO", json_format=True)
        bind_context(run="abc")
        get_logger().info("bound")
        clear_context()
        get_logger().info("cleared")

        bound, cleared = (json.loads(line) for line in capsys.readouterr().err.strip().splitlines())
        assert bound["run"] == "abc"
        assert "run" not in cleared

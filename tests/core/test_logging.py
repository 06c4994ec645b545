"""Tests for ccc.core.logging module."""

import json
import logging

import structlog

from ccc.core.logging import configure_from_settings, configure_logging, get_logger


class TestConfigureLogging:
    """structlog configuration."""

    def test_json_output_to_stderr(self, capsys):
        configure_logging(level="DEBUG", json_format=True)
        get_logger("ccc.test").info("container_freed", released=3)
        captured = capsys.readouterr()
        assert captured.out == ""
        line = captured.err.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "container_freed"
        assert event["released"] == 3
        assert event["level"] == "info"
        assert event["service.name"] == "ccc"
        assert "timestamp" in event

    def test_level_filters_debug(self, capsys):
        configure_logging(level="WARNING", json_format=True)
        get_logger("ccc.test").debug("buffer_resized")
        assert "buffer_resized" not in capsys.readouterr().err

    def test_service_name(self, capsys):
        configure_logging(level="INFO", json_format=True, service="bench")
        get_logger("ccc.test").info("ping")
        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert event["service.name"] == "bench"
        configure_logging(level="INFO", json_format=True)

    def test_without_timestamp(self, capsys):
        configure_logging(level="INFO", json_format=True, add_timestamp=False)
        get_logger("ccc.test").info("ping")
        event = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert "timestamp" not in event

    def test_from_settings(self, monkeypatch):
        monkeypatch.setenv("CCC_LOG_LEVEL", "ERROR")
        configure_from_settings()
        assert logging.getLogger().level == logging.ERROR


class TestGetLogger:
    def test_configures_lazily(self):
        structlog.reset_defaults()
        get_logger("ccc.test")
        assert structlog.is_configured()

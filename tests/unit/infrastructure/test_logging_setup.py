"""Tests for structlog + stdlib logging configuration."""

from __future__ import annotations

from typing import Iterator
from unittest.mock import patch

import pytest
import structlog

from reqgate.infrastructure.config.schema import AppConfig
from reqgate.infrastructure.logging.setup import (
    BASE_LOGGING_CONFIG,
    build_logging_config,
    configure_logging,
)


def _config(**overrides: object) -> AppConfig:
    return AppConfig.model_validate(overrides)


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# build_logging_config
# ---------------------------------------------------------------------------


class TestBuildLoggingConfig:
    def test_root_uses_configured_level(self) -> None:
        cfg = build_logging_config(_config(log_level="WARNING"))
        assert cfg["root"] == {"handlers": ["default"], "level": "WARNING"}

    def test_handler_writes_to_stderr_through_structlog(self) -> None:
        cfg = build_logging_config(_config())
        handler = cfg["handlers"]["default"]
        assert handler["stream"] == "ext://sys.stderr"
        assert handler["formatter"] == "structlog"
        assert cfg["formatters"]["structlog"]["()"] is (
            structlog.stdlib.ProcessorFormatter
        )

    def test_json_renderer(self) -> None:
        cfg = build_logging_config(_config(log_format="json"))
        renderer = cfg["formatters"]["structlog"]["processors"][-1]
        assert isinstance(renderer, structlog.processors.JSONRenderer)

    def test_console_renderer(self) -> None:
        cfg = build_logging_config(_config(log_format="console"))
        renderer = cfg["formatters"]["structlog"]["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)

    def test_prod_defaults_to_json(self) -> None:
        cfg = build_logging_config(_config(environment="prod"))
        renderer = cfg["formatters"]["structlog"]["processors"][-1]
        assert isinstance(renderer, structlog.processors.JSONRenderer)

    def test_transport_loggers_quiet_by_default(self) -> None:
        cfg = build_logging_config(_config(log_level="INFO"))
        assert cfg["loggers"]["httpx"]["level"] == "WARNING"
        assert cfg["loggers"]["httpcore"]["level"] == "WARNING"

    def test_transport_loggers_follow_debug(self) -> None:
        cfg = build_logging_config(_config(log_level="DEBUG"))
        assert cfg["loggers"]["httpx"]["level"] == "DEBUG"
        assert cfg["loggers"]["httpcore"]["level"] == "DEBUG"

    def test_base_config_not_mutated(self) -> None:
        build_logging_config(_config(log_level="DEBUG"))
        assert "formatter" not in BASE_LOGGING_CONFIG["handlers"]["default"]
        assert BASE_LOGGING_CONFIG["loggers"]["httpx"]["level"] == "WARNING"
        assert "root" not in BASE_LOGGING_CONFIG


# ---------------------------------------------------------------------------
# configure_logging
# ---------------------------------------------------------------------------


class TestConfigureLogging:
    def test_applies_built_config(self) -> None:
        config = _config(log_level="ERROR")
        with patch("logging.config.dictConfig") as dict_config:
            cfg = configure_logging(config)

        dict_config.assert_called_once_with(cfg)
        assert cfg["root"]["level"] == "ERROR"

    def test_routes_structlog_through_stdlib(self) -> None:
        with patch("logging.config.dictConfig"):
            configure_logging(_config())

        processors = structlog.get_config()["processors"]
        assert processors[-1] is structlog.stdlib.ProcessorFormatter.wrap_for_formatter
        assert isinstance(
            structlog.get_config()["logger_factory"], structlog.stdlib.LoggerFactory
        )

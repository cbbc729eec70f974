"""Unit tests for the logging helpers."""

import logging
from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from policy_registry.core.logging_utils import (
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture
def basic_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[MagicMock]:
    """Record root logger configuration without touching real handlers."""
    recorder = MagicMock()
    monkeypatch.setattr(logging, "basicConfig", recorder)
    reset_logging()
    yield recorder
    reset_logging()


class TestConfigureLogging:
    """Test one-shot root logger configuration."""

    def test_applies_once(self, basic_config: MagicMock) -> None:
        configure_logging(level="DEBUG")
        configure_logging(level="ERROR")

        basic_config.assert_called_once()
        assert basic_config.call_args.kwargs["level"] == "DEBUG"

    def test_force_reapplies(self, basic_config: MagicMock) -> None:
        configure_logging()
        configure_logging(level="WARNING", force=True)

        assert basic_config.call_count == 2
        assert basic_config.call_args.kwargs == {
            "level": "WARNING",
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            "force": True,
        }

    def test_reset_allows_reconfiguration(self, basic_config: MagicMock) -> None:
        configure_logging(level="INFO")
        reset_logging()
        configure_logging(level="ERROR")

        assert [c.kwargs["level"] for c in basic_config.call_args_list] == [
            "INFO",
            "ERROR",
        ]


class TestGetLogger:
    """Test logger lookup."""

    def test_default_name(self, basic_config: MagicMock) -> None:
        assert get_logger().name == "policy_registry"
        basic_config.assert_called_once()

    def test_named_logger_with_level(self, basic_config: MagicMock) -> None:
        logger = get_logger("policy_registry.tests", level=logging.DEBUG)

        assert logger.name == "policy_registry.tests"
        assert logger.level == logging.DEBUG

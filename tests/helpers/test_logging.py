"""Tests for logging configuration."""

import pytest

import logging

from src.helpers.logging import get_logger


class TestGetLogger:
    """Tests for get_logger function."""

    def test_get_logger_returns_logger(self) -> None:
        """Test that get_logger returns a logger instance."""
        logger = get_logger("test_module")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "test_module"

    def test_get_logger_same_name_returns_same_instance(self) -> None:
        """Test that getting logger with same name returns same instance."""
        logger1 = get_logger("test_same")
        logger2 = get_logger("test_same", log_level="ERROR")

        assert logger1 is logger2
        assert len(logger1.handlers) == 1

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    def test_get_logger_with_level(self, level: str) -> None:
        """Test get_logger with each supported level."""
        logger = get_logger(f"test_level_{level.lower()}", log_level=level)

        assert logger.level == getattr(logging, level)

    def test_default_level_from_environment(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test that LOG_LEVEL sets the default level."""
        monkeypatch.setenv("LOG_LEVEL", "debug")

        logger = get_logger("test_env_level")

        assert logger.level == logging.DEBUG

    def test_default_level_is_info(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test get_logger with default level."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        logger = get_logger("test_default")

        assert logger.level == logging.INFO

    def test_get_logger_invalid_level_raises(self) -> None:
        """Test that invalid log level raises ValueError."""
        with pytest.raises(ValueError, match="Invalid log level"):
            get_logger("test_invalid", log_level="INVALID")

    def test_get_logger_invalid_handler_raises(self) -> None:
        """Test that invalid handler raises ValueError."""
        with pytest.raises(ValueError, match="Invalid handler"):
            get_logger("test_invalid_handler", log_handler="invalid")

    def test_get_logger_with_color(self) -> None:
        """Test get_logger with color enabled."""
        import colorlog

        logger = get_logger("test_color", log_color=True)

        assert isinstance(logger.handlers[0].formatter, colorlog.ColoredFormatter)

    def test_color_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that LOG_COLOR=1 enables colour."""
        import colorlog

        monkeypatch.setenv("LOG_COLOR", "1")

        logger = get_logger("test_env_color")

        assert isinstance(logger.handlers[0].formatter, colorlog.ColoredFormatter)

    def test_logger_can_log_messages(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that configured logger can log messages."""
        logger = get_logger("test_log_messages", log_level="DEBUG")

        with caplog.at_level(logging.DEBUG, logger="test_log_messages"):
            logger.debug("Debug message")
            logger.warning("Warning message")

        assert any("Debug message" in record.message for record in caplog.records)
        assert any("Warning message" in record.message for record in caplog.records)

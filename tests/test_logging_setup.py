import logging

from hyprmirror.logging_setup import LogObjects, ScreenLogFormatter, get_logger


def test_get_logger_does_not_duplicate_handlers():
    logger = get_logger("test_handlers")
    get_logger("test_handlers")

    assert not logger.propagate
    assert logger.level == logging.DEBUG  # debug forced in conftest
    assert len(logger.handlers) == len(LogObjects.handlers)


def test_screen_formatter_without_colors(monkeypatch):
    monkeypatch.setenv("NO_COLOR", "1")
    record = logging.LogRecord("ipc", logging.ERROR, __file__, 12, "cannot reach %s", ("sock",), None)

    line = ScreenLogFormatter().format(record)

    assert "cannot reach sock" in line
    assert "\x1b[" not in line

"""ANSI terminal color helpers for log output and the `watch` command."""

import os
import sys
from typing import TextIO

__all__ = ["LogStyles", "WatchStyles", "colorize", "make_style", "should_colorize"]

_ESC = "\x1b["

RESET = f"{_ESC}0m"

BOLD = "1"
DIM = "2"

RED = "31"
YELLOW = "33"
CYAN = "36"


def should_colorize(stream: TextIO | None = None) -> bool:
    """Determine if ANSI colors should be used for the given stream.

    `NO_COLOR` disables colors, `FORCE_COLOR` forces them,
    otherwise colors are used only when the stream is a TTY.

    Args:
        stream: The output stream to check. Defaults to sys.stderr.
    """
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("FORCE_COLOR"):
        return True
    if stream is None:
        stream = sys.stderr
    return hasattr(stream, "isatty") and stream.isatty()


def make_style(*codes: str) -> tuple[str, str]:
    """Return a (prefix, suffix) pair for the given codes."""
    if not codes:
        return ("", RESET)
    return (f"{_ESC}{';'.join(codes)}m", RESET)


def colorize(text: str, *codes: str) -> str:
    """Wrap text in ANSI codes."""
    if not codes:
        return text
    prefix, suffix = make_style(*codes)
    return f"{prefix}{text}{suffix}"


class LogStyles:
    """Styles for log levels."""

    WARNING = (YELLOW, DIM)
    ERROR = (RED, DIM)
    CRITICAL = (RED, BOLD)


class WatchStyles:
    """Styles used by `hyprmirror watch`."""

    EVENT = (CYAN, BOLD)
    CHANGE = (YELLOW, BOLD)

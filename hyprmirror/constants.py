"""Shared constants for hyprmirror."""

import os
from pathlib import Path

__all__ = [
    "CONFIG_FILE",
    "CONFIG_SECTION",
    "DEBOUNCED_EVENTS",
    "DEFAULT_DEBOUNCE_DELAY",
    "DEFAULT_DISPATCH_REFRESH_DELAY",
    "DEFAULT_DISPATCH_WRITE_TIMEOUT",
    "DEFAULT_EVENT_CONNECT_TIMEOUT",
    "DEFAULT_REQUEST_CONNECT_TIMEOUT",
    "DEFAULT_REQUEST_READ_TIMEOUT",
    "DISPATCH_PREFIX",
    "EVENT_SEPARATOR",
    "EVENT_SOCKET_NAME",
    "IMMEDIATE_EVENTS",
    "QUERY_PREFIX",
    "READ_CHUNK_SIZE",
    "RECONNECT_BASE_DELAY",
    "RECONNECT_MAX_DELAY",
    "RECONNECT_MAX_RETRIES",
    "REQUEST_SOCKET_NAME",
]

_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "hyprmirror" / "config.toml"
CONFIG_SECTION = "hyprmirror"

# Socket files inside <runtime dir>/hypr/<instance>/
REQUEST_SOCKET_NAME = ".socket.sock"
EVENT_SOCKET_NAME = ".socket2.sock"

# Wire format
QUERY_PREFIX = "j/"
DISPATCH_PREFIX = "dispatch "
EVENT_SEPARATOR = ">>"
READ_CHUNK_SIZE = 4096

# Timings (seconds)
DEFAULT_REQUEST_CONNECT_TIMEOUT = 0.5
DEFAULT_REQUEST_READ_TIMEOUT = 1.0
DEFAULT_EVENT_CONNECT_TIMEOUT = 1.0
DEFAULT_DISPATCH_WRITE_TIMEOUT = 0.5
DEFAULT_DEBOUNCE_DELAY = 0.05
DEFAULT_DISPATCH_REFRESH_DELAY = 0.1

# Event link reconnection (disabled unless configured)
RECONNECT_MAX_RETRIES = 10
RECONNECT_BASE_DELAY = 0.5
RECONNECT_MAX_DELAY = 30.0

# Events changing the set of open windows
IMMEDIATE_EVENTS = frozenset({"openwindow", "closewindow", "movewindow", "movewindowv2"})
# Events arriving in bursts (eg: workspace switch animations)
DEBOUNCED_EVENTS = frozenset({"workspace", "focusedmon", "activewindow", "changefloatingmode"})

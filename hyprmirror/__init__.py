"""hyprmirror - a live mirror of Hyprland's windows, workspaces and monitors.

Combines pull requests on the request socket with the pushed event stream
to keep an in-memory snapshot up to date, and notifies subscribers on changes.
"""

from .config import Settings, load_settings
from .mirror import HyprlandMirror
from .models import Category, ChangeEvent, MirrorEvent, PullResult, PullStatus
from .store import Snapshot, StateStore

__all__ = [
    "Category",
    "ChangeEvent",
    "HyprlandMirror",
    "MirrorEvent",
    "PullResult",
    "PullStatus",
    "Settings",
    "Snapshot",
    "StateStore",
    "load_settings",
]

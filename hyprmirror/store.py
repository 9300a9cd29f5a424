"""In-memory mirror of the Hyprland state.

Only `apply` mutates the snapshot, one category at a time, replacing it wholesale.
Every query is a projection of the current snapshot.
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from logging import Logger
from typing import cast

from .logging_setup import get_logger
from .models import Category, ChangeEvent, ClientInfo, MonitorInfo, PullResult, WorkspaceInfo
from .pubsub import Publisher, Subscription

__all__ = ["Snapshot", "StateStore", "as_int", "window_area", "workspace_id_of"]


@dataclass
class Snapshot:
    """Last known state, in the order reported by Hyprland."""

    windows: list[ClientInfo] = field(default_factory=list)
    workspaces: list[WorkspaceInfo] = field(default_factory=list)
    monitors: list[MonitorInfo] = field(default_factory=list)
    active_workspace: WorkspaceInfo | None = None
    focused_monitor: MonitorInfo | None = None  # derived from monitors


def as_int(value: object, default: int = 0) -> int:
    """Convert a JSON number to int, `default` for anything else."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    if isinstance(value, float) and not math.isfinite(value):
        return default
    return int(value)


def window_area(window: ClientInfo) -> int:
    """Return width × height, 0 if the size is missing or malformed."""
    size = window.get("size")
    if not isinstance(size, list | tuple) or len(size) < 2:  # noqa: PLR2004
        return 0
    return as_int(size[0]) * as_int(size[1])


def workspace_id_of(window: ClientInfo) -> int | None:
    """Return the id of the workspace holding `window`."""
    workspace = window.get("workspace")
    if not isinstance(workspace, dict):
        return None
    return workspace.get("id")


class StateStore:
    """Holds the snapshot and publishes a `ChangeEvent` for each updated category."""

    def __init__(self, log: Logger | None = None) -> None:
        self.log = log or get_logger("store")
        self.snapshot = Snapshot()
        self._changes: Publisher[ChangeEvent] = Publisher(self.log)

    # Accessors {{{

    @property
    def windows(self) -> list[ClientInfo]:
        return self.snapshot.windows

    @property
    def workspaces(self) -> list[WorkspaceInfo]:
        return self.snapshot.workspaces

    @property
    def monitors(self) -> list[MonitorInfo]:
        return self.snapshot.monitors

    @property
    def active_workspace(self) -> WorkspaceInfo | None:
        return self.snapshot.active_workspace

    @property
    def focused_monitor(self) -> MonitorInfo | None:
        return self.snapshot.focused_monitor

    @property
    def active_workspace_id(self) -> int:
        """Return the id of the active workspace, -1 if unknown."""
        if self.snapshot.active_workspace is None:
            return -1
        return as_int(self.snapshot.active_workspace.get("id"), -1)

    # }}}

    def subscribe(self, callback: Callable[[ChangeEvent], None]) -> Subscription:
        """Get notified after each category update."""
        return self._changes.subscribe(callback)

    def publish(self, category: Category) -> None:
        """Notify the subscribers of a change not coming from a pull (eg: connection)."""
        self._changes.publish(ChangeEvent(category))

    def apply(self, result: PullResult) -> bool:
        """Replace the category of `result` with its payload.

        Failed pulls leave the snapshot untouched.

        Returns:
            True if the snapshot was updated
        """
        if not result.ok:
            self.log.debug("%s not updated: %s", result.category, result.status)
            return False
        match result.category:
            case Category.CLIENTS:
                self.snapshot.windows = cast("list[ClientInfo]", result.payload)
            case Category.WORKSPACES:
                self.snapshot.workspaces = cast("list[WorkspaceInfo]", result.payload)
            case Category.MONITORS:
                self.snapshot.monitors = cast("list[MonitorInfo]", result.payload)
                self._update_focused_monitor()
            case Category.ACTIVE_WORKSPACE:
                self.snapshot.active_workspace = cast("WorkspaceInfo", result.payload)
            case _:
                self.log.error("%s can't be pulled", result.category)
                return False
        self._changes.publish(ChangeEvent(result.category))
        return True

    def _update_focused_monitor(self) -> None:
        """Pick the first focused monitor, keep the previous one if none is focused."""
        for monitor in self.snapshot.monitors:
            if isinstance(monitor, dict) and monitor.get("focused"):
                self.snapshot.focused_monitor = monitor
                self._changes.publish(ChangeEvent(Category.FOCUSED_MONITOR))
                return

    # Lookups {{{

    def window_by_address(self, address: str) -> ClientInfo | None:
        """Return the window with the given address."""
        for window in self.snapshot.windows:
            if window.get("address") == address:
                return window
        return None

    def workspace_by_id(self, workspace_id: int) -> WorkspaceInfo | None:
        """Return the workspace with the given id."""
        for workspace in self.snapshot.workspaces:
            if workspace.get("id") == workspace_id:
                return workspace
        return None

    def biggest_window_for_workspace(self, workspace_id: int) -> ClientInfo | None:
        """Return the window of the workspace having the largest area.

        The first window wins on ties. Windows with a zero area are never returned,
        so an empty workspace and a workspace holding only zero-sized windows look the same.
        """
        biggest = None
        max_area = 0
        for window in self.snapshot.windows:
            if workspace_id_of(window) != workspace_id:
                continue
            area = window_area(window)
            if area > max_area:
                max_area = area
                biggest = window
        return biggest

    # }}}
    # Indexed views {{{

    def window_by_address_map(self) -> dict[str, ClientInfo]:
        """Return windows indexed by address."""
        return {w["address"]: w for w in self.snapshot.windows if w.get("address")}

    def workspace_by_id_map(self) -> dict[int, WorkspaceInfo]:
        """Return workspaces indexed by id."""
        return {ws["id"]: ws for ws in self.snapshot.workspaces if isinstance(ws.get("id"), int)}

    def workspace_ids(self) -> list[int]:
        """Return the ids of the workspaces, in order."""
        return [ws["id"] for ws in self.snapshot.workspaces if isinstance(ws.get("id"), int)]

    def addresses(self) -> list[str]:
        """Return the addresses of the windows, in order."""
        return [w["address"] for w in self.snapshot.windows if w.get("address")]

    # }}}

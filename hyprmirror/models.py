"""Common types mirrored from the Hyprland API."""

from dataclasses import dataclass
from enum import IntEnum, StrEnum
from typing import TypedDict

PlainTypes = float | str | dict[str, "PlainTypes"] | list["PlainTypes"]
JSONResponse = dict[str, PlainTypes] | list[dict[str, PlainTypes]] | PlainTypes


class WorkspaceDf(TypedDict):
    """Workspace reference embedded in other records."""

    id: int
    name: str


class ClientInfo(TypedDict, total=False):
    """Client (window) information as returned by Hyprland."""

    address: str
    mapped: bool
    hidden: bool
    at: tuple[int, int]
    size: tuple[int, int]
    workspace: WorkspaceDf
    floating: bool
    monitor: int
    title: str
    initialClass: str
    initialTitle: str
    pid: int
    xwayland: bool
    pinned: bool
    fullscreen: bool
    focusHistoryID: int


class WorkspaceInfo(TypedDict, total=False):
    """Workspace information as returned by Hyprland."""

    id: int
    name: str
    monitor: str
    monitorID: int
    windows: int
    hasfullscreen: bool
    lastwindow: str
    lastwindowtitle: str


class MonitorInfo(TypedDict, total=False):
    """Monitor information as returned by Hyprland."""

    id: int
    name: str
    description: str
    width: int
    height: int
    refreshRate: float
    x: int
    y: int
    activeWorkspace: WorkspaceDf
    specialWorkspace: WorkspaceDf
    scale: float
    transform: int
    focused: bool
    dpmsStatus: bool
    disabled: bool


class Category(StrEnum):
    """Snapshot categories.

    The first four are pulled with `j/<value>`, the others only appear in change notifications.
    """

    CLIENTS = "clients"
    WORKSPACES = "workspaces"
    MONITORS = "monitors"
    ACTIVE_WORKSPACE = "activeworkspace"
    FOCUSED_MONITOR = "focusedmonitor"
    CONNECTED = "connected"

    @property
    def expects_list(self) -> bool:
        """Return True if the pulled document must be a JSON array."""
        return self is not Category.ACTIVE_WORKSPACE


PULLED_CATEGORIES = (Category.CLIENTS, Category.WORKSPACES, Category.MONITORS, Category.ACTIVE_WORKSPACE)


class PullStatus(StrEnum):
    """Outcome of a single pull."""

    OK = "ok"
    NO_DATA = "no_data"  # connection failed or nothing was received
    MALFORMED = "malformed"  # invalid JSON
    WRONG_SHAPE = "wrong_shape"  # array instead of object or vice versa


@dataclass(frozen=True)
class PullResult:
    """Decoded response of one pull."""

    category: Category
    status: PullStatus
    payload: JSONResponse | None = None

    @property
    def ok(self) -> bool:
        """Return True if the payload can be applied."""
        return self.status is PullStatus.OK


@dataclass(frozen=True)
class MirrorEvent:
    """One line of the event stream, split as `name>>data`."""

    name: str
    data: str = ""


@dataclass(frozen=True)
class ChangeEvent:
    """Published after a snapshot category changed."""

    category: Category


class ConnectionState(StrEnum):
    """Lifecycle of the event link."""

    UNRESOLVED = "unresolved"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


class MirrorError(Exception):
    """Base error for hyprmirror."""


class ConfigError(MirrorError):
    """Invalid configuration file."""


class ExitCode(IntEnum):
    """Exit codes of the command line tool."""

    SUCCESS = 0
    USAGE_ERROR = 1  # No command provided, invalid arguments
    ENV_ERROR = 2  # No Hyprland instance found
    CONNECTION_ERROR = 3  # Cannot connect to the event socket

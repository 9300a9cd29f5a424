" generic fixtures "
import json
from copy import deepcopy

import pytest
from pytest_asyncio import fixture

from .testtools import FakeHyprland


def pytest_configure():
    "Runs once before all"
    from hyprmirror.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


INSTANCE = "0123456789abcdef_1700000000_42"


@pytest.fixture
def paths():
    from hyprmirror.ipc_paths import InstancePaths

    return InstancePaths.build("/tmp/runtime", INSTANCE)


@pytest.fixture
def settings():
    from hyprmirror.config import Settings

    return Settings(debounce_delay=0.05, dispatch_refresh_delay=0.1)


@fixture
async def mirror(paths, settings):
    "A mirror with known paths, not started"
    from hyprmirror.mirror import HyprlandMirror

    instance = HyprlandMirror(settings, paths)
    yield instance
    await instance.close()


def encoded_responses(**overrides):
    "Return the pull responses as sent by Hyprland"
    documents = {
        "clients": CLIENTS,
        "workspaces": WORKSPACES,
        "monitors": MONITORS,
        "activeworkspace": ACTIVE_WORKSPACE,
    }
    documents.update(overrides)
    return {f"j/{name}".encode(): json.dumps(doc).encode() if not isinstance(doc, bytes | None) else doc for name, doc in documents.items()}


@pytest.fixture
def fake_hyprland(monkeypatch):
    "Replace the request socket with canned responses"
    fake = FakeHyprland(encoded_responses())
    monkeypatch.setattr("hyprmirror.mirror.request_once", fake.request_once)
    return fake


CLIENTS = [
    {
        "address": "0x5581a3e0",
        "mapped": True,
        "hidden": False,
        "at": [10, 60],
        "size": [1700, 1370],
        "workspace": {"id": 1, "name": "1"},
        "floating": False,
        "monitor": 1,
        "class": "kitty",
        "title": "~",
        "pid": 1234,
    },
    {
        "address": "0x5581b7c0",
        "mapped": True,
        "hidden": False,
        "at": [1720, 60],
        "size": [1710, 1370],
        "workspace": {"id": 1, "name": "1"},
        "floating": False,
        "monitor": 1,
        "class": "firefox",
        "title": "Hyprland Wiki",
        "pid": 2345,
    },
    {
        "address": "0x5581c010",
        "mapped": True,
        "hidden": False,
        "at": [0, 50],
        "size": [1920, 1030],
        "workspace": {"id": 4, "name": "4"},
        "floating": False,
        "monitor": 0,
        "class": "mpv",
        "title": "video.mkv",
        "pid": 3456,
    },
]

WORKSPACES = [
    {"id": 1, "name": "1", "monitor": "DP-1", "monitorID": 1, "windows": 2, "hasfullscreen": False},
    {"id": 4, "name": "4", "monitor": "HDMI-A-1", "monitorID": 0, "windows": 1, "hasfullscreen": False},
]

MONITORS = [
    {
        "id": 1,
        "name": "DP-1",
        "description": "Microstep MAG342CQPV DB6H513700137 (DP-1)",
        "width": 3440,
        "height": 1440,
        "refreshRate": 59.99900,
        "x": 0,
        "y": 1080,
        "activeWorkspace": {"id": 1, "name": "1"},
        "specialWorkspace": {"id": 0, "name": ""},
        "scale": 1.00,
        "transform": 0,
        "focused": True,
        "dpmsStatus": True,
    },
    {
        "id": 0,
        "name": "HDMI-A-1",
        "description": "BNQ BenQ PJ 0x01010101 (HDMI-A-1)",
        "width": 1920,
        "height": 1080,
        "refreshRate": 60.00000,
        "x": 0,
        "y": 0,
        "activeWorkspace": {"id": 4, "name": "4"},
        "specialWorkspace": {"id": 0, "name": ""},
        "scale": 1.00,
        "transform": 0,
        "focused": False,
        "dpmsStatus": True,
    },
]

ACTIVE_WORKSPACE = {"id": 1, "name": "1", "monitor": "DP-1", "windows": 2}


@pytest.fixture
def sample_state():
    "Copies of the sample documents"
    return deepcopy(CLIENTS), deepcopy(WORKSPACES), deepcopy(MONITORS), deepcopy(ACTIVE_WORKSPACE)

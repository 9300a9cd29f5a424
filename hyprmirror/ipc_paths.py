"""Hyprland instance discovery and socket paths."""

import os
from dataclasses import dataclass

import aiofiles.os

from .constants import EVENT_SOCKET_NAME, REQUEST_SOCKET_NAME

__all__ = [
    "InstancePaths",
    "event_socket_path",
    "get_runtime_dir",
    "request_socket_path",
    "resolve_instance",
    "resolve_paths",
]


def get_runtime_dir() -> str:
    """Return `$XDG_RUNTIME_DIR`, defaulting to `/run/user/<uid>`."""
    return os.environ.get("XDG_RUNTIME_DIR") or f"/run/user/{os.getuid()}"


def request_socket_path(runtime_dir: str, instance: str) -> str:
    """Return the path of the request socket (one connection per query)."""
    return f"{runtime_dir}/hypr/{instance}/{REQUEST_SOCKET_NAME}"


def event_socket_path(runtime_dir: str, instance: str) -> str:
    """Return the path of the event stream socket."""
    return f"{runtime_dir}/hypr/{instance}/{EVENT_SOCKET_NAME}"


@dataclass(frozen=True)
class InstancePaths:
    """Sockets of one Hyprland instance."""

    instance: str
    request: str
    events: str

    @classmethod
    def build(cls, runtime_dir: str, instance: str) -> "InstancePaths":
        """Compute the paths for `instance` under `runtime_dir`."""
        return cls(instance, request_socket_path(runtime_dir, instance), event_socket_path(runtime_dir, instance))


async def resolve_instance(runtime_dir: str | None = None) -> str | None:
    """Return the instance signature.

    Uses `$HYPRLAND_INSTANCE_SIGNATURE`, or the first folder found in `<runtime_dir>/hypr`.
    """
    instance = os.environ.get("HYPRLAND_INSTANCE_SIGNATURE")
    if instance:
        return instance
    hypr_dir = f"{runtime_dir or get_runtime_dir()}/hypr"
    if not await aiofiles.os.path.isdir(hypr_dir):
        return None
    for entry in sorted(await aiofiles.os.listdir(hypr_dir)):
        if await aiofiles.os.path.isdir(f"{hypr_dir}/{entry}"):
            return entry
    return None


async def resolve_paths(runtime_dir: str | None = None) -> InstancePaths | None:
    """Return the socket paths of the running instance, None if no instance is found."""
    runtime_dir = runtime_dir or get_runtime_dir()
    instance = await resolve_instance(runtime_dir)
    if not instance:
        return None
    return InstancePaths.build(runtime_dir, instance)

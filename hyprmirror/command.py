"""hyprmirror command line: inspect the mirrored Hyprland state."""

import asyncio
import json
import sys

from . import ipc
from .ansi import WatchStyles, colorize, should_colorize
from .codec import encode_dispatch
from .config import Settings, load_settings
from .ipc_paths import InstancePaths, resolve_paths
from .logging_setup import get_logger, init_logger
from .mirror import HyprlandMirror
from .models import ChangeEvent, ConfigError, ExitCode, MirrorEvent

__all__ = ["main"]

HELP = """Syntax: hyprmirror [--debug LOGFILE] [--config FILE] <command>

Commands:
  dump               print the mirrored state as JSON
  watch              print events and state changes until interrupted
  dispatch <action>  send a dispatch command (eg: "dispatch workspace 2")
  help               show this help
"""


def use_param(txt: str) -> str:
    """Check if parameter `txt` is in sys.argv.

    If found, removes it from sys.argv & returns the argument value
    """
    v = ""
    if txt in sys.argv:
        i = sys.argv.index(txt)
        v = sys.argv[i + 1] if i + 1 < len(sys.argv) else ""
        del sys.argv[i : i + 2]
    return v


def snapshot_as_dict(mirror: HyprlandMirror) -> dict:
    """Return the state as a JSON serializable dict."""
    return {
        "connected": mirror.connected,
        "activeWorkspaceId": mirror.active_workspace_id,
        "activeWorkspace": mirror.active_workspace,
        "focusedMonitor": mirror.focused_monitor,
        "monitors": mirror.monitors,
        "workspaces": mirror.workspaces,
        "clients": mirror.windows,
    }


async def run_dump(mirror: HyprlandMirror) -> ExitCode:
    """Print the state once."""
    print(json.dumps(snapshot_as_dict(mirror), indent=2))
    return ExitCode.SUCCESS


async def run_watch(mirror: HyprlandMirror) -> ExitCode:
    """Print every event and change until interrupted."""
    use_colors = should_colorize(sys.stdout)

    def _style(text: str, style: tuple[str, ...]) -> str:
        return colorize(text, *style) if use_colors else text

    def _on_event(event: MirrorEvent) -> None:
        print(f"{_style(event.name, WatchStyles.EVENT)} {event.data}")

    def _on_change(change: ChangeEvent) -> None:
        print(f"  {_style('changed', WatchStyles.CHANGE)} {change.category}")

    with mirror.subscribe_events(_on_event), mirror.subscribe(_on_change):
        await asyncio.Event().wait()
    return ExitCode.SUCCESS


async def run_dispatch(paths: InstancePaths, settings: Settings, args: list[str]) -> ExitCode:
    """Send a dispatch command.

    The event socket is not opened and no refresh follows: nothing is left to mirror once the command is sent.
    """
    if not args:
        print("dispatch requires an action", file=sys.stderr)
        return ExitCode.USAGE_ERROR
    sent = await ipc.send_once(
        paths.request,
        encode_dispatch(" ".join(args)),
        connect_timeout=settings.request_connect_timeout,
        write_timeout=settings.dispatch_write_timeout,
    )
    return ExitCode.SUCCESS if sent else ExitCode.CONNECTION_ERROR


async def run_command(command: str, args: list[str], config_file: str = "") -> ExitCode:
    """Connect a mirror and run `command`."""
    log = get_logger("command")
    settings = load_settings(config_file or None, log=log)
    if command == "dispatch":
        paths = await resolve_paths()
        if paths is None:
            log.critical("No Hyprland instance found. Is HYPRLAND_INSTANCE_SIGNATURE set ?")
            return ExitCode.ENV_ERROR
        return await run_dispatch(paths, settings, args)
    mirror = HyprlandMirror(settings)
    try:
        if not await mirror.start():
            if mirror.paths is None:
                log.critical("No Hyprland instance found. Is HYPRLAND_INSTANCE_SIGNATURE set ?")
                return ExitCode.ENV_ERROR
            log.critical("Cannot connect to %s", mirror.paths.events)
            return ExitCode.CONNECTION_ERROR
        if command == "dump":
            return await run_dump(mirror)
        return await run_watch(mirror)
    finally:
        await mirror.close()


def main() -> None:
    """Run the command."""
    debug_flag = use_param("--debug")
    if debug_flag:
        init_logger(filename=debug_flag, force_debug=True)
    else:
        init_logger()
    ipc.init()
    log = get_logger("startup")
    config_file = use_param("--config")

    if len(sys.argv) < 2 or sys.argv[1] in {"help", "--help", "-h"}:  # noqa: PLR2004
        print(HELP)
        sys.exit(ExitCode.SUCCESS if len(sys.argv) >= 2 else ExitCode.USAGE_ERROR)  # noqa: PLR2004

    command, args = sys.argv[1], sys.argv[2:]
    if command not in {"dump", "watch", "dispatch"}:
        print(f'Unknown command "{command}". Try "help" for available commands.', file=sys.stderr)
        sys.exit(ExitCode.USAGE_ERROR)

    code = ExitCode.SUCCESS
    try:
        code = asyncio.run(run_command(command, args, config_file))
    except KeyboardInterrupt:
        pass
    except ConfigError as e:
        log.critical("%s", e)
        code = ExitCode.USAGE_ERROR
    sys.exit(code)


if __name__ == "__main__":
    main()

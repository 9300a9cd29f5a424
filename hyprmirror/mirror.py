"""HyprlandMirror - keeps the store in sync with a Hyprland instance."""

import asyncio
from collections.abc import Callable, Coroutine
from logging import Logger
from typing import Any

from .codec import EventFramer, decode_payload, encode_dispatch, encode_query
from .config import Settings
from .constants import READ_CHUNK_SIZE
from .events import Debouncer, RefreshPolicy, classify
from .ipc import close_writer, open_event_stream, open_event_stream_with_retry, request_once, send_once
from .ipc_paths import InstancePaths, resolve_paths
from .logging_setup import get_logger
from .models import (
    PULLED_CATEGORIES,
    Category,
    ChangeEvent,
    ClientInfo,
    ConnectionState,
    MirrorEvent,
    MonitorInfo,
    PullResult,
    PullStatus,
    WorkspaceInfo,
)
from .pubsub import Publisher, Subscription
from .store import Snapshot, StateStore

__all__ = ["HyprlandMirror"]


class HyprlandMirror:  # pylint: disable=too-many-instance-attributes,too-many-public-methods
    """Mirror of the clients, workspaces, monitors and active workspace of Hyprland.

    Pulls are triggered by `refresh`, by `dispatch` and by the events read from the event socket:
    window list changes refresh right away, bursty events (workspace switch, focus...) are debounced.

    Usage:
        mirror = HyprlandMirror()
        await mirror.start()
        mirror.subscribe(lambda change: print(change.category))
    """

    event_reader: asyncio.StreamReader | None = None
    event_writer: asyncio.StreamWriter | None = None

    def __init__(self, settings: Settings | None = None, paths: InstancePaths | None = None, log: Logger | None = None) -> None:
        self.settings = settings or Settings()
        self.paths = paths
        self.log = log or get_logger("mirror")
        self.store = StateStore(get_logger("store"))
        self.state = ConnectionState.UNRESOLVED
        self.framer = EventFramer()
        self.debouncer = Debouncer(self.settings.debounce_delay, self.request_refresh)
        self._events: Publisher[MirrorEvent] = Publisher(self.log)
        self._tasks: set[asyncio.Task] = set()
        self._timers: set[asyncio.TimerHandle] = set()
        self._reader_task: asyncio.Task | None = None

    # Lifecycle {{{

    @property
    def connected(self) -> bool:
        """Return True once the event socket is connected."""
        return self.state is ConnectionState.CONNECTED

    async def start(self) -> bool:
        """Connect the event socket, pull the initial state and listen to events.

        Failing to find the instance or to connect is final: no retry is attempted.

        Returns:
            True if connected
        """
        if self.state is not ConnectionState.UNRESOLVED:
            return self.connected
        if self.paths is None:
            self.paths = await resolve_paths()
            if self.paths is None:
                self.log.warning("Could not find Hyprland instance!")
                self.state = ConnectionState.FAILED
                return False

        self.state = ConnectionState.CONNECTING
        try:
            self.event_reader, self.event_writer = await open_event_stream(self.paths.events, self.settings.event_connect_timeout)
        except (OSError, TimeoutError) as e:
            self.log.warning("Can't connect to event socket %s: %s", self.paths.events, e)
            self.state = ConnectionState.FAILED
            return False

        self.state = ConnectionState.CONNECTED
        self.log.info("connected to %s", self.paths.instance)
        self.store.publish(Category.CONNECTED)
        await self.refresh()
        self._reader_task = self._spawn(self.read_events_loop())
        return True

    async def close(self) -> None:
        """Stop listening to events and cancel the pending refreshes."""
        self.debouncer.cancel()
        for handle in self._timers:
            handle.cancel()
        self._timers.clear()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if self.event_writer:
            await close_writer(self.event_writer)
            self.event_writer = None

    # }}}
    # Commands {{{

    async def refresh(self) -> dict[Category, PullResult]:
        """Pull every category.

        The pulls run concurrently, each one updates the store as soon as it completes
        and a failing pull doesn't affect the others.
        """
        if self.paths is None:
            self.log.debug("refresh skipped: no instance")
            return {}
        results = await asyncio.gather(*(self._pull(category) for category in PULLED_CATEGORIES))
        return {result.category: result for result in results}

    async def _pull(self, category: Category) -> PullResult:
        assert self.paths
        data = await request_once(
            self.paths.request,
            encode_query(category),
            connect_timeout=self.settings.request_connect_timeout,
            read_timeout=self.settings.request_read_timeout,
            logger=self.log,
        )
        result = decode_payload(category, data)
        if result.status in {PullStatus.MALFORMED, PullStatus.WRONG_SHAPE}:
            self.log.debug("discarding %s response: %s", category, result.status)
        self.store.apply(result)
        return result

    async def dispatch(self, command: str) -> bool:
        """Send a dispatch command, then refresh after `dispatch_refresh_delay`.

        The refresh is scheduled even if the command could not be sent.

        Returns:
            True if the command was written
        """
        sent = False
        if self.paths is None:
            self.log.warning("dispatch %s: no instance", command)
        else:
            sent = await send_once(
                self.paths.request,
                encode_dispatch(command),
                connect_timeout=self.settings.request_connect_timeout,
                write_timeout=self.settings.dispatch_write_timeout,
                logger=self.log,
            )
        self._schedule_refresh(self.settings.dispatch_refresh_delay)
        return sent

    def request_refresh(self) -> asyncio.Task:
        """Start a refresh in the background."""
        return self._spawn(self.refresh())

    def _schedule_refresh(self, delay: float) -> None:
        handle: asyncio.TimerHandle

        def _fire() -> None:
            self._timers.discard(handle)
            self.request_refresh()

        handle = asyncio.get_running_loop().call_later(delay, _fire)
        self._timers.add(handle)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # }}}
    # Events {{{

    def subscribe(self, callback: Callable[[ChangeEvent], None]) -> Subscription:
        """Get notified after each snapshot category update."""
        return self.store.subscribe(callback)

    def subscribe_events(self, callback: Callable[[MirrorEvent], None]) -> Subscription:
        """Get every event received from Hyprland."""
        return self._events.subscribe(callback)

    def handle_event(self, event: MirrorEvent) -> None:
        """Apply the refresh policy of `event` and forward it to the subscribers."""
        match classify(event.name):
            case RefreshPolicy.IMMEDIATE:
                self.request_refresh()
            case RefreshPolicy.DEBOUNCED:
                self.debouncer.trigger()
        self._events.publish(event)

    def feed(self, chunk: bytes) -> None:
        """Handle raw bytes read from the event socket."""
        for event in self.framer.feed(chunk):
            self.handle_event(event)

    async def read_events_loop(self) -> None:
        """Consume the event socket until it is closed."""
        while self.event_reader:
            try:
                chunk = await self.event_reader.read(READ_CHUNK_SIZE)
            except OSError as e:
                self.log.error("Error reading events: %s", e)
                chunk = b""
            if chunk:
                self.feed(chunk)
                continue
            self.log.critical("Event stream closed")
            if not (self.settings.reconnect and await self._reconnect()):
                return

    async def _reconnect(self) -> bool:
        """Reopen the event socket and pull the state again."""
        assert self.paths
        if self.event_writer:
            await close_writer(self.event_writer)
            self.event_writer = None
        stream = await open_event_stream_with_retry(
            self.paths.events,
            timeout=self.settings.event_connect_timeout,
            max_retries=self.settings.reconnect_max_retries,
            base_delay=self.settings.reconnect_base_delay,
            max_delay=self.settings.reconnect_max_delay,
            logger=self.log,
        )
        if stream is None:
            return False
        self.event_reader, self.event_writer = stream
        self.framer.reset()
        self.log.info("event stream reconnected")
        await self.refresh()
        return True

    # }}}
    # Snapshot {{{

    @property
    def snapshot(self) -> Snapshot:
        return self.store.snapshot

    @property
    def windows(self) -> list[ClientInfo]:
        return self.store.windows

    @property
    def workspaces(self) -> list[WorkspaceInfo]:
        return self.store.workspaces

    @property
    def monitors(self) -> list[MonitorInfo]:
        return self.store.monitors

    @property
    def active_workspace(self) -> WorkspaceInfo | None:
        return self.store.active_workspace

    @property
    def focused_monitor(self) -> MonitorInfo | None:
        return self.store.focused_monitor

    @property
    def active_workspace_id(self) -> int:
        return self.store.active_workspace_id

    def window_by_address(self, address: str) -> ClientInfo | None:
        return self.store.window_by_address(address)

    def workspace_by_id(self, workspace_id: int) -> WorkspaceInfo | None:
        return self.store.workspace_by_id(workspace_id)

    def biggest_window_for_workspace(self, workspace_id: int) -> ClientInfo | None:
        return self.store.biggest_window_for_workspace(workspace_id)

    # }}}

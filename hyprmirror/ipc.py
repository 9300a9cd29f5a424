"""Interact with hyprland using sockets.

Requests use a new connection each time, the event stream uses a single persistent one.
Connection failures never escape `request_once` and `send_once`: they return no data instead.
"""

__all__ = [
    "close_writer",
    "hyprctl_connection",
    "open_connection",
    "open_event_stream",
    "open_event_stream_with_retry",
    "request_once",
    "send_once",
]

import asyncio
import contextlib
import itertools
from collections.abc import AsyncIterator
from logging import Logger

from .constants import (
    DEFAULT_DISPATCH_WRITE_TIMEOUT,
    DEFAULT_EVENT_CONNECT_TIMEOUT,
    DEFAULT_REQUEST_CONNECT_TIMEOUT,
    DEFAULT_REQUEST_READ_TIMEOUT,
    READ_CHUNK_SIZE,
    RECONNECT_BASE_DELAY,
    RECONNECT_MAX_DELAY,
    RECONNECT_MAX_RETRIES,
)
from .logging_setup import get_logger

Stream = tuple[asyncio.StreamReader, asyncio.StreamWriter]

log = get_logger("ipc")


async def open_connection(path: str, timeout: float) -> Stream:
    """Connect to the unix socket at `path`.

    Raises:
        TimeoutError: connection not established within `timeout`
        OSError: socket missing or connection refused
    """
    async with asyncio.timeout(timeout):
        return await asyncio.open_unix_connection(path)


async def close_writer(writer: asyncio.StreamWriter) -> None:
    """Close `writer`, ignoring errors of an already broken socket."""
    writer.close()
    with contextlib.suppress(OSError):
        await writer.wait_closed()


@contextlib.asynccontextmanager
async def hyprctl_connection(path: str, timeout: float = DEFAULT_REQUEST_CONNECT_TIMEOUT) -> AsyncIterator[Stream]:
    """Context manager for a request connection, always closing it on exit."""
    reader, writer = await open_connection(path, timeout)
    try:
        yield reader, writer
    finally:
        await close_writer(writer)


async def _read_available(reader: asyncio.StreamReader, timeout: float) -> bytes:
    """Read until EOF or until `timeout` elapses, returning what was received."""
    chunks: list[bytes] = []
    with contextlib.suppress(TimeoutError):
        async with asyncio.timeout(timeout):
            while chunk := await reader.read(READ_CHUNK_SIZE):
                chunks.append(chunk)
    return b"".join(chunks)


async def request_once(
    path: str,
    payload: bytes,
    connect_timeout: float = DEFAULT_REQUEST_CONNECT_TIMEOUT,
    read_timeout: float = DEFAULT_REQUEST_READ_TIMEOUT,
    logger: Logger | None = None,
) -> bytes | None:
    """Send `payload` on a fresh connection and return the response.

    Args:
        path: request socket path
        payload: encoded command
        connect_timeout: maximum time to connect
        read_timeout: maximum time to wait for the whole response
        logger: logger to use in case of error

    Returns:
        The received bytes (possibly partial on read timeout), None if the connection failed
    """
    logger = logger or log
    logger.debug("request %s", payload)
    try:
        async with hyprctl_connection(path, connect_timeout) as (reader, writer):
            writer.write(payload)
            await writer.drain()
            return await _read_available(reader, read_timeout)
    except TimeoutError:
        logger.warning("timeout connecting to %s", path)
    except OSError as e:
        logger.warning("cannot reach %s: %s", path, e)
    return None


async def send_once(
    path: str,
    payload: bytes,
    connect_timeout: float = DEFAULT_REQUEST_CONNECT_TIMEOUT,
    write_timeout: float = DEFAULT_DISPATCH_WRITE_TIMEOUT,
    logger: Logger | None = None,
) -> bool:
    """Send `payload` without waiting for any response.

    Returns:
        True if the payload was written
    """
    logger = logger or log
    logger.debug("send %s", payload)
    try:
        async with hyprctl_connection(path, connect_timeout) as (_, writer):
            writer.write(payload)
            async with asyncio.timeout(write_timeout):
                await writer.drain()
    except TimeoutError:
        logger.warning("timeout sending %s to %s", payload, path)
    except OSError as e:
        logger.warning("cannot reach %s: %s", path, e)
    else:
        return True
    return False


async def open_event_stream(path: str, timeout: float = DEFAULT_EVENT_CONNECT_TIMEOUT) -> Stream:
    """Return a new event socket connection."""
    return await open_connection(path, timeout)


async def open_event_stream_with_retry(
    path: str,
    timeout: float = DEFAULT_EVENT_CONNECT_TIMEOUT,
    max_retries: int = RECONNECT_MAX_RETRIES,
    base_delay: float = RECONNECT_BASE_DELAY,
    max_delay: float = RECONNECT_MAX_DELAY,
    logger: Logger | None = None,
) -> Stream | None:
    """Obtain the event stream, retrying with an exponential backoff.

    Args:
        path: event socket path
        timeout: connect timeout of each attempt
        max_retries: number of attempts before giving up
        base_delay: delay after the first failure, doubled after each new failure
        max_delay: upper bound of the delay
        logger: logger to use in case of error

    Returns:
        The stream, or None once all the attempts failed
    """
    logger = logger or log
    for attempt in itertools.count():
        try:
            return await open_event_stream(path, timeout)
        except (OSError, TimeoutError) as e:
            if attempt + 1 >= max_retries:
                logger.error("event stream unreachable after %d attempts: %s", attempt + 1, e)
                return None
            delay = min(base_delay * 2**attempt, max_delay)
            logger.warning("event stream connection failed (%s), retrying in %.1fs", e, delay)
            await asyncio.sleep(delay)
    return None


def init() -> None:
    """Attach the configured handlers to the module logger."""
    global log  # noqa: PLW0603
    log = get_logger("ipc")

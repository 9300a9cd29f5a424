"""Wire format: query/dispatch encoding, pull decoding and event stream framing."""

import json

from .constants import DISPATCH_PREFIX, EVENT_SEPARATOR, QUERY_PREFIX
from .models import Category, MirrorEvent, PullResult, PullStatus

__all__ = [
    "EventFramer",
    "decode_payload",
    "encode_dispatch",
    "encode_query",
    "parse_event_line",
]


def encode_query(command: str) -> bytes:
    """Encode a query requesting JSON output, eg: `j/clients`."""
    return f"{QUERY_PREFIX}{command}".encode()


def encode_dispatch(action: str) -> bytes:
    """Encode a dispatch command, eg: `dispatch workspace 2`."""
    return f"{DISPATCH_PREFIX}{action}".encode()


def decode_payload(category: Category, data: bytes | None) -> PullResult:
    """Decode the response of a pull for `category`.

    Clients, workspaces and monitors are JSON arrays of objects, the active workspace is a JSON object.
    """
    if not data:
        return PullResult(category, PullStatus.NO_DATA)
    try:
        document = json.loads(data.decode("utf-8", errors="replace"))
    except json.JSONDecodeError:
        return PullResult(category, PullStatus.MALFORMED)
    expected = list if category.expects_list else dict
    if not isinstance(document, expected):
        return PullResult(category, PullStatus.WRONG_SHAPE)
    if expected is list and not all(isinstance(item, dict) for item in document):
        return PullResult(category, PullStatus.WRONG_SHAPE)
    return PullResult(category, PullStatus.OK, document)


def parse_event_line(line: str) -> MirrorEvent | None:
    """Split an event line at the first `>>`.

    Returns None for blank lines.
    """
    line = line.strip()
    if not line:
        return None
    name, _, data = line.partition(EVENT_SEPARATOR)
    return MirrorEvent(name, data)


class EventFramer:
    """Split the event stream into lines.

    The stream has no message framing: reads may stop anywhere, including inside a line
    or a multi-byte character. Bytes after the last newline stay in `pending`.
    """

    def __init__(self) -> None:
        self.pending = b""

    def feed(self, chunk: bytes) -> list[MirrorEvent]:
        """Buffer `chunk` and return the events of every completed line."""
        self.pending += chunk
        if b"\n" not in self.pending:
            return []
        *lines, self.pending = self.pending.split(b"\n")
        events = []
        for raw in lines:
            event = parse_event_line(raw.decode("utf-8", errors="replace"))
            if event:
                events.append(event)
        return events

    def reset(self) -> None:
        """Drop the partial line, used when the stream is reopened."""
        self.pending = b""

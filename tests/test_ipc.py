import asyncio
from unittest.mock import AsyncMock, Mock

import pytest

from hyprmirror import ipc

SOCKET = "/tmp/runtime/hypr/instance/.socket.sock"


@pytest.fixture
def mock_open_connection(mocker):
    reader = AsyncMock()
    # StreamWriter methods write and close are synchronous, drain and wait_closed are async
    writer = Mock()
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()

    mock_connect = mocker.patch("asyncio.open_unix_connection", return_value=(reader, writer))
    return mock_connect, reader, writer


async def never_connects(*_):
    await asyncio.sleep(10)


@pytest.mark.asyncio
async def test_hyprctl_connection_context_manager(mock_open_connection):
    mock_connect, reader, writer = mock_open_connection

    async with ipc.hyprctl_connection(SOCKET) as (r, w):
        assert r == reader
        assert w == writer

    mock_connect.assert_awaited_once_with(SOCKET)
    writer.close.assert_called_once()
    writer.wait_closed.assert_awaited_once()


@pytest.mark.asyncio
async def test_request_once(mock_open_connection):
    _, reader, writer = mock_open_connection
    reader.read.side_effect = [b'[{"id": 1}, ', b'{"id": 2}]', b""]

    result = await ipc.request_once(SOCKET, b"j/workspaces")

    assert result == b'[{"id": 1}, {"id": 2}]'
    writer.write.assert_called_once_with(b"j/workspaces")
    writer.drain.assert_awaited_once()
    writer.close.assert_called_once()


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [FileNotFoundError, ConnectionRefusedError])
async def test_request_once_unreachable(mocker, error):
    mocker.patch("asyncio.open_unix_connection", side_effect=error)
    logger = Mock()

    assert await ipc.request_once(SOCKET, b"j/clients", logger=logger) is None
    logger.warning.assert_called_once()


@pytest.mark.asyncio
async def test_request_once_connect_timeout(mocker):
    mocker.patch("asyncio.open_unix_connection", side_effect=never_connects)

    assert await ipc.request_once(SOCKET, b"j/clients", connect_timeout=0.02) is None


@pytest.mark.asyncio
async def test_request_once_read_timeout_returns_partial(mock_open_connection):
    _, reader, writer = mock_open_connection
    chunks = [b'[{"address": "0x1"']

    async def _read(*_):
        if chunks:
            return chunks.pop()
        await asyncio.sleep(10)
        return b""

    reader.read.side_effect = _read

    result = await ipc.request_once(SOCKET, b"j/clients", read_timeout=0.02)

    assert result == b'[{"address": "0x1"'
    writer.close.assert_called_once()


@pytest.mark.asyncio
async def test_send_once(mock_open_connection):
    _, reader, writer = mock_open_connection

    assert await ipc.send_once(SOCKET, b"dispatch workspace 2") is True
    writer.write.assert_called_once_with(b"dispatch workspace 2")
    reader.read.assert_not_called()
    writer.close.assert_called_once()


@pytest.mark.asyncio
async def test_send_once_unreachable(mocker):
    mocker.patch("asyncio.open_unix_connection", side_effect=ConnectionRefusedError)

    assert await ipc.send_once(SOCKET, b"dispatch workspace 2") is False


@pytest.mark.asyncio
async def test_send_once_write_timeout(mock_open_connection):
    _, _, writer = mock_open_connection
    writer.drain.side_effect = never_connects

    assert await ipc.send_once(SOCKET, b"dispatch exit", write_timeout=0.02) is False
    writer.close.assert_called_once()


@pytest.mark.asyncio
async def test_open_event_stream_timeout(mocker):
    mocker.patch("asyncio.open_unix_connection", side_effect=never_connects)

    with pytest.raises(TimeoutError):
        await ipc.open_event_stream(SOCKET, timeout=0.02)


@pytest.mark.asyncio
async def test_open_event_stream_with_retry(mocker):
    stream = (AsyncMock(), Mock())
    connect = mocker.patch("asyncio.open_unix_connection", side_effect=[FileNotFoundError, ConnectionRefusedError, stream])

    result = await ipc.open_event_stream_with_retry(SOCKET, base_delay=0.001, max_delay=0.002)

    assert result == stream
    assert connect.await_count == 3


@pytest.mark.asyncio
async def test_open_event_stream_with_retry_gives_up(mocker):
    connect = mocker.patch("asyncio.open_unix_connection", side_effect=ConnectionRefusedError)
    logger = Mock()

    result = await ipc.open_event_stream_with_retry(SOCKET, max_retries=3, base_delay=0.001, logger=logger)

    assert result is None
    assert connect.await_count == 3
    assert logger.warning.call_count == 2
    logger.error.assert_called_once()

"""MCP stdio transport — the server side of newline-delimited JSON.

Inbound bytes arrive through an :class:`asyncio.StreamReader`; outbound
messages leave through any object satisfying :class:`MessageSink`.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any, BinaryIO, Protocol, TextIO, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class MessageSink(Protocol):
    """Destination for outbound JSON-RPC messages."""

    async def send(self, data: dict[str, Any]) -> None: ...


def encode_line(data: dict[str, Any]) -> bytes:
    """Serialize *data* as one compact JSON line.

    ``json.dumps`` escapes control characters inside strings, so the only
    raw newline in the result is the terminator.
    """
    return (json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str) + "\n").encode(
        "utf-8"
    )


class LineWriter:
    """Writes each message as a newline-terminated JSON line and flushes.

    Writes happen synchronously on the event loop thread, so lines from
    concurrently finishing requests never interleave.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream

    async def send(self, data: dict[str, Any]) -> None:
        """Write a JSON line to the stream."""
        self._stream.write(encode_line(data))
        self._stream.flush()


async def open_stdin_reader(stdin: TextIO | None = None) -> asyncio.StreamReader:
    """Return a :class:`asyncio.StreamReader` fed from standard input.

    Pipes are attached to the event loop directly. Regular files and other
    non-pollable inputs are read on a worker thread instead.
    """
    stream = stdin or sys.stdin
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)

    try:
        await loop.connect_read_pipe(lambda: protocol, stream)
    except (ValueError, OSError) as exc:
        logger.debug("stdin is not a pipe (%s); reading on a worker thread", exc)
        loop.create_task(_pump_blocking(stream, reader))
    return reader


async def _pump_blocking(stream: TextIO, reader: asyncio.StreamReader) -> None:
    raw: BinaryIO = stream.buffer  # type: ignore[attr-defined]
    while True:
        chunk = await asyncio.to_thread(raw.read1, 65536)  # type: ignore[attr-defined]
        if not chunk:
            reader.feed_eof()
            return
        reader.feed_data(chunk)

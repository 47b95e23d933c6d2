"""Line framing for newline-delimited JSON-RPC.

:class:`MessageFramer` is a pure transform: it never reads from a stream
itself, it is fed chunks as they arrive and hands back complete lines.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from codescribe.protocols.errors import FrameTooLargeError

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINE_BYTES = 64 * 1024 * 1024

# Returned by decode() for lines that are not JSON; distinct from a literal null.
MALFORMED: Any = object()


class MessageFramer:
    """Split a byte stream into newline-terminated lines.

    Bytes are buffered until a ``\\n`` arrives, so a read that ends in the
    middle of a line (or of a multi-byte character) is harmless. Empty and
    whitespace-only lines are dropped.

    ``max_line_bytes`` bounds the buffer: a line, or an unterminated tail,
    longer than the limit puts the framer into the :attr:`overflow` state.
    Lines completed before the oversized one are still returned; once in
    that state every further :meth:`feed` raises :class:`FrameTooLargeError`.
    """

    def __init__(self, max_line_bytes: int | None = DEFAULT_MAX_LINE_BYTES) -> None:
        self._buffer = bytearray()
        self._max_line_bytes = max_line_bytes
        self._overflow: FrameTooLargeError | None = None

    @property
    def pending(self) -> bytes:
        """The unconsumed tail of the stream."""
        return bytes(self._buffer)

    @property
    def overflow(self) -> FrameTooLargeError | None:
        """The error that ended framing, or ``None`` while the stream is healthy."""
        return self._overflow

    def feed(self, chunk: bytes) -> list[str]:
        """Append *chunk* and return every complete, non-blank line.

        Raises:
            FrameTooLargeError: If the stream has overflowed and no line
                preceding the oversized one is left to hand back.
        """
        if self._overflow is not None:
            raise self._overflow

        self._buffer.extend(chunk)
        lines: list[str] = []

        while True:
            newline = self._buffer.find(b"\n")
            if newline == -1:
                break
            raw = bytes(self._buffer[:newline])
            del self._buffer[: newline + 1]
            if self._too_long(len(raw)):
                break

            text = raw.decode("utf-8", errors="replace").rstrip("\r")
            if text.strip():
                lines.append(text)

        if self._overflow is None:
            self._too_long(len(self._buffer))
        if self._overflow is not None and not lines:
            raise self._overflow
        return lines

    def decode(self, line: str) -> Any:
        """Parse one line as JSON; malformed lines are logged and yield :data:`MALFORMED`."""
        try:
            return json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("Discarding malformed JSON-RPC line: %s", exc)
            return MALFORMED

    def messages(self, chunk: bytes) -> list[Any]:
        """Feed *chunk* and return the decoded messages, skipping bad lines."""
        decoded: list[Any] = []
        for line in self.feed(chunk):
            message = self.decode(line)
            if message is not MALFORMED:
                decoded.append(message)
        return decoded

    def _too_long(self, size: int) -> bool:
        if self._max_line_bytes is None or size <= self._max_line_bytes:
            return False
        self._buffer.clear()
        self._overflow = FrameTooLargeError(self._max_line_bytes)
        return True

"""Tests for MessageFramer line splitting and decoding."""

import pytest

from codescribe.protocols.errors import FrameTooLargeError
from codescribe.protocols.mcp.framer import MALFORMED, MessageFramer


class TestFeed:
    def test_single_complete_line(self) -> None:
        framer = MessageFramer()
        assert framer.feed(b'{"a":1}\n') == ['{"a":1}']
        assert framer.pending == b""

    def test_partial_line_is_buffered(self) -> None:
        framer = MessageFramer()
        assert framer.feed(b'{"a":') == []
        assert framer.pending == b'{"a":'
        assert framer.feed(b"1}\n") == ['{"a":1}']
        assert framer.pending == b""

    def test_multiple_lines_in_one_chunk(self) -> None:
        framer = MessageFramer()
        lines = framer.feed(b'{"a":1}\n{"b":2}\n{"c":')
        assert lines == ['{"a":1}', '{"b":2}']
        assert framer.pending == b'{"c":'

    def test_blank_lines_are_dropped(self) -> None:
        framer = MessageFramer()
        assert framer.feed(b"\n   \n\t\n") == []

    def test_crlf_is_stripped(self) -> None:
        framer = MessageFramer()
        assert framer.feed(b'{"a":1}\r\n') == ['{"a":1}']

    def test_multibyte_character_split_across_chunks(self) -> None:
        framer = MessageFramer()
        encoded = '{"text":"é"}\n'.encode()
        split = encoded.index(b"\xa9")  # second byte of "é"
        assert framer.feed(encoded[:split]) == []
        assert framer.feed(encoded[split:]) == ['{"text":"é"}']


class TestDecode:
    def test_valid_json(self) -> None:
        assert MessageFramer().decode('{"id":1}') == {"id": 1}

    def test_literal_null_is_not_malformed(self) -> None:
        assert MessageFramer().decode("null") is None

    def test_malformed_json_is_sentinel(self, caplog: pytest.LogCaptureFixture) -> None:
        assert MessageFramer().decode("{not json") is MALFORMED
        assert "malformed" in caplog.text

    def test_messages_skips_malformed_lines(self) -> None:
        framer = MessageFramer()
        messages = framer.messages(b'{"id":1}\ngarbage\n{"id":2}\n')
        assert messages == [{"id": 1}, {"id": 2}]


class TestMaxLineBytes:
    def test_complete_line_over_limit_raises(self) -> None:
        framer = MessageFramer(max_line_bytes=8)
        with pytest.raises(FrameTooLargeError, match="8 bytes"):
            framer.feed(b'{"a":"0123456789"}\n')

    def test_unterminated_tail_over_limit_raises(self) -> None:
        framer = MessageFramer(max_line_bytes=8)
        with pytest.raises(FrameTooLargeError):
            framer.feed(b"x" * 9)
        assert framer.pending == b""

    def test_line_at_limit_is_accepted(self) -> None:
        framer = MessageFramer(max_line_bytes=7)
        assert framer.feed(b'{"a":1}\n') == ['{"a":1}']

    def test_no_limit(self) -> None:
        framer = MessageFramer(max_line_bytes=None)
        payload = b"[" + b"1," * 100_000 + b"1]\n"
        assert len(framer.feed(payload)) == 1

    def test_lines_before_oversized_line_are_kept(self) -> None:
        framer = MessageFramer(max_line_bytes=16)
        lines = framer.feed(b'{"id":1}\n' + b"x" * 40 + b'\n{"id":2}\n')

        assert lines == ['{"id":1}']
        assert isinstance(framer.overflow, FrameTooLargeError)
        assert framer.pending == b""

    def test_feed_after_overflow_raises(self) -> None:
        framer = MessageFramer(max_line_bytes=16)
        framer.feed(b'{"id":1}\n' + b"y" * 40)
        assert framer.overflow is not None

        with pytest.raises(FrameTooLargeError):
            framer.feed(b'{"id":3}\n')

    def test_healthy_stream_has_no_overflow(self) -> None:
        framer = MessageFramer(max_line_bytes=16)
        framer.feed(b'{"id":1}\n')
        assert framer.overflow is None

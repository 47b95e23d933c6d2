"""Tests for the stdio transport helpers."""

import io
import json

from codescribe.protocols.mcp.transport import LineWriter, MessageSink, encode_line


class TestEncodeLine:
    def test_single_terminated_line(self) -> None:
        raw = encode_line({"jsonrpc": "2.0", "id": 1, "result": {"text": "a\nb"}})
        assert raw.endswith(b"\n")
        assert raw.count(b"\n") == 1
        assert json.loads(raw) == {"jsonrpc": "2.0", "id": 1, "result": {"text": "a\nb"}}

    def test_compact_separators(self) -> None:
        assert encode_line({"a": 1, "b": 2}) == b'{"a":1,"b":2}\n'

    def test_non_ascii_is_utf8(self) -> None:
        assert encode_line({"t": "é"}) == '{"t":"é"}\n'.encode()


class TestLineWriter:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(LineWriter(io.BytesIO()), MessageSink)

    async def test_send_writes_json_line(self) -> None:
        stream = io.BytesIO()
        writer = LineWriter(stream)

        await writer.send({"jsonrpc": "2.0", "id": 1, "result": {}})
        await writer.send({"jsonrpc": "2.0", "id": 2, "result": {}})

        lines = stream.getvalue().decode().splitlines()
        assert [json.loads(line)["id"] for line in lines] == [1, 2]

"""MCPServer — JSON-RPC dispatcher and connection lifecycle.

Inbound lines are decoded by a :class:`MessageFramer` and every message is
handled in its own task, so a slow ``tools/call`` never holds up the next
line. Responses are written as soon as each task finishes and are matched
to requests by ``id`` only.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from opentelemetry import trace

from codescribe.protocols.errors import (
    FrameTooLargeError,
    InternalError,
    InvalidRequestError,
    MethodNotFoundError,
    MissingParameterError,
    ProtocolError,
    RequestTimeoutError,
    ToolCallError,
)
from codescribe.protocols.mcp.framer import DEFAULT_MAX_LINE_BYTES, MessageFramer
from codescribe.protocols.mcp.models import (
    JSONRPC_VERSION,
    JsonRpcRequest,
    JsonRpcResponse,
    Method,
    ServerInfo,
)
from codescribe.utils.telemetry import (
    ATTR_REQUEST_ID,
    ATTR_RPC_METHOD,
    ATTR_TOOL_NAME,
    get_tracer,
)

if TYPE_CHECKING:
    from codescribe.collaborators.provider import Collaborators
    from codescribe.protocols.mcp.transport import MessageSink
    from codescribe.protocols.registry import CapabilityRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

_READ_CHUNK = 64 * 1024

MethodHandler = Callable[[JsonRpcRequest], Awaitable[dict[str, Any]]]


class Phase(str, Enum):
    """Connection lifecycle phase."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"


class MCPServer:
    """Serves a :class:`CapabilityRegistry` over newline-delimited JSON-RPC.

    Lifecycle::

        UNINITIALIZED --start()--> READY --shutdown--> SHUTTING_DOWN --stop()--> STOPPED

    :meth:`start` pushes an ``initialize`` result without waiting for the
    client; an explicit ``initialize`` request is answered with the same
    payload. After ``shutdown`` only ``initialize`` and ``shutdown`` are
    still accepted, but requests already in flight run to completion.

    Usage::

        server = MCPServer(registry, LineWriter(sys.stdout.buffer), info=info)
        await server.serve(await open_stdin_reader())
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        sink: MessageSink,
        *,
        info: ServerInfo,
        collaborators: Collaborators | None = None,
        request_timeout: float | None = None,
        max_line_bytes: int | None = DEFAULT_MAX_LINE_BYTES,
    ) -> None:
        self._registry = registry
        self._sink = sink
        self._info = info
        self._collaborators = collaborators
        self._request_timeout = request_timeout
        self._framer = MessageFramer(max_line_bytes)
        self._phase = Phase.UNINITIALIZED
        self._next_outbound_id = 1
        self._in_flight: set[asyncio.Task[JsonRpcResponse | None]] = set()

        self._handlers: dict[Method, MethodHandler] = {
            Method.INITIALIZE: self._handle_initialize,
            Method.SHUTDOWN: self._handle_shutdown,
            Method.TOOLS_LIST: self._handle_tools_list,
            Method.TOOLS_CALL: self._handle_tools_call,
            Method.RESOURCES_LIST: self._handle_resources_list,
            Method.RESOURCES_GET: self._handle_resources_get,
        }
        missing = set(Method) - set(self._handlers)
        if missing:
            msg = f"No handler for methods: {sorted(m.value for m in missing)}"
            raise RuntimeError(msg)

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Move to READY and push the capability advertisement."""
        if self._phase is not Phase.UNINITIALIZED:
            return
        self._phase = Phase.READY
        await self._send(JsonRpcResponse.success(self._allocate_id(), self._info.to_wire()))
        logger.info("MCP server started and ready to receive messages")

    async def stop(self, *, drain: bool = True) -> None:
        """Stop serving and release collaborators.

        With ``drain`` the in-flight requests are awaited first; without it
        they are cancelled.
        """
        if self._phase is Phase.STOPPED:
            return
        if drain:
            await self.wait_idle()
        else:
            for task in list(self._in_flight):
                task.cancel()
            await asyncio.gather(*self._in_flight, return_exceptions=True)
        self._phase = Phase.STOPPED
        if self._collaborators is not None:
            await self._collaborators.close()
        logger.info("MCP server stopped")

    async def wait_idle(self) -> None:
        """Wait until every dispatched request has been answered."""
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)

    async def serve(self, reader: asyncio.StreamReader) -> None:
        """Start, read until EOF or a framing failure, then stop."""
        await self.start()
        try:
            await self._read_loop(reader)
        except asyncio.CancelledError:
            await self.stop(drain=False)
            raise
        await self.stop()

    async def _read_loop(self, reader: asyncio.StreamReader) -> None:
        while self._phase is not Phase.STOPPED:
            chunk = await reader.read(_READ_CHUNK)
            if not chunk:
                logger.info("Input closed")
                return
            try:
                self.feed(chunk)
            except FrameTooLargeError as exc:
                logger.error("Closing connection: %s", exc)
                await self._send(JsonRpcResponse.failure(None, exc.to_error()))
                return

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    def feed(self, chunk: bytes) -> list[asyncio.Task[JsonRpcResponse | None]]:
        """Frame *chunk* and dispatch every complete message without awaiting it.

        Messages that precede an oversized line in the same chunk are
        dispatched before the overflow is reported.

        Raises:
            FrameTooLargeError: If a line exceeds the configured limit.
        """
        tasks = []
        for message in self._framer.messages(chunk):
            task = asyncio.create_task(self.handle_message(message))
            self._in_flight.add(task)
            task.add_done_callback(self._in_flight.discard)
            tasks.append(task)
        if self._framer.overflow is not None:
            raise self._framer.overflow
        return tasks

    async def handle_message(self, message: Any) -> JsonRpcResponse | None:
        """Handle one decoded message and send its response, if it gets one."""
        response = await self._respond(message)
        if response is not None:
            await self._send(response)
        return response

    async def _respond(self, message: Any) -> JsonRpcResponse | None:
        if not isinstance(message, dict):
            return JsonRpcResponse.failure(None, InvalidRequestError("Invalid Request").to_error())

        message_id = message.get("id")
        if message.get("jsonrpc") != JSONRPC_VERSION:
            return JsonRpcResponse.failure(message_id, InvalidRequestError("Invalid Request").to_error())

        if not isinstance(message.get("method"), str):
            if "result" in message or "error" in message:
                logger.debug("Ignoring client response for id %r", message_id)
                return None
            error = InvalidRequestError("Invalid Request: missing method")
            return JsonRpcResponse.failure(message_id, error.to_error())

        request = JsonRpcRequest.from_message(message)
        logger.debug("Received %s (id=%r)", request.method, request.id)

        with _tracer.start_as_current_span("mcp.request") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            span.set_attribute(ATTR_REQUEST_ID, str(request.id))
            try:
                response = JsonRpcResponse.success(request.id, await self._dispatch(request))
            except ProtocolError as exc:
                span.set_status(trace.StatusCode.ERROR, exc.message)
                response = JsonRpcResponse.failure(request.id, exc.to_error())
            except Exception as exc:
                logger.exception("Error handling method %s", request.method)
                span.set_status(trace.StatusCode.ERROR, str(exc))
                error = InternalError(f"Error handling method {request.method}: {exc}")
                response = JsonRpcResponse.failure(request.id, error.to_error())

        if request.is_notification:
            return None
        return response

    async def _dispatch(self, request: JsonRpcRequest) -> dict[str, Any]:
        try:
            method = Method(request.method)
        except ValueError:
            raise MethodNotFoundError(request.method) from None

        if self._phase in (Phase.SHUTTING_DOWN, Phase.STOPPED) and method not in (
            Method.INITIALIZE,
            Method.SHUTDOWN,
        ):
            msg = "Server is shutting down"
            raise InvalidRequestError(msg)

        handler = self._handlers[method]
        try:
            async with asyncio.timeout(self._request_timeout) as deadline:
                return await handler(request)
        except TimeoutError:
            if deadline.expired():
                assert self._request_timeout is not None
                logger.warning("Request %r (%s) timed out", request.id, request.method)
                raise RequestTimeoutError(self._request_timeout) from None
            raise

    # ------------------------------------------------------------------
    # Method handlers
    # ------------------------------------------------------------------

    async def _handle_initialize(self, request: JsonRpcRequest) -> dict[str, Any]:
        if self._phase is Phase.UNINITIALIZED:
            self._phase = Phase.READY
        return self._info.to_wire()

    async def _handle_shutdown(self, request: JsonRpcRequest) -> dict[str, Any]:
        if self._phase is not Phase.STOPPED:
            self._phase = Phase.SHUTTING_DOWN
        logger.info("Shutdown requested")
        return {}

    async def _handle_tools_list(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {"tools": [tool.to_wire() for tool in self._registry.list_tools()]}

    async def _handle_tools_call(self, request: JsonRpcRequest) -> dict[str, Any]:
        name = request.params.get("name")
        if not name or not isinstance(name, str):
            msg = "Missing tool name"
            raise MissingParameterError(msg)
        trace.get_current_span().set_attribute(ATTR_TOOL_NAME, name)

        handler = self._registry.get_tool_handler(name)

        arguments = request.params.get("input")
        if arguments is None:
            arguments = request.params.get("arguments", {})
        if not isinstance(arguments, dict):
            msg = "Tool input must be an object"
            raise MissingParameterError(msg)

        try:
            result = await handler(arguments)
        except ProtocolError:
            raise
        except Exception as exc:
            logger.exception("Error handling tool call %s", name)
            raise ToolCallError(name, str(exc)) from exc
        return {"result": result}

    async def _handle_resources_list(self, request: JsonRpcRequest) -> dict[str, Any]:
        return {"resources": [resource.to_wire() for resource in self._registry.list_resources()]}

    async def _handle_resources_get(self, request: JsonRpcRequest) -> dict[str, Any]:
        name = request.params.get("name")
        if not name or not isinstance(name, str):
            msg = "Missing resource name"
            raise MissingParameterError(msg)

        handler = self._registry.get_resource_handler(name)
        try:
            content = await handler()
        except ProtocolError:
            raise
        except Exception as exc:
            logger.exception("Error getting resource %s", name)
            raise InternalError(f"Error getting resource {name}: {exc}") from exc
        return {"content": content}

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    def _allocate_id(self) -> int:
        message_id = self._next_outbound_id
        self._next_outbound_id += 1
        return message_id

    async def _send(self, response: JsonRpcResponse) -> None:
        try:
            await self._sink.send(response.to_wire())
        except OSError as exc:
            logger.error("Failed to write response for id %r: %s", response.id, exc)

"""CapabilityRegistry — name-to-handler maps for tools and resources."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from codescribe.protocols.errors import UnknownCapabilityError
from codescribe.protocols.mcp.models import ResourceDescriptor, ToolDescriptor

ToolHandler = Callable[[dict[str, Any]], Awaitable[Any]]
ResourceHandler = Callable[[], Awaitable[Any]]


class CapabilityRegistry:
    """Holds tool and resource descriptors together with their handlers.

    Listing preserves registration order. The registry is populated once at
    startup; registering more later is allowed but never changes what is
    already there.

    Usage::

        registry = CapabilityRegistry()
        registry.register_tool(descriptor, handler)

        tools = registry.list_tools()
        handler = registry.get_tool_handler("count_tokens")
    """

    def __init__(self) -> None:
        self._tools: dict[str, tuple[ToolDescriptor, ToolHandler]] = {}
        self._resources: dict[str, tuple[ResourceDescriptor, ResourceHandler]] = {}

    def register_tool(self, descriptor: ToolDescriptor, handler: ToolHandler) -> None:
        if descriptor.name in self._tools:
            msg = f"Tool already registered: {descriptor.name}"
            raise ValueError(msg)
        self._tools[descriptor.name] = (descriptor, handler)

    def register_resource(self, descriptor: ResourceDescriptor, handler: ResourceHandler) -> None:
        if descriptor.name in self._resources:
            msg = f"Resource already registered: {descriptor.name}"
            raise ValueError(msg)
        self._resources[descriptor.name] = (descriptor, handler)

    def list_tools(self) -> list[ToolDescriptor]:
        return [descriptor for descriptor, _ in self._tools.values()]

    def list_resources(self) -> list[ResourceDescriptor]:
        return [descriptor for descriptor, _ in self._resources.values()]

    def get_tool_handler(self, name: str) -> ToolHandler:
        """Resolve a tool name, raising :class:`UnknownCapabilityError` if absent."""
        entry = self._tools.get(name)
        if entry is None:
            raise UnknownCapabilityError("tool", name)
        return entry[1]

    def get_resource_handler(self, name: str) -> ResourceHandler:
        """Resolve a resource name, raising :class:`UnknownCapabilityError` if absent."""
        entry = self._resources.get(name)
        if entry is None:
            raise UnknownCapabilityError("resource", name)
        return entry[1]

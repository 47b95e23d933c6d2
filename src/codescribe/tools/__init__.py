"""Tool catalog and handlers."""

from codescribe.tools.catalog import RESOURCES, SETTINGS_RESOURCE, TOOLS
from codescribe.tools.handlers import DocumentationTools

__all__ = [
    "RESOURCES",
    "SETTINGS_RESOURCE",
    "TOOLS",
    "DocumentationTools",
]

"""Data models exchanged with collaborators."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

OutputStyle = Literal["markdown", "plain", "xml"]


class DirectoryNode(BaseModel):
    """One entry of a scanned directory tree."""

    name: str
    path: str
    type: Literal["file", "directory"]
    selected: bool = True
    children: list[DirectoryNode] | None = None

    def file_paths(self) -> list[str]:
        """Flatten the tree to its file paths, depth-first in listing order."""
        if self.type == "file":
            return [self.path]
        paths: list[str] = []
        for child in self.children or []:
            paths.extend(child.file_paths())
        return paths

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class PackOptions(BaseModel):
    """Options forwarded to the packaging tool for a single call."""

    style: OutputStyle = "markdown"
    security_check: bool = False
    ignore_patterns: list[str] = Field(default_factory=list)

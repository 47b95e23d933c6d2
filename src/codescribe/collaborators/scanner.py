"""Directory scanning with ignore patterns."""

from __future__ import annotations

import asyncio
import fnmatch
import os
from collections.abc import Sequence

from codescribe.collaborators.models import DirectoryNode


def should_ignore(relative_path: str, name: str, patterns: Sequence[str]) -> bool:
    """Return ``True`` if an entry matches any ignore pattern.

    Patterns containing ``*`` are globs matched against the entry name.
    Plain patterns match the entry name exactly, or the relative path and
    everything beneath it.
    """
    relative = relative_path.replace(os.sep, "/")
    for pattern in patterns:
        if "*" in pattern:
            if fnmatch.fnmatchcase(name, pattern):
                return True
            continue
        plain = pattern.rstrip("/")
        if name == plain or relative == plain or relative.startswith(plain + "/"):
            return True
    return False


def scan_directory_sync(root: str, ignore_patterns: Sequence[str]) -> DirectoryNode:
    """Walk *root* and build the tree, entries sorted by name.

    Symlinked directories are listed as files and never descended into.

    Raises:
        OSError: If *root* cannot be listed.
    """
    root = os.path.abspath(root)
    tree = DirectoryNode(name=os.path.basename(root) or root, path=root, type="directory", children=[])
    _fill(root, root, tree, list(ignore_patterns))
    return tree


def _fill(root: str, directory: str, parent: DirectoryNode, patterns: list[str]) -> None:
    with os.scandir(directory) as it:
        entries = sorted(it, key=lambda e: e.name)

    assert parent.children is not None
    for entry in entries:
        relative = os.path.relpath(entry.path, root)
        if should_ignore(relative, entry.name, patterns):
            continue
        if entry.is_dir(follow_symlinks=False):
            node = DirectoryNode(name=entry.name, path=entry.path, type="directory", children=[])
            parent.children.append(node)
            _fill(root, entry.path, node, patterns)
        else:
            parent.children.append(DirectoryNode(name=entry.name, path=entry.path, type="file"))


async def scan_directory(root: str, ignore_patterns: Sequence[str]) -> DirectoryNode:
    """Async wrapper running :func:`scan_directory_sync` on a worker thread."""
    return await asyncio.to_thread(scan_directory_sync, root, list(ignore_patterns))

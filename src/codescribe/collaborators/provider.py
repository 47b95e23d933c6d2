"""Collaborators protocol — everything the tool handlers reach outside the process for.

Handlers only ever talk to this interface, so tests can swap in mocks and
front ends can swap in their own file-system or packaging back ends.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from codescribe.collaborators.assembler import assemble_document
from codescribe.collaborators.scanner import scan_directory

if TYPE_CHECKING:
    from codescribe.collaborators.models import DirectoryNode, PackOptions
    from codescribe.collaborators.repomix import RepomixPackager
    from codescribe.collaborators.settings_store import SettingsStore
    from codescribe.config import Settings


@runtime_checkable
class Collaborators(Protocol):
    """Async, single-shot, non-retrying operations used by the handlers."""

    async def scan_directory(self, root: str, ignore_patterns: Sequence[str]) -> DirectoryNode:
        """Return the directory tree under *root*, skipping ignored entries."""
        ...

    async def assemble_document(self, root: str, file_paths: Sequence[str]) -> str:
        """Return the markdown document for *file_paths*."""
        ...

    async def persist_settings(self, settings: Settings) -> bool:
        """Save *settings*; returns ``True`` on success."""
        ...

    async def package_remote(self, url: str, options: PackOptions) -> str:
        """Pack a remote repository with the external packaging tool."""
        ...

    async def package_local_with_security(self, path: str, options: PackOptions) -> str:
        """Pack a local directory with secret scanning enabled."""
        ...

    async def close(self) -> None:
        """Release owned resources (e.g. terminate subprocesses)."""
        ...


class LocalCollaborators:
    """Default :class:`Collaborators` backed by the local file system.

    ``packager`` may be ``None``, in which case the packaging operations fail
    with a clear error instead of spawning anything.
    """

    def __init__(
        self,
        *,
        store: SettingsStore | None = None,
        packager: RepomixPackager | None = None,
    ) -> None:
        self._store = store
        self._packager = packager

    @property
    def packager(self) -> RepomixPackager | None:
        return self._packager

    async def scan_directory(self, root: str, ignore_patterns: Sequence[str]) -> DirectoryNode:
        return await scan_directory(root, ignore_patterns)

    async def assemble_document(self, root: str, file_paths: Sequence[str]) -> str:
        return await assemble_document(root, file_paths)

    async def persist_settings(self, settings: Settings) -> bool:
        if self._store is None:
            return False
        return await self._store.save(settings)

    async def package_remote(self, url: str, options: PackOptions) -> str:
        return await self._require_packager().package_remote(url, options)

    async def package_local_with_security(self, path: str, options: PackOptions) -> str:
        return await self._require_packager().package_local_with_security(path, options)

    async def close(self) -> None:
        if self._packager is not None:
            await self._packager.close()

    def _require_packager(self) -> RepomixPackager:
        if self._packager is None:
            msg = "Repomix integration not initialized"
            raise RuntimeError(msg)
        return self._packager

"""Error types raised by collaborators (file system, repomix, settings)."""

from __future__ import annotations


class CollaboratorError(Exception):
    """Base error for all collaborator failures."""


class SettingsError(CollaboratorError):
    """A settings file could not be read, parsed, or written."""


class PackagingError(CollaboratorError):
    """The external packaging tool failed or produced no output."""

    def __init__(self, detail: str = "", *, exit_code: int | None = None) -> None:
        self.detail = detail
        self.exit_code = exit_code
        if exit_code is not None:
            message = f"Repomix exited with code {exit_code}" + (f": {detail}" if detail else "")
        else:
            message = detail or "Repomix failed"
        super().__init__(message)

"""Collaborators — file system, settings persistence, and repomix delegation."""

from codescribe.collaborators.errors import CollaboratorError, PackagingError, SettingsError
from codescribe.collaborators.models import DirectoryNode, OutputStyle, PackOptions
from codescribe.collaborators.provider import Collaborators, LocalCollaborators
from codescribe.collaborators.repomix import RepomixPackager
from codescribe.collaborators.settings_store import SettingsStore

__all__ = [
    "CollaboratorError",
    "Collaborators",
    "DirectoryNode",
    "LocalCollaborators",
    "OutputStyle",
    "PackOptions",
    "PackagingError",
    "RepomixPackager",
    "SettingsError",
    "SettingsStore",
]

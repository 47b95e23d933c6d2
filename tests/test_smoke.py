"""Smoke test to verify the project scaffolding works."""

from __future__ import annotations


def test_import() -> None:
    import codescribe

    assert codescribe.__version__ == "1.0.0"


def test_cli_entrypoint() -> None:
    from codescribe.cli import main

    assert callable(main)


def test_public_imports() -> None:
    from codescribe.collaborators import LocalCollaborators
    from codescribe.protocols import CapabilityRegistry
    from codescribe.protocols.mcp import MCPServer, MessageFramer
    from codescribe.tools import DocumentationTools

    assert MCPServer is not None
    assert MessageFramer is not None
    assert CapabilityRegistry is not None
    assert LocalCollaborators is not None
    assert DocumentationTools is not None

"""DocumentationTools — the tool and resource handlers behind ``tools/call``.

Handlers read :class:`Settings` but never write to it. A per-request
``ignorePatterns`` override is resolved to a plain list and passed down to
the collaborator call, so concurrent requests cannot see each other's
overrides.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from codescribe.collaborators.models import PackOptions
from codescribe.tools import catalog
from codescribe.tools.inputs import (
    CountTokensInput,
    GenerateMarkdownInput,
    GetDirectoryStructureInput,
    PackRemoteRepositoryInput,
    ProcessWithSecurityInput,
    parse_input,
)

if TYPE_CHECKING:
    from codescribe.collaborators.provider import Collaborators
    from codescribe.config import Settings
    from codescribe.protocols.registry import CapabilityRegistry
    from codescribe.tokens.stats import StatsCalculator

logger = logging.getLogger(__name__)


class DocumentationTools:
    """Binds the tool catalog to collaborator calls.

    Usage::

        tools = DocumentationTools(settings, collaborators, stats)
        tools.register(registry)
    """

    def __init__(
        self,
        settings: Settings,
        collaborators: Collaborators,
        stats: StatsCalculator,
    ) -> None:
        self._settings = settings
        self._collaborators = collaborators
        self._stats = stats

    def register(self, registry: CapabilityRegistry) -> None:
        """Register every tool in catalog order, then the settings resource."""
        registry.register_tool(catalog.GENERATE_MARKDOWN, self.generate_markdown)
        registry.register_tool(catalog.PACK_REMOTE_REPOSITORY, self.pack_remote_repository)
        registry.register_tool(catalog.PROCESS_WITH_SECURITY, self.process_with_security)
        registry.register_tool(catalog.COUNT_TOKENS, self.count_tokens)
        registry.register_tool(catalog.GET_DIRECTORY_STRUCTURE, self.get_directory_structure)
        registry.register_resource(catalog.SETTINGS_RESOURCE, self.settings_resource)

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    async def generate_markdown(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Scan (unless paths are given), assemble, and measure a document."""
        params = parse_input(GenerateMarkdownInput, catalog.GENERATE_MARKDOWN.name, arguments)

        paths = params.selected_paths
        if paths is None:
            patterns = self._effective_patterns(params.ignore_patterns)
            tree = await self._collaborators.scan_directory(params.folder_path, patterns)
            paths = tree.file_paths()

        markdown = await self._collaborators.assemble_document(params.folder_path, paths)
        stats = await self._stats.compute(markdown)
        return {"success": True, "markdownContent": markdown, "stats": stats.to_wire()}

    async def pack_remote_repository(self, arguments: dict[str, Any]) -> dict[str, Any]:
        params = parse_input(PackRemoteRepositoryInput, catalog.PACK_REMOTE_REPOSITORY.name, arguments)
        logger.info("Processing remote repository: %s", params.repo_url)

        options = PackOptions(
            style=params.style,
            security_check=params.security_check,
            ignore_patterns=list(self._settings.ignore_patterns),
        )
        try:
            content = await self._collaborators.package_remote(params.repo_url, options)
        except Exception as exc:
            msg = f"Error processing remote repository: {exc}"
            raise RuntimeError(msg) from exc

        stats = await self._stats.compute(content)
        return {"content": content, "stats": stats.to_wire()}

    async def process_with_security(self, arguments: dict[str, Any]) -> dict[str, Any]:
        params = parse_input(ProcessWithSecurityInput, catalog.PROCESS_WITH_SECURITY.name, arguments)
        logger.info("Processing folder with security checks: %s", params.folder_path)

        options = PackOptions(
            style=params.style,
            security_check=True,
            ignore_patterns=list(self._settings.ignore_patterns),
        )
        try:
            content = await self._collaborators.package_local_with_security(params.folder_path, options)
        except Exception as exc:
            msg = f"Error processing with security: {exc}"
            raise RuntimeError(msg) from exc

        stats = await self._stats.compute(content)
        return {"content": content, "stats": stats.to_wire()}

    async def count_tokens(self, arguments: dict[str, Any]) -> dict[str, Any]:
        params = parse_input(CountTokensInput, catalog.COUNT_TOKENS.name, arguments)
        stats = await self._stats.compute(params.text, model=params.model)
        return {"success": True, "stats": stats.to_wire()}

    async def get_directory_structure(self, arguments: dict[str, Any]) -> dict[str, Any]:
        params = parse_input(GetDirectoryStructureInput, catalog.GET_DIRECTORY_STRUCTURE.name, arguments)
        patterns = self._effective_patterns(params.ignore_patterns)
        tree = await self._collaborators.scan_directory(params.folder_path, patterns)
        return {"success": True, "directoryStructure": tree.to_wire()}

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    async def settings_resource(self) -> dict[str, Any]:
        """Live settings with the API key redacted."""
        return self._settings.redacted()

    def _effective_patterns(self, override: list[str] | None) -> list[str]:
        if override is not None:
            return list(override)
        return list(self._settings.ignore_patterns)

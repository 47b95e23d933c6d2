"""Input models for each tool — validated before any collaborator is called."""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from codescribe.collaborators.models import OutputStyle
from codescribe.protocols.errors import MissingParameterError


class _ToolInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GenerateMarkdownInput(_ToolInput):
    folder_path: str = Field(alias="folderPath", min_length=1)
    selected_paths: list[str] | None = Field(default=None, alias="selectedPaths")
    ignore_patterns: list[str] | None = Field(default=None, alias="ignorePatterns")


class PackRemoteRepositoryInput(_ToolInput):
    repo_url: str = Field(alias="repoUrl", min_length=1)
    security_check: bool = Field(default=False, alias="securityCheck")
    style: OutputStyle = "markdown"


class ProcessWithSecurityInput(_ToolInput):
    folder_path: str = Field(alias="folderPath", min_length=1)
    style: OutputStyle = "markdown"


class CountTokensInput(_ToolInput):
    text: str = Field(min_length=1)
    model: str | None = None


class GetDirectoryStructureInput(_ToolInput):
    folder_path: str = Field(alias="folderPath", min_length=1)
    ignore_patterns: list[str] | None = Field(default=None, alias="ignorePatterns")


T = TypeVar("T", bound=BaseModel)


def parse_input(model: type[T], tool: str, arguments: dict[str, Any]) -> T:
    """Validate *arguments* for *tool*.

    Raises:
        MissingParameterError: Listing every offending field.
    """
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}" for err in exc.errors()
        )
        raise MissingParameterError(f"Invalid input for {tool}: {problems}") from exc

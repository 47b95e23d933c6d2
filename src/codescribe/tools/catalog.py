"""Static descriptors for the tools and resources the server exposes."""

from __future__ import annotations

from codescribe.protocols.mcp.models import ResourceDescriptor, ToolDescriptor

_STRING_LIST = {"type": "array", "items": {"type": "string"}}

_STYLE = {
    "type": "string",
    "description": "Output style: 'markdown', 'plain', or 'xml' (default: 'markdown')",
    "enum": ["markdown", "plain", "xml"],
}

_FOLDER_PATH = {
    "type": "string",
    "description": "Path to the folder containing source code",
}

GENERATE_MARKDOWN = ToolDescriptor(
    name="generate_markdown",
    description="Generates markdown documentation from source code in a specified folder",
    input_schema={
        "type": "object",
        "properties": {
            "folderPath": _FOLDER_PATH,
            "selectedPaths": {
                **_STRING_LIST,
                "description": "Optional list of specific file paths to include",
            },
            "ignorePatterns": {
                **_STRING_LIST,
                "description": "Optional list of patterns to ignore",
            },
        },
        "required": ["folderPath"],
    },
)

PACK_REMOTE_REPOSITORY = ToolDescriptor(
    name="pack_remote_repository",
    description="Process a remote Git repository and generate markdown documentation",
    input_schema={
        "type": "object",
        "properties": {
            "repoUrl": {
                "type": "string",
                "description": "URL of the repository to process (e.g., 'owner/repo' or full URL)",
            },
            "securityCheck": {
                "type": "boolean",
                "description": "Whether to perform security checks (default: false)",
            },
            "style": _STYLE,
        },
        "required": ["repoUrl"],
    },
)

PROCESS_WITH_SECURITY = ToolDescriptor(
    name="process_with_security",
    description=(
        "Process a local repository with security checks to identify and filter "
        "sensitive information"
    ),
    input_schema={
        "type": "object",
        "properties": {
            "folderPath": _FOLDER_PATH,
            "style": _STYLE,
        },
        "required": ["folderPath"],
    },
)

COUNT_TOKENS = ToolDescriptor(
    name="count_tokens",
    description="Counts tokens in a text string using various tokenizers",
    input_schema={
        "type": "object",
        "properties": {
            "text": {"type": "string", "minLength": 1, "description": "The text to count tokens for"},
            "model": {
                "type": "string",
                "enum": ["gpt-4o", "claude"],
                "description": "The model to use for token counting",
            },
        },
        "required": ["text"],
    },
)

GET_DIRECTORY_STRUCTURE = ToolDescriptor(
    name="get_directory_structure",
    description="Returns the directory structure for a given folder path",
    input_schema={
        "type": "object",
        "properties": {
            "folderPath": {"type": "string", "description": "Path to the folder to scan"},
            "ignorePatterns": {
                **_STRING_LIST,
                "description": "Optional list of patterns to ignore",
            },
        },
        "required": ["folderPath"],
    },
)

TOOLS: tuple[ToolDescriptor, ...] = (
    GENERATE_MARKDOWN,
    PACK_REMOTE_REPOSITORY,
    PROCESS_WITH_SECURITY,
    COUNT_TOKENS,
    GET_DIRECTORY_STRUCTURE,
)

SETTINGS_RESOURCE = ResourceDescriptor(
    name="settings",
    description="Current settings for the Markdown Generator",
    content_schema={
        "type": "object",
        "properties": {
            "ignorePatterns": {
                **_STRING_LIST,
                "description": "Patterns to ignore when generating markdown",
            },
            "anthropicApiKey": {
                "type": "string",
                "description": "Anthropic API key for Claude token counting",
            },
        },
    },
)

RESOURCES: tuple[ResourceDescriptor, ...] = (SETTINGS_RESOURCE,)

"""Shared CLI output formatters and logging setup."""

from __future__ import annotations

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from codescribe.protocols.mcp.models import ToolDescriptor  # noqa: TC001
from codescribe.tokens.stats import TokenStats  # noqa: TC001

console = Console()
# Diagnostics go to stderr: under ``serve`` stdout is the JSON-RPC channel.
err_console = Console(stderr=True)


def configure_logging(*, verbose: bool = False) -> None:
    """Route all logging to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False, rich_tracebacks=True)],
        force=True,
    )


def print_tools_table(tools: list[ToolDescriptor], *, as_json: bool = False) -> None:
    """Pretty-print the tool catalog as a table."""
    if as_json:
        console.print_json(json.dumps([tool.to_wire() for tool in tools]))
        return

    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Required")
    table.add_column("Description")

    for tool in tools:
        required = ", ".join(tool.input_schema.get("required", [])) or "-"
        table.add_row(tool.name, required, _truncate(tool.description))

    console.print(table)


def print_stats(stats: TokenStats, *, as_json: bool = False) -> None:
    """Pretty-print character and token counts."""
    if as_json:
        console.print_json(json.dumps(stats.to_wire()))
        return

    console.print(f"  Characters:     {stats.character_count}")
    console.print(f"  OpenAI tokens:  {_count_or_na(stats.open_ai_tokens)}")
    console.print(f"  Claude tokens:  {_count_or_na(stats.claude_tokens)}")


def print_settings(content: dict[str, Any]) -> None:
    console.print_json(json.dumps(content))


def _count_or_na(value: int) -> str:
    return str(value) if value >= 0 else "n/a"


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."

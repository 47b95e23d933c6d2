"""CLI subcommand registration."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all subcommands on the CLI group."""
    from codescribe.cli_commands.count import count_tokens_cmd
    from codescribe.cli_commands.serve import serve
    from codescribe.cli_commands.settings import settings
    from codescribe.cli_commands.tools import tools

    cli.add_command(serve)
    cli.add_command(tools)
    cli.add_command(count_tokens_cmd)
    cli.add_command(settings)

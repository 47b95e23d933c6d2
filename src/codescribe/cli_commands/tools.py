"""``codescribe tools`` — list the tools the server exposes."""

from __future__ import annotations

import click

from codescribe.cli_commands._output import print_tools_table


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print the raw descriptors as JSON.")
def tools(as_json: bool) -> None:
    """List the tools served over MCP."""
    from codescribe.tools.catalog import TOOLS

    print_tools_table(list(TOOLS), as_json=as_json)

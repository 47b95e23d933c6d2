"""CodeScribe CLI entrypoint."""

from __future__ import annotations

import click

from codescribe import __version__


@click.group()
@click.version_option(version=__version__, prog_name="codescribe")
def main() -> None:
    """CodeScribe — markdown documentation tools served over MCP."""


# Register subcommands
from codescribe.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()

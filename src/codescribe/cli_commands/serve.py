"""``codescribe serve`` — run the MCP server on stdin/stdout."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from codescribe.cli_commands._output import configure_logging, err_console


@click.command()
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON or YAML settings file.",
)
@click.option(
    "--timeout",
    type=float,
    default=600.0,
    show_default=True,
    help="Per-request deadline in seconds (0 disables).",
)
@click.option(
    "--max-line-bytes",
    type=int,
    default=64 * 1024 * 1024,
    show_default=True,
    help="Largest accepted request line (0 disables).",
)
@click.option(
    "--repomix-command",
    default="npx --yes repomix",
    show_default=True,
    help="Command used to invoke repomix.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr.")
@click.option("--telemetry", is_flag=True, help="Print trace spans to stderr.")
@click.option(
    "--otlp-endpoint",
    default=None,
    metavar="URL",
    help="Export trace spans over OTLP/gRPC to this collector.",
)
def serve(
    settings_path: Path | None,
    timeout: float,
    max_line_bytes: int,
    repomix_command: str,
    verbose: bool,
    telemetry: bool,
    otlp_endpoint: str | None,
) -> None:
    """Serve the documentation tools over JSON-RPC on stdio."""
    import shlex

    from codescribe.app import serve_stdio
    from codescribe.collaborators.errors import CollaboratorError
    from codescribe.collaborators.settings_store import SettingsStore
    from codescribe.config import ServerConfig

    configure_logging(verbose=verbose)

    if telemetry or otlp_endpoint:
        from codescribe.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(console=telemetry, otlp_endpoint=otlp_endpoint)
        except ImportError as exc:
            err_console.print(f"[yellow]Telemetry disabled:[/yellow] {exc}")

    store = SettingsStore(settings_path)
    try:
        settings = store.load()
    except CollaboratorError as exc:
        err_console.print(f"[red]Settings error:[/red] {exc}")
        sys.exit(1)

    config = ServerConfig(
        request_timeout=timeout or None,
        max_line_bytes=max_line_bytes or None,
        repomix_command=shlex.split(repomix_command),
    )

    try:
        asyncio.run(serve_stdio(settings, config, store=store))
    except CollaboratorError as exc:
        err_console.print(f"[red]Startup error:[/red] {exc}")
        sys.exit(1)

"""``codescribe settings`` — inspect and initialise the settings file."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

from codescribe.cli_commands._output import console, err_console, print_settings


@click.group()
def settings() -> None:
    """Inspect and initialise settings."""


@settings.command("show")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON or YAML settings file.",
)
def show(settings_path: Path | None) -> None:
    """Print the effective settings with the API key redacted."""
    from codescribe.collaborators.errors import SettingsError
    from codescribe.collaborators.settings_store import SettingsStore

    try:
        loaded = SettingsStore(settings_path).load()
    except SettingsError as exc:
        err_console.print(f"[red]Settings error:[/red] {exc}")
        sys.exit(1)

    print_settings(loaded.redacted())


@settings.command("init")
@click.argument("path", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
@click.option(
    "--ignore",
    "extra_ignores",
    multiple=True,
    help="Additional ignore pattern (repeatable).",
)
def init(path: Path, force: bool, extra_ignores: tuple[str, ...]) -> None:
    """Write a settings file with the default ignore patterns to PATH."""
    from codescribe.collaborators.errors import SettingsError
    from codescribe.collaborators.provider import LocalCollaborators
    from codescribe.collaborators.settings_store import SettingsStore
    from codescribe.config import Settings

    if path.exists() and not force:
        err_console.print(f"[red]{path} already exists[/red] (use --force to overwrite)")
        sys.exit(1)

    defaults = Settings()
    defaults.ignore_patterns.extend(p for p in extra_ignores if p not in defaults.ignore_patterns)

    collaborators = LocalCollaborators(store=SettingsStore(path))
    try:
        asyncio.run(collaborators.persist_settings(defaults))
    except SettingsError as exc:
        err_console.print(f"[red]Settings error:[/red] {exc}")
        sys.exit(1)

    console.print(f"[green]Wrote settings to {path}[/green]")

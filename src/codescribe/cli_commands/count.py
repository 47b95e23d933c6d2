"""``codescribe count-tokens`` — character and token counts for a text."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TextIO

import click

from codescribe.cli_commands._output import configure_logging, print_stats


@click.command("count-tokens")
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--model", default="gpt-4o", show_default=True, help="Model for the tiktoken count.")
@click.option(
    "--settings",
    "settings_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file providing the Anthropic API key.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the stats as JSON.")
def count_tokens_cmd(source: TextIO, model: str, settings_path: Path | None, as_json: bool) -> None:
    """Count tokens in SOURCE (a file, or ``-`` for stdin)."""
    from codescribe.collaborators.settings_store import SettingsStore
    from codescribe.tokens.stats import StatsCalculator

    configure_logging()
    text = source.read()
    settings = SettingsStore(settings_path).load()
    stats = asyncio.run(StatsCalculator(settings).compute(text, model=model))
    print_stats(stats, as_json=as_json)

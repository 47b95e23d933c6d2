"""Tests for ``codescribe count-tokens`` CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from codescribe.cli import main


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


class TestCountTokens:
    def test_stdin_json(self) -> None:
        result = CliRunner().invoke(main, ["count-tokens", "--json"], input="hello big world")

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "characterCount": 15,
            "openAiTokens": 3,
            "claudeTokens": 4,
        }

    def test_file(self, tmp_path: Path) -> None:
        path = tmp_path / "doc.md"
        path.write_text("abcdefgh")

        result = CliRunner().invoke(main, ["count-tokens", str(path)])

        assert result.exit_code == 0
        assert "Characters:" in result.stdout
        assert "8" in result.stdout
        assert "Claude tokens:" in result.stdout

"""Tests for ``codescribe settings`` CLI commands."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from codescribe.cli import main
from codescribe.cli_commands._output import configure_logging


@pytest.fixture(autouse=True)
def _no_env_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)


class TestSettingsShow:
    def test_defaults(self) -> None:
        result = CliRunner().invoke(main, ["settings", "show"])

        assert result.exit_code == 0
        content = json.loads(result.stdout)
        assert "node_modules" in content["ignorePatterns"]
        assert content["anthropicApiKey"] == ""

    def test_redacts_key(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"anthropicApiKey": "sk-very-secret"}))

        result = CliRunner().invoke(main, ["settings", "show", "--settings", str(path)])

        assert result.exit_code == 0
        assert "sk-very-secret" not in result.output
        assert json.loads(result.stdout)["anthropicApiKey"] == "[REDACTED]"

    def test_stdout_is_pure_json_with_logging_enabled(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"ignorePatterns": ["dist"]}))
        configure_logging(verbose=True)

        result = CliRunner().invoke(main, ["settings", "show", "--settings", str(path)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["ignorePatterns"] == ["dist"]

    def test_invalid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("{broken")

        result = CliRunner().invoke(main, ["settings", "show", "--settings", str(path)])
        assert result.exit_code == 1


class TestSettingsInit:
    def test_writes_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        result = CliRunner().invoke(main, ["settings", "init", str(path), "--ignore", "vendor"])

        assert result.exit_code == 0
        assert "Wrote settings" in result.stdout
        content = json.loads(path.read_text())
        assert content["ignorePatterns"][-1] == "vendor"
        assert ".git" in content["ignorePatterns"]

    def test_refuses_overwrite(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.json"
        path.write_text("{}")

        result = CliRunner().invoke(main, ["settings", "init", str(path)])

        assert result.exit_code == 1
        assert path.read_text() == "{}"

    def test_force_overwrites(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text("{}")

        result = CliRunner().invoke(main, ["settings", "init", str(path), "--force"])

        assert result.exit_code == 0
        assert "ignorePatterns:" in path.read_text()

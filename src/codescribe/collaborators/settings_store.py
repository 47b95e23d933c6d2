"""Settings persistence — load and save :class:`Settings` as JSON or YAML."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from codescribe.collaborators.errors import SettingsError
from codescribe.config import Settings

logger = logging.getLogger(__name__)

_YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class SettingsStore:
    """Reads and writes a settings file.

    The format follows the file suffix: ``.yaml``/``.yml`` for YAML,
    anything else for JSON.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    @property
    def path(self) -> Path | None:
        return self._path

    def load(self, *, env: dict[str, str] | None = None) -> Settings:
        """Read the file over the defaults and fill the API key from the environment.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before parsing. A missing file is not
        an error; the defaults are returned.

        Raises:
            SettingsError: On parse errors or schema validation failures.
        """
        environ = os.environ if env is None else env
        data: dict[str, Any] = {}

        if self._path is not None and self._path.exists():
            data = self._read()
            logger.info("Loaded settings from %s", self._path)

        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise SettingsError(f"Invalid settings in {self._path}: {exc}") from exc

        if not settings.anthropic_api_key:
            settings.anthropic_api_key = environ.get("ANTHROPIC_API_KEY", "")
        return settings

    async def save(self, settings: Settings) -> bool:
        """Persist *settings*; returns ``True`` on success."""
        if self._path is None:
            msg = "No settings path configured"
            raise SettingsError(msg)

        payload = settings.to_wire()
        if self._path.suffix in _YAML_SUFFIXES:
            text = yaml.safe_dump(payload, sort_keys=False)
        else:
            text = json.dumps(payload, indent=2) + "\n"

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(text, encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Cannot write {self._path}: {exc}") from exc
        return True

    def _read(self) -> dict[str, Any]:
        assert self._path is not None
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SettingsError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            if self._path.suffix in _YAML_SUFFIXES:
                data: Any = yaml.safe_load(expanded)
            else:
                data = json.loads(expanded)
        except (yaml.YAMLError, json.JSONDecodeError) as exc:
            raise SettingsError(f"Cannot parse {self._path}: {exc}") from exc

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SettingsError(f"Settings file {self._path} must contain a mapping")
        return data

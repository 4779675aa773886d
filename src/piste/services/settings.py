from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from piste.engine.types import MODES, Mode


@dataclass
class SettingsState:
    mode: Mode = "basic"

    @staticmethod
    def from_dict(d: Mapping[str, object], default_mode: Mode = "basic") -> "SettingsState":
        mode = d.get("mode", default_mode)
        if mode not in MODES:
            mode = default_mode
        return SettingsState(mode=mode)  # type: ignore[arg-type]

    def to_dict(self) -> dict[str, object]:
        return {"mode": self.mode}


class SettingsService:
    """Local settings file. A missing or malformed file falls back to defaults."""

    def __init__(self, path: Path, schema: object, default_mode: Mode = "basic") -> None:
        self._path = path
        self._validator = Draft202012Validator(schema)
        self._default_mode = default_mode
        self.settings = self._load_or_create()

    def _load_or_create(self) -> SettingsState:
        if not self._path.exists():
            settings = SettingsState(mode=self._default_mode)
            self._write(settings)
            return settings
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            return SettingsState(mode=self._default_mode)
        if not isinstance(raw, dict) or not self._validator.is_valid(raw):
            return SettingsState(mode=self._default_mode)
        return SettingsState.from_dict(raw, self._default_mode)

    def _write(self, settings: SettingsState) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")

    def save(self) -> None:
        self._write(self.settings)

    def set_mode(self, mode: Mode) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown mode: {mode}")
        self.settings.mode = mode
        self.save()

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from piste.engine.state import MatchConfig
from piste.engine.types import Mode


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: list(e.path))
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int):
        raise ContentError(f"Expected int for {key}")
    return v


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def load_schema(self, name: str) -> object:
        return _load_json(self._schema_dir / f"{name}.schema.json")

    def _load_rules(self) -> dict[str, object]:
        path = self._data_dir / "rules.json"
        raw = _load_json(path)
        validate_json(raw, self.load_schema("rules"), context=str(path))
        if not isinstance(raw, dict):
            raise ContentError("rules.json must be an object")
        return raw

    def load_match_config(self) -> MatchConfig:
        raw = self._load_rules()
        values = raw.get("card_values")
        if not isinstance(values, list):
            raise ContentError("Expected list for card_values")
        return MatchConfig(
            board_length=_require_int(raw, "board_length"),
            hand_size=_require_int(raw, "hand_size"),
            rounds_to_win=_require_int(raw, "rounds_to_win"),
            card_values=tuple(int(v) for v in values),
            copies_per_value=_require_int(raw, "copies_per_value"),
        )

    def default_mode(self) -> Mode:
        mode = self._load_rules().get("default_mode")
        # schema restricts values
        return mode  # type: ignore[return-value]

    def validate_snapshot(self, snap: Mapping[str, object]) -> None:
        validate_json(dict(snap), self.load_schema("snapshot"), context="snapshot")

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_match_config()
        _ = self.load_schema("snapshot")
        _ = self.load_schema("settings")

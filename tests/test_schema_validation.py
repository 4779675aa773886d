from __future__ import annotations

import json
import shutil

import pytest

from piste.engine.actions import AttackAction
from piste.engine.match import new_match, step
from piste.engine.serialize import snapshot
from piste.engine.state import MatchConfig
from piste.paths import get_paths
from piste.services.content import ContentError, ContentService


def _content() -> ContentService:
    paths = get_paths()
    return ContentService(paths.data_dir, paths.schema_dir)


def test_content_schemas_validate() -> None:
    _content().validate_all()


def test_shipped_rules_match_defaults() -> None:
    content = _content()
    assert content.load_match_config() == MatchConfig()
    assert content.default_mode() == "basic"


def test_snapshots_validate_against_schema(rig) -> None:
    content = _content()
    state = new_match(seed=5, mode="advanced")
    content.validate_snapshot(snapshot(state))

    rig(state, positions=(5, 8), hands=([3, 3, 1, 2, 2], [4, 4, 5, 5, 1]))
    step(state, AttackAction(player=0, hand_index=0))
    snap = snapshot(state)
    assert snap["attack"] is not None
    content.validate_snapshot(snap)


def test_invalid_rules_are_reported(tmp_path) -> None:
    paths = get_paths()
    data_dir = tmp_path / "data"
    shutil.copytree(paths.data_dir, data_dir)
    rules = json.loads((data_dir / "rules.json").read_text(encoding="utf-8"))
    rules["board_length"] = "long"
    (data_dir / "rules.json").write_text(json.dumps(rules), encoding="utf-8")

    content = ContentService(data_dir, data_dir / "schemas")
    with pytest.raises(ContentError) as info:
        content.load_match_config()
    assert "board_length" in str(info.value)


def test_missing_rules_file_is_reported(tmp_path) -> None:
    paths = get_paths()
    content = ContentService(tmp_path, paths.schema_dir)
    with pytest.raises(ContentError):
        content.validate_all()

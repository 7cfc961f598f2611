from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from barbs_installer.state_store import ensure_defaults, load_config, load_state, save_state


def test_missing_state_is_empty(tmp_path: Path):
    assert load_state(str(tmp_path / "none.json")) == {}


def test_secrets_are_never_written(tmp_path: Path):
    path = tmp_path / "state.json"
    state = ensure_defaults({"secrets": {"password": "hunter2"}})
    save_state(str(path), state)

    raw = path.read_text(encoding="utf-8")
    assert "hunter2" not in raw
    assert "secrets" not in json.loads(raw)
    assert state["secrets"]["password"] == "hunter2"


def test_yaml_state(tmp_path: Path):
    path = tmp_path / "state.yaml"
    save_state(str(path), {"config": {"user_name": "alice"}})
    assert yaml.safe_load(path.read_text(encoding="utf-8")) == {"config": {"user_name": "alice"}}
    assert load_state(str(path))["config"]["user_name"] == "alice"


def test_defaults_do_not_override():
    state = ensure_defaults({"config": {"aur_helper": "paru"}})
    assert state["config"]["aur_helper"] == "paru"
    assert state["config"]["dotfiles_branch"] == "master"
    assert state["execution"]["completed_steps"] == []


def test_config_must_be_a_mapping(tmp_path: Path):
    path = tmp_path / "barbs.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_config_yaml(tmp_path: Path):
    path = tmp_path / "barbs.yaml"
    path.write_text("aur_helper: paru\nprerequisites: [git]\n", encoding="utf-8")
    assert load_config(str(path)) == {"aur_helper": "paru", "prerequisites": ["git"]}

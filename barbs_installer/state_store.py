from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from .lib.env import PATHS

logger = logging.getLogger(__name__)

# Never written to disk.
TRANSIENT_KEYS = ("secrets",)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def _load_mapping(path: Path, what: str) -> Dict[str, Any]:
    if _detect_format(path) in {"yaml", "yml"}:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    else:
        data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object/dict, got {type(data)}")
    return data


def load_state(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        return {}
    return _load_mapping(p, "State file")


def save_state(path: str, state: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)

    persisted = {k: v for k, v in state.items() if k not in TRANSIENT_KEYS}
    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(persisted, sort_keys=False) + "\n", encoding="utf-8")
    else:
        p.write_text(json.dumps(persisted, indent=2, sort_keys=True) + "\n", encoding="utf-8")


def load_config(path: str) -> Dict[str, Any]:
    """Read an operator config file (YAML or JSON) to overlay on state['config']."""

    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)
    return _load_mapping(p, "Config file")


def ensure_defaults(state: Dict[str, Any]) -> Dict[str, Any]:
    """Fill required keys with sane defaults (without overriding user values)."""

    state.setdefault("version", "20231126.1")
    state.setdefault("config", {})
    state.setdefault("execution", {})

    cfg = state["config"]
    # Sources: fork the dotfiles repo or point at your own program list.
    cfg.setdefault("dotfiles_repo", "https://github.com/aegixlinux/gohan.git")
    cfg.setdefault("dotfiles_branch", "master")
    cfg.setdefault("programs_manifest", "https://github.com/aegixlinux/barbs/raw/master/aegix-programs.csv")
    cfg.setdefault("manifest_cache", PATHS.manifest_cache)
    cfg.setdefault("aur_helper", "yay")
    cfg.setdefault("aur_base_url", "https://aur.archlinux.org")
    cfg.setdefault("prerequisites", ["curl", "ca-certificates", "base-devel", "git", "zsh"])
    cfg.setdefault("user_group", "wheel")
    cfg.setdefault("login_shell", "/bin/zsh")
    # Arch marks the system interpreter externally managed; add
    # --break-system-packages here if pip entries must install system-wide.
    cfg.setdefault("pip_args", [])
    cfg.setdefault(
        "home_dirs",
        ["Downloads", "Documents", "Pictures", "Music", "Videos/obs", "code", "ss", "Applications/vs-code-insider"],
    )
    cfg.setdefault("user_dirs", [".cache/zsh", ".config/abook", ".config/mpd/playlists"])
    cfg.setdefault("strict", False)
    cfg.setdefault("dry_run", False)

    exe = state["execution"]
    exe.setdefault("current_step", None)
    exe.setdefault("completed_steps", [])
    exe.setdefault("errors", [])

    return state


def mark_step_completed(state: Dict[str, Any], step_id: str) -> None:
    exe = state.setdefault("execution", {})
    completed = exe.setdefault("completed_steps", [])
    if step_id not in completed:
        completed.append(step_id)


def is_step_completed(state: Dict[str, Any], step_id: str) -> bool:
    exe = state.get("execution") or {}
    completed = exe.get("completed_steps") or []
    return step_id in completed

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from ..errors import StateIncomplete
from ..lib.command import CommandRunner
from ..lib.dialog import Dialog
from ..lib.env import PATHS, Paths


class BaseStep:
    """Shared wiring for steps: the command runner, the dialog surface and system paths."""

    step_id = ""
    always_run = False

    def __init__(self, runner: CommandRunner, dialog: Dialog, paths: Paths = PATHS) -> None:
        self.runner = runner
        self.dialog = dialog
        self.paths = paths

    @staticmethod
    def config(state: Dict[str, Any]) -> Dict[str, Any]:
        return state.get("config") or {}

    @staticmethod
    def dry_run(state: Dict[str, Any]) -> bool:
        return bool((state.get("config") or {}).get("dry_run", False))

    @staticmethod
    def user(state: Dict[str, Any]) -> Dict[str, Any]:
        user = (state.get("execution") or {}).get("user") or {}
        if not user.get("name"):
            raise StateIncomplete("execution.user missing; run 30_add_user first")
        return user

    def home(self, state: Dict[str, Any]) -> Path:
        return Path(self.user(state)["home"])

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

from __future__ import annotations

from typing import Any, Dict

from ..lib.dotfiles import deploy_dotfiles
from .base import BaseStep


class DotfilesStep(BaseStep):
    step_id = "60_dotfiles"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.config(state)
        user = self.user(state)
        self.dialog.show_progress("Downloading and installing config files...")
        deploy_dotfiles(
            self.runner,
            str(cfg.get("dotfiles_repo")),
            self.home(state),
            user=user["name"],
            group=user["group"],
            branch=str(cfg.get("dotfiles_branch") or "master"),
        )
        return state

from __future__ import annotations

from typing import Any, Dict

from ..lib.dotfiles import install_nvim_plugins
from .base import BaseStep


class NvimPluginsStep(BaseStep):
    step_id = "65_nvim_plugins"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        user = self.user(state)
        plug = self.home(state) / ".config" / "nvim" / "autoload" / "plug.vim"
        if plug.exists():
            return state
        self.dialog.show_progress("Installing neovim plugins...")
        install_nvim_plugins(
            self.runner,
            self.home(state),
            user=user["name"],
            group=user["group"],
            dry_run=self.dry_run(state),
        )
        return state

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from ..errors import PrerequisiteInstallFailed, SubprocessFailed
from ..lib.pkg import is_installed
from ..lib.vcs import clone_or_update
from .base import BaseStep

logger = logging.getLogger(__name__)


class AurHelperStep(BaseStep):
    """Build the AUR helper by hand; every AUR record depends on it."""

    step_id = "40_aur_helper"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.config(state)
        helper = str(cfg.get("aur_helper") or "yay")
        user = self.user(state)

        if is_installed(self.runner, helper):
            logger.info("AUR helper %s already installed", helper)
            return state

        self.dialog.show_progress(f'Installing "{helper}", an AUR helper...')
        url = f"{str(cfg.get('aur_base_url')).rstrip('/')}/{helper}.git"
        checkout = Path(user["src_dir"]) / helper
        try:
            clone_or_update(self.runner, url, checkout, user=user["name"])
            self.runner.run(["makepkg", "--noconfirm", "-si"], cwd=str(checkout), user=user["name"], check=True)
        except SubprocessFailed as e:
            raise PrerequisiteInstallFailed("Failed to install AUR helper.") from e
        return state

from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import PrerequisiteInstallFailed, SubprocessFailed
from ..lib.pkg import is_systemd_host, refresh_keys
from .base import BaseStep

logger = logging.getLogger(__name__)


class RefreshKeysStep(BaseStep):
    step_id = "20_refresh_keys"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        if is_systemd_host(self.paths.init_path):
            self.dialog.show_progress("Refreshing Arch Keyring...")
        else:
            self.dialog.show_progress("Enabling Arch Repositories...")

        try:
            flavour = refresh_keys(
                self.runner,
                init_path=self.paths.init_path,
                pacman_conf=self.paths.pacman_conf,
                dry_run=self.dry_run(state),
            )
        except SubprocessFailed as e:
            raise PrerequisiteInstallFailed(
                "Error automatically refreshing Arch keyring. Consider doing so manually."
            ) from e

        state.setdefault("execution", {}).setdefault("decisions", {})["init"] = flavour
        logger.info("Keyring refreshed (%s)", flavour)
        return state

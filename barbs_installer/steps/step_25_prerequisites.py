from __future__ import annotations

from typing import Any, Dict

from ..errors import PrerequisiteInstallFailed, SubprocessFailed
from ..lib.pkg import pacman_install
from .base import BaseStep


class PrerequisitesStep(BaseStep):
    """Packages every later step relies on (git, compilers, the login shell)."""

    step_id = "25_prerequisites"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        for pkg in self.config(state).get("prerequisites") or []:
            self.dialog.show_progress(
                f"Installing `{pkg}` which is required to install and configure other programs.",
                title="Installing Required Packages",
            )
            try:
                pacman_install(self.runner, str(pkg))
            except SubprocessFailed as e:
                raise PrerequisiteInstallFailed(f"Failed to install required package {pkg}") from e
        return state

from __future__ import annotations

import os
from functools import partial
from typing import Any, Dict

from ..lib.sysconf import rewrite_file, tweak_makepkg_conf, tweak_pacman_conf
from .base import BaseStep


class PackageTweaksStep(BaseStep):
    step_id = "35_package_tweaks"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        dry_run = self.dry_run(state)
        rewrite_file(self.paths.pacman_conf, tweak_pacman_conf, dry_run=dry_run)
        rewrite_file(
            self.paths.makepkg_conf,
            partial(tweak_makepkg_conf, jobs=os.cpu_count() or 1),
            dry_run=dry_run,
        )
        return state

from __future__ import annotations

import logging
from typing import Any, Dict

from ..installation import InstallSummary, run_installation_loop
from ..lib.pkg import foreign_packages
from ..manifest import load_manifest
from ..session import session_from_state
from .base import BaseStep

logger = logging.getLogger(__name__)


class InstallProgramsStep(BaseStep):
    step_id = "50_install_programs"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.config(state)
        manifest = load_manifest(
            str(cfg.get("programs_manifest")),
            cache_path=cfg.get("manifest_cache"),
        )

        session = session_from_state(state)
        session.total = manifest.total
        session.aur_installed = foreign_packages(self.runner)

        summary = InstallSummary()
        try:
            run_installation_loop(
                manifest,
                session,
                self.runner,
                self.dialog,
                strict=bool(cfg.get("strict", False)),
                summary=summary,
            )
        finally:
            state.setdefault("execution", {})["install_summary"] = summary.as_dict()
        if summary.failed:
            logger.warning("Records that failed to install: %s", ", ".join(summary.failed_identifiers))
        return state

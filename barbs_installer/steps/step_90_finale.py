from __future__ import annotations

import logging
from typing import Any, Dict

from .base import BaseStep

logger = logging.getLogger(__name__)

FINALE = """Congrats! You're done with BARBS.

If you got here the traditional route from install.sh, you'll be returned to your nice, new system.

If you ran BARBS standalone, you can run startx as your new user. Logging in after reboot will land you in tty1 which will auto-run startx."""


def failure_report(state: Dict[str, Any]) -> str:
    summary = (state.get("execution") or {}).get("install_summary") or {}
    failed = summary.get("failed") or []
    if not failed:
        return ""
    lines = [f"{len(failed)} program(s) could not be installed:"]
    lines += [f"  {f.get('identifier')} ({f.get('tag')})" for f in failed]
    lines.append("See the log for details.")
    return "\n".join(lines)


class FinaleStep(BaseStep):
    step_id = "90_finale"
    always_run = True

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        report = failure_report(state)
        text = FINALE + ("\n\n" + report if report else "") + "\n\nEnjoy\nAegix"
        logger.info("Finale summary: %s", (state.get("execution") or {}).get("install_summary") or {})
        self.dialog.message(text, title="All done!")
        return state

from __future__ import annotations

from typing import Any, Dict

from .base import BaseStep

WELCOME = """Welcome to BARBS!

B - Beach
A - Automation
R - Routine for
B - Building
S - Systems.

If you made it here from the Aegix install.sh script, your base system is installed. We're now inside a chroot, and you're ready to set up a graphical environment.

BARBS can also be run standalone, in some cases, on top of other distros."""


class WelcomeStep(BaseStep):
    step_id = "10_welcome"
    always_run = True

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        self.dialog.message(WELCOME, title="aegixlinux.org")
        return state

from __future__ import annotations

from typing import Any, Dict

from ..errors import OperatorCancelled, StateIncomplete
from ..lib.users import user_exists
from .base import BaseStep


class ConfirmStep(BaseStep):
    step_id = "18_confirm"
    always_run = True

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        name = self.config(state).get("user_name")
        if not name:
            raise StateIncomplete("config.user_name missing")

        resuming = bool(((state.get("execution") or {}).get("user") or {}).get("name"))
        if not resuming and user_exists(self.runner, name):
            ok = self.dialog.confirm(
                f"The user `{name}` already exists on this system. Proceeding will OVERWRITE any "
                f"conflicting user configuration for this user.\n\n"
                f"User {name}'s password will also be updated to what you just entered.",
                title="WARNING",
                yes_label="CONTINUE",
                no_label="No wait...",
            )
            if not ok:
                raise OperatorCancelled("User exited.")

        ready = self.dialog.confirm(
            "Time to get up and stretch a bit.\n\n"
            "BARBS is about to run its lengthy installation routines.\n\n"
            "We'll keep you notified how it's going along the way.",
            title="Ready?",
            yes_label="Let's go!",
            no_label="No. Cancel BARBS!",
        )
        if not ready:
            raise OperatorCancelled("User exited.")
        return state

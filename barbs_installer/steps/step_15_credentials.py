from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.users import is_valid_username
from .base import BaseStep

logger = logging.getLogger(__name__)


class CredentialsStep(BaseStep):
    """Ask for the user name and passphrase. The passphrase stays in memory only.

    Once 30_add_user has recorded ``execution.user``, later runs reuse that
    account and do not prompt.
    """

    step_id = "15_credentials"
    always_run = True

    def _ask_name(self) -> str:
        name = self.dialog.prompt_text(
            "Enter a username for logging into your Aegix graphical environment."
        ).strip()
        while not is_valid_username(name):
            name = self.dialog.prompt_text(
                "The username you entered is not valid. Provide a username beginning with a letter, "
                "with only lowercase letters, - or _.",
                allow_cancel=False,
            ).strip()
        return name

    def _ask_password(self) -> str:
        first = self.dialog.prompt_secret("Enter a passphrase for that user.")
        second = self.dialog.prompt_secret("Retype your passphrase.")
        while first != second:
            first = self.dialog.prompt_secret("Passphrases do not match.\n\nTry again.")
            second = self.dialog.prompt_secret("Retype your passphrase.")
        return first

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        created = (state.get("execution") or {}).get("user") or {}
        if created.get("name"):
            # The account from an earlier run is the target; a new name needs fresh state.
            state.setdefault("config", {})["user_name"] = created["name"]
            logger.info("Resuming with existing target user: %s", created["name"])
            return state

        name = self._ask_name()
        password = self._ask_password()
        state.setdefault("config", {})["user_name"] = name
        state.setdefault("secrets", {})["password"] = password
        logger.info("Target user: %s", name)
        return state

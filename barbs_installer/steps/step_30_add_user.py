from __future__ import annotations

import logging
from typing import Any, Dict

from ..errors import ProvisionError, StateIncomplete, SubprocessFailed
from ..lib.users import add_user, home_dir, make_user_dirs, set_password
from .base import BaseStep

logger = logging.getLogger(__name__)

SRC_SUBDIR = ".local/src"


class AddUserStep(BaseStep):
    step_id = "30_add_user"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.config(state)
        name = cfg.get("user_name")
        if not name:
            raise StateIncomplete("config.user_name missing")
        group = str(cfg.get("user_group", "wheel"))
        password = (state.get("secrets") or {}).pop("password", None)
        created = (state.get("execution") or {}).get("user") or {}
        if password is None and created.get("name") != name:
            raise StateIncomplete("No passphrase collected; 15_credentials must run first")

        self.dialog.show_progress(f'Adding user "{name}"...')
        home = home_dir(self.paths.home_root, name)
        src_dir = home / SRC_SUBDIR
        try:
            add_user(
                self.runner,
                name,
                group=group,
                shell=str(cfg.get("login_shell", "/bin/zsh")),
                home_root=self.paths.home_root,
            )
            make_user_dirs(self.runner, name, group, [src_dir.parent, src_dir])
            if password is None:
                logger.info("Keeping the existing passphrase for %s", name)
            else:
                set_password(self.runner, name, password)
        except SubprocessFailed as e:
            raise ProvisionError("Error adding username and/or password.") from e

        state.setdefault("execution", {})["user"] = {
            "name": name,
            "group": group,
            "home": str(home),
            "src_dir": str(src_dir),
        }
        logger.info("User %s ready (src_dir=%s)", name, src_dir)
        return state

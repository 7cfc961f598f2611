from __future__ import annotations

from typing import Any, Dict

from ..lib.users import make_user_dirs
from .base import BaseStep


class HomeLayoutStep(BaseStep):
    step_id = "80_home_layout"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.config(state)
        user = self.user(state)
        home = self.home(state)
        rel = [*(cfg.get("user_dirs") or []), *(cfg.get("home_dirs") or [])]
        make_user_dirs(self.runner, user["name"], user["group"], [home / str(d) for d in rel])
        return state

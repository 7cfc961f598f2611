from __future__ import annotations

import logging
from typing import Any, Dict

from ..lib.sysconf import VISUDO_EDITOR, WHEEL_NOPASSWD, ensure_line, write_file
from ..lib.tweaks import disable_pc_speaker, enable_tap_to_click, setup_dbus
from ..lib.users import set_login_shell
from .base import BaseStep

logger = logging.getLogger(__name__)


class SystemTweaksStep(BaseStep):
    """Beep, login shell, D-Bus, touchpad and sudo policy."""

    step_id = "70_system_tweaks"

    def run(self, state: Dict[str, Any]) -> Dict[str, Any]:
        cfg = self.config(state)
        user = self.user(state)
        dry_run = self.dry_run(state)
        p = self.paths

        self.dialog.show_progress("Applying system tweaks...")
        beep_disabled = disable_pc_speaker(self.runner, p.nobeep_conf, dry_run=dry_run)
        set_login_shell(self.runner, user["name"], str(cfg.get("login_shell", "/bin/zsh")))
        setup_dbus(self.runner, p.dbus_machine_id, p.dbus_profile, dry_run=dry_run)
        tap_written = enable_tap_to_click(p.libinput_conf, dry_run=dry_run)

        ensure_line(p.sudoers, WHEEL_NOPASSWD, dry_run=dry_run)
        write_file(p.sudoers_editor, VISUDO_EDITOR + "\n", dry_run=dry_run, mode=0o440)

        state.setdefault("execution", {}).setdefault("decisions", {}).update(
            {"pcspkr_blacklisted": beep_disabled, "libinput_conf_written": tap_written}
        )
        return state

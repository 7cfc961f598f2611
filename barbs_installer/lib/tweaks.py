from __future__ import annotations

import logging
from pathlib import Path

from .command import CommandRunner
from .sysconf import write_file

logger = logging.getLogger(__name__)

LIBINPUT_TOUCHPAD = """Section "InputClass"
        Identifier "libinput touchpad catchall"
        MatchIsTouchpad "on"
        MatchDevicePath "/dev/input/event*"
        Driver "libinput"
        Option "Tapping" "on"
EndSection
"""

DBUS_PROFILE = "export $(dbus-launch)\n"


def pc_speaker_loaded(runner: CommandRunner) -> bool:
    r = runner.run(["lsmod"])
    return any(ln.split()[:1] == ["pcspkr"] for ln in r.stdout.splitlines())


def disable_pc_speaker(runner: CommandRunner, nobeep_conf: str, *, dry_run: bool = False) -> bool:
    """Unload and blacklist the pcspkr module. Returns False if it was not loaded."""

    if not pc_speaker_loaded(runner):
        logger.info("pcspkr module not loaded")
        return False
    runner.run(["rmmod", "pcspkr"], check=True)
    write_file(nobeep_conf, "blacklist pcspkr\n", dry_run=dry_run)
    return True


def setup_dbus(runner: CommandRunner, machine_id: str, profile_script: str, *, dry_run: bool = False) -> None:
    """Generate the D-Bus machine id and start a session bus from login shells."""

    r = runner.run(["dbus-uuidgen"], check=True)
    write_file(machine_id, r.stdout if r.stdout.endswith("\n") else r.stdout + "\n", dry_run=dry_run)
    write_file(profile_script, DBUS_PROFILE, dry_run=dry_run)


def enable_tap_to_click(libinput_conf: str, *, dry_run: bool = False) -> bool:
    """Write the libinput touchpad config unless one already exists."""

    if Path(libinput_conf).exists():
        logger.info("%s exists; leaving it alone", libinput_conf)
        return False
    write_file(libinput_conf, LIBINPUT_TOUCHPAD, dry_run=dry_run)
    return True

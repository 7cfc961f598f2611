from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Paths:
    state_default: str = "/var/lib/barbs-installer/state.json"
    log_default: str = "/var/log/barbs-installer.log"
    manifest_cache: str = "/tmp/barbs-programs.csv"
    home_root: str = "/home"
    pacman_conf: str = "/etc/pacman.conf"
    makepkg_conf: str = "/etc/makepkg.conf"
    sudoers: str = "/etc/sudoers"
    sudoers_temp: str = "/etc/sudoers.d/barbs-temp"
    sudoers_editor: str = "/etc/sudoers.d/02-barbs-visudo-editor"
    nobeep_conf: str = "/etc/modprobe.d/nobeep.conf"
    dbus_machine_id: str = "/var/lib/dbus/machine-id"
    dbus_profile: str = "/etc/profile.d/dbus.sh"
    libinput_conf: str = "/etc/X11/xorg.conf.d/40-libinput.conf"
    init_path: str = "/sbin/init"


PATHS = Paths()

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Set

from .command import CommandRunner

logger = logging.getLogger(__name__)

ARTIX_UNIVERSE = """[universe]
Server = https://universe.artixlinux.org/$arch
Server = https://mirror1.artixlinux.org/universe/$arch
Server = https://mirror.pascalpuffke.de/artix-universe/$arch
Server = https://mirrors.qontinuum.space/artixlinux-universe/$arch
Server = https://mirror1.cl.netactuate.com/artix/universe/$arch
Server = https://ftp.crifo.org/artix-universe/$arch
Server = https://artix.sakamoto.pl/universe/$arch
"""

ARCH_REPOS_ON_ARTIX = ("extra", "community")


def pacman_install(runner: CommandRunner, package: str) -> None:
    """Install from the official repositories.

    --needed turns an already up-to-date package into a no-op.
    """
    runner.run(["pacman", "--noconfirm", "--needed", "-S", package], check=True)


def is_installed(runner: CommandRunner, package: str) -> bool:
    return runner.run(["pacman", "-Qq", package]).ok


def foreign_packages(runner: CommandRunner) -> Set[str]:
    """Packages not found in any sync database (AUR and local builds)."""
    r = runner.run(["pacman", "-Qqm"])
    return {ln.strip() for ln in r.stdout.splitlines() if ln.strip()}


def is_systemd_host(init_path: str) -> bool:
    try:
        return "systemd" in os.path.realpath(init_path)
    except OSError:
        return False


def _has_section(text: str, name: str) -> bool:
    return any(ln.strip() == f"[{name}]" for ln in text.splitlines())


def enable_artix_arch_repos(runner: CommandRunner, pacman_conf: str, *, dry_run: bool = False) -> None:
    """Give an Artix host access to the Arch repositories."""

    conf = Path(pacman_conf)
    text = conf.read_text(encoding="utf-8") if conf.exists() else ""

    if not _has_section(text, "universe"):
        if dry_run:
            logger.info("Would add [universe] to %s", conf)
        else:
            with conf.open("a", encoding="utf-8") as fh:
                fh.write(ARTIX_UNIVERSE)
            text = conf.read_text(encoding="utf-8")
        runner.run(["pacman", "-Sy", "--noconfirm"])

    runner.run(["pacman", "--noconfirm", "--needed", "-S", "artix-keyring", "artix-archlinux-support"])

    for repo in ARCH_REPOS_ON_ARTIX:
        if _has_section(text, repo):
            continue
        if dry_run:
            logger.info("Would add [%s] to %s", repo, conf)
            continue
        with conf.open("a", encoding="utf-8") as fh:
            fh.write(f"[{repo}]\nInclude = /etc/pacman.d/mirrorlist-arch\n")

    runner.run(["pacman", "-Sy"])
    runner.run(["pacman-key", "--populate", "archlinux"], check=True)


def refresh_keys(
    runner: CommandRunner,
    *,
    init_path: str,
    pacman_conf: str,
    dry_run: bool = False,
) -> str:
    """Refresh the keyring for the detected init system; returns "systemd" or "artix"."""

    if is_systemd_host(init_path):
        runner.run(["pacman", "--noconfirm", "-S", "archlinux-keyring"], check=True)
        return "systemd"

    enable_artix_arch_repos(runner, pacman_conf, dry_run=dry_run)
    return "artix"

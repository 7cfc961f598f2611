from __future__ import annotations

import logging
import shutil
import tempfile
from pathlib import Path
from typing import Iterable

import requests

from .command import CommandRunner
from .sysconf import write_file
from .vcs import shallow_clone_argv

logger = logging.getLogger(__name__)

VIM_PLUG_URL = "https://raw.githubusercontent.com/junegunn/vim-plug/master/plug.vim"

# Repository metadata that should not land in the user's home directory.
REPO_CLUTTER = (".git", "README.md", "LICENSE", "FUNDING.yml")


def deploy_dotfiles(
    runner: CommandRunner,
    repo: str,
    home: Path,
    *,
    user: str,
    group: str,
    branch: str = "master",
    clutter: Iterable[str] = REPO_CLUTTER,
) -> None:
    """Clone the dotfiles repository as ``user`` and copy it over ``home``."""

    workdir = tempfile.mkdtemp(prefix="barbs-dotfiles-")
    checkout = Path(workdir) / "repo"
    try:
        runner.run(["mkdir", "-p", str(home)], check=True)
        runner.run(["chown", f"{user}:{group}", workdir, str(home)], check=True)

        runner.run(shallow_clone_argv(repo, checkout, branch=branch, recursive=True), user=user, check=True)
        runner.run(["cp", "-rfT", str(checkout), str(home)], user=user, check=True)
    finally:
        shutil.rmtree(workdir, ignore_errors=True)

    leftovers = [str(home / name) for name in clutter]
    if leftovers:
        runner.run(["rm", "-rf", *leftovers], check=True)
    logger.info("Dotfiles from %s (%s) deployed to %s", repo, branch, home)


def install_nvim_plugins(
    runner: CommandRunner,
    home: Path,
    *,
    user: str,
    group: str,
    dry_run: bool = False,
    timeout: float = 30.0,
) -> bool:
    """Install vim-plug and run PlugInstall. Returns False if vim-plug was already present."""

    nvim_dir = home / ".config" / "nvim"
    plug = nvim_dir / "autoload" / "plug.vim"
    if plug.exists():
        return False

    if dry_run:
        logger.info("Would download %s to %s", VIM_PLUG_URL, str(plug))
    else:
        response = requests.get(VIM_PLUG_URL, timeout=timeout)
        response.raise_for_status()
        write_file(str(plug), response.text)

    runner.run(["chown", "-R", f"{user}:{group}", str(nvim_dir)], check=True)
    runner.run(["nvim", "-c", "PlugInstall|q|q"], user=user, check=True)
    return True

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

from .command import CommandRunner

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[a-z_][a-z0-9_-]*$")


def is_valid_username(name: str) -> bool:
    return bool(USERNAME_RE.match(name))


def user_exists(runner: CommandRunner, name: str) -> bool:
    return runner.run(["id", "-u", name]).ok


def home_dir(home_root: str, name: str) -> Path:
    return Path(home_root) / name


def add_user(
    runner: CommandRunner,
    name: str,
    *,
    group: str,
    shell: str,
    home_root: str,
) -> None:
    """Create the user, or add an existing one to ``group``."""

    r = runner.run(["useradd", "-m", "-g", group, "-s", shell, name])
    if r.ok:
        logger.info("Created user %s", name)
        return

    logger.info("useradd failed for %s (rc=%s); treating as existing user", name, r.returncode)
    home = home_dir(home_root, name)
    runner.run(["usermod", "-a", "-G", group, name], check=True)
    runner.run(["mkdir", "-p", str(home)], check=True)
    runner.run(["chown", f"{name}:{group}", str(home)], check=True)


def set_password(runner: CommandRunner, name: str, password: str) -> None:
    runner.run(["chpasswd"], input_text=f"{name}:{password}\n", check=True)


def set_login_shell(runner: CommandRunner, name: str, shell: str) -> None:
    runner.run(["chsh", "-s", shell, name], check=True)


def make_user_dirs(
    runner: CommandRunner,
    name: str,
    group: str,
    dirs: Iterable[Path],
) -> None:
    """Create directories and hand them to the user."""

    paths = [str(d) for d in dirs]
    if not paths:
        return
    runner.run(["mkdir", "-p", *paths], check=True)
    runner.run(["chown", "-R", f"{name}:{group}", *paths], check=True)

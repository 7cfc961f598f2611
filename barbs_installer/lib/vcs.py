from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .command import CommandRunner

logger = logging.getLogger(__name__)

REPO_SUFFIX = ".git"


def repo_name_from_url(url: str) -> str:
    """Last path segment of a repository URL, without a trailing ``.git``."""

    name = url.rstrip("/").rsplit("/", 1)[-1]
    if name.endswith(REPO_SUFFIX):
        name = name[: -len(REPO_SUFFIX)]
    return name


def shallow_clone_argv(
    url: str,
    dest: Path,
    *,
    branch: Optional[str] = None,
    recursive: bool = False,
) -> list[str]:
    argv = ["git", "-C", str(dest.parent), "clone", "--depth", "1", "--single-branch", "--no-tags", "-q"]
    if recursive:
        argv += ["--recursive", "--recurse-submodules"]
    if branch:
        argv += ["-b", branch]
    return [*argv, url, str(dest)]


def clone_or_update(
    runner: CommandRunner,
    url: str,
    dest: Path,
    *,
    user: Optional[str] = None,
    branch: Optional[str] = None,
) -> str:
    """Shallow-clone ``url`` into ``dest``; if that fails, force-pull the existing checkout.

    Returns "cloned" or "updated". A failed pull raises SubprocessFailed.
    """

    r = runner.run(shallow_clone_argv(url, dest, branch=branch), user=user)
    if r.ok:
        return "cloned"

    logger.info("Clone of %s failed (rc=%s); updating existing checkout %s", url, r.returncode, dest)
    # Single-branch clones track exactly one remote branch.
    runner.run(["git", "pull", "--force"], cwd=str(dest), user=user, check=True)
    return "updated"

"""Install strategies, one per manifest tag.

Each strategy checks whether its target is already present, installs it if
not, and returns the Outcome. Failures surface as SubprocessFailed.
"""

from __future__ import annotations

import enum
import logging
from typing import Callable, Dict

from .lib.command import CommandRunner
from .lib.pkg import pacman_install
from .lib.vcs import clone_or_update, repo_name_from_url
from .manifest import Tag
from .session import Session

logger = logging.getLogger(__name__)

PIP_PACKAGE = "python-pip"


class Outcome(enum.Enum):
    INSTALLED = "installed"
    SKIPPED = "skipped"


Strategy = Callable[[Session, CommandRunner, str, str], Outcome]


def install_official(session: Session, runner: CommandRunner, identifier: str, annotation: str) -> Outcome:
    # pacman --needed decides on its own whether anything has to happen.
    pacman_install(runner, identifier)
    return Outcome.INSTALLED


def install_aur(session: Session, runner: CommandRunner, identifier: str, annotation: str) -> Outcome:
    if identifier in session.aur_installed:
        logger.info("AUR package %s already installed", identifier)
        return Outcome.SKIPPED

    runner.run(
        [session.aur_helper, "-S", "--noconfirm", "--needed", identifier],
        user=session.user_name,
        check=True,
    )
    session.aur_installed.add(identifier)
    return Outcome.INSTALLED


def install_git(session: Session, runner: CommandRunner, identifier: str, annotation: str) -> Outcome:
    name = repo_name_from_url(identifier)
    checkout = session.src_dir / name

    clone_or_update(runner, identifier, checkout, user=session.user_name)
    # cwd= is per command; the installer's own working directory never changes.
    runner.run(["make"], cwd=str(checkout), check=True)
    runner.run(["make", "install"], cwd=str(checkout), check=True)
    return Outcome.INSTALLED


def install_pip(session: Session, runner: CommandRunner, identifier: str, annotation: str) -> Outcome:
    # Only the presence of pip itself is checked, not the target package.
    if not runner.which("pip"):
        logger.info("pip not found; installing %s", PIP_PACKAGE)
        pacman_install(runner, PIP_PACKAGE)

    runner.run(["pip", "install", "--no-input", *session.pip_args, identifier], check=True)
    return Outcome.INSTALLED


STRATEGIES: Dict[Tag, Strategy] = {
    Tag.OFFICIAL: install_official,
    Tag.AUR: install_aur,
    Tag.GIT: install_git,
    Tag.PIP: install_pip,
}

_missing = set(Tag) - set(STRATEGIES)
if _missing:
    raise RuntimeError(f"No install strategy for tags: {sorted(t.value for t in _missing)}")


def select_strategy(tag: Tag) -> Strategy:
    return STRATEGIES.get(tag, install_official)

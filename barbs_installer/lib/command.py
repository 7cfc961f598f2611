from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Protocol, Sequence

from ..errors import SubprocessFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner(Protocol):
    """Capability used by every step and strategy to reach external tools.

    Tests substitute a fake that records invocations instead of executing them.
    """

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = False,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
        input_text: str | None = None,
        user: str | None = None,
    ) -> CmdResult:
        ...

    def which(self, program: str) -> Optional[str]:
        ...


def _fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def as_user(user: str | None, argv: Sequence[str]) -> list[str]:
    if not user:
        return list(argv)
    return ["sudo", "-u", user, *argv]


class SubprocessRunner:
    """Run commands with consistent logging.

    - Always logs the command (and the working directory when given).
    - Captured stdout/stderr go to the log at DEBUG, never to the terminal,
      so the dialog surface stays clean.
    - dry_run logs but does not execute.
    """

    def __init__(self, *, dry_run: bool = False) -> None:
        self.dry_run = dry_run

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = False,
        env: Mapping[str, str] | None = None,
        cwd: str | None = None,
        input_text: str | None = None,
        user: str | None = None,
    ) -> CmdResult:
        argv_list = as_user(user, argv)
        if cwd:
            logger.info("CMD %s (cwd=%s)", _fmt_argv(argv_list), cwd)
        else:
            logger.info("CMD %s", _fmt_argv(argv_list))

        if self.dry_run:
            return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

        try:
            p = subprocess.run(
                argv_list,
                input=input_text,
                text=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
                env=dict(os.environ, **(env or {})),
            )
        except FileNotFoundError as e:
            if check:
                raise SubprocessFailed(argv_list, 127, str(e)) from e
            logger.debug("STDERR %s", e)
            return CmdResult(argv=argv_list, returncode=127, stdout="", stderr=str(e))

        if p.stdout:
            logger.debug("STDOUT %s", p.stdout.strip())
        if p.stderr:
            logger.debug("STDERR %s", p.stderr.strip())

        if check and p.returncode != 0:
            raise SubprocessFailed(argv_list, p.returncode, p.stderr)

        return CmdResult(argv=argv_list, returncode=p.returncode, stdout=p.stdout, stderr=p.stderr)

    def which(self, program: str) -> Optional[str]:
        return shutil.which(program)

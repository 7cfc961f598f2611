from __future__ import annotations

import getpass
import logging
import os
import subprocess
from typing import Optional, Protocol, Sequence

from ..errors import OperatorCancelled

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "BARBS Installation"


class Dialog(Protocol):
    """Operator-facing surface. Every call blocks until it is answered."""

    def show_progress(self, text: str, *, title: str | None = None) -> None:
        ...

    def message(self, text: str, *, title: str | None = None) -> None:
        ...

    def confirm(
        self,
        prompt: str,
        *,
        title: str | None = None,
        yes_label: str | None = None,
        no_label: str | None = None,
    ) -> bool:
        ...

    def prompt_text(self, prompt: str, *, allow_cancel: bool = True) -> str:
        ...

    def prompt_secret(self, prompt: str) -> str:
        ...


class WhiptailDialog:
    """Dialogs rendered by whiptail.

    whiptail draws on the terminal and writes the operator's answer to stderr,
    so only stderr is captured.
    """

    def __init__(self, *, binary: str = "whiptail", height: int = 10, width: int = 70) -> None:
        self.binary = binary
        self.height = height
        self.width = width

    def _size(self, text: str) -> list[str]:
        # Grow with the number of explicit lines so long messages are not clipped.
        height = max(self.height, text.count("\n") + 8)
        return [str(height), str(self.width)]

    def _run(self, args: Sequence[str]) -> subprocess.CompletedProcess:
        argv = [self.binary, *args]
        logger.debug("DIALOG %s", argv[1])
        return subprocess.run(
            argv,
            text=True,
            stderr=subprocess.PIPE,
            env=dict(os.environ, TERM="ansi"),
        )

    def show_progress(self, text: str, *, title: str | None = None) -> None:
        self._run(["--title", title or DEFAULT_TITLE, "--infobox", text, *self._size(text)])

    def message(self, text: str, *, title: str | None = None) -> None:
        self._run(["--title", title or DEFAULT_TITLE, "--msgbox", text, *self._size(text)])

    def confirm(
        self,
        prompt: str,
        *,
        title: str | None = None,
        yes_label: str | None = None,
        no_label: str | None = None,
    ) -> bool:
        args = ["--title", title or DEFAULT_TITLE]
        if yes_label:
            args += ["--yes-button", yes_label]
        if no_label:
            args += ["--no-button", no_label]
        p = self._run([*args, "--yesno", prompt, *self._size(prompt)])
        return p.returncode == 0

    def prompt_text(self, prompt: str, *, allow_cancel: bool = True) -> str:
        args = [] if allow_cancel else ["--nocancel"]
        p = self._run([*args, "--inputbox", prompt, *self._size(prompt)])
        if p.returncode != 0:
            raise OperatorCancelled("User exited.")
        return p.stderr

    def prompt_secret(self, prompt: str) -> str:
        p = self._run(["--nocancel", "--passwordbox", prompt, *self._size(prompt)])
        if p.returncode != 0:
            raise OperatorCancelled("User exited.")
        return p.stderr


class ConsoleDialog:
    """Plain terminal fallback for hosts without whiptail."""

    def show_progress(self, text: str, *, title: str | None = None) -> None:
        print(text, flush=True)

    def message(self, text: str, *, title: str | None = None) -> None:
        if title:
            print(f"== {title} ==")
        print(text, flush=True)

    def _ask(self, prompt: str, *, secret: bool = False) -> str:
        try:
            if secret:
                return getpass.getpass(prompt + " ")
            return input(prompt + " ")
        except (EOFError, KeyboardInterrupt) as e:
            raise OperatorCancelled("User exited.") from e

    def confirm(
        self,
        prompt: str,
        *,
        title: str | None = None,
        yes_label: str | None = None,
        no_label: str | None = None,
    ) -> bool:
        if title:
            print(f"== {title} ==")
        answer = self._ask(f"{prompt} [y/N]")
        return answer.strip().lower() in {"y", "yes"}

    def prompt_text(self, prompt: str, *, allow_cancel: bool = True) -> str:
        return self._ask(prompt)

    def prompt_secret(self, prompt: str) -> str:
        return self._ask(prompt, secret=True)


def make_dialog(*, plain: bool = False, whiptail_path: Optional[str] = None) -> Dialog:
    if plain or not whiptail_path:
        return ConsoleDialog()
    return WhiptailDialog(binary=whiptail_path)

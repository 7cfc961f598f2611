"""
Shared test fixtures: a scripted command runner and dialog.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pytest

from barbs_installer.errors import OperatorCancelled, SubprocessFailed
from barbs_installer.lib.command import CmdResult
from barbs_installer.lib.env import Paths
from barbs_installer.session import Session


@dataclass
class Call:
    argv: List[str]
    cwd: Optional[str]
    user: Optional[str]
    input_text: Optional[str]


class FakeRunner:
    """Records every invocation; results are scripted by argv prefix (last rule wins)."""

    def __init__(self) -> None:
        self.calls: List[Call] = []
        self.rules: list = []
        self.programs: dict = {}

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "") -> "FakeRunner":
        self.rules.append((tuple(prefix), returncode, stdout, stderr))
        return self

    def run(self, argv, *, check=False, env=None, cwd=None, input_text=None, user=None) -> CmdResult:
        argv = list(argv)
        self.calls.append(Call(argv=argv, cwd=cwd, user=user, input_text=input_text))
        rc, out, err = 0, "", ""
        for prefix, r, o, e in reversed(self.rules):
            if tuple(argv[: len(prefix)]) == prefix:
                rc, out, err = r, o, e
                break
        if check and rc != 0:
            raise SubprocessFailed(argv, rc, err)
        return CmdResult(argv=argv, returncode=rc, stdout=out, stderr=err)

    def which(self, program: str) -> Optional[str]:
        return self.programs.get(program)

    @property
    def argvs(self) -> List[List[str]]:
        return [c.argv for c in self.calls]

    def find(self, *prefix: str) -> List[Call]:
        return [c for c in self.calls if tuple(c.argv[: len(prefix)]) == prefix]


class FakeDialog:
    """Scripted answers; an exhausted text queue means the operator hit Cancel."""

    def __init__(self, *, texts=(), secrets=(), confirms=()) -> None:
        self.texts = list(texts)
        self.secrets = list(secrets)
        self.confirms = list(confirms)
        self.progress: List[str] = []
        self.messages: List[str] = []
        self.prompts: List[str] = []

    def show_progress(self, text, *, title=None) -> None:
        self.progress.append(text)

    def message(self, text, *, title=None) -> None:
        self.messages.append(text)

    def confirm(self, prompt, *, title=None, yes_label=None, no_label=None) -> bool:
        self.prompts.append(prompt)
        return self.confirms.pop(0) if self.confirms else True

    def prompt_text(self, prompt, *, allow_cancel=True) -> str:
        self.prompts.append(prompt)
        if not self.texts:
            raise OperatorCancelled("User exited.")
        return self.texts.pop(0)

    def prompt_secret(self, prompt) -> str:
        self.prompts.append(prompt)
        if not self.secrets:
            raise OperatorCancelled("User exited.")
        return self.secrets.pop(0)


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def dialog() -> FakeDialog:
    return FakeDialog()


@pytest.fixture
def session(tmp_path: Path) -> Session:
    src = tmp_path / "home" / "alice" / ".local" / "src"
    src.mkdir(parents=True)
    return Session(user_name="alice", src_dir=src)


@pytest.fixture
def tmp_paths(tmp_path: Path) -> Paths:
    """System paths redirected under tmp_path."""

    etc = tmp_path / "etc"
    etc.mkdir()
    (etc / "pacman.conf").write_text("#Color\n#ParallelDownloads = 5\n#VerbosePkgLists\n", encoding="utf-8")
    (etc / "makepkg.conf").write_text('#MAKEFLAGS="-j2"\n', encoding="utf-8")
    (etc / "sudoers").write_text("root ALL=(ALL:ALL) ALL\n", encoding="utf-8")
    init = tmp_path / "lib" / "systemd" / "systemd"
    init.parent.mkdir(parents=True)
    init.write_text("", encoding="utf-8")
    return Paths(
        state_default=str(tmp_path / "state.json"),
        log_default=str(tmp_path / "barbs.log"),
        manifest_cache=str(tmp_path / "cache" / "programs.csv"),
        home_root=str(tmp_path / "home"),
        pacman_conf=str(etc / "pacman.conf"),
        makepkg_conf=str(etc / "makepkg.conf"),
        sudoers=str(etc / "sudoers"),
        sudoers_temp=str(etc / "sudoers.d" / "barbs-temp"),
        sudoers_editor=str(etc / "sudoers.d" / "02-barbs-visudo-editor"),
        nobeep_conf=str(etc / "modprobe.d" / "nobeep.conf"),
        dbus_machine_id=str(tmp_path / "var" / "lib" / "dbus" / "machine-id"),
        dbus_profile=str(etc / "profile.d" / "dbus.sh"),
        libinput_conf=str(etc / "X11" / "xorg.conf.d" / "40-libinput.conf"),
        init_path=str(init),
    )

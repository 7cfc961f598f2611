from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Set, Tuple

from .errors import StateIncomplete


@dataclass
class Session:
    """Per-run context handed to every install strategy.

    ``aur_installed`` is a snapshot of foreign packages taken before the
    install loop starts. The AUR strategy adds what it installs itself, but
    packages installed through other tags during the run are not reflected.
    """

    user_name: str
    src_dir: Path
    aur_helper: str = "yay"
    aur_installed: Set[str] = field(default_factory=set)
    pip_args: Tuple[str, ...] = ()
    index: int = 0
    total: int = 0

    def advance(self) -> int:
        self.index += 1
        return self.index

    @property
    def progress(self) -> str:
        return f"{self.index} of {self.total}"


def session_from_state(state: Dict[str, Any]) -> Session:
    cfg = state.get("config") or {}
    user = (state.get("execution") or {}).get("user") or {}
    name = user.get("name")
    src_dir = user.get("src_dir")
    if not name or not src_dir:
        raise StateIncomplete("execution.user missing; the user must be created first")

    return Session(
        user_name=str(name),
        src_dir=Path(src_dir),
        aur_helper=str(cfg.get("aur_helper") or "yay"),
        pip_args=tuple(str(a) for a in (cfg.get("pip_args") or [])),
    )

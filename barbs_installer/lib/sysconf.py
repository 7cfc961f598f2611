from __future__ import annotations

import logging
import os
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

WHEEL_NOPASSWD = "%wheel ALL=(ALL) NOPASSWD: ALL"
VISUDO_EDITOR = "Defaults editor=/usr/bin/nvim"


def write_file(path: str, contents: str, *, dry_run: bool = False, mode: int | None = None) -> None:
    p = Path(path)
    if dry_run:
        logger.info("Would write %s", str(p))
        return
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    if mode is not None:
        os.chmod(p, mode)
    logger.info("Wrote %s", str(p))


def ensure_line(path: str, line: str, *, dry_run: bool = False) -> bool:
    """Append ``line`` unless the file already has it. Returns True if appended."""

    p = Path(path)
    text = p.read_text(encoding="utf-8") if p.exists() else ""
    if line in (ln.strip() for ln in text.splitlines()):
        return False
    if dry_run:
        logger.info("Would append %r to %s", line, str(p))
        return True
    if text and not text.endswith("\n"):
        text += "\n"
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text + line + "\n", encoding="utf-8")
    logger.info("Appended %r to %s", line, str(p))
    return True


def tweak_pacman_conf(text: str, *, parallel_downloads: int = 5) -> str:
    """Colour, parallel downloads and the ILoveCandy progress bar."""

    lines = text.splitlines()
    out: list[str] = []
    has_candy = any(ln.strip() == "ILoveCandy" for ln in lines)
    for ln in lines:
        if re.match(r"^#ParallelDownloads", ln):
            ln = f"ParallelDownloads = {parallel_downloads}"
        elif ln == "#Color":
            ln = "Color"
        out.append(ln)
        if ln.strip() == "#VerbosePkgLists" and not has_candy:
            out.append("ILoveCandy")
            has_candy = True
    return "\n".join(out) + ("\n" if text.endswith("\n") else "")


def tweak_makepkg_conf(text: str, *, jobs: int) -> str:
    """Enable MAKEFLAGS and build with one job per CPU."""

    out: list[str] = []
    for ln in text.splitlines():
        if ln.startswith("#MAKEFLAGS"):
            ln = ln[1:]
        if ln.startswith("MAKEFLAGS"):
            ln = re.sub(r"-j\d+", f"-j{jobs}", ln)
        out.append(ln)
    return "\n".join(out) + ("\n" if text.endswith("\n") else "")


def rewrite_file(path: str, transform, *, dry_run: bool = False) -> bool:
    """Apply ``transform`` to a file's text. Returns True if the text changed."""

    p = Path(path)
    if not p.exists():
        logger.warning("Not found, skipping: %s", str(p))
        return False
    before = p.read_text(encoding="utf-8")
    after = transform(before)
    if after == before:
        return False
    write_file(path, after, dry_run=dry_run)
    return True


def grant_temporary_sudo(path: str, *, dry_run: bool = False) -> None:
    write_file(path, WHEEL_NOPASSWD + "\n", dry_run=dry_run, mode=0o440)


def revoke_temporary_sudo(path: str, *, dry_run: bool = False) -> None:
    p = Path(path)
    if dry_run:
        logger.info("Would remove %s", str(p))
        return
    if p.exists():
        p.unlink()
        logger.info("Removed %s", str(p))


@contextmanager
def temporary_sudo(path: str, *, dry_run: bool = False) -> Iterator[None]:
    """Passwordless sudo for wheel while the block runs; revoked on every exit path."""

    grant_temporary_sudo(path, dry_run=dry_run)
    try:
        yield
    finally:
        revoke_temporary_sudo(path, dry_run=dry_run)

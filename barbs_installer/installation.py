from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from .errors import RecordInstallFailed, SubprocessFailed
from .lib.command import CommandRunner
from .lib.dialog import Dialog
from .lib.vcs import repo_name_from_url
from .manifest import Record, Tag, strip_quotes
from .session import Session
from .strategies import Outcome, select_strategy

logger = logging.getLogger(__name__)


@dataclass
class InstallSummary:
    installed: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: List[Dict[str, str]] = field(default_factory=list)

    @property
    def failed_identifiers(self) -> List[str]:
        return [f["identifier"] for f in self.failed]

    def as_dict(self) -> Dict[str, Any]:
        return {"installed": list(self.installed), "skipped": list(self.skipped), "failed": list(self.failed)}


def progress_text(record: Record, annotation: str, session: Session) -> str:
    n = session.progress
    if record.tag is Tag.AUR:
        return f"Installing `{record.identifier}` ({n}) from the AUR. {record.identifier} {annotation}"
    if record.tag is Tag.GIT:
        name = repo_name_from_url(record.identifier)
        return f"Installing `{name}` ({n}) via `git` and `make`. {name} {annotation}"
    if record.tag is Tag.PIP:
        return f"Installing the Python package `{record.identifier}` ({n}). {record.identifier} {annotation}"
    return f"Installing `{record.identifier}` ({n}). {record.identifier} {annotation}"


def install_record(record: Record, session: Session, runner: CommandRunner, dialog: Dialog) -> Outcome:
    """Install one record. Raises RecordInstallFailed on any failure."""

    annotation = strip_quotes(record.annotation)
    dialog.show_progress(progress_text(record, annotation, session))

    if not record.identifier:
        raise RecordInstallFailed(record.identifier, "record has no identifier")

    strategy = select_strategy(record.tag)
    logger.info("[%s] %s %s (%s)", session.progress, record.tag.value, record.identifier, annotation)
    try:
        return strategy(session, runner, record.identifier, annotation)
    except (SubprocessFailed, OSError) as e:
        raise RecordInstallFailed(record.identifier, str(e)) from e


def run_installation_loop(
    records: Iterable[Record],
    session: Session,
    runner: CommandRunner,
    dialog: Dialog,
    *,
    strict: bool = False,
    summary: Optional[InstallSummary] = None,
) -> InstallSummary:
    """Install every record in order.

    A failed record is logged and recorded in the summary, and the loop moves
    on. With strict=True the first failure is raised instead; a caller-owned
    ``summary`` still holds what ran before it.
    """

    summary = summary if summary is not None else InstallSummary()
    for record in records:
        session.advance()
        try:
            outcome = install_record(record, session, runner, dialog)
        except RecordInstallFailed as e:
            logger.error("%s", e)
            summary.failed.append({"identifier": record.identifier, "tag": record.tag.value, "reason": e.reason})
            if strict:
                raise
            continue

        if outcome is Outcome.SKIPPED:
            summary.skipped.append(record.identifier)
        else:
            summary.installed.append(record.identifier)

    logger.info(
        "Install loop done: %d installed, %d skipped, %d failed",
        len(summary.installed),
        len(summary.skipped),
        len(summary.failed),
    )
    return summary

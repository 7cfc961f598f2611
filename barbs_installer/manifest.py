"""Program manifest: one ``tag,identifier,annotation`` record per line.

Lines whose first non-blank character is ``#`` are comments, and blank lines
are ignored; neither produces a record. A line is split on its first two
commas only, so the annotation may contain commas but the tag and the
identifier cannot.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import requests

from .errors import ManifestUnavailable

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
DELIMITER = ","
QUOTE_CHARS = ('"', "'")


class Tag(enum.Enum):
    OFFICIAL = "OFFICIAL"
    AUR = "AUR"
    GIT = "GIT"
    PIP = "PIP"

    @classmethod
    def from_field(cls, raw: str) -> "Tag":
        """Map a tag field to a Tag; anything unrecognised is OFFICIAL."""
        return _TAG_ALIASES.get(raw.strip().upper(), cls.OFFICIAL)


_TAG_ALIASES = {
    "A": Tag.AUR,
    "AUR": Tag.AUR,
    "G": Tag.GIT,
    "GIT": Tag.GIT,
    "P": Tag.PIP,
    "PIP": Tag.PIP,
    "OFFICIAL": Tag.OFFICIAL,
}


@dataclass(frozen=True)
class Record:
    tag: Tag
    identifier: str
    annotation: str = ""


@dataclass(frozen=True)
class Manifest:
    records: Tuple[Record, ...]
    source: str

    @property
    def total(self) -> int:
        return len(self.records)

    def __iter__(self):
        return iter(self.records)


def is_comment(line: str) -> bool:
    return line.lstrip().startswith(COMMENT_MARKER)


def strip_quotes(text: str) -> str:
    """Remove exactly one pair of matching quotes wrapping the whole field."""
    if len(text) >= 2 and text[0] in QUOTE_CHARS and text[-1] == text[0]:
        return text[1:-1]
    return text


def parse_record(line: str) -> Record:
    fields = line.rstrip("\r\n").split(DELIMITER, 2)
    fields += [""] * (3 - len(fields))
    tag, identifier, annotation = fields
    return Record(tag=Tag.from_field(tag), identifier=identifier.strip(), annotation=annotation)


def parse_manifest(lines: Iterable[str]) -> List[Record]:
    records: List[Record] = []
    for line in lines:
        if not line.strip() or is_comment(line):
            continue
        records.append(parse_record(line))
    return records


def strip_comments(text: str) -> str:
    kept = [ln for ln in text.splitlines() if ln.strip() and not is_comment(ln)]
    return "\n".join(kept) + ("\n" if kept else "")


def _is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def fetch_manifest_text(location: str, *, timeout: float = 30.0) -> str:
    """Read a manifest, preferring a local file and falling back to a download."""

    local = Path(location)
    if local.is_file():
        logger.info("Using local program manifest %s", local)
        try:
            return local.read_text(encoding="utf-8")
        except OSError as e:
            raise ManifestUnavailable(f"Cannot read program manifest {local}: {e}") from e

    if not _is_remote(location):
        raise ManifestUnavailable(f"Program manifest not found: {location}")

    logger.info("Fetching program manifest %s", location)
    try:
        response = requests.get(location, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ManifestUnavailable(f"Cannot fetch program manifest {location}: {e}") from e
    return response.text


def load_manifest(
    location: str,
    *,
    cache_path: Optional[str] = None,
    timeout: float = 30.0,
) -> Manifest:
    """Obtain the manifest and cache its comment-free form for this run."""

    text = fetch_manifest_text(location, timeout=timeout)
    cleaned = strip_comments(text)

    if cache_path:
        p = Path(cache_path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(cleaned, encoding="utf-8")
        logger.info("Cached program manifest at %s", p)

    records = parse_manifest(cleaned.splitlines())
    logger.info("Program manifest has %d records", len(records))
    return Manifest(records=tuple(records), source=location)

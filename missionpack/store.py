"""Filesystem store for daily mission packs (``<missions_dir>/YYYY-MM-DD.md``).

Absence is signalled with ``None``; only I/O errors and invalid dates
raise. Every write replaces the whole file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from missionpack.document import parse_document
from missionpack.merge import merge_batch
from missionpack.models import MissionDocument
from missionpack.parse import count_mission_headers, mission_titles
from missionpack.slugs import date_from_slug, extract_mission_markdown, find_mission, is_valid_date

log = logging.getLogger(__name__)


@dataclass
class PackSummary:
    """Header-only summary of one pack, for listings."""

    date: str
    mission_count: int
    titles: list[str] = field(default_factory=list)


@dataclass
class AppendResult:
    date: str
    markdown: str
    existing_count: int
    added_count: int

    @property
    def total(self) -> int:
        return self.existing_count + self.added_count


class MissionStore:
    """Directory of mission packs, one markdown file per date.

    Parameters
    ----------
    missions_dir:
        Directory holding ``YYYY-MM-DD.md`` files. Created on first save.
    mirror_dirs:
        Extra directories that receive a copy of every saved pack.
    """

    def __init__(self, missions_dir: Path, mirror_dirs: Iterable[Path] = ()) -> None:
        self.missions_dir = Path(missions_dir)
        self.mirror_dirs = [Path(p) for p in mirror_dirs]

    def path_for(self, date: str) -> Path:
        if not is_valid_date(date):
            raise ValueError(f"Invalid pack date '{date}' (expected YYYY-MM-DD)")
        return self.missions_dir / f"{date}.md"

    def exists(self, date: str) -> bool:
        return self.path_for(date).exists()

    def read_text(self, date: str) -> str | None:
        path = self.path_for(date)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def load(self, date: str, strict: bool = False) -> MissionDocument | None:
        """Parse the pack for *date*; None when there is none."""
        content = self.read_text(date)
        if content is None:
            return None
        doc = parse_document(content, date, strict=strict)
        if not strict:
            from missionpack.linter import lint_document

            result = lint_document(doc)
            for violation in result.violations:
                log.warning("Pack %s: %s", violation.location, violation.message)
        return doc

    def save(self, date: str, markdown: str) -> Path:
        """Write *markdown* as the pack for *date* (and to every mirror)."""
        path = self.path_for(date)
        for directory in [self.missions_dir, *self.mirror_dirs]:
            directory.mkdir(parents=True, exist_ok=True)
            (directory / path.name).write_text(markdown, encoding="utf-8")
        log.info("Saved pack %s (%d missions)", date, count_mission_headers(markdown))
        return path

    def dates(self) -> list[str]:
        """Pack dates, newest first."""
        if not self.missions_dir.is_dir():
            return []
        return sorted(
            (p.stem for p in self.missions_dir.glob("*.md") if is_valid_date(p.stem)),
            reverse=True,
        )

    def latest(self) -> MissionDocument | None:
        dates = self.dates()
        return self.load(dates[0]) if dates else None

    def list_packs(self) -> list[PackSummary]:
        """Summaries for every pack, newest first, from header lines only."""
        summaries: list[PackSummary] = []
        for date in self.dates():
            content = self.read_text(date) or ""
            summaries.append(PackSummary(
                date=date,
                mission_count=count_mission_headers(content),
                titles=mission_titles(content),
            ))
        return summaries

    def append(self, date: str, batch_markdown: str, batch_count: int | None = None) -> AppendResult:
        """Append a rendered batch to the pack for *date*, or create it.

        Raises :class:`~missionpack.merge.RenumberError` before anything
        is written when the batch headers are malformed.
        """
        existing = self.read_text(date) or ""
        existing_count = count_mission_headers(existing)
        added = count_mission_headers(batch_markdown)

        markdown = merge_batch(existing, batch_markdown, batch_count)
        self.save(date, markdown)
        if existing_count:
            log.info("Appended %d missions to pack %s (%d total)", added, date, existing_count + added)
        return AppendResult(date=date, markdown=markdown, existing_count=existing_count, added_count=added)

    def export_mission(self, slug: str) -> str | None:
        """Standalone markdown for the mission identified by *slug*."""
        date = date_from_slug(slug)
        if date is None:
            return None
        doc = self.load(date)
        if doc is None:
            return None
        mission = find_mission(doc, slug)
        if mission is None:
            return None
        return extract_mission_markdown(doc, mission)

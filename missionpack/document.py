"""Mission and document parsers.

``parse_document`` is the single entry point used by the store, the CLI
and the slug exporter. Missing sub-sections parse as empty values; only
``strict=True`` turns structural problems into an exception.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from missionpack.models import Mission, MissionDocument
from missionpack.parse import (
    BUILDING_MARKER,
    CRITERIA_MARKER,
    MISSION_HEADER_RE,
    NEXT_STEPS_MARKER,
    PREREQUISITES_MARKER,
    RULE_MARKER,
    SUBSECTION_MARKER,
    YOULL_HAVE_MARKER,
    between,
    extract_bullet_list,
    extract_meta_field,
)
from missionpack.slugs import mission_slug
from missionpack.sources import parse_source
from missionpack.steps import parse_steps

if TYPE_CHECKING:
    from missionpack.linter.numbering import Violation


class MissionStructureError(ValueError):
    """Raised by strict parsing when a document fails structural validation."""

    def __init__(self, date: str, violations: list[Violation]) -> None:
        self.date = date
        self.violations = violations
        details = "; ".join(v.message for v in violations)
        super().__init__(f"Mission pack {date} is malformed: {details}")


class MissionSection(NamedTuple):
    """One ``## Mission N: Title`` header and the body that follows it."""

    numeral: int
    title: str
    body: str


def split_missions(content: str) -> tuple[str, list[MissionSection]]:
    """Split *content* into (preamble, mission sections) in header order."""
    parts = MISSION_HEADER_RE.split(content)
    sections = [
        MissionSection(int(parts[i]), parts[i + 1].strip(), parts[i + 2])
        for i in range(1, len(parts) - 2, 3)
    ]
    return parts[0], sections


def _description(body: str) -> str:
    region = between(body, BUILDING_MARKER, SUBSECTION_MARKER)
    region = region.split(YOULL_HAVE_MARKER, 1)[0]
    lines = [
        line.strip() for line in region.split("\n")
        if line.strip() and not line.strip().startswith("**")
    ]
    return " ".join(lines).strip()


def parse_mission(index: int, title: str, body: str, date: str) -> Mission:
    """Parse one mission body into a :class:`Mission`."""
    return Mission(
        index=index,
        title=title,
        slug=mission_slug(date, title),
        time_estimate=extract_meta_field(body, "Time"),
        difficulty=extract_meta_field(body, "Difficulty"),
        tools=extract_meta_field(body, "Tools"),
        description=_description(body),
        source=parse_source(body),
        youll_build=extract_bullet_list(body, YOULL_HAVE_MARKER, SUBSECTION_MARKER),
        prerequisites=extract_bullet_list(body, PREREQUISITES_MARKER, SUBSECTION_MARKER),
        steps=parse_steps(body),
        success_criteria=extract_bullet_list(body, CRITERIA_MARKER, SUBSECTION_MARKER),
        next_steps=extract_bullet_list(body, NEXT_STEPS_MARKER, RULE_MARKER),
    )


def parse_document(content: str, date: str, strict: bool = False) -> MissionDocument:
    """Parse a full day's pack.

    Parameters
    ----------
    content:
        Raw markdown; retained verbatim on the result.
    date:
        Pack date (``YYYY-MM-DD``), used for slugs.
    strict:
        Raise :class:`MissionStructureError` when numbering is not
        contiguous, headers are duplicated or slugs collide.
    """
    _, sections = split_missions(content)
    missions = [
        parse_mission(section.numeral, section.title, section.body, date)
        for section in sections
    ]
    doc = MissionDocument(date=date, raw_text=content, missions=missions)

    if strict:
        from missionpack.linter import lint_document

        result = lint_document(doc)
        if not result.passed:
            raise MissionStructureError(date, result.violations)

    return doc

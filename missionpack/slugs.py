"""Slug derivation and slug -> mission resolution.

Slugs are derived from ``(date, title)`` on every lookup and never
stored, so renaming a mission changes its slug and breaks old links.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from missionpack.parse import MISSION_HEADER_SPLIT_RE

if TYPE_CHECKING:
    from missionpack.models import Mission, MissionDocument

DATE_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')

_NON_ALNUM_RE = re.compile(r'[^a-z0-9]+')


def slugify(text: str) -> str:
    """Lowercase, collapse non ``[a-z0-9]`` runs to ``-``, trim hyphens."""
    return _NON_ALNUM_RE.sub("-", text.lower()).strip("-")


def mission_slug(date: str, title: str) -> str:
    return f"{date}-{slugify(title)}"


def is_valid_date(date: str) -> bool:
    return bool(DATE_RE.match(date))


def date_from_slug(slug: str) -> str | None:
    """The pack date encoded in *slug*, or None if the prefix is not a date."""
    date = slug[:10]
    return date if is_valid_date(date) else None


def find_mission(doc: MissionDocument, slug: str) -> Mission | None:
    """First mission in *doc* whose derived slug equals *slug*."""
    for mission in doc.missions:
        if mission.slug == slug:
            return mission
    return None


def extract_mission_markdown(doc: MissionDocument, mission: Mission) -> str:
    """Standalone markdown for one mission, sliced from the raw pack text.

    Section ``k`` of the header split is the body of the k-th mission
    (section 0 is the preamble). The section is chosen by the mission's
    position in ``doc.missions``, not by its header numeral, which may be
    duplicated or out of sequence in a malformed pack.
    """
    position = _position(doc, mission)
    sections = MISSION_HEADER_SPLIT_RE.split(doc.raw_text)
    body = sections[position + 1] if position + 1 < len(sections) else ""
    return f"## Mission {mission.index}: {mission.title}\n{body.strip()}"


def _position(doc: MissionDocument, mission: Mission) -> int:
    for position, candidate in enumerate(doc.missions):
        if candidate is mission:
            return position
    return doc.missions.index(mission)

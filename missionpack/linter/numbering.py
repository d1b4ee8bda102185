"""Numbering and identity checks for parsed mission packs.

Rules:

  missions:  header numerals run 1..N in document order, no duplicates.
  steps:     within each mission, step numerals run 1..K, no duplicates.
  headers:   every ``## Mission N:`` line in the raw text produced a mission.
  slugs:     no two missions of one pack derive the same slug.
"""

from __future__ import annotations

from collections import Counter

from missionpack.models import MissionDocument
from missionpack.parse import count_mission_headers


class Violation:
    """A single structural violation."""

    __slots__ = ("date", "mission", "message")

    def __init__(self, date: str, mission: int | None, message: str) -> None:
        self.date = date
        self.mission = mission
        self.message = message

    @property
    def location(self) -> str:
        loc = self.date
        if self.mission is not None:
            loc += f"/mission-{self.mission}"
        return loc

    def __repr__(self) -> str:
        return f"Violation({self.location}: {self.message})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Violation):
            return NotImplemented
        return (
            self.date == other.date
            and self.mission == other.mission
            and self.message == other.message
        )

    def __hash__(self) -> int:
        return hash((self.date, self.mission, self.message))


def _sequence_problems(numerals: list[int], noun: str) -> list[str]:
    """Describe duplicates and gaps in a 1-based numeral sequence."""
    problems: list[str] = []
    counts = Counter(numerals)
    for numeral in sorted(n for n, c in counts.items() if c > 1):
        problems.append(f"Duplicate {noun} number {numeral}")

    for position, numeral in enumerate(numerals, start=1):
        if numeral != position and counts[numeral] == 1:
            problems.append(
                f"{noun.capitalize()} {position} is numbered {numeral} "
                f"(expected {position}: gap or out of order)"
            )
    return problems


def validate_mission_numbering(doc: MissionDocument) -> list[Violation]:
    numerals = [mission.index for mission in doc.missions]
    return [
        Violation(doc.date, None, message)
        for message in _sequence_problems(numerals, "mission")
    ]


def validate_step_numbering(doc: MissionDocument) -> list[Violation]:
    violations: list[Violation] = []
    for position, mission in enumerate(doc.missions, start=1):
        numerals = [step.number for step in mission.steps]
        for message in _sequence_problems(numerals, "step"):
            violations.append(Violation(doc.date, position, message))
    return violations


def validate_header_count(doc: MissionDocument) -> list[Violation]:
    found = count_mission_headers(doc.raw_text)
    if found != len(doc.missions):
        return [Violation(
            doc.date, None,
            f"Raw text has {found} mission headers but {len(doc.missions)} missions parsed",
        )]
    return []


def validate_unique_slugs(doc: MissionDocument) -> list[Violation]:
    violations: list[Violation] = []
    seen: dict[str, int] = {}
    for position, mission in enumerate(doc.missions, start=1):
        previous = seen.get(mission.slug)
        if previous is not None:
            violations.append(Violation(
                doc.date, position,
                f"Slug '{mission.slug}' already used by mission {previous}",
            ))
        else:
            seen[mission.slug] = position
    return violations

"""Core records for mission packs: parsed documents and generated batches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from missionpack.parse import SUBSECTION_MARKER, YOULL_HAVE_MARKER


@dataclass(frozen=True)
class Source:
    """Structured "Inspired by" citation. ``url`` is empty when unresolvable."""

    label: str
    url: str


@dataclass(frozen=True)
class Step:
    """One instruction unit within a mission."""

    number: int
    title: str
    description: str
    commands: list[str] = field(default_factory=list)
    checklist: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "title": self.title,
            "description": self.description,
            "commands": list(self.commands),
            "checklist": list(self.checklist),
        }


@dataclass(frozen=True)
class Mission:
    """One parsed mission. ``index`` is 1-based within its document."""

    index: int
    title: str
    slug: str
    time_estimate: str = ""
    difficulty: str = ""
    tools: str = ""
    description: str = ""
    source: Source | None = None
    youll_build: list[str] = field(default_factory=list)
    prerequisites: list[str] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)
    success_criteria: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)

    @property
    def position(self) -> int:
        """0-based key used by votes, ratings and comments."""
        return self.index - 1

    def to_dict(self) -> dict[str, Any]:
        """camelCase mapping consumed by display code."""
        return {
            "index": self.index,
            "title": self.title,
            "slug": self.slug,
            "timeEstimate": self.time_estimate,
            "difficulty": self.difficulty,
            "tools": self.tools,
            "description": self.description,
            "source": (
                {"label": self.source.label, "url": self.source.url}
                if self.source else None
            ),
            "youllBuild": list(self.youll_build),
            "prerequisites": list(self.prerequisites),
            "steps": [step.to_dict() for step in self.steps],
            "successCriteria": list(self.success_criteria),
            "nextSteps": list(self.next_steps),
        }


@dataclass(frozen=True)
class MissionDocument:
    """One calendar day's pack. ``raw_text`` is kept for per-mission slicing."""

    date: str
    raw_text: str
    missions: list[Mission] = field(default_factory=list)

    def to_dict(self, include_raw: bool = False) -> dict[str, Any]:
        data: dict[str, Any] = {
            "date": self.date,
            "missions": [mission.to_dict() for mission in self.missions],
        }
        if include_raw:
            data["rawContent"] = self.raw_text
        return data


# -- Generated batches (model output) ---------------------------------------


def _str_list(raw: dict[str, Any], key: str) -> list[str]:
    """Coerce a JSON list field to stripped, non-empty strings."""
    value = raw.get(key) or []
    if isinstance(value, str):
        value = [value]
    return [str(item).strip() for item in value if str(item).strip()]


# Line starts the step parser skips or reads as a checklist item
_STEP_DESCRIPTION_BLOCKED = ("```", "#", "**", "- [")


def _joined_lines(text: str) -> str:
    return " ".join(line.strip() for line in text.split("\n") if line.strip())


@dataclass(frozen=True)
class GeneratedStep:
    title: str
    description: str
    commands: list[str] = field(default_factory=list)
    checklist: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> GeneratedStep:
        title = str(raw.get("title", "")).strip()
        if not title:
            raise ValueError("Step has no title.")
        description = _joined_lines(str(raw.get("description") or ""))
        if not description:
            raise ValueError(f"Step '{title}' has no description.")
        if description.startswith(_STEP_DESCRIPTION_BLOCKED):
            raise ValueError(
                f"Step '{title}' description must not start with a fence, heading, "
                f"bold label or checkbox: {description[:40]!r}"
            )
        return cls(
            title=title,
            description=description,
            commands=[str(cmd) for cmd in raw.get("commands") or [] if str(cmd).strip()],
            checklist=_str_list(raw, "checklist"),
        )


@dataclass(frozen=True)
class GeneratedMission:
    """Structured mission as returned by the generation agent."""

    title: str
    description: str
    time_estimate: str
    difficulty: str
    tools: list[str] = field(default_factory=list)
    what_youll_build: list[str] = field(default_factory=list)
    prerequisites: list[str] = field(default_factory=list)
    steps: list[GeneratedStep] = field(default_factory=list)
    success_criteria: list[str] = field(default_factory=list)
    next_steps: list[str] = field(default_factory=list)
    inspiration_source: str = ""

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> GeneratedMission:
        """Build from the agent's JSON object; raises ValueError when unusable."""
        title = str(raw.get("title", "")).strip()
        if not title:
            raise ValueError("Mission has no title.")
        raw_steps = raw.get("steps") or []
        if not isinstance(raw_steps, list) or not raw_steps:
            raise ValueError(f"Mission '{title}' has no steps.")
        if not all(isinstance(step, dict) for step in raw_steps):
            raise ValueError(f"Mission '{title}' has a step that is not an object.")
        description = str(raw.get("description") or "").strip()
        for line in description.split("\n"):
            line = line.strip()
            if line.startswith(("**", "#")) or SUBSECTION_MARKER in line or YOULL_HAVE_MARKER in line:
                raise ValueError(
                    f"Mission '{title}' description has a bold-label or heading line: "
                    f"{line[:40]!r}"
                )
        return cls(
            title=title,
            description=description,
            time_estimate=str(raw.get("time_estimate", "")).strip(),
            difficulty=str(raw.get("difficulty", "")).strip(),
            tools=_str_list(raw, "tools"),
            what_youll_build=_str_list(raw, "what_youll_build"),
            prerequisites=_str_list(raw, "prerequisites"),
            steps=[GeneratedStep.from_dict(step) for step in raw_steps],
            success_criteria=_str_list(raw, "success_criteria"),
            next_steps=_str_list(raw, "next_steps"),
            inspiration_source=str(raw.get("inspiration_source") or "").strip(),
        )

    @property
    def display_difficulty(self) -> str:
        """Difficulty with its first character upper-cased."""
        return self.difficulty[:1].upper() + self.difficulty[1:]

    def to_mission(self, index: int, date: str) -> Mission:
        """The record the parser produces for this mission's rendered markdown."""
        from missionpack.slugs import mission_slug
        from missionpack.sources import classify_source

        return Mission(
            index=index,
            title=self.title,
            slug=mission_slug(date, self.title),
            time_estimate=self.time_estimate,
            difficulty=self.display_difficulty,
            tools=", ".join(self.tools),
            description=" ".join(
                line.strip() for line in self.description.split("\n") if line.strip()
            ),
            source=classify_source(self.inspiration_source) if self.inspiration_source else None,
            youll_build=list(self.what_youll_build),
            prerequisites=list(self.prerequisites),
            steps=[
                Step(
                    number=number,
                    title=step.title,
                    description=step.description,
                    commands=list(step.commands),
                    checklist=list(step.checklist),
                )
                for number, step in enumerate(self.steps, start=1)
            ],
            success_criteria=list(self.success_criteria),
            next_steps=list(self.next_steps),
        )

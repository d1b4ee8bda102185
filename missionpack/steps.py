"""Parse the "Step-by-Step Instructions" region of a mission body."""

from __future__ import annotations

from missionpack.models import Step
from missionpack.parse import (
    CRITERIA_MARKER,
    FENCE_RE,
    STEP_HEADER_RE,
    STEPS_MARKER,
    between,
    strip_bullet,
)


def _step_description(step_body: str) -> str:
    """First line that is not blank, a fence, a heading or a bold label."""
    for line in step_body.split("\n"):
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith(("```", "#", "**")):
            continue
        return stripped
    return ""


def _step_commands(step_body: str) -> list[str]:
    """Non-blank lines of the first fenced block only."""
    m = FENCE_RE.search(step_body)
    if not m:
        return []
    return [line for line in m.group(1).split("\n") if line.strip()]


def _step_checklist(step_body: str) -> list[str]:
    return [
        strip_bullet(line)
        for line in step_body.split("\n")
        if line.strip().startswith("- [")
    ]


def parse_steps_section(section: str) -> list[Step]:
    """Split an instructions region on ``#### Step N: Title`` headings."""
    steps: list[Step] = []
    parts = STEP_HEADER_RE.split(section)

    # parts = [preamble, N, title, body, N, title, body, ...]
    for i in range(1, len(parts) - 2, 3):
        step_body = parts[i + 2]
        steps.append(Step(
            number=int(parts[i]),
            title=parts[i + 1].strip(),
            description=_step_description(step_body),
            commands=_step_commands(step_body),
            checklist=_step_checklist(step_body),
        ))

    return steps


def parse_steps(body: str) -> list[Step]:
    """Parse all steps of a mission body; empty list when the region is absent."""
    section = between(body, STEPS_MARKER, CRITERIA_MARKER)
    if not section:
        return []
    return parse_steps_section(section)

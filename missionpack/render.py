"""Jinja2 rendering of generated missions into pack markdown.

The templates emit exactly the grammar ``missionpack.document`` reads:
mission headers are numbered from 1 in list order, step headers from 1
within each mission.
"""

from __future__ import annotations

import datetime
from pathlib import Path
from typing import Any, Sequence

from jinja2 import Environment, FileSystemLoader, Template

from missionpack.config import DEFAULTS
from missionpack.models import GeneratedMission, MissionDocument

_TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


def template_env() -> Environment:
    """Create a Jinja2 environment loading from missionpack/templates/."""
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def _pack_settings(pack: dict[str, Any] | None) -> dict[str, Any]:
    settings = dict(DEFAULTS["pack"])
    if pack:
        settings.update(pack)
    return settings


def render_mission(
    mission: GeneratedMission,
    number: int,
    pack: dict[str, Any] | None = None,
    template: Template | None = None,
) -> str:
    """Render one ``## Mission <number>:`` block ending in a ``---`` rule.

    *template* is the loaded ``mission.md``; callers rendering many
    missions pass it in so the environment is built once.
    """
    settings = _pack_settings(pack)
    if template is None:
        template = template_env().get_template("mission.md")
    return template.render(
        mission=mission,
        number=number,
        step_intro=settings["step_intro"],
        next_steps_intro=settings["next_steps_intro"],
    )


def render_document(
    missions: Sequence[GeneratedMission],
    date: str | None = None,
    pack: dict[str, Any] | None = None,
) -> str:
    """Render a fresh pack: preamble, then missions numbered ``1..n``.

    Parameters
    ----------
    missions:
        Generated missions in display order.
    date:
        Pack date for the title line; defaults to today (UTC).
    pack:
        The ``pack`` section of the config (title, sources, lead-in lines).
    """
    settings = _pack_settings(pack)
    if date is None:
        date = datetime.datetime.now(datetime.timezone.utc).date().isoformat()

    env = template_env()
    header = env.get_template("pack_header.md").render(
        title=settings["title"],
        date=date,
        count=len(missions),
        sources=settings["sources"],
        difficulty=settings["difficulty"],
    )
    mission_template = env.get_template("mission.md")
    blocks = [
        render_mission(mission, number, settings, mission_template)
        for number, mission in enumerate(missions, start=1)
    ]
    return header + "".join("\n" + block for block in blocks)


def build_document(
    missions: Sequence[GeneratedMission],
    date: str,
    pack: dict[str, Any] | None = None,
) -> MissionDocument:
    """Render *missions* and build the matching structured document.

    The records come straight from the generated data; they equal what
    ``parse_document`` returns for the rendered text.
    """
    return MissionDocument(
        date=date,
        raw_text=render_document(missions, date, pack),
        missions=[
            mission.to_mission(number, date)
            for number, mission in enumerate(missions, start=1)
        ],
    )

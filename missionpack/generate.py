"""Generation collaborator: prompt the agent and decode its missions.

The model call itself is an external CLI; this module only builds the
prompt, shells out, and turns the JSON reply into
:class:`~missionpack.models.GeneratedMission` records.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess
from pathlib import Path
from typing import Any, Sequence

from missionpack.models import GeneratedMission
from missionpack.render import template_env

log = logging.getLogger(__name__)

_FENCE_OPEN_RE = re.compile(r'^```(?:json)?\n?')
_FENCE_CLOSE_RE = re.compile(r'\n?```$')


class GenerationError(ValueError):
    """Raised when the agent reply cannot be turned into missions."""


def render_prompt(trends: Sequence[dict[str, Any]], count: int) -> str:
    """Render the generation prompt for *trends* (``{name, url, content}``)."""
    template = template_env().get_template("generate_prompt.md")
    return template.render(
        trends=[
            {
                "name": str(trend.get("name", "")).strip(),
                "url": str(trend.get("url") or "").strip(),
                "content": str(trend.get("content", "")).strip(),
            }
            for trend in trends
        ],
        count=count,
    )


def invoke_agent(
    config: dict[str, Any],
    project_root: Path,
    prompt: str,
    timeout: int | None = None,
) -> str | None:
    """Shell out to the configured agent CLI and return its stdout.

    Builds the command from ``generation.agent_command`` or
    ``generation.model``, appends *prompt* as the final argument.
    Returns None when the agent fails, times out or is missing.
    """
    generation = config.get("generation", {})
    model = generation.get("model", "sonnet")
    agent_cmd = generation.get("agent_command")
    if agent_cmd:
        cmd = agent_cmd.split()
    else:
        cmd = ["claude", "--print", "--model", model]
    if timeout is None:
        timeout = generation.get("timeout", 600)

    cmd.append(prompt)

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(project_root),
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        log.error("Generation agent timed out (%d s)", timeout)
        return None
    except FileNotFoundError:
        log.error("Agent command not found: %s", cmd[0])
        return None

    if result.returncode != 0:
        log.error("Generation agent failed (rc=%d): %s", result.returncode, result.stderr[:500])
        return None
    return result.stdout


def parse_agent_response(text: str) -> list[GeneratedMission]:
    """Decode the agent's JSON array, tolerating a surrounding code fence."""
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_CLOSE_RE.sub("", _FENCE_OPEN_RE.sub("", text, count=1), count=1)

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise GenerationError(f"Agent reply is not valid JSON: {exc}") from exc

    return missions_from_data(raw)


def missions_from_data(raw: object) -> list[GeneratedMission]:
    """Build missions from an already-decoded list of mission mappings."""
    if not isinstance(raw, list):
        raise GenerationError(f"Missions must be a JSON array, got {type(raw).__name__}")

    missions: list[GeneratedMission] = []
    for position, item in enumerate(raw, start=1):
        if not isinstance(item, dict):
            raise GenerationError(f"Mission {position} is not a JSON object")
        try:
            missions.append(GeneratedMission.from_dict(item))
        except ValueError as exc:
            raise GenerationError(f"Mission {position}: {exc}") from exc
    if not missions:
        raise GenerationError("No missions supplied")
    return missions


def generate_batch(
    config: dict[str, Any],
    project_root: Path,
    trends: Sequence[dict[str, Any]],
    count: int | None = None,
) -> list[GeneratedMission]:
    """Prompt the agent for *count* missions inspired by *trends*."""
    if not trends:
        raise GenerationError("No trends supplied")
    if count is None:
        count = config["generation"]["batch_size"]

    reply = invoke_agent(config, project_root, render_prompt(trends, count))
    if reply is None:
        raise GenerationError("Generation agent produced no output")

    missions = parse_agent_response(reply)
    if len(missions) != count:
        log.warning("Asked for %d missions, agent returned %d", count, len(missions))
    return missions

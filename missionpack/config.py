"""Load and validate .missionpack/config.yaml."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml


# Default config values
DEFAULTS: dict[str, Any] = {
    "missions_dir": "missions/",
    "mirror_dirs": [],
    "pack": {
        "title": "\U0001F3AF Project Missions",
        "sources": ["Product Hunt", "HackerNews", "GitHub Trending", "Cursor Changelog"],
        "difficulty": "Mix of beginner to advanced",
        "step_intro": "**Execute these steps in order:**",
        "next_steps_intro": "Once you've completed the basics, try:",
    },
    "generation": {
        "batch_size": 3,
        "model": "sonnet",
        "agent_command": None,
        "timeout": 600,
    },
}


class ConfigError(Exception):
    """Raised when config is invalid or missing."""


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base recursively. Override wins on conflicts."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _validate(config: dict) -> None:
    """Validate required fields in config."""
    missions_dir = config.get("missions_dir")
    if not isinstance(missions_dir, str) or not missions_dir.strip():
        raise ConfigError("'missions_dir' must be a non-empty path string")

    mirrors = config.get("mirror_dirs")
    if not isinstance(mirrors, list):
        raise ConfigError("'mirror_dirs' must be a list")

    pack = config.get("pack")
    if not isinstance(pack, dict):
        raise ConfigError("'pack' must be a mapping")
    if not isinstance(pack.get("sources"), list):
        raise ConfigError("'pack.sources' must be a list")

    generation = config.get("generation")
    if not isinstance(generation, dict):
        raise ConfigError("'generation' must be a mapping")
    batch_size = generation.get("batch_size")
    if not isinstance(batch_size, int) or isinstance(batch_size, bool) or batch_size < 1:
        raise ConfigError(f"'generation.batch_size' must be a positive integer, got {batch_size!r}")
    timeout = generation.get("timeout")
    if not isinstance(timeout, int) or isinstance(timeout, bool) or timeout < 1:
        raise ConfigError(f"'generation.timeout' must be a positive integer, got {timeout!r}")


def load_config(project_root: Path | None = None) -> dict:
    """Load config from .missionpack/config.yaml under project_root.

    Falls back to cwd if project_root is None. Merges with DEFAULTS
    so callers always get a full config dict.
    """
    root = Path(project_root) if project_root else Path.cwd()
    config_path = root / ".missionpack" / "config.yaml"

    if not config_path.exists():
        raise ConfigError(f"Config not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(raw).__name__}")

    config = _deep_merge(copy.deepcopy(DEFAULTS), raw)
    _validate(config)
    return config


def resolve_missions_dir(config: dict, project_root: Path) -> Path:
    """Missions directory, relative paths resolved against project_root."""
    return (project_root / Path(config["missions_dir"]).expanduser()).resolve()


def resolve_mirror_dirs(config: dict, project_root: Path) -> list[Path]:
    return [
        (project_root / Path(str(rel)).expanduser()).resolve()
        for rel in config["mirror_dirs"]
    ]

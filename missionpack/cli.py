"""CLI entry point for missionpack."""

from __future__ import annotations

import datetime
import json
from pathlib import Path

import click
import yaml


# Default config template
CONFIG_TEMPLATE = """\
missions_dir: missions/
mirror_dirs: []  # Extra folders that receive a copy of every saved pack

pack:
  title: "\U0001F3AF Project Missions"
  sources:
    - Product Hunt
    - HackerNews
    - GitHub Trending
    - Cursor Changelog
  difficulty: Mix of beginner to advanced
  step_intro: "**Execute these steps in order:**"
  next_steps_intro: "Once you've completed the basics, try:"

generation:
  batch_size: 3
  model: sonnet
  agent_command: null  # Optional full command; the prompt is appended as the last argument
  timeout: 600
"""

_PROJECT_ROOT_OPTION = click.option(
    "--project-root",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    default=".",
    help="Project root directory (default: cwd).",
)


def _today() -> str:
    return datetime.datetime.now(datetime.timezone.utc).date().isoformat()


def _open_store(project_root: str):
    """Load config and build the store, exiting cleanly on config errors."""
    from missionpack.config import (
        ConfigError,
        load_config,
        resolve_mirror_dirs,
        resolve_missions_dir,
    )
    from missionpack.store import MissionStore

    root = Path(project_root)
    try:
        config = load_config(root)
    except ConfigError as exc:
        click.echo(f"Config error: {exc}")
        raise SystemExit(1)
    store = MissionStore(
        resolve_missions_dir(config, root),
        resolve_mirror_dirs(config, root),
    )
    return config, store


def _load_structured(path: str) -> object:
    """Read a JSON or YAML file (JSON is valid YAML)."""
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f)


@click.group()
def cli() -> None:
    """missionpack: daily mission pack parser, renderer and merger."""


@cli.command()
@_PROJECT_ROOT_OPTION
def init(project_root: str) -> None:
    """Initialize .missionpack/ with a config and an empty missions dir."""
    root = Path(project_root)
    config_dir = root / ".missionpack"

    if config_dir.exists():
        click.echo(f".missionpack/ already exists at {config_dir}")
        raise SystemExit(1)

    config_dir.mkdir(parents=True)
    config_path = config_dir / "config.yaml"
    config_path.write_text(CONFIG_TEMPLATE, encoding="utf-8")
    click.echo(f"Created {config_path}")

    # Load config through the standard path to validate it
    from missionpack.config import load_config, resolve_missions_dir
    config = load_config(root)

    missions_dir = resolve_missions_dir(config, root)
    missions_dir.mkdir(parents=True, exist_ok=True)
    click.echo(f"Created {missions_dir}")


@cli.command("list")
@_PROJECT_ROOT_OPTION
def list_cmd(project_root: str) -> None:
    """List every pack, newest first."""
    _, store = _open_store(project_root)
    packs = store.list_packs()
    if not packs:
        click.echo("No mission packs.")
        return
    for pack in packs:
        click.echo(f"{pack.date}  {pack.mission_count} missions")
        for number, title in enumerate(pack.titles, start=1):
            click.echo(f"  {number}. {title}")


@cli.command()
@_PROJECT_ROOT_OPTION
@click.argument("date")
@click.option("--json", "as_json", is_flag=True, help="Print the parsed pack as JSON.")
@click.option("--strict", is_flag=True, help="Fail on numbering or slug problems.")
def show(project_root: str, date: str, as_json: bool, strict: bool) -> None:
    """Parse and display the pack for DATE (YYYY-MM-DD)."""
    from missionpack.document import MissionStructureError

    _, store = _open_store(project_root)
    try:
        doc = store.load(date, strict=strict)
    except (ValueError, MissionStructureError) as exc:
        click.echo(f"Error: {exc}")
        raise SystemExit(1)

    if doc is None:
        click.echo(f"No mission pack for {date}")
        raise SystemExit(1)

    if as_json:
        click.echo(json.dumps(doc.to_dict(), indent=2, ensure_ascii=False))
        return

    click.echo(f"Pack {doc.date}: {len(doc.missions)} missions")
    for mission in doc.missions:
        click.echo(f"\n{mission.index}. {mission.title}")
        click.echo(f"  Slug: {mission.slug}")
        click.echo(f"  Time: {mission.time_estimate or '-'}  "
                   f"Difficulty: {mission.difficulty or '-'}  Tools: {mission.tools or '-'}")
        click.echo(f"  Steps: {len(mission.steps)}")
        if mission.source:
            click.echo(f"  Source: {mission.source.label} {mission.source.url}".rstrip())


@cli.command()
@_PROJECT_ROOT_OPTION
def lint(project_root: str) -> None:
    """Validate numbering and slugs of every pack."""
    from missionpack.linter import lint_store

    _, store = _open_store(project_root)
    result = lint_store(store)

    if result.passed:
        click.echo("Lint: PASS (0 violations)")
    else:
        click.echo(f"Lint: FAIL ({len(result.violations)} violations)")
        for v in result.violations:
            click.echo(f"  [{v.location}] {v.message}")
        raise SystemExit(1)


@cli.command()
@_PROJECT_ROOT_OPTION
@click.argument("missions_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--date", default=None, help="Pack date for the title line (default: today).")
@click.option("--output", type=click.Path(dir_okay=False), default=None,
              help="Write markdown here instead of stdout.")
def render(project_root: str, missions_file: str, date: str | None, output: str | None) -> None:
    """Render a JSON/YAML list of generated missions to pack markdown."""
    from missionpack.generate import GenerationError, missions_from_data
    from missionpack.render import render_document

    config, _ = _open_store(project_root)
    raw = _load_structured(missions_file)
    try:
        missions = missions_from_data(raw)
    except GenerationError as exc:
        click.echo(f"Error: {exc}")
        raise SystemExit(1)

    markdown = render_document(missions, date or _today(), config["pack"])
    if output:
        Path(output).write_text(markdown, encoding="utf-8")
        click.echo(f"Wrote {len(missions)} missions to {output}")
    else:
        click.echo(markdown, nl=False)


@cli.command()
@_PROJECT_ROOT_OPTION
@click.argument("date")
@click.argument("batch_file", type=click.Path(exists=True, dir_okay=False))
def append(project_root: str, date: str, batch_file: str) -> None:
    """Append a rendered batch (BATCH_FILE) to the pack for DATE."""
    from missionpack.merge import RenumberError

    _, store = _open_store(project_root)
    batch = Path(batch_file).read_text(encoding="utf-8")
    try:
        result = store.append(date, batch)
    except (ValueError, RenumberError) as exc:
        click.echo(f"Append aborted, pack unchanged: {exc}")
        raise SystemExit(1)

    if result.existing_count:
        click.echo(f"Appended {result.added_count} missions to {date} ({result.total} total)")
    else:
        click.echo(f"Created {date} with {result.added_count} missions")


@cli.command()
@_PROJECT_ROOT_OPTION
@click.argument("slug")
def export(project_root: str, slug: str) -> None:
    """Print one mission's standalone markdown."""
    _, store = _open_store(project_root)
    markdown = store.export_mission(slug)
    if markdown is None:
        click.echo(f"Mission not found: {slug}")
        raise SystemExit(1)
    click.echo(markdown)


@cli.command()
@_PROJECT_ROOT_OPTION
@click.argument("trends_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--date", default=None, help="Pack date (default: today).")
@click.option("--count", type=int, default=None, help="Missions to request (default: batch_size).")
def generate(project_root: str, trends_file: str, date: str | None, count: int | None) -> None:
    """Generate a batch from TRENDS_FILE and append it to the day's pack."""
    import logging

    from missionpack.generate import GenerationError, generate_batch
    from missionpack.merge import RenumberError
    from missionpack.render import render_document

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    config, store = _open_store(project_root)
    date = date or _today()
    trends = _load_structured(trends_file)
    if not isinstance(trends, list):
        click.echo("Trends file must contain a list of {name, url, content} entries")
        raise SystemExit(1)

    try:
        missions = generate_batch(config, Path(project_root), trends, count)
        batch = render_document(missions, date, config["pack"])
        result = store.append(date, batch, len(missions))
    except (GenerationError, RenumberError, ValueError) as exc:
        click.echo(f"Generation failed: {exc}")
        raise SystemExit(1)

    click.echo(f"Generated {result.added_count} new missions"
               + (f" ({result.total} total today)" if result.existing_count else "") + ":")
    for offset, mission in enumerate(missions, start=1):
        click.echo(f"  {result.existing_count + offset}. {mission.title}")
    click.echo(f"Pack ready for {date}")

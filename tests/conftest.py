"""Shared fixtures: a hand-written pack and generated mission batches."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from missionpack.models import GeneratedMission, GeneratedStep

PACK_DATE = "2026-02-14"

SAMPLE_PACK = """\
# \U0001F3AF Project Missions - 2026-02-14

**Today's hands-on projects:** 2 practical missions

**Difficulty:** Mix of beginner to advanced

---

## Mission 1: Build an MCP Server!!

**⏱️ Time:** 30-45 minutes
**📊 Difficulty:** Beginner
**🛠️ Tools:** Node.js, npm

### 💡 What You're Building

A tiny MCP server that exposes your notes
to any compatible client.

**You'll have:**
- A running server
- A notes tool

### ✅ Prerequisites

- Node.js 20+
- A terminal

### 🚀 Step-by-Step Instructions

**Execute these steps in order:**

#### Step 1: Scaffold the project

Create the package and install the SDK.

```bash
mkdir notes-mcp && cd notes-mcp
npm init -y

```

**Success Checklist:**
- [ ] package.json exists
- [x] SDK installed

#### Step 2: Add a tool

Register a `search_notes` tool.

```
node server.js
```

```bash
echo "second block"
```

**Success Checklist:**
- [ ] Tool responds

### 🎯 Success Criteria

- [ ] Server starts
- [ ] Tool returns notes

### 🐰 Next Steps (Optional)

Once you've completed the basics, try:

- Add authentication
- Deploy it

*Inspired by: HackerNews: Show HN: my tool*

---

## Mission 2: Wire GitHub Alerts

**⏱️ Time:** 1 hour
**📊 Difficulty:** Advanced
**🛠️ Tools:** gh

### 💡 What You're Building

Alerts for new issues.

### 🚀 Step-by-Step Instructions

#### Step 1: Install gh

Install the CLI.

**Success Checklist:**
- [ ] gh --version works

### 🎯 Success Criteria

- [ ] Alerts arrive

### 🐰 Next Steps (Optional)

- Add Slack

*Inspired by: octocat/hello-world - a demo repo*

---
"""


def make_generated(title: str, **overrides: object) -> GeneratedMission:
    """A complete generated mission; keyword arguments replace fields."""
    fields: dict[str, object] = {
        "title": title,
        "description": f"Ship {title.lower()} end to end.",
        "time_estimate": "30-45 minutes",
        "difficulty": "intermediate",
        "tools": ["Python 3.12", "uv"],
        "what_youll_build": ["A CLI", "A config file"],
        "prerequisites": ["Python installed"],
        "steps": [
            GeneratedStep(
                title="Create the project",
                description="Lay out the package.",
                commands=["uv init demo", "cd demo"],
                checklist=["pyproject.toml exists", "uv run works"],
            ),
            GeneratedStep(
                title="Write the code",
                description="Add the entry point.",
                commands=[],
                checklist=["It prints hello"],
            ),
        ],
        "success_criteria": ["Tool runs", "Tests pass"],
        "next_steps": ["Publish it", "Add a plugin system"],
        "inspiration_source": "GitHub Trending: astral-sh/uv",
    }
    fields.update(overrides)
    return GeneratedMission(**fields)  # type: ignore[arg-type]


@pytest.fixture
def sample_pack() -> str:
    return SAMPLE_PACK


@pytest.fixture
def generated_batch() -> list[GeneratedMission]:
    """Three generated missions with varied source shapes."""
    return [
        make_generated("Build a Release Notes Bot"),
        make_generated(
            "Connect Postgres to Slack",
            difficulty="advanced",
            inspiration_source="Wispr Flow - 4x faster voice dictation tool",
        ),
        make_generated(
            "Automate Screenshot Diffs",
            difficulty="beginner",
            inspiration_source="",
            next_steps=[],
        ),
    ]


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a minimal .missionpack/config.yaml in tmp_path."""
    config_dir = tmp_path / ".missionpack"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text(yaml.dump({"missions_dir": "missions/"}))
    (tmp_path / "missions").mkdir()
    return tmp_path


@pytest.fixture
def make_mission():
    """Factory fixture for generated missions."""
    return make_generated

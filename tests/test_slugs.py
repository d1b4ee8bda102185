"""Tests for missionpack.slugs."""

from __future__ import annotations

import pytest

from missionpack.document import parse_document
from missionpack.slugs import (
    date_from_slug,
    extract_mission_markdown,
    find_mission,
    mission_slug,
    slugify,
)

DATE = "2026-02-14"


class TestSlugify:
    @pytest.mark.parametrize(
        ("title", "slug"),
        [
            ("Build an MCP Server!!", "build-an-mcp-server"),
            ("  --Hello,   World--  ", "hello-world"),
            ("Connect X to Y (v2.0)", "connect-x-to-y-v2-0"),
            ("Café déjà vu", "caf-d-j-vu"),
            ("!!!", ""),
        ],
    )
    def test_slugify(self, title: str, slug: str) -> None:
        assert slugify(title) == slug

    def test_stable(self) -> None:
        assert mission_slug(DATE, "Ship It") == mission_slug(DATE, "Ship It")
        assert mission_slug(DATE, "Ship It") == "2026-02-14-ship-it"


class TestDateFromSlug:
    def test_valid(self) -> None:
        assert date_from_slug("2026-02-14-build-an-mcp-server") == DATE

    def test_invalid_prefix(self) -> None:
        assert date_from_slug("build-an-mcp-server") is None

    def test_short(self) -> None:
        assert date_from_slug("2026-02") is None


class TestResolution:
    def test_find_mission(self, sample_pack: str) -> None:
        doc = parse_document(sample_pack, DATE)
        mission = find_mission(doc, "2026-02-14-wire-github-alerts")
        assert mission is not None
        assert mission.index == 2

    def test_find_missing(self, sample_pack: str) -> None:
        doc = parse_document(sample_pack, DATE)
        assert find_mission(doc, "2026-02-14-nope") is None

    def test_title_edit_breaks_slug(self, sample_pack: str) -> None:
        edited = sample_pack.replace("Wire GitHub Alerts", "Wire GitHub Alarms")
        doc = parse_document(edited, DATE)
        assert find_mission(doc, "2026-02-14-wire-github-alerts") is None

    def test_extract_markdown(self, sample_pack: str) -> None:
        doc = parse_document(sample_pack, DATE)
        text = extract_mission_markdown(doc, doc.missions[1])
        assert text.startswith("## Mission 2: Wire GitHub Alerts\n**⏱️ Time:** 1 hour")
        assert text.endswith("*Inspired by: octocat/hello-world - a demo repo*\n\n---")
        assert "Build an MCP Server" not in text

    def test_duplicate_numeral_slices_by_position(self, sample_pack: str) -> None:
        broken = sample_pack.replace("## Mission 2: Wire", "## Mission 1: Wire")
        doc = parse_document(broken, DATE)
        mission = find_mission(doc, "2026-02-14-wire-github-alerts")
        assert mission is not None
        text = extract_mission_markdown(doc, mission)
        assert text.startswith("## Mission 1: Wire GitHub Alerts\n**⏱️ Time:** 1 hour")
        assert "Node.js" not in text

    def test_gapped_numeral_keeps_body(self, sample_pack: str) -> None:
        broken = sample_pack.replace("## Mission 2: Wire", "## Mission 7: Wire")
        doc = parse_document(broken, DATE)
        text = extract_mission_markdown(doc, doc.missions[1])
        assert text.startswith("## Mission 7: Wire GitHub Alerts\n")
        assert "- [ ] Alerts arrive" in text

    def test_extracted_fragment_reparses(self, sample_pack: str) -> None:
        doc = parse_document(sample_pack, DATE)
        original = doc.missions[0]
        fragment = extract_mission_markdown(doc, original)
        reparsed = parse_document(fragment, DATE).missions
        assert reparsed == [original]

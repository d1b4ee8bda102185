"""Tests for missionpack.merge: renumbering and appending batches."""

from __future__ import annotations

import pytest

from missionpack.document import parse_document
from missionpack.linter import lint_document
from missionpack.merge import (
    MERGE_SEPARATOR,
    RenumberError,
    merge_batch,
    renumber_batch,
    strip_preamble,
)
from missionpack.models import GeneratedMission
from missionpack.parse import MISSION_HEADER_SPLIT_RE
from missionpack.render import render_document

DATE = "2026-02-14"

BATCH = """\
# Fresh batch

## Mission 1: Alpha
See ## Mission 1: in the intro, and step 1 of Mission 2.
---

## Mission 2: Beta
---
"""


class TestRenumberBatch:
    def test_offsets_headers(self) -> None:
        out = renumber_batch(BATCH, 4)
        assert "## Mission 5: Alpha" in out
        assert "## Mission 6: Beta" in out

    def test_only_header_lines_touched(self) -> None:
        out = renumber_batch(BATCH, 4)
        assert "See ## Mission 1: in the intro, and step 1 of Mission 2." in out

    def test_overlapping_numerals(self) -> None:
        # Offset 1 maps 1->2, 2->3; the new "2" must not be renumbered again
        out = renumber_batch(BATCH, 1)
        headers = [line for line in out.splitlines() if line.startswith("## Mission")]
        assert headers == ["## Mission 2: Alpha", "## Mission 3: Beta"]

    def test_zero_offset_is_identity(self) -> None:
        assert renumber_batch(BATCH, 0) == BATCH

    def test_out_of_sequence_header(self) -> None:
        bad = BATCH.replace("## Mission 2: Beta", "## Mission 3: Beta")
        with pytest.raises(RenumberError, match="numbered 3, expected 2"):
            renumber_batch(bad, 2)

    def test_count_mismatch(self) -> None:
        with pytest.raises(RenumberError, match="expected 3"):
            renumber_batch(BATCH, 2, expected_count=3)


class TestStripPreamble:
    def test_drops_title_block(self) -> None:
        assert strip_preamble(BATCH).startswith("## Mission 1: Alpha")

    def test_no_missions(self) -> None:
        assert strip_preamble("just text") == "just text"

    def test_ignores_mid_line_mentions(self) -> None:
        text = "Intro mentions ## Mission 9: nothing\n\n## Mission 1: Alpha\n"
        assert strip_preamble(text) == "## Mission 1: Alpha\n"


class TestMergeBatch:
    def test_appends_and_renumbers(
        self, sample_pack: str, generated_batch: list[GeneratedMission],
    ) -> None:
        batch = render_document(generated_batch, DATE)
        merged = merge_batch(sample_pack, batch, len(generated_batch))

        doc = parse_document(merged, DATE)
        assert [m.index for m in doc.missions] == [1, 2, 3, 4, 5]
        assert doc.missions[2].title == "Build a Release Notes Bot"
        assert lint_document(doc).passed

    def test_existing_text_preserved(
        self, sample_pack: str, generated_batch: list[GeneratedMission],
    ) -> None:
        batch = render_document(generated_batch, DATE)
        merged = merge_batch(sample_pack, batch)
        assert merged.startswith(sample_pack.rstrip() + MERGE_SEPARATOR + "## Mission 3:")

        before = parse_document(sample_pack, DATE).missions
        after = parse_document(merged, DATE).missions[:2]
        assert after == before

    def test_existing_sections_sliced_identically(
        self, sample_pack: str, generated_batch: list[GeneratedMission],
    ) -> None:
        merged = merge_batch(sample_pack, render_document(generated_batch, DATE))
        old_sections = MISSION_HEADER_SPLIT_RE.split(sample_pack)
        new_sections = MISSION_HEADER_SPLIT_RE.split(merged)
        assert new_sections[1] == old_sections[1]
        assert new_sections[2].startswith(old_sections[2].rstrip())

    def test_batch_preamble_dropped(
        self, sample_pack: str, generated_batch: list[GeneratedMission],
    ) -> None:
        batch = render_document(generated_batch, DATE, {"title": "Second Batch"})
        merged = merge_batch(sample_pack, batch)
        assert "Second Batch" not in merged

    def test_no_existing_missions(self, generated_batch: list[GeneratedMission]) -> None:
        batch = render_document(generated_batch, DATE)
        assert merge_batch("", batch) == batch
        assert merge_batch("# Empty pack\n", batch) == batch

    @pytest.mark.parametrize("existing", ["", "# Empty pack\n"])
    def test_headerless_batch_rejected_for_new_pack(self, existing: str) -> None:
        with pytest.raises(RenumberError, match="no '## Mission N:' headers"):
            merge_batch(existing, "# Nothing to add\n")

    def test_headerless_batch_rejected(self, sample_pack: str) -> None:
        with pytest.raises(RenumberError, match="no '## Mission N:' headers"):
            merge_batch(sample_pack, "# The agent returned nothing useful\n")

    def test_fresh_pack_still_validated(self) -> None:
        with pytest.raises(RenumberError, match="expected 3"):
            merge_batch("", BATCH, 3)

    def test_mismatch_is_fatal(self, sample_pack: str) -> None:
        with pytest.raises(RenumberError):
            merge_batch(sample_pack, BATCH.replace("Mission 2: Beta", "Mission 5: Beta"))

    def test_repeated_appends(self, sample_pack: str, make_mission) -> None:
        merged = sample_pack
        for title in ("One", "Two", "Three"):
            merged = merge_batch(merged, render_document([make_mission(title)], DATE), 1)
        doc = parse_document(merged, DATE)
        assert [m.index for m in doc.missions] == [1, 2, 3, 4, 5]
        assert [m.title for m in doc.missions[2:]] == ["One", "Two", "Three"]

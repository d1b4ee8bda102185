"""Append a freshly generated batch to an existing day's pack.

A new batch is always numbered ``1..k`` by the renderer. Appending it to
a pack with ``n`` missions rewrites its headers to ``n+1..n+k``, drops the
batch's own preamble and joins the two with a horizontal rule.
"""

from __future__ import annotations

from missionpack.parse import MISSION_HEADER_RE, count_mission_headers

MERGE_SEPARATOR = "\n\n---\n\n"


class RenumberError(ValueError):
    """Raised when a batch's headers do not match the expected ``1..k``."""


def renumber_batch(markdown: str, offset: int, expected_count: int | None = None) -> str:
    """Shift every ``## Mission i:`` header of a batch by *offset*.

    Headers are rewritten in one pass over the header lines, so a
    renumbered header is never matched again and numerals elsewhere in
    the text are untouched. The i-th header (1-based) must carry ``i``.

    Raises
    ------
    RenumberError
        If the batch has no headers, a header numeral is out of sequence,
        or the header count differs from *expected_count*.
    """
    headers = list(MISSION_HEADER_RE.finditer(markdown))
    if expected_count is not None and len(headers) != expected_count:
        raise RenumberError(
            f"Batch has {len(headers)} mission headers, expected {expected_count}"
        )
    if not headers:
        raise RenumberError("Batch has no '## Mission N:' headers")

    pieces: list[str] = []
    last = 0
    for position, m in enumerate(headers, start=1):
        old = int(m.group(1))
        if old != position:
            raise RenumberError(
                f"Batch header {position} is numbered {old}, expected {position}"
            )
        start, end = m.span(1)
        pieces.append(markdown[last:start])
        pieces.append(str(offset + position))
        last = end
    pieces.append(markdown[last:])
    return "".join(pieces)


def strip_preamble(markdown: str) -> str:
    """Drop everything before the first ``## Mission N:`` header line."""
    m = MISSION_HEADER_RE.search(markdown)
    return markdown[m.start():] if m else markdown


def merge_batch(existing: str, batch: str, batch_count: int | None = None) -> str:
    """Return *existing* with *batch* appended and renumbered.

    When *existing* has no missions the batch is validated and returned
    unchanged, preamble included.
    *existing* is kept byte-for-byte apart from trailing whitespace.
    """
    existing_count = count_mission_headers(existing)
    if existing_count == 0:
        renumber_batch(batch, 0, batch_count)
        return batch

    renumbered = renumber_batch(batch, existing_count, batch_count)
    return existing.rstrip() + MERGE_SEPARATOR + strip_preamble(renumbered)

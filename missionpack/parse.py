"""Shared markdown extraction utilities.

Foundation module used by the step, mission and document parsers. All
marker comparisons are literal substring matches; only the header
patterns below are regexes.
"""

from __future__ import annotations

import re

# "## Mission 3: Build a thing", captures numeral and title
MISSION_HEADER_RE = re.compile(r'^## Mission (\d+): (.+)$', re.MULTILINE)

# Same header without capture groups, for slicing raw sections
MISSION_HEADER_SPLIT_RE = re.compile(r'^## Mission \d+: .+$', re.MULTILINE)

# "#### Step 2: Wire the server"
STEP_HEADER_RE = re.compile(r'^#### Step (\d+): (.+)$', re.MULTILINE)

# First fenced block, bash-tagged or untagged
FENCE_RE = re.compile(r'```(?:bash)?\n([\s\S]*?)```')

# Leading dash plus optional [ ] / [x] checkbox
_BULLET_PREFIX_RE = re.compile(r'^-\s*(\[.\]\s*)?')

# Section markers (emoji + fixed label)
BUILDING_MARKER = "### \U0001F4A1 What You're Building"
YOULL_HAVE_MARKER = "**You'll have:**"
PREREQUISITES_MARKER = "### ✅ Prerequisites"
STEPS_MARKER = "### \U0001F680 Step-by-Step Instructions"
CRITERIA_MARKER = "### \U0001F3AF Success Criteria"
NEXT_STEPS_MARKER = "### \U0001F430 Next Steps"
SUBSECTION_MARKER = "###"
RULE_MARKER = "---"


def between(text: str, start: str, end: str) -> str:
    """Return the trimmed text after *start* up to the first *end* following it.

    Empty string if *start* is absent; the remainder if *end* is absent.
    """
    si = text.find(start)
    if si == -1:
        return ""
    after = text[si + len(start):]
    ei = after.find(end)
    if ei == -1:
        return after.strip()
    return after[:ei].strip()


def extract_meta_field(body: str, label: str) -> str:
    """Extract ``value`` from a ``**<anything><label>:** value`` line."""
    m = re.search(r'\*\*.*?' + re.escape(label) + r':?\*\* (.+)', body, re.IGNORECASE)
    return m.group(1).strip() if m else ""


def strip_bullet(line: str) -> str:
    """Drop the leading dash and checkbox marker from a bullet line."""
    return _BULLET_PREFIX_RE.sub("", line.strip(), count=1).strip()


def extract_bullet_list(body: str, start: str, end: str) -> list[str]:
    """Bullet items between *start* and *end*, markers stripped, in order."""
    section = between(body, start, end)
    return [
        strip_bullet(line)
        for line in section.split("\n")
        if line.strip().startswith("-")
    ]


def count_mission_headers(text: str) -> int:
    """Number of ``## Mission N:`` header lines in *text*."""
    return len(MISSION_HEADER_RE.findall(text))


def mission_titles(text: str) -> list[str]:
    """Titles of every mission header, in document order."""
    return [title.strip() for _, title in MISSION_HEADER_RE.findall(text)]

"""Classify "Inspired by" citations into a label and an outbound URL.

Rules are a strict priority chain; the first match wins:

1. ``[Label](URL)``
2. ``HackerNews: <title>``
3. ``GitHub Trending: <repo>``
4. ``Product Hunt: <name>``
5. ``X: <term>``
6. ``<Known blog> - <description>``
7. ``owner/name`` with optional `` - <description>``
8. ``<Name> - <description>``
9. anything else: label only, empty URL
"""

from __future__ import annotations

import re
from urllib.parse import quote

from missionpack.models import Source

# "*Inspired by: ...*" on its own line
INSPIRED_BY_RE = re.compile(r'^\s*\*Inspired by:\s*(.+?)\*\s*$', re.MULTILINE)

_LINK_RE = re.compile(r'^\[([^\]]+)\]\(([^)\s]+)\)$')
_HN_RE = re.compile(r'^HackerNews:\s*(.+)$', re.IGNORECASE)
_GH_TRENDING_RE = re.compile(r'^GitHub Trending:\s*(.+)$', re.IGNORECASE)
_PH_RE = re.compile(r'^Product Hunt:\s*(.+)$', re.IGNORECASE)
_X_RE = re.compile(r'^X:\s*(.+)$', re.IGNORECASE)
_OWNER_REPO_RE = re.compile(r'^[a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+$')
_BARE_REPO_RE = re.compile(r'^([a-zA-Z0-9_.-]+/[a-zA-Z0-9_.-]+)(?:\s+-\s+.+)?$')
_NAMED_RE = re.compile(r'^(.+?)\s+-\s+.+$')

GITHUB_TRENDING_URL = "https://github.com/trending"

# Lower-cased name fragment -> landing page
KNOWN_SOURCES: dict[str, str] = {
    "lenny's newsletter": "https://www.lennysnewsletter.com/",
    "lennys newsletter": "https://www.lennysnewsletter.com/",
    "product talk": "https://www.producttalk.org/",
    "mind the product": "https://www.mindtheproduct.com/",
    "reforge": "https://www.reforge.com/blog",
    "product coalition": "https://productcoalition.com/",
    "claude code mcp sdk": "https://docs.anthropic.com/en/docs/claude-code/mcp",
    "indie hackers": "https://www.indiehackers.com/",
    "x (twitter)": "https://x.com/",
}


def encode_component(value: str) -> str:
    """Percent-encode like a URL query component (spaces become %20)."""
    return quote(value, safe="-_.!~*'()")


def web_search_url(query: str) -> str:
    return f"https://www.google.com/search?q={encode_component(query)}"


def _known_source_url(name: str) -> str | None:
    key = name.lower()
    for fragment, url in KNOWN_SOURCES.items():
        if fragment in key:
            return url
    return None


def classify_source(raw: str) -> Source:
    """Map citation text to a :class:`Source`."""
    raw = raw.strip()

    m = _LINK_RE.match(raw)
    if m:
        return Source(label=m.group(1).strip(), url=m.group(2).strip())

    m = _HN_RE.match(raw)
    if m:
        title = m.group(1).strip()
        return Source(
            label="HackerNews",
            url=f"https://www.google.com/search?q=site:news.ycombinator.com+{encode_component(title)}",
        )

    m = _GH_TRENDING_RE.match(raw)
    if m:
        repo = m.group(1).strip()
        if _OWNER_REPO_RE.match(repo):
            return Source(label="GitHub", url=f"https://github.com/{repo}")
        return Source(label="GitHub", url=GITHUB_TRENDING_URL)

    m = _PH_RE.match(raw)
    if m:
        name = m.group(1).strip()
        return Source(
            label="Product Hunt",
            url=f"https://www.producthunt.com/search?q={encode_component(name)}",
        )

    m = _X_RE.match(raw)
    if m:
        term = m.group(1).strip()
        return Source(label="X", url=f"https://x.com/search?q={encode_component(term)}&src=typed_query")

    named = _NAMED_RE.match(raw)
    if named:
        known = _known_source_url(named.group(1).strip())
        if known:
            return Source(label=named.group(1).strip(), url=known)

    m = _BARE_REPO_RE.match(raw)
    if m:
        return Source(label="GitHub", url=f"https://github.com/{m.group(1)}")

    if named:
        name = named.group(1).strip()
        return Source(label=name, url=web_search_url(name))

    return Source(label=raw, url="")


def parse_source(body: str) -> Source | None:
    """Find and classify the citation line in a mission body."""
    m = INSPIRED_BY_RE.search(body)
    if not m:
        return None
    return classify_source(m.group(1))

"""Structural validation for mission packs.

Main entry point: ``lint_document()`` checks a parsed pack and returns a
``LintResult`` with pass/fail and a list of violations. Parsing itself
stays permissive; callers decide whether violations are fatal.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from missionpack.linter.numbering import (
    Violation,
    validate_header_count,
    validate_mission_numbering,
    validate_step_numbering,
    validate_unique_slugs,
)
from missionpack.models import MissionDocument

if TYPE_CHECKING:
    from missionpack.store import MissionStore

log = logging.getLogger(__name__)

__all__ = ["LintResult", "Violation", "lint_document", "lint_store"]


@dataclass
class LintResult:
    """Result of validating one or more packs."""

    passed: bool
    violations: list[Violation] = field(default_factory=list)

    def __repr__(self) -> str:
        status = "PASS" if self.passed else "FAIL"
        return f"LintResult({status}, {len(self.violations)} violations)"


def lint_document(doc: MissionDocument) -> LintResult:
    """Validate numbering, header coverage and slug uniqueness of *doc*."""
    violations: list[Violation] = []
    violations.extend(validate_mission_numbering(doc))
    violations.extend(validate_step_numbering(doc))
    violations.extend(validate_header_count(doc))
    violations.extend(validate_unique_slugs(doc))
    return LintResult(passed=len(violations) == 0, violations=violations)


def lint_store(store: MissionStore) -> LintResult:
    """Lint every pack in *store*.

    A pack that cannot be read is reported as a violation and does not
    stop the remaining packs from being checked.
    """
    violations: list[Violation] = []
    for date in store.dates():
        try:
            doc = store.load(date)
        except (OSError, UnicodeDecodeError) as exc:
            log.warning("Cannot read pack %s: %s", date, exc)
            violations.append(Violation(date, None, f"Unreadable pack: {exc}"))
            continue
        if doc is None:
            continue
        violations.extend(lint_document(doc).violations)
    return LintResult(passed=len(violations) == 0, violations=violations)

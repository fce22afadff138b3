"""Base rule interface and violation model for the ds-coverage scanner."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

__all__ = [
    "COMMENT_PREFIXES",
    "CONTEXT_MAX_CHARS",
    "Violation",
    "RuleDiagnostic",
    "BaseRule",
    "is_comment_line",
    "find_violations",
]

COMMENT_PREFIXES: tuple[str, ...] = ("//", "/*", "*")
CONTEXT_MAX_CHARS = 120


@dataclass(frozen=True)
class Violation:
    line: int
    column: int
    match: str
    context: str


@dataclass(frozen=True)
class RuleDiagnostic:
    """A rule that could not be applied during a run."""
    rule_id: str
    pattern: str
    message: str


def is_comment_line(trimmed: str) -> bool:
    return trimmed.startswith(COMMENT_PREFIXES)


def find_violations(lines: list[str], pattern: re.Pattern[str], scan_comments: bool) -> list[Violation]:
    """Apply *pattern* to every line, one violation per match (1-based positions)."""
    violations: list[Violation] = []
    for index, line in enumerate(lines):
        trimmed = line.strip()
        if not scan_comments and is_comment_line(trimmed):
            continue
        for match in pattern.finditer(line):
            if not match.group(0):
                continue
            violations.append(Violation(
                line=index + 1, column=match.start() + 1,
                match=match.group(0), context=trimmed[:CONTEXT_MAX_CHARS],
            ))
    return violations


class BaseRule(ABC):
    rule_id: str = "base"
    description: str = ""

    def __init__(self, rule_id: str, pattern: re.Pattern[str]) -> None:
        self.rule_id = rule_id
        self.pattern = pattern

    @abstractmethod
    def evaluate(self, lines: list[str]) -> list[Violation]:
        """Scan the lines of one file and return the violations found."""

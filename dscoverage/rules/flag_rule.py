"""Rule: comment-embedded @ds-migrate / @ds-todo annotations."""
from __future__ import annotations
from dscoverage.rules.base_rule import BaseRule, Violation, find_violations

__all__ = ["FlagRule", "FLAG_KEYS"]

FLAG_KEYS: tuple[str, ...] = ("migrate_simple", "migrate_complex", "todo")


class FlagRule(BaseRule):
    description = "Finds migration flags. Flags live in comments, so comment lines are scanned."

    def evaluate(self, lines: list[str]) -> list[Violation]:
        return find_violations(lines, self.pattern, scan_comments=True)

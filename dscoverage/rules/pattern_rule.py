"""Rule: configurable regex for hardcoded styling values."""
from __future__ import annotations
import re
from dataclasses import replace
from dscoverage.config.settings import ViolationRuleConfig
from dscoverage.rules.base_rule import BaseRule, Violation, find_violations

__all__ = ["PatternRule", "deduplicate_by_line"]


def deduplicate_by_line(violations: list[Violation]) -> list[Violation]:
    """Merge matches sharing a line into one violation, joining match texts with ", "."""
    by_line: dict[int, Violation] = {}
    for v in violations:
        existing = by_line.get(v.line)
        if existing is None:
            by_line[v.line] = v
        else:
            by_line[v.line] = replace(existing, match=f"{existing.match}, {v.match}")
    return [by_line[line] for line in sorted(by_line)]


class PatternRule(BaseRule):
    description = "Flags every match of a configured pattern outside comment lines."

    def __init__(self, rule_id: str, pattern: re.Pattern[str], deduplicate: bool = False, label: str = "") -> None:
        super().__init__(rule_id, pattern)
        self.deduplicate = deduplicate
        self.label = label or rule_id

    @classmethod
    def from_config(cls, rule_id: str, config: ViolationRuleConfig) -> PatternRule:
        """Compile a rule from config. Raises ``re.error`` on an invalid pattern."""
        return cls(rule_id, re.compile(config.pattern), deduplicate=config.deduplicate_by_line, label=config.label)

    def evaluate(self, lines: list[str]) -> list[Violation]:
        violations = find_violations(lines, self.pattern, scan_comments=False)
        if self.deduplicate:
            return deduplicate_by_line(violations)
        return violations

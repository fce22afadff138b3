"""Compile configured rules once per run, collecting diagnostics for bad patterns."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from dscoverage.config.settings import DsCoverageSettings
from dscoverage.rules.base_rule import RuleDiagnostic
from dscoverage.rules.flag_rule import FLAG_KEYS, FlagRule
from dscoverage.rules.pattern_rule import PatternRule

__all__ = ["RuleSet", "compile_rules"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleSet:
    violation_rules: list[PatternRule] = field(default_factory=list)
    flag_rules: dict[str, FlagRule] = field(default_factory=dict)
    diagnostics: list[RuleDiagnostic] = field(default_factory=list)


def _diagnostic(rule_id: str, pattern: str, exc: re.error) -> RuleDiagnostic:
    logger.warning("Invalid pattern for rule %r (%s) – rule skipped for this run", rule_id, exc)
    return RuleDiagnostic(rule_id=rule_id, pattern=pattern, message=f"Invalid regex: {exc}")


def compile_rules(settings: DsCoverageSettings) -> RuleSet:
    violation_rules: list[PatternRule] = []
    flag_rules: dict[str, FlagRule] = {}
    diagnostics: list[RuleDiagnostic] = []

    for key, config in settings.violations.items():
        if not config.enabled:
            continue
        try:
            violation_rules.append(PatternRule.from_config(key, config))
        except re.error as exc:
            diagnostics.append(_diagnostic(key, config.pattern, exc))

    for key in FLAG_KEYS:
        pattern = getattr(settings.flags, key)
        try:
            flag_rules[key] = FlagRule(key, re.compile(pattern))
        except re.error as exc:
            diagnostics.append(_diagnostic(f"flags.{key}", pattern, exc))

    logger.debug("Compiled %d violation rule(s), %d flag rule(s)", len(violation_rules), len(flag_rules))
    return RuleSet(violation_rules=violation_rules, flag_rules=flag_rules, diagnostics=diagnostics)

"""Violation scanning: applies compiled rules to every discovered file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dscoverage.config.settings import DsCoverageSettings
from dscoverage.core.locator import discover_files, read_sources
from dscoverage.rules.base_rule import RuleDiagnostic, Violation
from dscoverage.rules.registry import RuleSet, compile_rules

__all__ = ["FileFlags", "FileReport", "ScanResult", "scan_file_content", "scan"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileFlags:
    migrate_simple: list[Violation] = field(default_factory=list)
    migrate_complex: list[Violation] = field(default_factory=list)
    todo: list[Violation] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.migrate_simple) + len(self.migrate_complex) + len(self.todo)


@dataclass(frozen=True)
class FileReport:
    """Violations and flags for one scanned file. ``path`` is relative to the scan dir."""
    path: str
    violations: dict[str, list[Violation]]
    flags: FileFlags
    total_violations: int
    total_flags: int

    def count(self, rule_id: str) -> int:
        return len(self.violations.get(rule_id, ()))

    def violation_lines(self) -> set[int]:
        return {v.line for found in self.violations.values() for v in found}


@dataclass(frozen=True)
class ScanResult:
    scan_dir: Path
    file_reports: list[FileReport]
    file_contents: dict[Path, str]
    total_files: int
    diagnostics: list[RuleDiagnostic] = field(default_factory=list)

    @property
    def files_with_violations(self) -> list[FileReport]:
        return [f for f in self.file_reports if f.total_violations > 0]

    @property
    def total_violations(self) -> int:
        return sum(f.total_violations for f in self.file_reports)

    @property
    def total_flags(self) -> int:
        return sum(f.total_flags for f in self.file_reports)

    @property
    def coverage_percent(self) -> float:
        scanned = len(self.file_reports)
        if scanned == 0:
            return 100.0
        return round((scanned - len(self.files_with_violations)) / scanned * 100, 2)

    def relative_path(self, path: Path) -> str:
        return path.relative_to(self.scan_dir).as_posix()


def scan_file_content(content: str, relative_path: str, rules: RuleSet) -> FileReport:
    lines = content.split("\n")
    violations: dict[str, list[Violation]] = {}
    for rule in rules.violation_rules:
        violations[rule.rule_id] = rule.evaluate(lines)

    found_flags = {key: rule.evaluate(lines) for key, rule in rules.flag_rules.items()}
    flags = FileFlags(**found_flags)
    return FileReport(
        path=relative_path,
        violations=violations,
        flags=flags,
        total_violations=sum(len(v) for v in violations.values()),
        total_flags=flags.total,
    )


def scan(root_dir: Path, settings: DsCoverageSettings, rules: RuleSet | None = None) -> ScanResult:
    """Discover, read and scan every source file under ``root_dir / settings.scan_dir``.

    Raises ``DirectoryNotFoundError`` when the scan dir is missing and
    ``SourceReadError`` when any discovered file cannot be read.
    """
    scan_dir = (Path(root_dir) / settings.scan_dir).resolve()
    rules = rules or compile_rules(settings)
    paths = discover_files(scan_dir, settings.extensions, settings.exclude)
    contents = read_sources(paths)

    reports = [
        scan_file_content(content, path.relative_to(scan_dir).as_posix(), rules)
        for path, content in contents.items()
    ]
    logger.debug(
        "Scanned %d file(s): %d violation(s), %d flag(s)",
        len(reports), sum(r.total_violations for r in reports), sum(r.total_flags for r in reports),
    )
    return ScanResult(
        scan_dir=scan_dir, file_reports=reports, file_contents=contents,
        total_files=len(paths), diagnostics=list(rules.diagnostics),
    )

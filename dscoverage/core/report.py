"""Report assembly and JSON serialization."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields, is_dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Any

from dscoverage.core.component_analyzer import ComponentApiResult
from dscoverage.core.migration_analyzer import MigrationReport
from dscoverage.core.roadmap import CategorySummary, Roadmap, build_category_summary
from dscoverage.core.scanner import FileReport, ScanResult
from dscoverage.rules.base_rule import RuleDiagnostic

__all__ = [
    "FlagTotals",
    "ReportSummary",
    "Report",
    "camel_case",
    "to_plain",
    "assemble_report",
    "write_report_json",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlagTotals:
    migrate_simple: int = 0
    migrate_complex: int = 0
    todo: int = 0


@dataclass(frozen=True)
class ReportSummary:
    total_files: int
    total_files_scanned: int
    total_files_with_violations: int
    total_violations: int
    total_flags: int
    coverage_percent: float
    categories: dict[str, CategorySummary]
    flags: FlagTotals


@dataclass(frozen=True)
class Report:
    generated_at: str
    scan_dir: str
    summary: ReportSummary
    roadmap: Roadmap
    component_api: ComponentApiResult
    migration: MigrationReport | None
    files: list[FileReport]
    diagnostics: list[RuleDiagnostic] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return to_plain(self)


# Acronyms the dashboard reads in upper case.
_CAMEL_OVERRIDES = {"uses_cva": "usesCVA", "target_ds": "targetDS"}


def camel_case(name: str) -> str:
    if name in _CAMEL_OVERRIDES:
        return _CAMEL_OVERRIDES[name]
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def to_plain(value: Any) -> Any:
    """Convert report objects to JSON-ready data.

    Dataclass field names become camelCase; dictionary keys are kept as-is
    since they are user-defined identifiers such as rule keys.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {camel_case(f.name): to_plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, PurePath):
        return value.as_posix()
    return value


def _flag_totals(file_reports: list[FileReport]) -> FlagTotals:
    return FlagTotals(
        migrate_simple=sum(len(f.flags.migrate_simple) for f in file_reports),
        migrate_complex=sum(len(f.flags.migrate_complex) for f in file_reports),
        todo=sum(len(f.flags.todo) for f in file_reports),
    )


def assemble_report(
    scan: ScanResult,
    rule_keys: list[str],
    roadmap: Roadmap,
    component_api: ComponentApiResult,
    migration: MigrationReport | None,
    scan_dir_label: str,
) -> Report:
    reports = scan.file_reports
    summary = ReportSummary(
        total_files=scan.total_files,
        total_files_scanned=len(reports),
        total_files_with_violations=len(scan.files_with_violations),
        total_violations=scan.total_violations,
        total_flags=scan.total_flags,
        coverage_percent=scan.coverage_percent,
        categories={key: build_category_summary(reports, key) for key in rule_keys},
        flags=_flag_totals(reports),
    )
    files = sorted(
        (f for f in reports if f.total_violations > 0 or f.total_flags > 0),
        key=lambda f: f.total_violations,
        reverse=True,
    )
    return Report(
        generated_at=datetime.now(timezone.utc).isoformat(),
        scan_dir=scan_dir_label,
        summary=summary,
        roadmap=roadmap,
        component_api=component_api,
        migration=migration,
        files=files,
        diagnostics=list(scan.diagnostics),
    )


def write_report_json(report: Report, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Wrote report to %s", path)
    return path

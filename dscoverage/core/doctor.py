"""Configuration and environment checks for ``ds-coverage doctor``."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from dscoverage.config.settings import DsCoverageSettings
from dscoverage.core.locator import DirectoryNotFoundError, discover_files
from dscoverage.core.migration_catalog import KNOWN_CATALOGS, TargetCatalog, find_catalog

__all__ = ["CheckStatus", "DoctorCheck", "run_checks"]


class CheckStatus(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True)
class DoctorCheck:
    label: str
    status: CheckStatus
    detail: str = ""


def _check_scan_dir(scan_dir: Path, label: str) -> DoctorCheck:
    if not scan_dir.exists():
        return DoctorCheck(label, CheckStatus.FAIL, "Directory not found. Check scan_dir in your config.")
    if not scan_dir.is_dir():
        return DoctorCheck(label, CheckStatus.FAIL, "Path exists but is not a directory.")
    return DoctorCheck(label, CheckStatus.PASS)


def _check_files(scan_dir: Path, settings: DsCoverageSettings) -> DoctorCheck:
    extensions = ", ".join(settings.extensions)
    try:
        count = len(discover_files(scan_dir, settings.extensions, settings.exclude))
    except DirectoryNotFoundError:
        return DoctorCheck("Scannable files found", CheckStatus.WARN, "Could not enumerate files.")
    if count == 0:
        return DoctorCheck(
            "Scannable files found", CheckStatus.WARN,
            f"0 files matching [{extensions}] in {settings.scan_dir}/. Check extensions and exclude patterns.",
        )
    return DoctorCheck("Scannable files found", CheckStatus.PASS, f"{count} files matching [{extensions}]")


def _check_patterns(settings: DsCoverageSettings) -> list[DoctorCheck]:
    checks: list[DoctorCheck] = []
    enabled = settings.enabled_rule_keys
    if not enabled:
        checks.append(DoctorCheck("Violation categories configured", CheckStatus.WARN, "No violation categories are enabled."))
        return checks
    checks.append(DoctorCheck(
        "Violation categories configured", CheckStatus.PASS, f"{len(enabled)} enabled: {', '.join(enabled)}",
    ))

    invalid = 0
    for key in enabled:
        pattern = settings.violations[key].pattern
        try:
            re.compile(pattern)
        except re.error as exc:
            invalid += 1
            checks.append(DoctorCheck(f"Pattern valid: violations.{key}", CheckStatus.FAIL, f"Invalid regex {pattern!r}: {exc}"))
    if invalid == 0:
        checks.append(DoctorCheck("All regex patterns valid", CheckStatus.PASS))
    return checks


def _check_components(scan_dir: Path, settings: DsCoverageSettings) -> DoctorCheck:
    analysis = settings.component_analysis
    if not analysis.enabled:
        return DoctorCheck("Component analysis", CheckStatus.PASS, "Disabled (optional)")
    label = f"Component directory exists ({analysis.primary_directory})"
    directory = scan_dir / analysis.primary_directory
    if not directory.exists():
        return DoctorCheck(label, CheckStatus.WARN, "Directory not found. Components won't be analyzed.")
    if not directory.is_dir():
        return DoctorCheck(label, CheckStatus.FAIL, "Path exists but is not a directory.")
    return DoctorCheck(label, CheckStatus.PASS)


def _check_migration(settings: DsCoverageSettings, catalogs: tuple[TargetCatalog, ...]) -> DoctorCheck:
    migration = settings.migration
    if not migration.enabled:
        return DoctorCheck("Migration", CheckStatus.PASS, "Disabled (optional)")
    if migration.mappings:
        return DoctorCheck(
            "Migration mappings", CheckStatus.PASS, f"{len(migration.mappings)} mappings → {migration.target_ds}",
        )
    if find_catalog(migration.target_ds, catalogs) is not None:
        return DoctorCheck(
            "Migration mappings", CheckStatus.PASS,
            f"Mappings will be auto-discovered from codebase → {migration.target_ds}",
        )
    return DoctorCheck(
        "Migration mappings", CheckStatus.WARN,
        "Migration is enabled but no mappings are defined and the target library has no known catalog.",
    )


def run_checks(
    settings: DsCoverageSettings,
    root_dir: Path,
    catalogs: tuple[TargetCatalog, ...] = KNOWN_CATALOGS,
) -> list[DoctorCheck]:
    scan_dir = (Path(root_dir) / settings.scan_dir).resolve()
    checks = [_check_scan_dir(scan_dir, f"Scan directory exists ({settings.scan_dir}/)")]
    checks.append(_check_files(scan_dir, settings))
    checks.extend(_check_patterns(settings))
    checks.append(_check_components(scan_dir, settings))
    checks.append(_check_migration(settings, catalogs))
    checks.append(DoctorCheck("Output path configured", CheckStatus.PASS, f"Report: {settings.output.report_json}"))
    return checks

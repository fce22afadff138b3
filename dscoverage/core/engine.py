"""Orchestration engine – ties scanning, component analysis, migration and roadmap together."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dscoverage.config.settings import DsCoverageSettings, MigrationMapping
from dscoverage.core.component_analyzer import ComponentApiResult, analyze_components
from dscoverage.core.migration_analyzer import MigrationReport, analyze_migration
from dscoverage.core.migration_catalog import KNOWN_CATALOGS, TargetCatalog, discover_migration_mappings
from dscoverage.core.report import Report, assemble_report, write_report_json
from dscoverage.core.roadmap import Roadmap, build_roadmap
from dscoverage.core.scanner import ScanResult, scan
from dscoverage.rules.registry import RuleSet, compile_rules

__all__ = ["DsCoverageEngine"]

logger = logging.getLogger(__name__)


class DsCoverageEngine:
    """Central orchestrator for a ds-coverage run."""

    def __init__(
        self,
        settings: DsCoverageSettings,
        root_dir: Path | None = None,
        catalogs: tuple[TargetCatalog, ...] = KNOWN_CATALOGS,
    ) -> None:
        self.settings = settings
        self.root_dir = (root_dir or Path.cwd()).resolve()
        self.catalogs = catalogs
        self._rules: RuleSet | None = None

    @property
    def scan_dir(self) -> Path:
        return (self.root_dir / self.settings.scan_dir).resolve()

    @property
    def rules(self) -> RuleSet:
        if self._rules is None:
            self._rules = compile_rules(self.settings)
        return self._rules

    def run_scan(self) -> ScanResult:
        return scan(self.root_dir, self.settings, self.rules)

    def run_components(self, scan_result: ScanResult) -> ComponentApiResult:
        return analyze_components(scan_result, self.settings.component_analysis)

    def resolve_mappings(self, scan_result: ScanResult, components: ComponentApiResult) -> list[MigrationMapping]:
        """Configured mappings, or auto-discovered ones when none are configured."""
        migration = self.settings.migration
        if migration.mappings:
            return list(migration.mappings)
        if not migration.enabled:
            return []
        discovered = discover_migration_mappings(
            scan_result.file_contents,
            [c.name for c in components.components],
            scan_result.scan_dir,
            self.settings,
            self.catalogs,
        )
        if discovered:
            logger.info("Auto-discovered %d migration mapping(s) for %s", len(discovered), migration.target_ds)
        return discovered

    def run_migration(self, scan_result: ScanResult, components: ComponentApiResult) -> MigrationReport | None:
        if not self.settings.migration.enabled:
            return None
        mappings = self.resolve_mappings(scan_result, components)
        return analyze_migration(scan_result.file_contents, scan_result.scan_dir, self.settings.migration, mappings)

    def run_roadmap(self, scan_result: ScanResult) -> Roadmap:
        return build_roadmap(scan_result.file_reports, self.settings)

    def run_report(self) -> Report:
        scan_result = self.run_scan()
        components = self.run_components(scan_result)
        migration = self.run_migration(scan_result, components)
        roadmap = self.run_roadmap(scan_result)
        return assemble_report(
            scan_result,
            self.settings.enabled_rule_keys,
            roadmap,
            components,
            migration,
            scan_dir_label=Path(os.path.relpath(scan_result.scan_dir, self.root_dir)).as_posix(),
        )

    def report_path(self, output: Path | None = None) -> Path:
        if output is not None:
            return Path(output).resolve()
        return self.root_dir / self.settings.output.report_json

    def write_report(self, report: Report, output: Path | None = None) -> Path:
        return write_report_json(report, self.report_path(output))

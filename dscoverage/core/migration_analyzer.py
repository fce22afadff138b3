"""Migration usage analysis: where each mapped source component is still used."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path

from dscoverage.config.settings import NATIVE_ELEMENT_PATTERN, MigrationConfig, MigrationMapping
from dscoverage.rules.base_rule import is_comment_line

__all__ = [
    "COMPLEXITY_ORDER",
    "DetectedUsage",
    "MigrationFileUsage",
    "MigrationComponentReport",
    "ComplexityBucket",
    "MigrationSummary",
    "LegacyNativeReport",
    "MigrationReport",
    "to_kebab_case",
    "detect_component_usage",
    "analyze_migration",
]

logger = logging.getLogger(__name__)

COMPLEXITY_ORDER = ("simple", "moderate", "complex")


@dataclass(frozen=True)
class DetectedUsage:
    import_lines: list[int] = field(default_factory=list)
    usage_lines: list[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.import_lines) + len(self.usage_lines)


@dataclass(frozen=True)
class MigrationFileUsage:
    path: str
    import_lines: list[int]
    usage_lines: list[int]
    total_occurrences: int


@dataclass(frozen=True)
class MigrationComponentReport:
    source: str
    target: str
    target_import_path: str
    complexity: str
    guidelines: str
    prop_mapping: dict[str, str] | None
    breaking_changes: list[str]
    effort: str | None
    total_usages: int
    files_affected: int
    migrated: bool
    files: list[MigrationFileUsage]


@dataclass(frozen=True)
class ComplexityBucket:
    count: int = 0
    usages: int = 0
    files: int = 0


@dataclass(frozen=True)
class MigrationSummary:
    total_mappings: int
    total_usages: int
    total_files_affected: int
    migrated_count: int
    pending_count: int
    progress_percent: float
    by_complexity: dict[str, ComplexityBucket]


@dataclass(frozen=True)
class LegacyNativeReport:
    """Usage of a native markup element that has a target replacement."""
    tag: str
    target: str
    total_usages: int
    files_affected: int
    files: list[MigrationFileUsage]


@dataclass(frozen=True)
class MigrationReport:
    target_ds: str
    summary: MigrationSummary
    components: list[MigrationComponentReport]
    legacy_native: dict[str, LegacyNativeReport] = field(default_factory=dict)


def to_kebab_case(name: str) -> str:
    kebab = re.sub(r"([a-z0-9])([A-Z])", r"\1-\2", name)
    kebab = re.sub(r"([A-Z])([A-Z][a-z])", r"\1-\2", kebab)
    return kebab.lower()


def _tag_regex(name: str) -> re.Pattern[str]:
    return re.compile(rf"</?{re.escape(name)}(?:[\s/>]|$)")


def _import_regexes(name: str, import_pattern: str) -> tuple[re.Pattern[str], re.Pattern[str]]:
    module = re.escape(import_pattern)
    module_import = re.compile(
        rf"""(?:import|from)\s+.*["']\.?/?{module}["']"""
        rf"""|require\s*\(\s*["']{module}["']""",
        re.IGNORECASE,
    )
    component = re.escape(name)
    named_import = re.compile(
        rf"""\b{component}\b.*from\s+["']"""
        rf"""|import\s+{component}\b"""
        rf"""|import\s*\{{[^}}]*\b{component}\b[^}}]*\}}"""
    )
    return module_import, named_import


def detect_component_usage(content: str, name: str, import_pattern: str) -> DetectedUsage:
    """Find import lines and tag-usage lines (1-based) of *name* in *content*.

    An import line is never also counted as a usage line, and a line matching
    both the tag and its kebab-cased form counts once. Without any import,
    usages of a lowercase-initial name are discarded.
    """
    native = import_pattern == NATIVE_ELEMENT_PATTERN
    tag_patterns = [_tag_regex(name)]
    kebab = to_kebab_case(name)
    if kebab != name.lower():
        tag_patterns.append(_tag_regex(kebab))
    import_patterns = () if native else _import_regexes(name, import_pattern)

    import_lines: list[int] = []
    usage_lines: list[int] = []
    for number, line in enumerate(content.split("\n"), start=1):
        if is_comment_line(line.strip()):
            continue
        if any(p.search(line) for p in import_patterns):
            import_lines.append(number)
            continue
        if any(p.search(line) for p in tag_patterns):
            usage_lines.append(number)

    has_import = native or bool(import_lines)
    if not has_import and usage_lines and name[:1] != name[:1].upper():
        return DetectedUsage()
    return DetectedUsage(import_lines=import_lines, usage_lines=usage_lines)


def _file_usages(file_contents: dict[Path, str], scan_dir: Path, mapping: MigrationMapping) -> list[MigrationFileUsage]:
    files: list[MigrationFileUsage] = []
    for path, content in file_contents.items():
        usage = detect_component_usage(content, mapping.source, mapping.source_import_pattern)
        if usage.total == 0:
            continue
        files.append(MigrationFileUsage(
            path=path.relative_to(scan_dir).as_posix(),
            import_lines=usage.import_lines,
            usage_lines=usage.usage_lines,
            total_occurrences=usage.total,
        ))
    files.sort(key=lambda f: f.total_occurrences, reverse=True)
    return files


def _sort_key(component: MigrationComponentReport) -> tuple[bool, int, int]:
    return (component.migrated, COMPLEXITY_ORDER.index(component.complexity), -component.total_usages)


def _summarize(components: list[MigrationComponentReport]) -> MigrationSummary:
    buckets: dict[str, ComplexityBucket] = {}
    affected: set[str] = set()
    for tier in COMPLEXITY_ORDER:
        group = [c for c in components if c.complexity == tier]
        group_files = {f.path for c in group for f in c.files}
        affected.update(group_files)
        buckets[tier] = ComplexityBucket(
            count=len(group),
            usages=sum(c.total_usages for c in group),
            files=len(group_files),
        )
    migrated = sum(1 for c in components if c.migrated)
    total = len(components)
    return MigrationSummary(
        total_mappings=total,
        total_usages=sum(c.total_usages for c in components),
        total_files_affected=len(affected),
        migrated_count=migrated,
        pending_count=total - migrated,
        progress_percent=round(migrated / total * 100, 2) if total else 100.0,
        by_complexity=buckets,
    )


def _legacy_native(components: list[MigrationComponentReport], mappings: list[MigrationMapping]) -> dict[str, LegacyNativeReport]:
    native_sources = {m.source for m in mappings if m.source_import_pattern == NATIVE_ELEMENT_PATTERN}
    result: dict[str, LegacyNativeReport] = {}
    for component in components:
        if component.source not in native_sources or component.source in result:
            continue
        result[component.source] = LegacyNativeReport(
            tag=component.source,
            target=component.target,
            total_usages=component.total_usages,
            files_affected=component.files_affected,
            files=sorted(component.files, key=lambda f: f.total_occurrences, reverse=True),
        )
    return result


def analyze_migration(
    file_contents: dict[Path, str],
    scan_dir: Path,
    config: MigrationConfig,
    mappings: list[MigrationMapping] | None = None,
) -> MigrationReport | None:
    """Report usage of every mapping's source component across *file_contents*.

    *mappings* defaults to the configured ones; auto-discovered mappings are
    passed in explicitly. Returns ``None`` when migration is disabled or there
    is nothing to map.
    """
    mappings = config.mappings if mappings is None else mappings
    if not config.enabled or not mappings:
        return None

    components: list[MigrationComponentReport] = []
    for mapping in mappings:
        files = _file_usages(file_contents, scan_dir, mapping)
        total_usages = sum(f.total_occurrences for f in files)
        components.append(MigrationComponentReport(
            source=mapping.source,
            target=mapping.target,
            target_import_path=mapping.target_import_path,
            complexity=mapping.complexity,
            guidelines=mapping.guidelines,
            prop_mapping=mapping.prop_mapping,
            breaking_changes=list(mapping.breaking_changes),
            effort=mapping.effort,
            total_usages=total_usages,
            files_affected=len(files),
            migrated=total_usages == 0,
            files=files,
        ))

    components.sort(key=_sort_key)
    logger.debug("Analyzed %d migration mapping(s)", len(components))
    return MigrationReport(
        target_ds=config.target_ds,
        summary=_summarize(components),
        components=components,
        legacy_native=_legacy_native(components, mappings),
    )

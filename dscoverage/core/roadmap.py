"""Roadmap phases, directory summaries and per-category summaries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from dscoverage.config.settings import (
    CategoryFilter,
    DirectoryFilter,
    DsCoverageSettings,
    FlagsFilter,
    QuickWinsFilter,
    RoadmapPhaseConfig,
)
from dscoverage.core.scanner import FileReport

__all__ = [
    "DIRECTORY_DEPTH",
    "TOP_FILES_LIMIT",
    "ROOT_DIRECTORY",
    "FileCount",
    "CategorySummary",
    "RoadmapPhase",
    "DirectorySummary",
    "QuickWin",
    "Roadmap",
    "build_category_summary",
    "build_phase",
    "build_directories",
    "build_roadmap",
]

logger = logging.getLogger(__name__)

DIRECTORY_DEPTH = 3
TOP_FILES_LIMIT = 20
ROOT_DIRECTORY = "."


@dataclass(frozen=True)
class FileCount:
    path: str
    count: int


@dataclass(frozen=True)
class CategorySummary:
    total_files: int
    total_violations: int
    top_files: list[FileCount]


@dataclass(frozen=True)
class RoadmapPhase:
    id: str
    title: str
    description: str
    business_case: str
    files_count: int
    violations_count: int
    files: list[FileCount]


@dataclass(frozen=True)
class DirectorySummary:
    path: str
    total_files: int
    files_with_violations: int
    total_violations: int
    coverage_percent: float
    categories: dict[str, int]


@dataclass(frozen=True)
class QuickWin:
    path: str
    violations: int


@dataclass(frozen=True)
class Roadmap:
    phases: list[RoadmapPhase] = field(default_factory=list)
    directories: list[DirectorySummary] = field(default_factory=list)
    quick_wins: list[QuickWin] = field(default_factory=list)


def _by_count_desc(files: list[FileCount]) -> list[FileCount]:
    return sorted(files, key=lambda f: f.count, reverse=True)


def build_category_summary(file_reports: list[FileReport], key: str) -> CategorySummary:
    hits = [FileCount(f.path, f.count(key)) for f in file_reports if f.count(key) > 0]
    return CategorySummary(
        total_files=len(hits),
        total_violations=sum(h.count for h in hits),
        top_files=_by_count_desc(hits)[:TOP_FILES_LIMIT],
    )


def _is_quick_win(report: FileReport, threshold: int) -> bool:
    return 0 < report.total_violations <= threshold


def _match_files(phase: RoadmapPhaseConfig, file_reports: list[FileReport], threshold: int) -> list[FileCount]:
    phase_filter = phase.filter
    if isinstance(phase_filter, FlagsFilter):
        return [FileCount(f.path, f.total_flags) for f in file_reports if f.total_flags > 0]
    if isinstance(phase_filter, DirectoryFilter):
        return [
            FileCount(f.path, f.total_violations) for f in file_reports
            if f.total_violations > 0 and f.path.startswith(phase_filter.prefix)
        ]
    if isinstance(phase_filter, CategoryFilter):
        return [FileCount(f.path, f.count(phase_filter.key)) for f in file_reports if f.count(phase_filter.key) > 0]
    if isinstance(phase_filter, QuickWinsFilter):
        return [FileCount(f.path, f.total_violations) for f in file_reports if _is_quick_win(f, threshold)]
    return [FileCount(f.path, f.total_violations) for f in file_reports if f.total_violations > 0]


def build_phase(phase: RoadmapPhaseConfig, file_reports: list[FileReport], settings: DsCoverageSettings) -> RoadmapPhase | None:
    """Select, rank and cap the files for one phase. ``None`` when nothing matches."""
    roadmap = settings.roadmap
    matched = _match_files(phase, file_reports, roadmap.quick_win_threshold)
    if not matched:
        return None

    description = phase.description
    if isinstance(phase.filter, QuickWinsFilter):
        description = (
            f"{len(matched)} files can be fully migrated with minimal effort. "
            f"Each needs only 1-{roadmap.quick_win_threshold} changes."
        )
    return RoadmapPhase(
        id=phase.id,
        title=phase.title,
        description=description,
        business_case=phase.business_case,
        files_count=len(matched),
        violations_count=sum(m.count for m in matched),
        files=_by_count_desc(matched)[: roadmap.max_files_per_phase],
    )


def _directory_of(path: str) -> str:
    parts = path.split("/")
    depth = min(len(parts) - 1, DIRECTORY_DEPTH)
    return "/".join(parts[:depth]) or ROOT_DIRECTORY


def build_directories(file_reports: list[FileReport], settings: DsCoverageSettings) -> list[DirectorySummary]:
    grouped: dict[str, list[FileReport]] = {}
    for report in file_reports:
        grouped.setdefault(_directory_of(report.path), []).append(report)

    keys = settings.enabled_rule_keys
    summaries: list[DirectorySummary] = []
    for path, reports in grouped.items():
        violating = [r for r in reports if r.total_violations > 0]
        total = sum(r.total_violations for r in violating)
        if total == 0:
            continue
        summaries.append(DirectorySummary(
            path=path,
            total_files=len(reports),
            files_with_violations=len(violating),
            total_violations=total,
            coverage_percent=round((len(reports) - len(violating)) / len(reports) * 100, 2),
            categories={key: sum(r.count(key) for r in violating) for key in keys},
        ))
    summaries.sort(key=lambda d: d.total_violations, reverse=True)
    return summaries


def build_roadmap(file_reports: list[FileReport], settings: DsCoverageSettings) -> Roadmap:
    if not settings.roadmap.enabled:
        return Roadmap()

    phases = []
    for phase_config in settings.roadmap.phases:
        phase = build_phase(phase_config, file_reports, settings)
        if phase is None:
            logger.debug("Phase %s has no matching files, omitted", phase_config.id)
            continue
        phases.append(phase)

    threshold = settings.roadmap.quick_win_threshold
    quick_wins = sorted(
        (QuickWin(f.path, f.total_violations) for f in file_reports if _is_quick_win(f, threshold)),
        key=lambda q: q.violations,
    )
    return Roadmap(phases=phases, directories=build_directories(file_reports, settings), quick_wins=quick_wins)

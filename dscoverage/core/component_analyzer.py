"""Component API analysis: CVA usage, prop naming, size vocabulary, scoring."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from pathlib import PurePosixPath

from dscoverage.config.settings import ComponentAnalysisConfig
from dscoverage.core.scanner import FileReport, ScanResult
from dscoverage.core.text_blocks import extract_block_keys, find_labeled_block

__all__ = [
    "ComponentApiIssue",
    "TokenCoverage",
    "ComponentApiReport",
    "ComponentApiSummary",
    "ComponentApiResult",
    "classify_location",
    "analyze_component",
    "compute_token_coverage",
    "analyze_components",
]

logger = logging.getLogger(__name__)

PRIMARY_LOCATION = "primary"
COMPLIANT_SCORE = 80

_EXPORT_RE = re.compile(r"export\s+(?:default\s+)?(?:function|const)\s+(\w+)")
_NAMED_EXPORT_RE = re.compile(r"export\s+\{\s*(\w+)")
_HELPER_FILE_RE = re.compile(r"(?:^|/)(?:helpers|types|utils|constants)\.[jt]sx?$")
_INDEX_FILE_RE = re.compile(r"(?:^|/)index\.[jt]sx?$")

_CVA_CALL_RE = re.compile(r"\bcva\s*\(")
_CVA_IMPORT_RE = re.compile(r"""from\s+["']class-variance-authority["']""")
_RADIX_IMPORT_RE = re.compile(r"""from\s+["'](?:@radix-ui|radix-ui)""")
_CLASS_NAME_RE = re.compile(r"\bclassName[\s?:,})]")
_AS_CHILD_RE = re.compile(r"\basChild\b")
_COMPOUND_RE = re.compile(r"compoundVariants")

_EXCLUDED_VARIANT_KEYS = frozenset({"class", "className"})


@dataclass(frozen=True)
class ComponentApiIssue:
    type: str
    severity: str
    message: str


@dataclass(frozen=True)
class TokenCoverage:
    score: float = 100.0
    total_lines: int = 0
    violation_lines: int = 0
    violations: dict[str, int] = field(default_factory=dict)
    total_violations: int = 0


@dataclass(frozen=True)
class ComponentApiReport:
    path: str
    name: str
    location: str
    uses_cva: bool
    uses_radix: bool
    has_class_name: bool
    has_as_child: bool
    uses_compound_variants: bool
    variant_props: list[str]
    size_values: list[str]
    variant_values: list[str]
    issues: list[ComponentApiIssue]
    compliance_score: int
    token_coverage: TokenCoverage = field(default_factory=TokenCoverage)


@dataclass(frozen=True)
class ComponentApiSummary:
    total_components: int = 0
    by_location: dict[str, int] = field(default_factory=dict)
    uses_cva: int = 0
    uses_radix: int = 0
    has_class_name: int = 0
    has_as_child: int = 0
    uses_compound_variants: int = 0
    correct_api_naming: int = 0
    correct_size_values: int = 0
    avg_compliance_score: int = 0
    compliant_count: int = 0
    avg_token_score: float = 100.0
    token_compliant_count: int = 0


@dataclass(frozen=True)
class ComponentApiResult:
    summary: ComponentApiSummary = field(default_factory=ComponentApiSummary)
    components: list[ComponentApiReport] = field(default_factory=list)


def classify_location(relative_path: str, config: ComponentAnalysisConfig) -> str | None:
    """First matching configured directory wins; ``None`` means not a component dir."""
    for directory in config.directories:
        if relative_path.startswith(directory):
            if directory == config.primary_directory:
                return PRIMARY_LOCATION
            return PurePosixPath(directory.rstrip("/")).name or "legacy"
    return None


def _extract_component_name(content: str) -> str | None:
    match = _EXPORT_RE.search(content) or _NAMED_EXPORT_RE.search(content)
    return match.group(1) if match else None


def _scope(content: str) -> str:
    """Text searched for value blocks: the variants block when present."""
    return find_labeled_block(content, "variants") or content


def _clamp(score: int) -> int:
    return max(0, min(100, score))


def analyze_component(content: str, relative_path: str, config: ComponentAnalysisConfig) -> ComponentApiReport | None:
    location = classify_location(relative_path, config)
    if location is None:
        return None
    if _INDEX_FILE_RE.search(relative_path) or _HELPER_FILE_RE.search(relative_path):
        return None
    name = _extract_component_name(content)
    if name is None:
        return None

    api = config.api
    in_primary = relative_path.startswith(config.primary_directory)

    uses_cva = bool(_CVA_CALL_RE.search(content) or _CVA_IMPORT_RE.search(content))
    uses_radix = bool(_RADIX_IMPORT_RE.search(content))
    has_class_name = bool(_CLASS_NAME_RE.search(content))
    has_as_child = bool(_AS_CHILD_RE.search(content))
    uses_compound_variants = bool(_COMPOUND_RE.search(content))

    variant_props = [k for k in extract_block_keys(content, "variants") if k not in _EXCLUDED_VARIANT_KEYS]
    scope = _scope(content)
    size_values = extract_block_keys(scope, "size")
    variant_values: list[str] = []
    for prop in [*api.expected_props, *api.forbidden_props]:
        if prop == "size":
            continue
        variant_values.extend(extract_block_keys(scope, prop))

    forbidden_props = set(api.forbidden_props)
    forbidden_sizes = set(api.forbidden_sizes)
    legacy_values = set(api.legacy_variant_values)
    paired_props = [p for p in api.expected_props if p != "size"]

    issues: list[ComponentApiIssue] = []
    if api.require_cva and in_primary and not uses_cva:
        issues.append(ComponentApiIssue("cva", "error", "Component should use CVA for variant management"))
    if api.require_radix and in_primary and not uses_radix:
        issues.append(ComponentApiIssue("radix", "warning", "Component should build on Radix primitives"))
    if not has_class_name:
        issues.append(ComponentApiIssue("props", "warning", "Missing className prop for composition"))
    bad_props = [p for p in variant_props if p in forbidden_props]
    expected_pattern = "' + '".join(paired_props)
    for prop in bad_props:
        issues.append(ComponentApiIssue(
            "naming", "error", f"Uses '{prop}' prop – should use '{expected_pattern}' pattern",
        ))
    if paired_props and all(p in variant_props for p in paired_props) and not uses_compound_variants:
        issues.append(ComponentApiIssue(
            "compound", "warning", f"Has {' + '.join(paired_props)} but no compoundVariants",
        ))
    bad_sizes = [v for v in size_values if v in forbidden_sizes]
    if bad_sizes:
        issues.append(ComponentApiIssue(
            "sizes", "error",
            f"Size values use abbreviations: {', '.join(bad_sizes)} – "
            f"should use full words ({', '.join(api.expected_sizes)})",
        ))
    bad_values = [v for v in variant_values if v in legacy_values]
    if bad_values:
        issues.append(ComponentApiIssue("variants", "error", f"Uses legacy variant values: {', '.join(bad_values)}"))

    w = config.scoring
    score = 0
    if uses_cva:
        score += w.uses_cva
    if not bad_props:
        score += w.correct_naming
    if not bad_sizes:
        score += w.correct_sizes
    if has_class_name:
        score += w.has_class_name
    if uses_compound_variants or not uses_cva:
        score += w.uses_compound_variants
    if has_as_child or not uses_radix:
        score += w.has_as_child
    if uses_radix or not in_primary:
        score += w.uses_radix

    return ComponentApiReport(
        path=relative_path, name=name, location=location,
        uses_cva=uses_cva, uses_radix=uses_radix, has_class_name=has_class_name,
        has_as_child=has_as_child, uses_compound_variants=uses_compound_variants,
        variant_props=variant_props, size_values=size_values, variant_values=variant_values,
        issues=issues, compliance_score=_clamp(score),
    )


def compute_token_coverage(content: str, file_report: FileReport | None) -> TokenCoverage:
    total_lines = len(content.split("\n"))
    if file_report is None:
        return TokenCoverage(score=100.0, total_lines=total_lines)
    violation_lines = len(file_report.violation_lines())
    score = round((total_lines - violation_lines) / total_lines * 100, 2) if total_lines else 100.0
    return TokenCoverage(
        score=score,
        total_lines=total_lines,
        violation_lines=violation_lines,
        violations={key: len(found) for key, found in file_report.violations.items()},
        total_violations=file_report.total_violations,
    )


def _summarize(components: list[ComponentApiReport], config: ComponentAnalysisConfig) -> ComponentApiSummary:
    if not components:
        return ComponentApiSummary()
    forbidden_props = set(config.api.forbidden_props)
    forbidden_sizes = set(config.api.forbidden_sizes)
    by_location: dict[str, int] = {}
    for c in components:
        by_location[c.location] = by_location.get(c.location, 0) + 1
    count = len(components)
    return ComponentApiSummary(
        total_components=count,
        by_location=by_location,
        uses_cva=sum(1 for c in components if c.uses_cva),
        uses_radix=sum(1 for c in components if c.uses_radix),
        has_class_name=sum(1 for c in components if c.has_class_name),
        has_as_child=sum(1 for c in components if c.has_as_child),
        uses_compound_variants=sum(1 for c in components if c.uses_compound_variants),
        correct_api_naming=sum(1 for c in components if not forbidden_props.intersection(c.variant_props)),
        correct_size_values=sum(1 for c in components if not forbidden_sizes.intersection(c.size_values)),
        avg_compliance_score=round(sum(c.compliance_score for c in components) / count),
        compliant_count=sum(1 for c in components if c.compliance_score >= COMPLIANT_SCORE),
        avg_token_score=round(sum(c.token_coverage.score for c in components) / count, 2),
        token_compliant_count=sum(1 for c in components if c.token_coverage.total_violations == 0),
    )


def analyze_components(scan: ScanResult, config: ComponentAnalysisConfig) -> ComponentApiResult:
    """Analyze every component file of *scan*, worst compliance score first."""
    if not config.enabled:
        return ComponentApiResult()

    reports_by_path = {fr.path: fr for fr in scan.file_reports}
    allowed = tuple(config.extensions)
    components: list[ComponentApiReport] = []
    for path, content in scan.file_contents.items():
        if not path.name.endswith(allowed):
            continue
        relative_path = scan.relative_path(path)
        report = analyze_component(content, relative_path, config)
        if report is None:
            continue
        coverage = compute_token_coverage(content, reports_by_path.get(relative_path))
        components.append(replace(report, token_coverage=coverage))

    components.sort(key=lambda c: c.compliance_score)
    logger.debug("Analyzed %d component(s)", len(components))
    return ComponentApiResult(summary=_summarize(components, config), components=components)

"""Pydantic-based configuration model and YAML loader for ds-coverage."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal, Union

import yaml
from pydantic import BaseModel, Field


__all__ = [
    "ViolationRuleConfig",
    "FlagPatterns",
    "ComponentApiRules",
    "ScoringWeights",
    "ComponentAnalysisConfig",
    "FlagsFilter",
    "DirectoryFilter",
    "CategoryFilter",
    "QuickWinsFilter",
    "AllFilter",
    "RoadmapPhaseConfig",
    "RoadmapConfig",
    "MigrationMapping",
    "MigrationConfig",
    "OutputConfig",
    "DsCoverageSettings",
    "NATIVE_ELEMENT_PATTERN",
    "deep_merge",
    "load_settings",
]

_CONFIG_FILE_NAMES: list[str] = [
    "ds-coverage.yaml",
    "ds-coverage.yml",
    ".ds-coverage.yaml",
    ".ds-coverage.yml",
    "ds-coverage.config.json",
]

# Sentinel import pattern: the mapping targets a native markup element.
NATIVE_ELEMENT_PATTERN = "html-native"

Complexity = Literal["simple", "moderate", "complex"]

_TAILWIND_COLOR_NAMES = [
    "gray", "slate", "zinc", "neutral", "stone",
    "red", "orange", "amber", "yellow", "lime",
    "green", "emerald", "teal", "cyan", "sky",
    "blue", "indigo", "violet", "purple", "fuchsia",
    "pink", "rose",
]

_COLOR_PATTERN = (
    r"(?:bg|text|border|ring|outline|shadow|accent|fill|stroke|from|via|to)-"
    rf"(?:{'|'.join(_TAILWIND_COLOR_NAMES)})-(?:\d{{2,3}}(?:/\d+)?)"
)
_BW_PATTERN = r"(?:bg|text|border|ring)-(?:white|black)(?![a-z-])"


class ViolationRuleConfig(BaseModel):
    """One named regex rule for hardcoded styling values."""

    enabled: bool = Field(default=True, description="Apply this rule during scans.")
    label: str = Field(default="", description="Human-readable category label.")
    icon: str = Field(default="", description="Icon shown next to the label.")
    color: str = Field(default="", description="CSS color used by the dashboard.")
    pattern: str = Field(description="Regular expression source, applied per line.")
    deduplicate_by_line: bool = Field(
        default=False,
        description="Merge multiple matches on the same line into one violation.",
    )


def _default_violations() -> dict[str, ViolationRuleConfig]:
    return {
        "hardcodedColors": ViolationRuleConfig(
            label="Colors", icon="🎨", color="oklch(0.637 0.237 25.331)",
            pattern=f"(?:{_COLOR_PATTERN})|(?:{_BW_PATTERN})",
        ),
        "hardcodedTypography": ViolationRuleConfig(
            label="Typography", icon="🔤", color="oklch(0.723 0.22 70.08)",
            pattern=(
                r"\btext-(?:xs|sm|base|lg|xl|2xl|3xl|4xl|5xl|6xl|7xl|8xl|9xl)\b"
                r"|\bfont-(?:thin|light|normal|medium|semibold|bold|extrabold|black)\b"
            ),
            deduplicate_by_line=True,
        ),
        "hardcodedRadius": ViolationRuleConfig(
            label="Radius", icon="⬜", color="oklch(0.8 0.25 102.212)",
            pattern=r"\brounded-(?:sm|md|lg|xl|2xl|3xl|none)\b",
        ),
        "hardcodedShadows": ViolationRuleConfig(
            label="Shadows", icon="🌫️", color="oklch(0.723 0.219 149.579)",
            pattern=r"\bshadow-(?:sm|md|lg|xl|2xl|inner)\b",
        ),
        "darkMode": ViolationRuleConfig(
            label="Dark Mode", icon="🌙", color="oklch(0.623 0.214 264.376)",
            pattern=r"\bdark:",
        ),
    }


class FlagPatterns(BaseModel):
    """Comment annotations that mark code for future design-system work."""

    migrate_simple: str = Field(default=r"@ds-migrate:\s*simple")
    migrate_complex: str = Field(default=r"@ds-migrate:\s*complex")
    todo: str = Field(default=r"@ds-todo")


class ComponentApiRules(BaseModel):
    """Naming and value conventions expected from reusable components."""

    require_cva: bool = Field(default=True, description="Primary components must use cva().")
    require_radix: bool = Field(default=False, description="Primary components must import Radix.")
    expected_props: list[str] = Field(default_factory=lambda: ["appearance", "hierarchy", "size"])
    forbidden_props: list[str] = Field(default_factory=lambda: ["variant", "intent"])
    expected_sizes: list[str] = Field(
        default_factory=lambda: ["xxsmall", "xsmall", "small", "default", "large"],
    )
    forbidden_sizes: list[str] = Field(default_factory=lambda: ["sm", "md", "lg", "xl", "xs", "2xs"])
    legacy_variant_values: list[str] = Field(
        default_factory=lambda: ["destructive", "outline", "ghost", "link"],
    )


class ScoringWeights(BaseModel):
    """Points awarded per compliance criterion. The total is clamped to 0..100."""

    uses_cva: int = 25
    correct_naming: int = 25
    correct_sizes: int = 15
    has_class_name: int = 10
    uses_compound_variants: int = 15
    has_as_child: int = 5
    uses_radix: int = 5


class ComponentAnalysisConfig(BaseModel):
    enabled: bool = Field(default=True, description="Run the component API analyzer.")
    directories: list[str] = Field(
        default_factory=lambda: ["components/ui/", "components/common/"],
        description="Directories holding reusable components, relative to scan_dir.",
    )
    primary_directory: str = Field(
        default="components/ui/",
        description="Where new, compliant components live.",
    )
    legacy_directories: list[str] = Field(default_factory=lambda: ["components/common/"])
    extensions: list[str] = Field(
        default_factory=lambda: [".tsx", ".jsx"],
        description="File extensions treated as component sources.",
    )
    api: ComponentApiRules = Field(default_factory=ComponentApiRules)
    scoring: ScoringWeights = Field(default_factory=ScoringWeights)


class FlagsFilter(BaseModel):
    type: Literal["flags"] = "flags"


class DirectoryFilter(BaseModel):
    type: Literal["directory"] = "directory"
    prefix: str


class CategoryFilter(BaseModel):
    type: Literal["category"] = "category"
    key: str


class QuickWinsFilter(BaseModel):
    type: Literal["quickWins"] = "quickWins"


class AllFilter(BaseModel):
    type: Literal["all"] = "all"


PhaseFilter = Annotated[
    Union[FlagsFilter, DirectoryFilter, CategoryFilter, QuickWinsFilter, AllFilter],
    Field(discriminator="type"),
]


class RoadmapPhaseConfig(BaseModel):
    id: str
    title: str
    description: str = ""
    business_case: str = ""
    filter: PhaseFilter


def _default_phases() -> list[RoadmapPhaseConfig]:
    return [
        RoadmapPhaseConfig(
            id="resolve-flags",
            title="Resolve existing migration flags",
            description="Files already annotated with migration flags from previous reviews.",
            business_case="Highest ROI: zero discovery cost, just execution.",
            filter=FlagsFilter(),
        ),
        RoadmapPhaseConfig(
            id="primary-components",
            title="Migrate primary UI components to 100%",
            description="Design system foundation, reused everywhere.",
            business_case="Maximum leverage: one fix here propagates to the entire app.",
            filter=DirectoryFilter(prefix="components/ui/"),
        ),
        RoadmapPhaseConfig(
            id="remove-dark-mode",
            title="Remove dark: prefixes",
            description="Remove all dark: prefixes and replace them with semantic tokens.",
            business_case="Dead code removal reduces maintenance burden.",
            filter=CategoryFilter(key="darkMode"),
        ),
        RoadmapPhaseConfig(
            id="quick-wins",
            title="Quick wins",
            description="Files that can be fully migrated with minimal effort.",
            business_case="Best coverage improvement per hour. Builds momentum.",
            filter=QuickWinsFilter(),
        ),
        RoadmapPhaseConfig(
            id="shadows",
            title="Migrate hardcoded shadows",
            description="Replace shadow-sm/md/lg with named shadow tokens.",
            business_case="Depth consistency with low risk, easy to batch.",
            filter=CategoryFilter(key="hardcodedShadows"),
        ),
        RoadmapPhaseConfig(
            id="radius",
            title="Migrate hardcoded radius",
            description="Replace rounded-sm/md/lg with token values.",
            business_case="Shape consistency, fully automatable.",
            filter=CategoryFilter(key="hardcodedRadius"),
        ),
        RoadmapPhaseConfig(
            id="typography",
            title="Migrate hardcoded typography",
            description="Replace text-xs/sm + font-medium combinations with typescale classes.",
            business_case="Enables future brand evolution from a single file.",
            filter=CategoryFilter(key="hardcodedTypography"),
        ),
        RoadmapPhaseConfig(
            id="colors",
            title="Migrate hardcoded colors",
            description="The largest category. Many matches need visual context.",
            business_case="Brand consistency: highest effort, highest long-term value.",
            filter=CategoryFilter(key="hardcodedColors"),
        ),
    ]


class RoadmapConfig(BaseModel):
    enabled: bool = True
    max_files_per_phase: int = Field(default=30, description="Files listed per phase.")
    quick_win_threshold: int = Field(default=3, description="Max violations for a quick win.")
    phases: list[RoadmapPhaseConfig] = Field(default_factory=_default_phases)


class MigrationMapping(BaseModel):
    """A source component (or native element) and its replacement."""

    source: str
    source_import_pattern: str = Field(
        description=f"Module path of the source library, or '{NATIVE_ELEMENT_PATTERN}'.",
    )
    target: str
    target_import_path: str = ""
    complexity: Complexity = "simple"
    guidelines: str = ""
    prop_mapping: dict[str, str] | None = None
    breaking_changes: list[str] = Field(default_factory=list)
    effort: str | None = None


class MigrationConfig(BaseModel):
    enabled: bool = False
    target_ds: str = Field(default="", description="Name of the target component library.")
    mappings: list[MigrationMapping] = Field(default_factory=list)


class OutputConfig(BaseModel):
    report_json: str = Field(default="ds-coverage-report.json")


class DsCoverageSettings(BaseModel):
    """Top-level ds-coverage configuration."""

    scan_dir: str = Field(default="src", description="Directory to scan, relative to the project root.")
    extensions: list[str] = Field(default_factory=lambda: [".tsx", ".jsx"])
    exclude: list[str] = Field(
        default_factory=lambda: [
            "stories/", ".storybook/", "test/", "__tests__/",
            ".test.", ".spec.", "node_modules/",
        ],
        description="Relative paths containing any of these substrings are skipped.",
    )
    violations: dict[str, ViolationRuleConfig] = Field(default_factory=_default_violations)
    flags: FlagPatterns = Field(default_factory=FlagPatterns)
    component_analysis: ComponentAnalysisConfig = Field(default_factory=ComponentAnalysisConfig)
    roadmap: RoadmapConfig = Field(default_factory=RoadmapConfig)
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @property
    def enabled_rule_keys(self) -> list[str]:
        return [key for key, rule in self.violations.items() if rule.enabled]


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge *override* into a copy of *base*.

    Nested mappings are merged key by key; lists and scalars in *override*
    replace the base value. An explicit ``None`` replaces too.
    """
    result = dict(base)
    for key, value in override.items():
        current = result.get(key)
        if isinstance(value, dict) and isinstance(current, dict):
            result[key] = deep_merge(current, value)
        else:
            result[key] = value
    return result


def _find_config_file(search_dir: Path) -> Path | None:
    """Walk up from *search_dir* looking for a config file."""
    current = search_dir.resolve()
    while True:
        for name in _CONFIG_FILE_NAMES:
            candidate = current / name
            if candidate.is_file():
                return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


def load_settings(
    config_path: Path | None = None,
    search_dir: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> DsCoverageSettings:
    """Load settings from a YAML file deep-merged over the defaults."""
    raw: dict[str, Any] = {}

    if config_path is not None:
        resolved = Path(config_path).resolve()
        if resolved.is_file():
            raw = yaml.safe_load(resolved.read_text(encoding="utf-8")) or {}
    else:
        found = _find_config_file(search_dir or Path.cwd())
        if found is not None:
            raw = yaml.safe_load(found.read_text(encoding="utf-8")) or {}

    merged = deep_merge(DsCoverageSettings().model_dump(), raw)
    if overrides:
        merged = deep_merge(merged, overrides)
    return DsCoverageSettings.model_validate(merged)

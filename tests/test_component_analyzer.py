"""Tests for component API analysis and scoring."""
from __future__ import annotations
from pathlib import Path
from dscoverage.config.settings import ComponentAnalysisConfig, DsCoverageSettings, ScoringWeights
from dscoverage.core.component_analyzer import (
    analyze_component, analyze_components, classify_location, compute_token_coverage,
)
from dscoverage.core.scanner import scan, scan_file_content
from dscoverage.rules.registry import compile_rules
from tests.conftest import BADGE_COMPONENT, BUTTON_COMPONENT, LEGACY_CARD


def _issue_types(report) -> list[str]:
    return [i.type for i in report.issues]


class TestClassifyLocation:
    def test_primary(self) -> None:
        assert classify_location("components/ui/button.tsx", ComponentAnalysisConfig()) == "primary"

    def test_legacy_directory_name(self) -> None:
        assert classify_location("components/common/Card.tsx", ComponentAnalysisConfig()) == "common"

    def test_outside_component_dirs(self) -> None:
        assert classify_location("app/page.tsx", ComponentAnalysisConfig()) is None


class TestAnalyzeComponent:
    def test_compliant_button(self) -> None:
        report = analyze_component(BUTTON_COMPONENT, "components/ui/button.tsx", ComponentAnalysisConfig())
        assert report.name == "Button" and report.location == "primary"
        assert report.uses_cva and report.uses_radix and report.has_as_child and report.uses_compound_variants
        assert report.variant_props == ["appearance", "hierarchy", "size"]
        assert report.size_values == ["small", "default", "large"]
        assert report.issues == [] and report.compliance_score == 100

    def test_legacy_badge(self) -> None:
        report = analyze_component(BADGE_COMPONENT, "components/ui/badge.tsx", ComponentAnalysisConfig())
        assert report.variant_props == ["variant", "size"] and report.size_values == ["sm", "lg"]
        assert "destructive" in report.variant_values
        assert _issue_types(report) == ["props", "naming", "sizes", "variants"]
        assert report.compliance_score == 30

    def test_documented_variants_still_analyzed(self) -> None:
        source = BADGE_COMPONENT.replace(
            "    variant: {", "    /** The badge's visual style */\n    variant: {",
        ).replace("    size: {", "    /* sizes } */\n    size: {")
        report = analyze_component(source, "components/ui/badge.tsx", ComponentAnalysisConfig())
        assert report.variant_props == ["variant", "size"] and report.size_values == ["sm", "lg"]
        assert _issue_types(report) == ["props", "naming", "sizes", "variants"]
        assert report.compliance_score == 30

    def test_naming_issue_message(self) -> None:
        report = analyze_component(BADGE_COMPONENT, "components/ui/badge.tsx", ComponentAnalysisConfig())
        naming = next(i for i in report.issues if i.type == "naming")
        assert naming.severity == "error" and "'variant'" in naming.message and "'appearance' + 'hierarchy'" in naming.message

    def test_legacy_directory_not_required_cva(self) -> None:
        report = analyze_component(LEGACY_CARD, "components/common/Card.tsx", ComponentAnalysisConfig())
        assert report.location == "common" and "cva" not in _issue_types(report)
        assert report.compliance_score == 75

    def test_missing_cva_in_primary(self) -> None:
        report = analyze_component(LEGACY_CARD, "components/ui/card.tsx", ComponentAnalysisConfig())
        assert _issue_types(report)[0] == "cva"

    def test_require_radix(self) -> None:
        config = ComponentAnalysisConfig()
        config.api.require_radix = True
        report = analyze_component(BADGE_COMPONENT, "components/ui/badge.tsx", config)
        assert "radix" in _issue_types(report)

    def test_compound_variants_missing(self) -> None:
        source = BUTTON_COMPONENT.replace("compoundVariants", "extraVariants")
        report = analyze_component(source, "components/ui/button.tsx", ComponentAnalysisConfig())
        assert _issue_types(report) == ["compound"] and report.compliance_score == 85

    def test_index_and_helper_files_skipped(self) -> None:
        config = ComponentAnalysisConfig()
        assert analyze_component("export const a = 1", "components/ui/index.tsx", config) is None
        assert analyze_component("export const a = 1", "components/ui/utils.tsx", config) is None

    def test_file_without_export_skipped(self) -> None:
        assert analyze_component("const A = () => null", "components/ui/a.tsx", ComponentAnalysisConfig()) is None

    def test_score_clamped_high(self) -> None:
        config = ComponentAnalysisConfig(scoring=ScoringWeights(uses_cva=500, correct_naming=500))
        assert analyze_component(BUTTON_COMPONENT, "components/ui/button.tsx", config).compliance_score == 100

    def test_score_clamped_low(self) -> None:
        weights = ScoringWeights(
            uses_cva=-500, correct_naming=-500, correct_sizes=-10, has_class_name=-10,
            uses_compound_variants=-10, has_as_child=-10, uses_radix=-10,
        )
        config = ComponentAnalysisConfig(scoring=weights)
        assert analyze_component(BUTTON_COMPONENT, "components/ui/button.tsx", config).compliance_score == 0


class TestTokenCoverage:
    def test_no_report_is_full_coverage(self) -> None:
        coverage = compute_token_coverage("a\nb", None)
        assert coverage.score == 100.0 and coverage.total_lines == 2

    def test_partial_coverage(self) -> None:
        content = "bg-red-500 text-sm\nok\nok\nshadow-md"
        report = scan_file_content(content, "a.tsx", compile_rules(DsCoverageSettings()))
        coverage = compute_token_coverage(content, report)
        assert coverage.violation_lines == 2 and coverage.score == 50.0
        assert coverage.total_violations == 3 and coverage.violations["hardcodedShadows"] == 1


class TestAnalyzeComponents:
    def test_project(self, tmp_project: Path) -> None:
        s = DsCoverageSettings()
        result = analyze_components(scan(tmp_project, s), s.component_analysis)
        assert [c.name for c in result.components] == ["Badge", "Card", "Button"]
        summary = result.summary
        assert summary.total_components == 3 and summary.by_location == {"primary": 2, "common": 1}
        assert summary.uses_cva == 2 and summary.compliant_count == 1 and summary.avg_compliance_score == 68
        assert summary.correct_api_naming == 2 and summary.correct_size_values == 2
        assert summary.token_compliant_count == 2

    def test_badge_token_coverage(self, tmp_project: Path) -> None:
        s = DsCoverageSettings()
        result = analyze_components(scan(tmp_project, s), s.component_analysis)
        badge = result.components[0]
        assert badge.token_coverage.total_violations == 6 and badge.token_coverage.violation_lines == 3

    def test_disabled(self, tmp_project: Path) -> None:
        s = DsCoverageSettings()
        s.component_analysis.enabled = False
        result = analyze_components(scan(tmp_project, s), s.component_analysis)
        assert result.components == [] and result.summary.total_components == 0
        assert result.summary.avg_token_score == 100.0

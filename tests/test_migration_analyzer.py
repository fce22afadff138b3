"""Tests for migration usage detection and reporting."""
from __future__ import annotations
import textwrap
from pathlib import Path
from dscoverage.config.settings import NATIVE_ELEMENT_PATTERN, MigrationConfig, MigrationMapping
from dscoverage.core.migration_analyzer import analyze_migration, detect_component_usage, to_kebab_case

ROOT = Path("/project/src")

BUTTON_USER = textwrap.dedent("""\
    import { Button } from "@company/ui"

    export function Toolbar() {
      return (
        <div>
          <Button>Save</Button>
          <Button variant="ghost" />
        </div>
      )
    }
""")


def _mapping(source: str, pattern: str = "@company/ui", target: str = "NewButton", **kwargs) -> MigrationMapping:
    return MigrationMapping(source=source, source_import_pattern=pattern, target=target, **kwargs)


def _config(*mappings: MigrationMapping) -> MigrationConfig:
    return MigrationConfig(enabled=True, target_ds="new-ds", mappings=list(mappings))


class TestKebabCase:
    def test_pascal_case(self) -> None:
        assert to_kebab_case("DatePicker") == "date-picker"

    def test_acronym(self) -> None:
        assert to_kebab_case("HTMLInput") == "html-input"

    def test_single_word(self) -> None:
        assert to_kebab_case("Button") == "button"


class TestDetectComponentUsage:
    def test_import_and_usages(self) -> None:
        usage = detect_component_usage(BUTTON_USER, "Button", "@company/ui")
        assert usage.import_lines == [1] and usage.usage_lines == [6, 7] and usage.total == 3

    def test_require_statement(self) -> None:
        usage = detect_component_usage('const ui = require("@company/ui")\n<Modal />', "Modal", "@company/ui")
        assert usage.import_lines == [1] and usage.usage_lines == [2]

    def test_module_import_is_case_insensitive(self) -> None:
        usage = detect_component_usage('import * as UI from "@Company/UI"', "Modal", "@company/ui")
        assert usage.import_lines == [1]

    def test_comment_lines_skipped(self) -> None:
        usage = detect_component_usage('// import { Button } from "@company/ui"\n// <Button />', "Button", "@company/ui")
        assert usage.total == 0

    def test_kebab_template_usage(self) -> None:
        source = 'import DatePicker from "@company/ui"\n<date-picker v-model="d" />\n<DatePicker />'
        usage = detect_component_usage(source, "DatePicker", "@company/ui")
        assert usage.usage_lines == [2, 3]

    def test_uppercase_usage_kept_without_import(self) -> None:
        usage = detect_component_usage("<Button>Go</Button>", "Button", "@company/ui")
        assert usage.import_lines == [] and usage.usage_lines == [1]

    def test_lowercase_usage_dropped_without_import(self) -> None:
        usage = detect_component_usage("<card>Go</card>", "card", "@company/ui")
        assert usage.total == 0

    def test_non_letter_initial_kept_without_import(self) -> None:
        usage = detect_component_usage("<_Foo />", "_Foo", "@x/ui")
        assert usage.usage_lines == [1]

    def test_native_element_counts_without_import(self) -> None:
        usage = detect_component_usage('<input type="text" />\n<inputs />', "input", NATIVE_ELEMENT_PATTERN)
        assert usage.import_lines == [] and usage.usage_lines == [1]

    def test_prefix_names_not_matched(self) -> None:
        usage = detect_component_usage("<ButtonGroup />", "Button", "@company/ui")
        assert usage.total == 0


class TestAnalyzeMigration:
    def test_scenario_single_file(self) -> None:
        report = analyze_migration({ROOT / "toolbar.tsx": BUTTON_USER}, ROOT, _config(_mapping("Button")))
        component = report.components[0]
        assert component.files_affected == 1 and component.total_usages == 3 and not component.migrated
        assert component.files[0].path == "toolbar.tsx"

    def test_unused_mapping_is_migrated_and_last(self) -> None:
        config = _config(
            _mapping("Tooltip", target="NewTooltip"),
            _mapping("Button", complexity="complex"),
        )
        report = analyze_migration({ROOT / "toolbar.tsx": BUTTON_USER}, ROOT, config)
        assert [c.source for c in report.components] == ["Button", "Tooltip"]
        assert report.components[1].migrated and report.components[1].total_usages == 0

    def test_pending_sorted_by_complexity_then_usages(self) -> None:
        contents = {
            ROOT / "a.tsx": "<Alpha />\n<Alpha />\n<Beta />\n<Gamma />\n<Gamma />\n<Gamma />",
        }
        config = _config(
            _mapping("Gamma", complexity="complex"),
            _mapping("Alpha", complexity="simple"),
            _mapping("Beta", complexity="simple"),
        )
        report = analyze_migration(contents, ROOT, config)
        assert [c.source for c in report.components] == ["Alpha", "Beta", "Gamma"]

    def test_files_sorted_by_occurrences(self) -> None:
        contents = {ROOT / "one.tsx": "<Button />", ROOT / "many.tsx": BUTTON_USER}
        report = analyze_migration(contents, ROOT, _config(_mapping("Button")))
        assert [f.path for f in report.components[0].files] == ["many.tsx", "one.tsx"]

    def test_summary(self) -> None:
        contents = {ROOT / "one.tsx": "<Button />", ROOT / "many.tsx": BUTTON_USER}
        config = _config(_mapping("Button"), _mapping("Tooltip", complexity="moderate"))
        summary = analyze_migration(contents, ROOT, config).summary
        assert summary.total_mappings == 2 and summary.total_usages == 4 and summary.total_files_affected == 2
        assert summary.migrated_count == 1 and summary.pending_count == 1 and summary.progress_percent == 50.0
        assert summary.by_complexity["simple"].files == 2 and summary.by_complexity["moderate"].count == 1

    def test_mapping_details_echoed(self) -> None:
        mapping = _mapping(
            "Button", prop_mapping={"variant": "appearance"}, breaking_changes=["size values renamed"], effort="~1h",
        )
        component = analyze_migration({ROOT / "a.tsx": BUTTON_USER}, ROOT, _config(mapping)).components[0]
        assert component.prop_mapping == {"variant": "appearance"} and component.effort == "~1h"
        assert component.breaking_changes == ["size values renamed"] and component.target == "NewButton"

    def test_legacy_native_report(self) -> None:
        contents = {ROOT / "form.tsx": '<input name="a" />\n<input name="b" />', ROOT / "b.tsx": "<input />"}
        config = _config(_mapping("input", NATIVE_ELEMENT_PATTERN, target="Input"), _mapping("Button"))
        report = analyze_migration(contents, ROOT, config)
        assert list(report.legacy_native) == ["input"]
        native = report.legacy_native["input"]
        assert native.total_usages == 3 and native.target == "Input" and native.files[0].path == "form.tsx"

    def test_no_native_mappings(self) -> None:
        report = analyze_migration({ROOT / "a.tsx": BUTTON_USER}, ROOT, _config(_mapping("Button")))
        assert report.legacy_native == {}

    def test_disabled_returns_none(self) -> None:
        config = MigrationConfig(enabled=False, mappings=[_mapping("Button")])
        assert analyze_migration({ROOT / "a.tsx": BUTTON_USER}, ROOT, config) is None

    def test_no_mappings_returns_none(self) -> None:
        assert analyze_migration({ROOT / "a.tsx": BUTTON_USER}, ROOT, _config()) is None

    def test_explicit_mappings_override_config(self) -> None:
        report = analyze_migration({ROOT / "a.tsx": BUTTON_USER}, ROOT, _config(), [_mapping("Button")])
        assert report.summary.total_mappings == 1

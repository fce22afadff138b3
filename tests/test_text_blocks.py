"""Tests for labeled-block key extraction."""
from __future__ import annotations
from dscoverage.core.text_blocks import extract_block_keys, find_labeled_block, top_level_keys


class TestFindLabeledBlock:
    def test_missing_label(self) -> None:
        assert find_labeled_block("const a = { size: 1 }", "variants") is None

    def test_nested_braces(self) -> None:
        body = find_labeled_block("variants: { a: { b: 1 }, c: 2 } rest", "variants")
        assert body == " a: { b: 1 }, c: 2 "

    def test_braces_in_strings_ignored(self) -> None:
        body = find_labeled_block('variants: { a: "}", b: `{`, c: 1 }', "variants")
        assert top_level_keys(body) == ["a", "b", "c"]

    def test_braces_in_line_comments_ignored(self) -> None:
        body = find_labeled_block("variants: {\n  // closing } here\n  a: 1,\n}", "variants")
        assert top_level_keys(body) == ["a"]

    def test_jsdoc_apostrophe_not_a_string(self) -> None:
        body = find_labeled_block("variants: {\n  /** The button's visual style */\n  variant: { a: 1 },\n}", "variants")
        assert top_level_keys(body) == ["variant"]

    def test_braces_in_block_comments_ignored(self) -> None:
        body = find_labeled_block("variants: { /* sizes } */ size: { sm: 1 } } tail", "variants")
        assert body == " /* sizes } */ size: { sm: 1 } "

    def test_unterminated_block_comment(self) -> None:
        assert find_labeled_block("size: { /* open } ", "size") == " /* open } "

    def test_unbalanced_returns_rest(self) -> None:
        assert find_labeled_block("size: { sm: 1, lg: 2", "size") == " sm: 1, lg: 2"

    def test_label_must_stand_alone(self) -> None:
        assert find_labeled_block("compoundVariants: [], defaultsize: { a: 1 }", "size") is None


class TestTopLevelKeys:
    def test_skips_nested_keys(self) -> None:
        assert top_level_keys(" appearance: { primary: 'x', ghost: 'y' }, size: { sm: 'z' } ") == ["appearance", "size"]

    def test_quoted_and_numeric_like_keys(self) -> None:
        assert top_level_keys(' "2xs": "h-4", \'default\': "h-8", xs: "h-6" ') == ["2xs", "default", "xs"]

    def test_values_with_colons_not_keys(self) -> None:
        assert top_level_keys(' dark: "dark:bg-black hover:bg-red", light: "x" ') == ["dark", "light"]

    def test_array_and_call_values(self) -> None:
        assert top_level_keys(" a: [1, 2, { b: 3 }], c: fn(d, { e: 1 }), f: 1 ") == ["a", "c", "f"]

    def test_block_comments_skipped(self) -> None:
        body = " /** The button's style */ variant: { a: 1 }, /* sizes } */ size: { sm: 1 } "
        assert top_level_keys(body) == ["variant", "size"]

    def test_duplicate_keys_once(self) -> None:
        assert top_level_keys(" a: 1, a: 2 ") == ["a"]


class TestExtractBlockKeys:
    def test_cva_variants(self) -> None:
        source = """
const v = cva("base", {
  variants: {
    variant: {
      default: "bg-primary",
      outline: "border",
    },
    size: { sm: "h-8", lg: "h-12" },
  },
  defaultVariants: { variant: "default" },
})
"""
        assert extract_block_keys(source, "variants") == ["variant", "size"]
        assert extract_block_keys(source, "size") == ["sm", "lg"]

    def test_no_block(self) -> None:
        assert extract_block_keys("export const x = 1", "size") == []

    def test_documented_cva_variants(self) -> None:
        source = """
const buttonVariants = cva("base", {
  variants: {
    /** The button's visual style */
    variant: { default: "bg-primary", ghost: "bg-transparent" },
    /* sizes } */
    size: { sm: "h-8", lg: "h-12" },
  },
})
"""
        assert extract_block_keys(source, "variants") == ["variant", "size"]
        assert extract_block_keys(source, "size") == ["sm", "lg"]

"""
Unit tests for documents.frontmatter module.

Tests:
- Document splitting (with/without block, empty block, body stripping)
- Line grammar: raw top-level scalars, flow lists, block lists, nested lists
- List-element coercion
- Serialization layout and quoting
- Round-trip stability of serializer output
- Shallow merge
- Error containment with a single reporter notice
"""

from typing import Any
from unittest.mock import patch

import pytest

from notebrotr.core.reporting import CollectingReporter
from notebrotr.documents.frontmatter import (
    EMPTY_BLOCK,
    FrontmatterCodec,
    coerce_scalar,
    parse_flow_list,
    render_block,
)


@pytest.fixture
def codec(reporter: CollectingReporter) -> FrontmatterCodec:
    return FrontmatterCodec(reporter)


# =============================================================================
# Parsing
# =============================================================================


class TestParseDocument:
    def test_block_and_body(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse("---\nid: abc\nkind: 1\n---\n\n  Body text\n\n")
        assert doc.frontmatter == {"id": "abc", "kind": "1"}
        assert doc.body == "Body text"

    def test_no_block_returns_whole_text(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse("just text\n")
        assert doc.frontmatter == {}
        assert doc.body == "just text\n"

    def test_closing_delimiter_without_newline(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse("---\na: b\n---")
        assert doc.frontmatter == {"a": "b"}
        assert doc.body == ""

    def test_empty_block(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse("---\n---\nbody")
        assert doc.frontmatter == {}
        assert doc.body == "body"

    def test_top_level_scalars_not_coerced(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse('---\nflag: true\ncount: 3\nnothing: null\nq: "x"\n---\n')
        assert doc.frontmatter == {"flag": "true", "count": "3", "nothing": "null", "q": '"x"'}

    def test_value_with_colon(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse("---\npicture: https://example.com/a.png\n---\n")
        assert doc.frontmatter == {"picture": "https://example.com/a.png"}

    def test_flow_list_coerced(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse('---\ntags: [a, "b, c", 3, 1.5, true, false, null]\n---\n')
        assert doc.frontmatter["tags"] == ["a", "b, c", 3, 1.5, True, False, None]

    def test_empty_value_starts_list(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse("---\naliases:\n  - x\n  - 2\n  - \"2\"\n  - [a, b]\nnext: v\n---\n")
        assert doc.frontmatter == {"aliases": ["x", 2, "2", ["a", "b"]], "next": "v"}

    def test_empty_value_without_items(self, codec: FrontmatterCodec) -> None:
        assert codec.parse("---\naliases:\n---\n").frontmatter == {"aliases": []}

    def test_item_without_key_ignored(self, codec: FrontmatterCodec) -> None:
        assert codec.parse("---\n- orphan\na: b\n---\n").frontmatter == {"a": "b"}

    def test_item_replaces_scalar(self, codec: FrontmatterCodec) -> None:
        assert codec.parse("---\na: b\n- c\n---\n").frontmatter == {"a": ["c"]}

    def test_blank_and_unmatched_lines_skipped(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse("---\n\na: 1\nnot a pair\n\n---\n")
        assert doc.frontmatter == {"a": "1"}

    def test_keys_keep_order(self, codec: FrontmatterCodec) -> None:
        doc = codec.parse("---\nz: 1\na: 2\nm: 3\n---\n")
        assert list(doc.frontmatter) == ["z", "a", "m"]


class TestCoercion:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ('"quoted"', "quoted"),
            ('"say \\"hi\\""', 'say "hi"'),
            ('"a\\nb"', "a\nb"),
            ("true", True),
            ("false", False),
            ("null", None),
            ("42", 42),
            ("-7", -7),
            ("2.5", 2.5),
            ("1e3", 1000.0),
            ("007", "007"),
            ("abc", "abc"),
            ("", ""),
            ("True", "True"),
        ],
    )
    def test_coerce_scalar(self, raw: str, expected: Any) -> None:
        result = coerce_scalar(raw)
        assert result == expected
        assert type(result) is type(expected)

    def test_flow_list_nested_brackets(self) -> None:
        assert parse_flow_list('a, "[b, c]", d') == ["a", "[b, c]", "d"]

    def test_flow_list_empty(self) -> None:
        assert parse_flow_list("") == []

    def test_flow_list_unquoted_brackets_nest(self) -> None:
        assert parse_flow_list('["a", 1], b, []') == [["a", 1], "b", []]


# =============================================================================
# Serialization
# =============================================================================


class TestRenderBlock:
    def test_layout(self) -> None:
        block = render_block(
            {
                "id": "abc",
                "kind": 1,
                "flag": True,
                "skipped_none": None,
                "skipped_empty": "",
                "tags": [],
                "aliases": ["x", "2"],
                "nostr_tags": [["e", "abc", "", "root"]],
                "meta": {"a": 1, "b": "two"},
            }
        )
        assert block == "\n".join(
            [
                "---",
                "id: abc",
                "kind: 1",
                "flag: true",
                "tags: []",
                "aliases:",
                "  - x",
                '  - "2"',
                "nostr_tags:",
                '  - ["e", "abc", "", "root"]',
                "meta:",
                "  a: 1",
                "  b: two",
                "---",
            ]
        )

    def test_empty_mapping(self) -> None:
        assert render_block({}) == EMPTY_BLOCK

    @pytest.mark.parametrize("item", ["", " pad", "true", "null", "[x]", '"q', "3.5"])
    def test_ambiguous_items_quoted(self, item: str) -> None:
        assert render_block({"k": [item]}).splitlines()[2].startswith('  - "')


class TestRoundTrip:
    @pytest.mark.parametrize(
        "frontmatter",
        [
            {"id": "abc", "kind": 1, "created": 1700000000},
            {"aliases": ["x", "2", "true", "", 'with "quote"', 3, False, None]},
            {"nostr_tags": [["e", "abc", "", "root"], ["p", "def"]], "tags": []},
            {"url": "https://example.com/a:b", "title": "Hello, world"},
            {"x": [[["a"], "b"]], "y": [["c", ["d", 2]]]},
        ],
    )
    def test_stringify_parse_stringify_stable(
        self, codec: FrontmatterCodec, frontmatter: dict[str, Any]
    ) -> None:
        first = codec.stringify(frontmatter)
        second = codec.stringify(codec.parse(first + "\n").frontmatter)
        assert second == first

    def test_blank_scalar_skipped(self, codec: FrontmatterCodec) -> None:
        assert codec.stringify({"note": "   ", "id": "abc"}) == "---\nid: abc\n---"

    def test_nested_lists_recovered(self, codec: FrontmatterCodec) -> None:
        original = {"x": [[["a"], "b"]]}
        assert codec.parse(codec.stringify(original)).frontmatter == original

    def test_list_values_recovered(self, codec: FrontmatterCodec) -> None:
        original = {"aliases": ["x", "2", 2, True, None, "a\nb"]}
        parsed = codec.parse(codec.stringify(original)).frontmatter
        assert parsed == original


# =============================================================================
# Merge
# =============================================================================


class TestMerge:
    def test_overlay(self) -> None:
        assert FrontmatterCodec.merge({"a": 1, "b": 2}, {"b": 3, "c": 4}) == {
            "a": 1,
            "b": 3,
            "c": 4,
        }

    def test_existing_only_keys_kept_in_place(self) -> None:
        merged = FrontmatterCodec.merge({"user": "x", "id": "old"}, {"id": "new", "kind": 1})
        assert list(merged) == ["user", "id", "kind"]

    def test_not_recursive(self) -> None:
        merged = FrontmatterCodec.merge({"m": {"a": 1}}, {"m": {"b": 2}})
        assert merged == {"m": {"b": 2}}

    def test_inputs_untouched(self) -> None:
        existing = {"a": 1}
        FrontmatterCodec.merge(existing, {"a": 2})
        assert existing == {"a": 1}


# =============================================================================
# Error containment
# =============================================================================


class TestErrorBoundary:
    def test_unsupported_value_falls_back(
        self, codec: FrontmatterCodec, reporter: CollectingReporter
    ) -> None:
        assert codec.stringify({"a": object()}) == EMPTY_BLOCK
        assert reporter.messages == [FrontmatterCodec.STRINGIFY_FAILED_NOTICE]

    def test_multiline_scalar_falls_back(
        self, codec: FrontmatterCodec, reporter: CollectingReporter
    ) -> None:
        assert codec.stringify({"a": "x\ny"}) == EMPTY_BLOCK
        assert len(reporter.messages) == 1

    @pytest.mark.parametrize("key", ["", "a:b", "- x", 3])
    def test_bad_keys_fall_back(self, codec: FrontmatterCodec, key: Any) -> None:
        assert codec.stringify({key: "v"}) == EMPTY_BLOCK

    def test_non_finite_number_falls_back(self, codec: FrontmatterCodec) -> None:
        assert codec.stringify({"a": float("nan")}) == EMPTY_BLOCK

    def test_deep_nesting_falls_back(self, codec: FrontmatterCodec) -> None:
        assert codec.stringify({"a": [[["x"]]]}) != EMPTY_BLOCK
        assert codec.stringify({"a": [[[["x"]]]]}) == EMPTY_BLOCK

    def test_parse_failure_returns_original(
        self, codec: FrontmatterCodec, reporter: CollectingReporter
    ) -> None:
        text = "---\na: b\n---\nbody"
        with patch(
            "notebrotr.documents.frontmatter.parse_block", side_effect=RuntimeError("broken")
        ):
            doc = codec.parse(text)
        assert doc.frontmatter == {}
        assert doc.body == text
        assert reporter.messages == [FrontmatterCodec.PARSE_FAILED_NOTICE]

    def test_failure_is_logged(
        self, codec: FrontmatterCodec, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level("ERROR", logger="frontmatter"):
            codec.stringify({"a": object()})
        assert any(r.getMessage() == "frontmatter_stringify_failed" for r in caplog.records)

    def test_default_reporter_logs(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level("WARNING", logger="notice"):
            FrontmatterCodec().stringify({"a": object()})
        assert any(r.getMessage() == "notice" for r in caplog.records)

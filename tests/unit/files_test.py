"""Tests for virtual files and @import expansion."""

from __future__ import annotations

from snippet_engine.core.files import (
    build_line_map_segments,
    expand_source,
    extract_imports,
    parse_files,
    reset_scan_cache,
    scan,
    serialize_files,
    strip_auto_import_block,
)

CARD_SNIPPET = "\n".join(
    [
        "// @import card",
        "export default function A() { return <Card /> }",
        "// @snippet-file card",
        "const Card = () => <div />",
        "// @snippet-file-end",
    ]
)


def _segments(source: str) -> list[tuple[str | None, int, int, int]]:
    return [
        (s.file_name, s.expanded_start_line, s.original_start_line, s.line_count)
        for s in scan(source).line_map_segments
    ]


class TestParseFiles:
    def test_splits_main_source_and_blocks(self) -> None:
        parsed = parse_files(CARD_SNIPPET)
        assert parsed.main_source == "// @import card\nexport default function A() { return <Card /> }"
        assert parsed.files == {"card": "const Card = () => <div />"}
        assert parsed.has_file_blocks is True

    def test_plain_source_has_no_blocks(self) -> None:
        parsed = parse_files("const a = 1\n")
        assert parsed.main_source == "const a = 1"
        assert parsed.files == {}
        assert parsed.has_file_blocks is False

    def test_repeated_block_name_appends(self) -> None:
        source = "\n".join(
            [
                "// @snippet-file x",
                "one",
                "// @snippet-file-end",
                "// @snippet-file x",
                "two",
                "// @snippet-file-end",
            ]
        )
        result = scan(source)
        assert result.files == {"x": "one\ntwo"}
        assert result.file_order == ["x"]

    def test_unterminated_block_runs_to_end(self) -> None:
        parsed = parse_files("main\n// @snippet-file tail\nline 1\nline 2\n")
        assert parsed.main_source == "main"
        assert parsed.files == {"tail": "line 1\nline 2"}

    def test_windows_line_endings(self) -> None:
        parsed = parse_files("a\r\n// @snippet-file f\r\nb\r\n// @snippet-file-end\r\n")
        assert parsed.main_source == "a"
        assert parsed.files == {"f": "b"}


class TestExpansion:
    def test_import_is_replaced_by_file_lines(self) -> None:
        result = scan(CARD_SNIPPET)
        assert result.expanded_source == (
            "const Card = () => <div />\nexport default function A() { return <Card /> }"
        )
        assert _segments(CARD_SNIPPET) == [("card", 1, 1, 1), (None, 2, 2, 1)]

    def test_consecutive_lines_coalesce(self) -> None:
        assert _segments("a\nb\nc") == [(None, 1, 1, 3)]

    def test_unknown_import_is_kept(self) -> None:
        assert expand_source("// @import missing\nx") == "// @import missing\nx"

    def test_cyclic_import_is_left_literal(self) -> None:
        source = "\n".join(
            [
                "// @import a",
                "// @snippet-file a",
                "// @import b",
                "A",
                "// @snippet-file-end",
                "// @snippet-file b",
                "// @import a",
                "B",
                "// @snippet-file-end",
            ]
        )
        result = scan(source)
        assert result.expanded_source == "// @import a\nB\nA"
        assert _segments(source) == [("b", 1, 1, 2), ("a", 3, 2, 1)]

    def test_depth_is_bounded(self) -> None:
        blocks = []
        for index in range(30):
            blocks += [f"// @snippet-file f{index}", f"// @import f{index + 1}", f"line {index}", "// @snippet-file-end"]
        source = "\n".join(["// @import f0", *blocks])
        expanded = scan(source).expanded_source.split("\n")
        assert expanded[0] == "// @import f20"
        assert expanded[1:] == [f"line {index}" for index in reversed(range(20))]

    def test_trailing_blank_lines_are_trimmed(self) -> None:
        result = scan("a\n\n\n")
        assert result.expanded_source == "a"
        assert _segments("a\n\n\n") == [(None, 1, 1, 1)]

    def test_empty_source(self) -> None:
        result = scan("")
        assert result.main_source == ""
        assert result.expanded_source == ""
        assert result.line_map_segments == []

    def test_single_file_example(self) -> None:
        source = "// @snippet-file a\nexport const X = 1\n// @snippet-file-end\n// @import a\n"
        result = scan(source)
        assert result.expanded_source == "export const X = 1"
        assert [segment.model_dump(by_alias=True) for segment in result.line_map_segments] == [
            {"fileName": "a", "expandedStartLine": 1, "originalStartLine": 1, "lineCount": 1}
        ]

    def test_rescanning_expanded_source_is_unchanged(self) -> None:
        expanded = scan(CARD_SNIPPET).expanded_source
        assert "@import" not in expanded
        assert scan(expanded).expanded_source == expanded
        assert expand_source(expanded) == expanded

    def test_build_line_map_segments(self) -> None:
        segments = build_line_map_segments("// @import f\nmain", {"f": "x\ny"})
        assert [(s.file_name, s.expanded_start_line, s.original_start_line, s.line_count) for s in segments] == [
            ("f", 1, 1, 2),
            (None, 3, 2, 1),
        ]


class TestScanMemo:
    def test_same_source_returns_cached_result(self) -> None:
        assert scan(CARD_SNIPPET) is scan(CARD_SNIPPET)

    def test_reset_drops_cached_result(self) -> None:
        first = scan(CARD_SNIPPET)
        reset_scan_cache()
        assert scan(CARD_SNIPPET) is not first


class TestHelpers:
    def test_serialize_files_sorts_blocks(self) -> None:
        output = serialize_files("main\n", {"b": "B", "a": "A\n", " ": "ignored"})
        assert output == (
            "main\n\n"
            "// @snippet-file a\nA\n// @snippet-file-end\n\n"
            "// @snippet-file b\nB\n// @snippet-file-end"
        )

    def test_serialize_round_trips_through_parse(self) -> None:
        parsed = parse_files(serialize_files("main", {"card": "const Card = 1"}))
        assert parsed.main_source == "main"
        assert parsed.files == {"card": "const Card = 1"}

    def test_extract_imports_first_seen_order(self) -> None:
        source = "\n".join(
            [
                "// @import b",
                "// @import a",
                "// @snippet-file a",
                "// @import b",
                "// @import c",
                "// @snippet-file-end",
            ]
        )
        assert extract_imports(source) == ["b", "a", "c"]

    def test_strip_auto_import_block(self) -> None:
        source = "// Auto-managed imports\n// @import card\n\nexport default () => <div />"
        assert strip_auto_import_block(source) == "export default () => <div />"

    def test_strip_keeps_imports_after_code(self) -> None:
        source = "const a = 1\n// @import card"
        assert strip_auto_import_block(source) == source

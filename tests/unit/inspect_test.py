"""Tests for the inspect index and point lookup."""

from __future__ import annotations

from snippet_engine.core.inspect import InspectLookup, build_inspect_index
from snippet_engine.models import InspectIndex, TextRange

SOURCE = """\
export default function C() {
  return (
    <section>
      <h1>Hello</h1>
      <>{"frag"}</>
      <p>{count} items {"literal"}</p>
    </section>
  )
}
"""


class TestBuildIndex:
    def test_indexes_elements_and_fragments(self) -> None:
        index = build_inspect_index(SOURCE)
        assert index is not None
        assert [(e.element_type, e.element_name) for e in index.elements] == [
            ("element", "section"),
            ("element", "h1"),
            ("fragment", None),
            ("element", "p"),
        ]

    def test_element_and_text_ranges(self) -> None:
        index = build_inspect_index(SOURCE)
        assert index is not None
        heading = index.elements[1]
        assert heading.element_range == TextRange(start_line=4, start_column=7, end_line=4, end_column=21)
        assert heading.text_ranges == [TextRange(start_line=4, start_column=11, end_line=4, end_column=16)]

    def test_only_static_text_children_count(self) -> None:
        index = build_inspect_index(SOURCE)
        assert index is not None
        section, _, fragment, paragraph = index.elements
        assert section.text_ranges == []
        assert len(fragment.text_ranges) == 1
        assert len(paragraph.text_ranges) == 2

    def test_blank_source(self) -> None:
        assert build_inspect_index("  \n") == InspectIndex()

    def test_camel_case_dump(self) -> None:
        index = build_inspect_index("export const A = () => <b>x</b>")
        assert index is not None
        dumped = index.model_dump(by_alias=True)
        assert dumped["version"] == 1
        assert set(dumped["elements"][0]) == {"elementRange", "textRanges", "elementType", "elementName"}


class TestLookup:
    def test_innermost_element_wins(self) -> None:
        index = build_inspect_index(SOURCE)
        assert index is not None
        match = InspectLookup(index).find_match(4, 9)
        assert match is not None
        assert match.element_name == "h1"
        assert match.range == match.element_range

    def test_column_before_element_falls_back_to_parent(self) -> None:
        index = build_inspect_index(SOURCE)
        assert index is not None
        match = InspectLookup(index).find_match(4, 1)
        assert match is not None
        assert match.element_name == "section"

    def test_fragment_match(self) -> None:
        index = build_inspect_index(SOURCE)
        assert index is not None
        match = InspectLookup(index).find_match(5, 9)
        assert match is not None
        assert match.element_type == "fragment"

    def test_out_of_range(self) -> None:
        index = build_inspect_index(SOURCE)
        assert index is not None
        lookup = InspectLookup(index)
        assert lookup.find_match(0) is None
        assert lookup.find_match(1) is None
        assert lookup.find_match(40) is None

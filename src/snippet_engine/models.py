from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys (``model_dump(by_alias=True)``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


PropType = Literal["string", "number", "boolean", "array", "object", "enum"]


# --- File virtualization ---


class LineMapSegment(CamelModel):
    file_name: str | None
    expanded_start_line: int
    original_start_line: int
    line_count: int


class ParsedFiles(CamelModel):
    main_source: str
    files: dict[str, str] = Field(default_factory=dict)
    has_file_blocks: bool = False


class FileScanResult(ParsedFiles):
    expanded_source: str = ""
    line_map_segments: list[LineMapSegment] = Field(default_factory=list)
    file_order: list[str] = Field(default_factory=list)


# --- Positions ---


class SourcePoint(CamelModel):
    line: int
    column: int


class TextRange(CamelModel):
    start_line: int
    start_column: int
    end_line: int
    end_column: int


# --- Props and exports ---


class PropDefinition(CamelModel):
    key: str
    label: str
    type: PropType = "string"
    required: bool | None = None
    enum_values: list[str] | None = None


class PropsSchema(CamelModel):
    version: Literal[1] = 1
    props: list[PropDefinition] = Field(default_factory=list)


class DerivedProps(CamelModel):
    props_schema: PropsSchema = Field(default_factory=PropsSchema)
    default_props: dict[str, Any] = Field(default_factory=dict)
    duplicate_keys: list[str] = Field(default_factory=list)


class ComponentExport(CamelModel):
    export_name: str
    label: str
    is_default: bool = False


class RemoveExportResult(CamelModel):
    source: str
    removed: bool
    reason: str | None = None


class ComponentTreeNode(CamelModel):
    """One rendered element; ``id`` is its dotted child path from the root."""

    id: str
    name: str
    class_name: str | None = None
    source: SourcePoint | None = None
    children: list[ComponentTreeNode] = Field(default_factory=list)


# --- Structural edits ---


class EditResult(CamelModel):
    source: str
    changed: bool
    inserted_at: SourcePoint | None = None
    reason: str | None = None
    notice: str | None = None


class StyleFields(CamelModel):
    """Style properties to write on an element.

    Only fields that were explicitly provided are applied; a field explicitly set
    to ``None`` removes the property. Use ``model_fields_set`` to tell them apart.
    """

    background_color: str | None = None
    border_width: float | None = None
    border_color: str | None = None
    border_radius: float | str | None = None
    text_color: str | None = None
    font_size: float | str | None = None
    font_weight: float | str | None = None


StyleValue = int | float | str | None


class StyleProperty(CamelModel):
    present: bool = False
    value: StyleValue = None


class StyleProperties(CamelModel):
    background_color: StyleProperty = Field(default_factory=StyleProperty)
    border_width: StyleProperty = Field(default_factory=StyleProperty)
    border_color: StyleProperty = Field(default_factory=StyleProperty)
    border_radius: StyleProperty = Field(default_factory=StyleProperty)
    text_color: StyleProperty = Field(default_factory=StyleProperty)
    font_size: StyleProperty = Field(default_factory=StyleProperty)
    font_weight: StyleProperty = Field(default_factory=StyleProperty)


class StyleState(CamelModel):
    """Current style of the element under the cursor, as the style editor sees it."""

    found: bool
    reason: str | None = None
    element_name: str | None = None
    class_name_kind: Literal["none", "static", "dynamic"] = "none"
    editable: bool = False
    properties: StyleProperties = Field(default_factory=StyleProperties)


# --- Inspect index ---


class InspectIndexEntry(CamelModel):
    element_range: TextRange
    text_ranges: list[TextRange] = Field(default_factory=list)
    element_type: Literal["element", "fragment"] = "element"
    element_name: str | None = None


class InspectIndex(CamelModel):
    version: Literal[1] = 1
    elements: list[InspectIndexEntry] = Field(default_factory=list)


class InspectMatch(CamelModel):
    range: TextRange
    element_range: TextRange
    text_ranges: list[TextRange]
    element_type: Literal["element", "fragment"]
    element_name: str | None = None


# --- Analysis ---


class SecurityIssue(CamelModel):
    message: str
    line: int
    column: int
    end_line: int | None = None
    end_column: int | None = None


class AnalyzeResult(CamelModel):
    exports: list[ComponentExport] = Field(default_factory=list)
    props_schema: PropsSchema = Field(default_factory=PropsSchema)
    default_props: dict[str, Any] = Field(default_factory=dict)
    duplicate_keys: list[str] = Field(default_factory=list)
    security_issues: list[SecurityIssue] = Field(default_factory=list)
    tailwind_css: str | None = None
    tailwind_error: str | None = None
    source_hash: int = 0
    inspect_index_by_file: dict[str, InspectIndex] | None = None
    line_map_segments: list[LineMapSegment] | None = None
    parse_error: str | None = None

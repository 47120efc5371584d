from __future__ import annotations

from pydantic import Field

from snippet_engine.models import CamelModel, InspectIndex, InspectMatch, StyleFields


class HealthResponse(CamelModel):
    status: str = "ok"


class ReadinessResponse(CamelModel):
    status: str = "ok"
    parser: str = "up"


class SourceRequest(CamelModel):
    source: str


class TargetRequest(SourceRequest):
    line: int = Field(ge=1)
    column: int = Field(ge=1)


class AnalyzeRequest(SourceRequest):
    include_tailwind: bool = True
    include_inspect: bool = True


class InspectRequest(SourceRequest):
    line: int | None = None
    column: int = 1


class ComponentTreeRequest(SourceRequest):
    export_name: str | None = None


class InspectResponse(CamelModel):
    index: InspectIndex | None
    match: InspectMatch | None = None


class InsertChildRequest(TargetRequest):
    jsx: str


class StyleRequest(TargetRequest, StyleFields):
    """Target plus the style fields to write; omitted fields are left alone."""

    def style_fields(self) -> StyleFields:
        provided = self.model_fields_set & set(StyleFields.model_fields)
        return StyleFields(**{name: getattr(self, name) for name in provided})


class TranslateRequest(TargetRequest):
    dx: float = 0.0
    dy: float = 0.0
    width: float | None = None
    height: float | None = None

"""Tests for the FastAPI routes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from tree_sitter import Parser

from snippet_engine.api.app import create_app
from snippet_engine.api.dependencies import get_loader, get_tailwind
from snippet_engine.core.parser import ParserLoader
from snippet_engine.core.tailwind import TailwindBuilder

SOURCE = 'export default function Card({ title = "Hi" }) {\n  return <div className="p-4">{title}</div>\n}\n'
ONE_LINE = "export const A = () => <div></div>"


def _broken_factory() -> Parser:
    raise RuntimeError("grammar missing")


@pytest.fixture
def client(tailwind_builder: TailwindBuilder) -> TestClient:
    app = create_app()

    async def _tailwind() -> TailwindBuilder:
        return tailwind_builder

    app.dependency_overrides[get_tailwind] = _tailwind
    return TestClient(app)


@pytest.fixture
def broken_client() -> TestClient:
    app = create_app()
    loader = ParserLoader(factory=_broken_factory, retry_cooldown=60)

    async def _loader() -> ParserLoader:
        return loader

    app.dependency_overrides[get_loader] = _loader
    return TestClient(app)


class TestRootRoute:
    def test_root_returns_discovery(self, client: TestClient) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        body = resp.json()
        assert body["links"]["analyze"] == "/analyze"
        assert body["links"]["style"] == "/edits/style"
        assert body["links"]["style-read"] == "/style/read"
        assert body["links"]["component-tree"] == "/component-tree"


class TestHealthRoutes:
    @pytest.mark.parametrize("path", ["/health", "/healthz/live"])
    def test_liveness_returns_ok(self, client: TestClient, path: str) -> None:
        resp = client.get(path)
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_readiness_when_parser_loads(self, client: TestClient) -> None:
        resp = client.get("/healthz/ready")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "parser": "up"}

    def test_readiness_when_parser_fails(self, broken_client: TestClient) -> None:
        resp = broken_client.get("/healthz/ready")
        assert resp.status_code == 503
        assert resp.json() == {"status": "degraded", "parser": "down"}


class TestAnalyzeRoute:
    def test_analyze(self, client: TestClient) -> None:
        resp = client.post("/analyze", json={"source": SOURCE})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["exports"] == [{"exportName": "default", "label": "Default (Card)", "isDefault": True}]
        assert body["defaultProps"] == {"title": "Hi"}
        assert body["tailwindCss"] == ".p-4 {}"
        assert body["sourceHash"] > 0
        assert list(body["inspectIndexByFile"]) == ["source"]

    def test_camel_case_flags(self, client: TestClient) -> None:
        resp = client.post("/analyze", json={"source": SOURCE, "includeTailwind": False, "includeInspect": False})
        assert resp.status_code == 200
        body = resp.json()
        assert body["tailwindCss"] is None
        assert body["inspectIndexByFile"] is None

    def test_parse_error_is_reported_in_body(self, client: TestClient) -> None:
        resp = client.post("/analyze", json={"source": "export default () => <div>"})
        assert resp.status_code == 200
        assert resp.json()["parseError"] == "Source contains syntax errors."

    def test_source_too_large(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNIPPET_ENGINE_SOURCE_MAX_CHARS", "10")
        resp = client.post("/analyze", json={"source": SOURCE})
        assert resp.status_code == 413
        assert resp.json()["detail"] == "Source is too large (limit 10 chars)."

    def test_missing_source(self, client: TestClient) -> None:
        resp = client.post("/analyze", json={})
        assert resp.status_code == 422


class TestInspectRoute:
    def test_index_and_match(self, client: TestClient) -> None:
        resp = client.post("/inspect", json={"source": SOURCE, "line": 2, "column": 10})
        assert resp.status_code == 200
        body = resp.json()
        assert len(body["index"]["elements"]) == 1
        assert body["match"]["elementName"] == "div"
        assert body["match"]["range"]["startColumn"] == 10

    def test_index_only(self, client: TestClient) -> None:
        body = client.post("/inspect", json={"source": SOURCE}).json()
        assert body["match"] is None


class TestStyleReadRoute:
    def test_reads_class_fields(self, client: TestClient) -> None:
        resp = client.post("/style/read", json={"source": SOURCE, "line": 2, "column": 10})
        assert resp.status_code == 200
        body = resp.json()
        assert body["found"] is True
        assert body["elementName"] == "div"
        assert body["classNameKind"] == "static"
        assert body["editable"] is True
        assert body["properties"]["backgroundColor"] == {"present": False, "value": None}

    def test_missing_element_is_not_an_http_error(self, client: TestClient) -> None:
        resp = client.post("/style/read", json={"source": SOURCE, "line": 9, "column": 1})
        assert resp.status_code == 200
        assert resp.json()["found"] is False


class TestComponentTreeRoute:
    def test_default_export(self, client: TestClient) -> None:
        resp = client.post("/component-tree", json={"source": SOURCE})
        assert resp.status_code == 200
        (root,) = resp.json()
        assert root["name"] == "div"
        assert root["className"] == "p-4"
        assert root["source"] == {"line": 2, "column": 10}

    def test_unknown_export_is_empty(self, client: TestClient) -> None:
        resp = client.post("/component-tree", json={"source": SOURCE, "exportName": "Missing"})
        assert resp.status_code == 200
        assert resp.json() == []


class TestEditRoutes:
    def test_insert_child(self, client: TestClient) -> None:
        resp = client.post(
            "/edits/insert-child", json={"source": ONE_LINE, "line": 1, "column": 24, "jsx": "<b />"}
        )
        assert resp.status_code == 200
        assert resp.json() == {
            "source": "export const A = () => <div>\n  <b />\n</div>",
            "changed": True,
            "insertedAt": {"line": 2, "column": 3},
            "reason": None,
            "notice": None,
        }

    def test_refusal_is_not_an_http_error(self, client: TestClient) -> None:
        resp = client.post("/edits/insert-child", json={"source": ONE_LINE, "line": 1, "column": 24, "jsx": ""})
        assert resp.status_code == 200
        assert resp.json()["reason"] == "Nothing to insert."

    def test_style_with_camel_case_fields(self, client: TestClient) -> None:
        resp = client.post(
            "/edits/style",
            json={"source": ONE_LINE, "line": 1, "column": 24, "textColor": "white", "fontWeight": 700},
        )
        assert resp.status_code == 200
        assert resp.json()["source"] == 'export const A = () => <div className="text-white font-bold"></div>'

    def test_style_null_clears(self, client: TestClient) -> None:
        source = 'export const A = () => <div className="p-2 rounded-lg"></div>'
        resp = client.post("/edits/style", json={"source": source, "line": 1, "column": 24, "borderRadius": None})
        assert resp.json()["source"] == 'export const A = () => <div className="p-2"></div>'

    def test_translate(self, client: TestClient) -> None:
        resp = client.post(
            "/edits/translate", json={"source": ONE_LINE, "line": 1, "column": 24, "dx": 4, "dy": 2, "width": 100}
        )
        assert resp.status_code == 200
        assert resp.json()["source"] == (
            'export const A = () => <div style={{ translate: "4px 2px", width: "100px" }}></div>'
        )

    def test_line_must_be_positive(self, client: TestClient) -> None:
        resp = client.post("/edits/translate", json={"source": ONE_LINE, "line": 0, "column": 1, "dx": 1, "dy": 1})
        assert resp.status_code == 422

    def test_parser_unavailable(self, broken_client: TestClient) -> None:
        resp = broken_client.post(
            "/edits/insert-child", json={"source": ONE_LINE, "line": 1, "column": 24, "jsx": "<b />"}
        )
        assert resp.status_code == 503
        assert "Failed to load the TSX parser" in resp.json()["detail"]

"""Shared fixtures and helpers for tests."""

from collections.abc import Callable, Iterator, Sequence
from pathlib import Path

import pytest
from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from snippet_engine import reset_caches
from snippet_engine.config import get_settings
from snippet_engine.core.tailwind import TailwindBuilder

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------


class FakeCompiler:
    """Tailwind compiler that emits one rule per candidate and records its calls."""

    def __init__(self, banner: str = "/*! tailwindcss v4.0.0 | MIT License */\n") -> None:
        self.banner = banner
        self.calls: list[list[str]] = []

    def compile(self, candidates: Sequence[str]) -> str:
        self.calls.append(list(candidates))
        return self.banner + "\n".join(f".{name} {{}}" for name in candidates) + "\n"


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_engine_caches() -> Iterator[None]:
    get_settings.cache_clear()
    reset_caches()
    yield
    get_settings.cache_clear()
    reset_caches()


@pytest.fixture
def tsx_parser() -> Parser:
    """Return a tree-sitter parser for TSX."""
    return get_parser("tsx")


@pytest.fixture
def parse_tsx(tsx_parser: Parser) -> Callable[[str], Node]:
    """Return a helper that parses TSX source and returns the root node."""

    def _parse(source: str) -> Node:
        return tsx_parser.parse(source.encode("utf-8")).root_node

    return _parse


@pytest.fixture
def fake_compiler() -> FakeCompiler:
    return FakeCompiler()


@pytest.fixture
def tailwind_builder(fake_compiler: FakeCompiler) -> TailwindBuilder:
    return TailwindBuilder(compiler_factory=lambda: fake_compiler)

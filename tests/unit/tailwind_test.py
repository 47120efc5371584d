"""Tests for Tailwind candidate extraction and the cached builder."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from tree_sitter import Node

from snippet_engine.config import get_settings
from snippet_engine.core.tailwind import (
    TailwindBuilder,
    extract_candidates,
    get_tailwind_builder,
    set_tailwind_builder,
    strip_banner,
)
from snippet_engine.errors import TailwindLimitError
from tests.conftest import FakeCompiler

ParseTsx = Callable[[str], Node]

SOURCE = """\
export const A = () => (
  <>
    <div className="p-4 bg-red-500" />
    <span class={"text-" + "lg"} />
    <p className={cn("a", b)} />
    <b className={`m-2 p-4`} />
    <i className={`m-${size}`} />
  </>
)
"""


class TestExtractCandidates:
    def test_static_values_only(self, parse_tsx: ParseTsx) -> None:
        assert extract_candidates(parse_tsx(SOURCE)) == ["bg-red-500", "m-2", "p-4", "text-lg"]

    def test_no_classes(self, parse_tsx: ParseTsx) -> None:
        assert extract_candidates(parse_tsx("export const A = () => <div id=\"x\" />")) == []


def test_strip_banner() -> None:
    assert strip_banner("/*! tailwindcss v4.1.0 | MIT License | https://tailwindcss.com */\n.a {}\n") == ".a {}"


class TestTailwindBuilder:
    def test_compiles_sorted_candidates(self, tailwind_builder: TailwindBuilder, fake_compiler: FakeCompiler) -> None:
        css = tailwind_builder.build(["p-4", "bg-red-500"])
        assert css == ".bg-red-500 {}\n.p-4 {}"
        assert fake_compiler.calls == [["bg-red-500", "p-4"]]

    def test_results_are_cached_by_set(self, tailwind_builder: TailwindBuilder, fake_compiler: FakeCompiler) -> None:
        first = tailwind_builder.build(["p-4", "m-2"])
        second = tailwind_builder.build(["m-2", "p-4"])
        assert first == second
        assert len(fake_compiler.calls) == 1

    def test_empty_set_skips_compiler(self, tailwind_builder: TailwindBuilder, fake_compiler: FakeCompiler) -> None:
        assert tailwind_builder.build([]) == ""
        assert fake_compiler.calls == []

    def test_candidate_limit(self, fake_compiler: FakeCompiler) -> None:
        builder = TailwindBuilder(compiler_factory=lambda: fake_compiler, max_candidates=1)
        with pytest.raises(TailwindLimitError, match="too many Tailwind classes") as exc_info:
            builder.build(["a", "b"])
        assert exc_info.value.limit == 1
        assert fake_compiler.calls == []

    def test_css_size_limit(self, fake_compiler: FakeCompiler) -> None:
        builder = TailwindBuilder(compiler_factory=lambda: fake_compiler, max_css_chars=5)
        with pytest.raises(TailwindLimitError, match=r"too large \(limit 5 chars\)"):
            builder.build(["p-4"])
        assert len(builder.cache) == 0

    def test_compiler_is_created_once(self, fake_compiler: FakeCompiler) -> None:
        created: list[FakeCompiler] = []

        def factory() -> FakeCompiler:
            created.append(fake_compiler)
            return fake_compiler

        builder = TailwindBuilder(compiler_factory=factory)
        builder.build(["a"])
        builder.build(["b"])
        assert len(created) == 1

    def test_cache_is_bounded(self, fake_compiler: FakeCompiler) -> None:
        builder = TailwindBuilder(compiler_factory=lambda: fake_compiler, cache_size=2)
        for name in ("a", "b", "c"):
            builder.build([name])
        # Eviction runs on the insert after the cache grows past its size.
        assert len(builder.cache) == 3
        builder.build(["d"])
        assert len(builder.cache) == 1
        assert "d" in builder.cache

    def test_reset_clears_cache(self, tailwind_builder: TailwindBuilder, fake_compiler: FakeCompiler) -> None:
        tailwind_builder.build(["a"])
        tailwind_builder.reset()
        tailwind_builder.build(["a"])
        assert len(fake_compiler.calls) == 2


class TestSharedBuilder:
    def test_default_builder_uses_settings(self) -> None:
        builder = get_tailwind_builder()
        settings = get_settings()
        assert builder.max_candidates == settings.tailwind_max_candidates
        assert builder.max_css_chars == settings.tailwind_max_css_chars
        assert get_tailwind_builder() is builder

    def test_override(self, tailwind_builder: TailwindBuilder) -> None:
        set_tailwind_builder(tailwind_builder)
        assert get_tailwind_builder() is tailwind_builder
        set_tailwind_builder(None)
        assert get_tailwind_builder() is not tailwind_builder

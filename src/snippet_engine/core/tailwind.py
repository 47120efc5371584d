"""Extract statically known Tailwind classes and compile just those."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Sequence

from tree_sitter import Node

from snippet_engine.config import get_settings
from snippet_engine.core.ast import iter_nodes, node_text, string_literal_value, unwrap_expression
from snippet_engine.core.cache import BoundedCache
from snippet_engine.core.jsx import attribute_name, attribute_value, expression_content
from snippet_engine.core.ports.compiler import TailwindCompiler
from snippet_engine.errors import TailwindLimitError

logger = logging.getLogger(__name__)

CLASS_ATTRIBUTES = ("className", "class")

_BANNER = re.compile(r"/\*!\s*tailwindcss[\s\S]*?\*/")


def static_string(node: Node | None, depth: int = 0) -> str | None:
    """Value of a string, substitution-free template, or ``+`` concatenation of those."""
    expr = unwrap_expression(node)
    if expr is None or depth > 64:
        return None
    if expr.type in ("string", "template_string"):
        return string_literal_value(expr)
    if expr.type == "binary_expression" and node_text(expr.child_by_field_name("operator")) == "+":
        left = static_string(expr.child_by_field_name("left"), depth + 1)
        right = static_string(expr.child_by_field_name("right"), depth + 1)
        if left is None or right is None:
            return None
        return left + right
    return None


def _class_value(attribute: Node) -> str | None:
    value = attribute_value(attribute)
    if value is None:
        return None
    if value.type == "string":
        return string_literal_value(value)
    return static_string(expression_content(value))


def extract_candidates(root: Node) -> list[str]:
    """Sorted, deduplicated class names from static ``className``/``class`` values.

    Computed class names are skipped; the result under-approximates what the
    snippet can render.
    """
    candidates: set[str] = set()
    for node in iter_nodes(root):
        if node.type != "jsx_attribute" or attribute_name(node) not in CLASS_ATTRIBUTES:
            continue
        value = _class_value(node)
        if value:
            candidates.update(value.split())
    return sorted(candidates)


def strip_banner(css: str) -> str:
    return _BANNER.sub("", css).strip()


def default_compiler_factory() -> TailwindCompiler:
    from snippet_engine.compiler.tailwind_cli import TailwindCliCompiler

    settings = get_settings()
    return TailwindCliCompiler(binary=settings.tailwind_bin, timeout=settings.tailwind_timeout)


class TailwindBuilder:
    """Compile candidate sets with limits and a bounded result cache."""

    def __init__(
        self,
        compiler_factory: Callable[[], TailwindCompiler] = default_compiler_factory,
        max_candidates: int = 800,
        max_css_chars: int = 150_000,
        cache_size: int = 50,
    ) -> None:
        self._compiler_factory = compiler_factory
        self._compiler: TailwindCompiler | None = None
        self.max_candidates = max_candidates
        self.max_css_chars = max_css_chars
        self.cache: BoundedCache[str, str] = BoundedCache(cache_size)

    @property
    def compiler(self) -> TailwindCompiler:
        if self._compiler is None:
            self._compiler = self._compiler_factory()
        return self._compiler

    def build(self, candidates: Sequence[str]) -> str:
        if not candidates:
            return ""
        if len(candidates) > self.max_candidates:
            raise TailwindLimitError(
                f"Snippet uses too many Tailwind classes (limit {self.max_candidates}).", self.max_candidates
            )
        key = " ".join(sorted(candidates))
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        css = strip_banner(self.compiler.compile(sorted(candidates)))
        if len(css) > self.max_css_chars:
            raise TailwindLimitError(
                f"Generated Tailwind CSS is too large (limit {self.max_css_chars} chars).", self.max_css_chars
            )
        logger.debug("Compiled %d Tailwind candidates into %d chars", len(candidates), len(css))
        self.cache.set(key, css)
        return css

    def reset(self) -> None:
        self._compiler = None
        self.cache.reset()


_builder: TailwindBuilder | None = None


def get_tailwind_builder() -> TailwindBuilder:
    global _builder  # noqa: PLW0603
    if _builder is None:
        settings = get_settings()
        _builder = TailwindBuilder(
            max_candidates=settings.tailwind_max_candidates,
            max_css_chars=settings.tailwind_max_css_chars,
            cache_size=settings.tailwind_cache_size,
        )
    return _builder


def set_tailwind_builder(builder: TailwindBuilder | None) -> None:
    """Install a builder (tests use one with a fake compiler); ``None`` restores the default."""
    global _builder  # noqa: PLW0603
    _builder = builder

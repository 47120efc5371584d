"""Lazy, memoized loading of the tree-sitter TSX parser."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from tree_sitter import Parser, Tree
from tree_sitter_language_pack import get_parser

from snippet_engine.config import get_settings
from snippet_engine.errors import ParserLoadError, ParserLoadTimeoutError

logger = logging.getLogger(__name__)


def load_tsx_parser() -> Parser:
    return get_parser("tsx")


class ParserLoader:
    """Load the parser once, share in-flight loads, and fail fast after errors.

    After a failed load, every call within ``retry_cooldown`` seconds re-raises the
    cached error instead of retrying.
    """

    def __init__(
        self,
        factory: Callable[[], Parser] = load_tsx_parser,
        timeout: float = 4.0,
        retry_cooldown: float = 1.5,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._factory = factory
        self.timeout = timeout
        self.retry_cooldown = retry_cooldown
        self._clock = clock
        self._parser: Parser | None = None
        self._pending: asyncio.Task[Parser] | None = None
        self._error: ParserLoadError | None = None
        self._failed_at = 0.0

    @property
    def loaded(self) -> bool:
        return self._parser is not None

    def _raise_if_cooling_down(self) -> None:
        if self._error is None:
            return
        if self._clock() - self._failed_at < self.retry_cooldown:
            raise self._error
        self._error = None

    def _record_failure(self, error: ParserLoadError) -> None:
        self._error = error
        self._failed_at = self._clock()
        logger.warning("TSX parser failed to load: %s", error)

    def _record_success(self, parser: Parser) -> Parser:
        self._parser = parser
        self._error = None
        logger.info("TSX parser loaded")
        return parser

    async def load(self) -> Parser:
        """Return the parser, loading it in a worker thread on first use."""
        if self._parser is not None:
            return self._parser
        self._raise_if_cooling_down()
        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load_with_timeout())
        # shield so one cancelled caller does not abort the load for the others
        return await asyncio.shield(self._pending)

    async def _load_with_timeout(self) -> Parser:
        try:
            parser = await asyncio.wait_for(asyncio.to_thread(self._factory), timeout=self.timeout)
        except TimeoutError as exc:
            error: ParserLoadError = ParserLoadTimeoutError(
                f"Timed out loading the TSX parser after {self.timeout:g}s"
            )
            self._record_failure(error)
            raise error from exc
        except Exception as exc:
            error = ParserLoadError(f"Failed to load the TSX parser: {exc}")
            self._record_failure(error)
            raise error from exc
        finally:
            self._pending = None
        return self._record_success(parser)

    def get(self) -> Parser:
        """Synchronous variant of :meth:`load` for callers outside an event loop."""
        if self._parser is not None:
            return self._parser
        self._raise_if_cooling_down()
        try:
            parser = self._factory()
        except Exception as exc:
            error = ParserLoadError(f"Failed to load the TSX parser: {exc}")
            self._record_failure(error)
            raise error from exc
        return self._record_success(parser)

    def reset(self) -> None:
        self._parser = None
        self._pending = None
        self._error = None
        self._failed_at = 0.0


_loader: ParserLoader | None = None


def get_parser_loader() -> ParserLoader:
    global _loader  # noqa: PLW0603
    if _loader is None:
        settings = get_settings()
        _loader = ParserLoader(timeout=settings.parser_load_timeout, retry_cooldown=settings.parser_retry_cooldown)
    return _loader


def set_parser_loader(loader: ParserLoader | None) -> None:
    """Install a loader; ``None`` rebuilds the default from settings on next use."""
    global _loader  # noqa: PLW0603
    _loader = loader


def parse_source(source: str, parser: Parser | None = None) -> Tree:
    """Parse TSX source, loading the shared parser when none is given."""
    if parser is None:
        parser = get_parser_loader().get()
    return parser.parse(source.encode("utf-8"))

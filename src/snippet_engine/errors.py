class SnippetEngineError(Exception):
    """Base class for errors raised by the snippet engine."""


class ParserLoadError(SnippetEngineError):
    """The TSX parser could not be loaded."""


class ParserLoadTimeoutError(ParserLoadError):
    pass


class TailwindError(SnippetEngineError):
    """Tailwind CSS could not be produced for a snippet."""


class TailwindLimitError(TailwindError):
    """A candidate set or generated stylesheet exceeded a configured limit."""

    def __init__(self, message: str, limit: int) -> None:
        super().__init__(message)
        self.limit = limit


class TailwindCompilerError(TailwindError):
    pass

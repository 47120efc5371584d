from collections.abc import Sequence
from typing import Protocol


class TailwindCompiler(Protocol):
    def compile(self, candidates: Sequence[str]) -> str: ...

"""Compile Tailwind candidates with the standalone ``tailwindcss`` CLI."""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from collections.abc import Sequence
from pathlib import Path

from snippet_engine.errors import TailwindCompilerError

logger = logging.getLogger(__name__)

INPUT_CSS = '@import "tailwindcss" source(none);\n@source "./candidates.html";\n'


class TailwindCliCompiler:
    """:class:`~snippet_engine.core.ports.compiler.TailwindCompiler` backed by a subprocess."""

    def __init__(self, binary: str = "tailwindcss", timeout: float = 30.0) -> None:
        self.binary = binary
        self.timeout = timeout
        self._resolved: str | None = None

    def resolve(self) -> str:
        if self._resolved is None:
            resolved = shutil.which(self.binary)
            if resolved is None:
                raise TailwindCompilerError(f"Tailwind CLI not found: {self.binary}")
            logger.info("Using Tailwind CLI at %s", resolved)
            self._resolved = resolved
        return self._resolved

    def compile(self, candidates: Sequence[str]) -> str:
        binary = self.resolve()
        with tempfile.TemporaryDirectory(prefix="snippet-tailwind-") as tmp:
            workdir = Path(tmp)
            (workdir / "input.css").write_text(INPUT_CSS, encoding="utf-8")
            (workdir / "candidates.html").write_text(
                f'<div class="{" ".join(candidates)}"></div>\n', encoding="utf-8"
            )
            output = workdir / "output.css"
            try:
                result = subprocess.run(
                    [binary, "-i", "input.css", "-o", str(output)],
                    cwd=workdir,
                    check=False,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as exc:
                raise TailwindCompilerError(f"Tailwind CLI timed out after {self.timeout:g}s") from exc
            except OSError as exc:
                raise TailwindCompilerError(f"Tailwind CLI could not be started: {exc}") from exc
            if result.returncode != 0:
                detail = result.stderr.strip().splitlines()[-1:] or [f"exit code {result.returncode}"]
                raise TailwindCompilerError(f"Tailwind CLI failed: {detail[0]}")
            if not output.exists():
                raise TailwindCompilerError("Tailwind CLI produced no output")
            return output.read_text(encoding="utf-8")

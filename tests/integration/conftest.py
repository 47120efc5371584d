"""Fixtures for tests that run the real Tailwind CLI."""

import shutil

import pytest

from snippet_engine.compiler.tailwind_cli import TailwindCliCompiler
from snippet_engine.config import get_settings


@pytest.fixture
def tailwind_compiler() -> TailwindCliCompiler:
    """Compiler for the configured binary; skips when it is not installed."""
    binary = get_settings().tailwind_bin
    if shutil.which(binary) is None:
        pytest.skip(f"{binary} is not installed")
    return TailwindCliCompiler(binary=binary, timeout=60)

import os
from functools import lru_cache

from pydantic import BaseModel


class EngineSettings(BaseModel):
    parser_load_timeout: float = 4.0
    parser_retry_cooldown: float = 1.5
    source_max_chars: int = 20_000
    tailwind_bin: str = "tailwindcss"
    tailwind_timeout: float = 30.0
    tailwind_max_candidates: int = 800
    tailwind_max_css_chars: int = 150_000
    tailwind_cache_size: int = 50


_ENV_FIELDS = {
    "SNIPPET_ENGINE_PARSER_TIMEOUT": "parser_load_timeout",
    "SNIPPET_ENGINE_PARSER_COOLDOWN": "parser_retry_cooldown",
    "SNIPPET_ENGINE_SOURCE_MAX_CHARS": "source_max_chars",
    "SNIPPET_ENGINE_TAILWIND_BIN": "tailwind_bin",
    "SNIPPET_ENGINE_TAILWIND_TIMEOUT": "tailwind_timeout",
    "SNIPPET_ENGINE_TAILWIND_MAX_CANDIDATES": "tailwind_max_candidates",
    "SNIPPET_ENGINE_TAILWIND_MAX_CSS_CHARS": "tailwind_max_css_chars",
    "SNIPPET_ENGINE_TAILWIND_CACHE_SIZE": "tailwind_cache_size",
}


def load_settings() -> EngineSettings:
    """Build settings from ``SNIPPET_ENGINE_*`` environment variables."""
    values = {field: os.getenv(env) for env, field in _ENV_FIELDS.items()}
    return EngineSettings.model_validate({k: v for k, v in values.items() if v not in (None, "")})


@lru_cache(maxsize=1)
def get_settings() -> EngineSettings:
    return load_settings()

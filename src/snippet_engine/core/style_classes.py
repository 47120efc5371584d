"""Tailwind utility classification and formatting for the style editor.

Only base tokens are classified: ``hover:bg-red-500`` or ``md:text-lg`` are never
treated as belonging to a category and always survive a rewrite.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping

THEME_COLOR_TOKENS = frozenset(
    {
        "background",
        "foreground",
        "card",
        "card-foreground",
        "popover",
        "popover-foreground",
        "primary",
        "primary-foreground",
        "secondary",
        "secondary-foreground",
        "muted",
        "muted-foreground",
        "accent",
        "accent-foreground",
        "destructive",
        "destructive-foreground",
        "border",
        "input",
        "ring",
        "chart-1",
        "chart-2",
        "chart-3",
        "chart-4",
        "chart-5",
        "sidebar",
        "sidebar-foreground",
        "sidebar-primary",
        "sidebar-primary-foreground",
        "sidebar-accent",
        "sidebar-accent-foreground",
        "sidebar-border",
        "sidebar-ring",
    }
)

NAMED_COLORS = frozenset({"transparent", "current", "black", "white"})

BORDER_COLOR_BLOCKLIST = frozenset(
    {"solid", "dashed", "dotted", "double", "hidden", "none", "collapse", "separate", "x", "y", "t", "r", "b", "l", "s", "e"}
)

FONT_WEIGHT_NAMES = {
    100: "thin",
    200: "extralight",
    300: "light",
    400: "normal",
    500: "medium",
    600: "semibold",
    700: "bold",
    800: "extrabold",
    900: "black",
}

_ARBITRARY = re.compile(r"^\[[^\]]+\]$")
_PALETTE_COLOR = re.compile(r"^[a-z]+(?:-[a-z]+)*-\d{2,3}(?:/\d{1,3})?$")
_HEX_DIGITS = re.compile(r"^[0-9a-fA-F]+$")
_FONT_SIZES = re.compile(r"^(xs|sm|base|lg|xl|[2-9]xl)$")
_FONT_WEIGHTS = re.compile(r"^(thin|extralight|light|normal|medium|semibold|bold|extrabold|black)$")
_BORDER_WIDTH = re.compile(r"^border-(0|2|4|8)$")
_BORDER_ARBITRARY = re.compile(r"^border-\[[^\]]+\]$")
_TRAILING_ZEROS = re.compile(r"\.?0+$")

# Order in which freshly formatted classes are appended.
CATEGORIES = ("background", "border_width", "border_color", "radius", "text_color", "font_size", "font_weight")


# --- Tokens ---


def split_variants(token: str) -> str:
    """Base utility of a token: everything after the last top-level ``:``."""
    depth = 0
    last_colon = -1
    for index, char in enumerate(token):
        if char == "[":
            depth += 1
        elif char == "]":
            depth = max(0, depth - 1)
        elif char == ":" and depth == 0:
            last_colon = index
    return token[last_colon + 1 :] if last_colon >= 0 else token


def is_base_token(token: str) -> bool:
    return split_variants(token) == token


def utility(token: str) -> str:
    return split_variants(token).lstrip("!")


def is_color_suffix(suffix: str) -> bool:
    if not suffix:
        return False
    if suffix in NAMED_COLORS or _ARBITRARY.match(suffix):
        return True
    if suffix.split("/", 1)[0] in THEME_COLOR_TOKENS:
        return True
    return bool(_PALETTE_COLOR.match(suffix)) and not suffix.startswith("opacity-")


def _suffix(token: str, prefix: str) -> str | None:
    if not is_base_token(token):
        return None
    base = utility(token)
    return base[len(prefix) :] if base.startswith(prefix) else None


# --- Predicates ---


def is_background_class(token: str) -> bool:
    suffix = _suffix(token, "bg-")
    return suffix is not None and is_color_suffix(suffix)


def is_border_width_class(token: str) -> bool:
    if not is_base_token(token):
        return False
    base = utility(token)
    return base == "border" or bool(_BORDER_WIDTH.match(base)) or bool(_BORDER_ARBITRARY.match(base))


def is_border_color_class(token: str) -> bool:
    suffix = _suffix(token, "border-")
    if not suffix or is_border_width_class(token):
        return False
    if suffix in BORDER_COLOR_BLOCKLIST or suffix.startswith("spacing-") or suffix.isdigit():
        return False
    return is_color_suffix(suffix)


def is_radius_class(token: str) -> bool:
    return is_base_token(token) and utility(token).startswith("rounded")


def is_text_color_class(token: str) -> bool:
    suffix = _suffix(token, "text-")
    return suffix is not None and is_color_suffix(suffix)


def is_font_size_class(token: str) -> bool:
    suffix = _suffix(token, "text-")
    return bool(suffix) and bool(_ARBITRARY.match(suffix) or _FONT_SIZES.match(suffix))


def is_font_weight_class(token: str) -> bool:
    suffix = _suffix(token, "font-")
    return bool(suffix) and bool(_ARBITRARY.match(suffix) or _FONT_WEIGHTS.match(suffix))


CATEGORY_PREDICATES: dict[str, Callable[[str], bool]] = {
    "background": is_background_class,
    "border_width": is_border_width_class,
    "border_color": is_border_color_class,
    "radius": is_radius_class,
    "text_color": is_text_color_class,
    "font_size": is_font_size_class,
    "font_weight": is_font_weight_class,
}


# --- Colors ---


def normalize_hex_color(raw: str) -> str | None:
    value = raw.strip()
    if not value.startswith("#"):
        return None
    digits = value[1:]
    if not _HEX_DIGITS.match(digits) or len(digits) not in (3, 4, 6, 8):
        return None
    if len(digits) in (3, 4):
        digits = "".join(char * 2 for char in digits)
    return f"#{digits.lower()}"


def normalize_color(raw: str | None) -> str | None:
    """Canonical color value, or ``None`` for blank input."""
    if raw is None:
        return None
    trimmed = raw.strip()
    if not trimmed:
        return None
    lowered = trimmed.lower()
    if lowered in ("current", "currentcolor"):
        return "current"
    if lowered in NAMED_COLORS:
        return lowered
    return normalize_hex_color(trimmed) or trimmed


# --- Formatting ---


def format_number(value: float) -> str:
    """Round to two decimals and drop trailing zeros (``1.50`` -> ``1.5``)."""
    if not math.isfinite(value):
        return "0"
    rounded = round(value * 100) / 100
    if abs(rounded) < 0.005:
        rounded = 0.0
    text = f"{rounded:.2f}"
    return _TRAILING_ZEROS.sub("", text) or "0"


def format_color_class(prefix: str, value: str) -> str:
    if value in NAMED_COLORS:
        return f"{prefix}-{value}"
    if value.startswith("#"):
        return f"{prefix}-[{value}]"
    if value.startswith("[") and value.endswith("]"):
        return f"{prefix}-{value}"
    if is_color_suffix(value):
        return f"{prefix}-{value}"
    return f"{prefix}-[{value}]"


def _positive(value: float) -> str | None:
    if not math.isfinite(value):
        return None
    formatted = format_number(value)
    return formatted if float(formatted) > 0 else None


def format_border_width_class(value: float) -> str | None:
    formatted = _positive(value)
    if formatted is None:
        return None
    numeric = float(formatted)
    if numeric == 1:
        return "border"
    if numeric in (2, 4, 8):
        return f"border-{int(numeric)}"
    return f"border-[{formatted}px]"


def format_radius_class(value: float | str) -> str | None:
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        return "rounded" if trimmed == "DEFAULT" else f"rounded-{trimmed}"
    formatted = _positive(value)
    return f"rounded-[{formatted}px]" if formatted is not None else None


def format_font_size_class(value: float | str) -> str | None:
    if isinstance(value, str):
        trimmed = value.strip()
        return f"text-{trimmed}" if trimmed else None
    formatted = _positive(value)
    return f"text-[{formatted}px]" if formatted is not None else None


def format_font_weight_class(value: float | str) -> str | None:
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        return trimmed if trimmed.startswith("font-") else f"font-{trimmed}"
    if not math.isfinite(value):
        return None
    rounded = round(value)
    if rounded <= 0:
        return None
    weight = min(1000, max(1, rounded))
    name = FONT_WEIGHT_NAMES.get(weight)
    return f"font-{name}" if name else f"font-[{weight}]"


def format_px(value: float) -> str:
    return f"{format_number(value)}px"


def format_color_style(value: str) -> str:
    return "currentColor" if value == "current" else value


# --- className rewrite ---


def normalize_class_name(value: str, updates: Mapping[str, str | None]) -> str:
    """Drop tokens of every updated category, then append the new classes.

    ``updates`` maps a category name from :data:`CATEGORIES` to the class to add;
    ``None`` only removes. Categories absent from the mapping are left alone.
    """
    predicates = [CATEGORY_PREDICATES[category] for category in CATEGORIES if category in updates]
    result: list[str] = []
    seen: set[str] = set()

    def push(token: str) -> None:
        if token and token not in seen:
            seen.add(token)
            result.append(token)

    for token in value.split():
        if any(predicate(token) for predicate in predicates):
            continue
        push(token)
    for category in CATEGORIES:
        addition = updates.get(category)
        if addition:
            push(addition)
    return " ".join(result)

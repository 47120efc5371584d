"""Tests for Tailwind class classification and formatting."""

from __future__ import annotations

import pytest

from snippet_engine.core import style_classes as sc


class TestTokens:
    def test_split_variants(self) -> None:
        assert sc.split_variants("md:hover:bg-red-500") == "bg-red-500"
        assert sc.split_variants("bg-[url(a:b)]") == "bg-[url(a:b)]"
        assert sc.utility("!font-bold") == "font-bold"

    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("bg-red-500", True),
            ("bg-primary/50", True),
            ("bg-[#fff]", True),
            ("bg-white", True),
            ("hover:bg-red-500", False),
            ("bg-cover", False),
            ("bg-opacity-50", False),
        ],
    )
    def test_background(self, token: str, expected: bool) -> None:
        assert sc.is_background_class(token) is expected

    @pytest.mark.parametrize(
        ("token", "width", "color"),
        [
            ("border", True, False),
            ("border-2", True, False),
            ("border-[3px]", True, False),
            ("border-red-500", False, True),
            ("border-solid", False, False),
            ("border-x", False, False),
            ("border-3", False, False),
        ],
    )
    def test_border(self, token: str, width: bool, color: bool) -> None:
        assert sc.is_border_width_class(token) is width
        assert sc.is_border_color_class(token) is color

    def test_text_and_font(self) -> None:
        assert sc.is_font_size_class("text-lg")
        assert not sc.is_text_color_class("text-lg")
        assert sc.is_text_color_class("text-red-500")
        assert not sc.is_font_size_class("text-red-500")
        assert sc.is_font_weight_class("font-bold")
        assert sc.is_font_weight_class("font-[650]")
        assert not sc.is_font_weight_class("font-sans")

    def test_radius(self) -> None:
        assert sc.is_radius_class("rounded")
        assert sc.is_radius_class("rounded-lg")
        assert not sc.is_radius_class("md:rounded")


class TestColors:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("#ABC", "#aabbcc"), ("#abcd", "#aabbccdd"), ("#A1B2C3", "#a1b2c3"), ("#12", None), ("red", None)],
    )
    def test_normalize_hex(self, raw: str, expected: str | None) -> None:
        assert sc.normalize_hex_color(raw) == expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("CurrentColor", "current"),
            ("  ", None),
            (None, None),
            ("White", "white"),
            ("#FFF", "#ffffff"),
            ("rgb(0 0 0)", "rgb(0 0 0)"),
        ],
    )
    def test_normalize_color(self, raw: str | None, expected: str | None) -> None:
        assert sc.normalize_color(raw) == expected


class TestFormatting:
    @pytest.mark.parametrize(("value", "expected"), [(1.5, "1.5"), (2.0, "2"), (0.001, "0"), (12.346, "12.35"), (100, "100")])
    def test_format_number(self, value: float, expected: str) -> None:
        assert sc.format_number(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("white", "bg-white"), ("#ffffff", "bg-[#ffffff]"), ("red-500", "bg-red-500"), ("rgb(0,0,0)", "bg-[rgb(0,0,0)]")],
    )
    def test_color_class(self, value: str, expected: str) -> None:
        assert sc.format_color_class("bg", value) == expected

    def test_border_width(self) -> None:
        assert sc.format_border_width_class(1) == "border"
        assert sc.format_border_width_class(2) == "border-2"
        assert sc.format_border_width_class(3) == "border-[3px]"
        assert sc.format_border_width_class(1.5) == "border-[1.5px]"
        assert sc.format_border_width_class(0) is None

    def test_radius(self) -> None:
        assert sc.format_radius_class("DEFAULT") == "rounded"
        assert sc.format_radius_class("lg") == "rounded-lg"
        assert sc.format_radius_class(6) == "rounded-[6px]"
        assert sc.format_radius_class(0) is None

    def test_font(self) -> None:
        assert sc.format_font_size_class("lg") == "text-lg"
        assert sc.format_font_size_class(18) == "text-[18px]"
        assert sc.format_font_weight_class(700) == "font-bold"
        assert sc.format_font_weight_class(650) == "font-[650]"
        assert sc.format_font_weight_class("semibold") == "font-semibold"
        assert sc.format_font_weight_class("font-bold") == "font-bold"
        assert sc.format_font_weight_class(0) is None

    def test_style_values(self) -> None:
        assert sc.format_px(4) == "4px"
        assert sc.format_color_style("current") == "currentColor"
        assert sc.format_color_style("#fff") == "#fff"


class TestNormalizeClassName:
    def test_replaces_category_and_keeps_variants(self) -> None:
        value = sc.normalize_class_name("p-4 bg-red-500 hover:bg-red-600 p-4", {"background": "bg-white"})
        assert value == "p-4 hover:bg-red-600 bg-white"

    def test_none_only_removes(self) -> None:
        assert sc.normalize_class_name("p-4 text-lg font-bold", {"font_size": None}) == "p-4 font-bold"

    def test_untouched_categories_survive(self) -> None:
        assert sc.normalize_class_name("p-4 text-red-500", {}) == "p-4 text-red-500"

    def test_additions_follow_category_order(self) -> None:
        updates = {"font_weight": "font-bold", "background": "bg-white", "radius": "rounded"}
        assert sc.normalize_class_name("", updates) == "bg-white rounded font-bold"

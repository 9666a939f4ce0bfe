"""Tests for CSS class derivation."""

from __future__ import annotations

import unicodedata

import pytest

from strata.domain.classify import html_classify


class TestHtmlClassify:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("HtmlWidget", "html-widget"),
            ("BlogPost", "blog-post"),
            ("HTMLWidget", "htmlwidget"),
            ("Raw Html_Widget", "raw-html-widget"),
            ("Menu", "menu"),
            ("Widget2Column", "widget2-column"),
            ("Café Menu", "café-menu"),
            ("Новости", "новости"),
            ("ЛентаНовостей", "лента-новостей"),
            ("日本", "日本"),
            ("ÜberWidget", "über-widget"),
        ],
    )
    def test_classify(self, text: str, expected: str) -> None:
        assert html_classify(text) == expected

    def test_strips_leading_and_trailing_separators(self) -> None:
        assert html_classify("  --Promo--  ") == "promo"

    def test_empty(self) -> None:
        assert html_classify("") == ""

    def test_decomposed_accents_are_kept(self) -> None:
        assert html_classify(unicodedata.normalize("NFD", "Café")) == "café"

    @pytest.mark.parametrize(
        ("a", "b"),
        [
            ("HTMLWidget", "HtmlWidget"),
            ("ÜberWidget", "UberWidget"),
            ("Новости", "日本"),
            ("Новости", "Статьи"),
            ("Widget", "Widget2"),
        ],
    )
    def test_distinct_types_get_distinct_classes(self, a: str, b: str) -> None:
        assert html_classify(a) != html_classify(b)

    @pytest.mark.parametrize("text", ["Новости", "日本", "Ünïcode"])
    def test_non_latin_names_never_empty(self, text: str) -> None:
        assert html_classify(text)

    @pytest.mark.parametrize("variant", ["Html_Widget", "Html Widget", "htmlWidget", "html-widget"])
    def test_documented_collisions(self, variant: str) -> None:
        assert html_classify(variant) == html_classify("HtmlWidget")

"""Tests for the theme resolver.

Execution Context:
    Test module - run via pytest

Dependencies:
    - pytest: Test framework
    - rich: Style assertions
    - histview_core.theme: Module under test
"""
from __future__ import annotations

import pytest
from rich.style import Style

from histview_core.models import LANE_PALETTE_SIZE
from histview_core.models import LineKind
from histview_core.models import TokenClass
from histview_core.theme import DEFAULT_THEME
from histview_core.theme import THEME_NAMES
from histview_core.theme import get_theme
from histview_core.theme import next_theme_name


class TestThemeTable:
    """Tests for the closed theme set."""

    def test_names(self) -> None:
        """Test the set of theme names and the default."""
        assert THEME_NAMES == ("dark", "light", "monokai", "nord")
        assert DEFAULT_THEME == "dark"

    @pytest.mark.parametrize("name", THEME_NAMES)
    def test_every_token_class_mapped(self, name: str) -> None:
        """Test that each theme colors every token class."""
        theme = get_theme(name)

        assert set(theme.tokens) == set(TokenClass)
        assert len(theme.lanes) == LANE_PALETTE_SIZE

    def test_unknown_theme_raises(self) -> None:
        """Test that an unknown name lists the valid themes."""
        with pytest.raises(ValueError) as exc_info:
            get_theme("solarized")

        assert "solarized" in str(exc_info.value)
        assert "nord" in str(exc_info.value)

    def test_next_theme_cycles(self) -> None:
        """Test cycling through the themes."""
        assert [next_theme_name(name) for name in THEME_NAMES] == ["light", "monokai", "nord", "dark"]
        assert next_theme_name("bogus") == DEFAULT_THEME


class TestThemeLookup:
    """Tests for color lookups."""

    def test_lane_color_wraps(self) -> None:
        """Test that lane indices wrap modulo the palette size."""
        theme = get_theme("dark")

        assert theme.lane_color(8) == theme.lane_color(0)
        assert theme.lane_color(11) == theme.lane_color(3)
        assert theme.lane_color(0) != theme.lane_color(1)

    def test_token_style(self) -> None:
        """Test rich styles for token classes."""
        theme = get_theme("monokai")
        keyword = theme.token_style(TokenClass.KEYWORD)
        comment = theme.token_style(TokenClass.COMMENT)

        assert isinstance(keyword, Style)
        assert keyword.bold
        assert comment.italic
        assert keyword.color.name == theme.token_color(TokenClass.KEYWORD)

    def test_line_color_follows_diff_tokens(self) -> None:
        """Test that line kinds map onto the diff token colors."""
        theme = get_theme("nord")

        assert theme.line_color(LineKind.ADDED) == theme.token_color(TokenClass.DIFF_ADDED)
        assert theme.line_color(LineKind.REMOVED) == theme.token_color(TokenClass.DIFF_REMOVED)

    def test_themes_differ(self) -> None:
        """Test that switching themes changes resolved colors."""
        dark = get_theme("dark")
        light = get_theme("light")

        assert dark.token_color(TokenClass.KEYWORD) != light.token_color(TokenClass.KEYWORD)
        assert dark.selected_bg != light.selected_bg

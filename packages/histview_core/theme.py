"""Theme resolver.

Maps token classes, diff line kinds and lane indices to colors for one of
a closed set of named themes. Resolution is a pure lookup performed at
render time; nothing computed upstream depends on the active theme.

Execution Context:
    Library module - imported by the render composer and CLI

Dependencies:
    - rich: Color parsing and Style objects

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from rich.color import Color
from rich.style import Style

from histview_core.models import LineKind
from histview_core.models import TokenClass


DEFAULT_THEME = "dark"

LINE_KIND_TOKENS = {
    LineKind.ADDED: TokenClass.DIFF_ADDED,
    LineKind.REMOVED: TokenClass.DIFF_REMOVED,
    LineKind.CONTEXT: TokenClass.DIFF_CONTEXT,
    LineKind.HEADER: TokenClass.DIFF_HEADER,
}

BOLD_TOKENS = frozenset({TokenClass.KEYWORD, TokenClass.DIFF_HEADER})
ITALIC_TOKENS = frozenset({TokenClass.COMMENT})


# ---- Theme --------------------------------------------------------------------------------------------------


@dataclass(frozen=True)
class Theme:
    """Named palette.

    Attributes:
        name: Theme name.
        tokens: Color per token class.
        lanes: Lane palette, indexed by lane modulo its size.
        text: Default text color.
        commit_hash: Color of short hashes.
        commit_date: Color of relative dates.
        commit_author: Color of author names.
        branch_name: Color of branch and tag names.
        selected_bg: Background of the selected row.
        line_number: Color of the diff gutter.
        detached: Color of the hollow detached glyph.
    """

    name: str
    tokens: Mapping[TokenClass, str]
    lanes: tuple[str, ...]
    text: str
    commit_hash: str
    commit_date: str
    commit_author: str
    branch_name: str
    selected_bg: str
    line_number: str
    detached: str

    def token_color(
            self,
            token: TokenClass,
    ) -> str:
        """Color for a token class (default text color when unmapped)."""
        return self.tokens.get(token, self.text)

    def token_style(
            self,
            token: TokenClass,
    ) -> Style:
        """rich Style for a token class."""
        return Style(
            color=Color.parse(self.token_color(token)),
            bold=token in BOLD_TOKENS,
            italic=token in ITALIC_TOKENS,
        )

    def line_color(
            self,
            kind: LineKind,
    ) -> str:
        """Color carrying the diff-prefix styling of a line kind."""
        return self.token_color(LINE_KIND_TOKENS[kind])

    def lane_color(
            self,
            lane: int,
    ) -> str:
        """Color of a lane; indices wrap modulo the palette size."""
        return self.lanes[lane % len(self.lanes)]

    def lane_style(
            self,
            lane: int,
    ) -> Style:
        """rich Style of a lane."""
        return Style(color=Color.parse(self.lane_color(lane)))


def _tokens(
        **colors: str,
) -> Mapping[TokenClass, str]:
    return MappingProxyType({TokenClass(name.replace("_", "-")): color for name, color in colors.items()})


# ---- Theme Table --------------------------------------------------------------------------------------------


THEMES: dict[str, Theme] = {
    theme.name: theme
    for theme in (
        Theme(
            name="dark",
            tokens=_tokens(
                keyword="#ff0080",
                type="#00bfff",
                string="#ffd700",
                comment="#646464",
                number="#bd93f9",
                operator="#c8c8c8",
                identifier="#e0e0e0",
                plain="#c8c8c8",
                diff_added="#00ff7f",
                diff_removed="#ff4500",
                diff_context="#c8c8c8",
                diff_header="#ffd700",
            ),
            lanes=(
                "#4caf50", "#2196f3", "#ff9800", "#9c27b0",
                "#f44336", "#00bcd4", "#e91e63", "#795548",
            ),
            text="#c8c8c8",
            commit_hash="#aaaaaa",
            commit_date="#969696",
            commit_author="#7878ff",
            branch_name="#00ff7f",
            selected_bg="#464664",
            line_number="#646464",
            detached="#646464",
        ),
        Theme(
            name="light",
            tokens=_tokens(
                keyword="magenta",
                type="blue",
                string="dark_orange3",
                comment="grey50",
                number="dark_cyan",
                operator="grey35",
                identifier="black",
                plain="grey23",
                diff_added="green",
                diff_removed="red",
                diff_context="grey23",
                diff_header="#b48c00",
            ),
            lanes=(
                "green", "blue", "dark_orange", "purple",
                "red", "dark_cyan", "deep_pink3", "orange4",
            ),
            text="grey23",
            commit_hash="grey35",
            commit_date="grey50",
            commit_author="blue",
            branch_name="green",
            selected_bg="grey82",
            line_number="grey62",
            detached="grey62",
        ),
        Theme(
            name="monokai",
            tokens=_tokens(
                keyword="#f92672",
                type="#66d9ef",
                string="#e6db74",
                comment="#75715e",
                number="#ae81ff",
                operator="#f8f8f2",
                identifier="#f8f8f2",
                plain="#f8f8f8",
                diff_added="#a6e3a1",
                diff_removed="#f38ba8",
                diff_context="#f8f8f8",
                diff_header="#ffd166",
            ),
            lanes=(
                "#a6e22e", "#66d9ef", "#fd971f", "#ae81ff",
                "#f92672", "#e6db74", "#bd93f9", "#a1efe4",
            ),
            text="#f8f8f8",
            commit_hash="#aaaaaa",
            commit_date="#969696",
            commit_author="#bd93f9",
            branch_name="#a6e3a1",
            selected_bg="#4e4a67",
            line_number="#808080",
            detached="#808080",
        ),
        Theme(
            name="nord",
            tokens=_tokens(
                keyword="#81a1c1",
                type="#8fbcbb",
                string="#a3be8c",
                comment="#616e88",
                number="#b48ead",
                operator="#81a1c1",
                identifier="#d8dee9",
                plain="#d8dee9",
                diff_added="#a3be8c",
                diff_removed="#bf616a",
                diff_context="#d8dee9",
                diff_header="#88c0d0",
            ),
            lanes=(
                "#88c0d0", "#a3be8c", "#ebcb8b", "#b48ead",
                "#bf616a", "#8fbcbb", "#d08770", "#5e81ac",
            ),
            text="#d8dee9",
            commit_hash="#aaaaaa",
            commit_date="#969696",
            commit_author="#81a1c1",
            branch_name="#a3be8c",
            selected_bg="#4c566a",
            line_number="#4c566a",
            detached="#616e88",
        ),
    )
}

THEME_NAMES: tuple[str, ...] = tuple(THEMES)


# ---- Lookup -------------------------------------------------------------------------------------------------


def get_theme(
        name: str,
) -> Theme:
    """Get a theme by name.

    Args:
        name: One of THEME_NAMES.

    Returns:
        Theme instance.

    Raises:
        ValueError: If the name is not a known theme.
    """
    try:
        return THEMES[name]
    except KeyError:
        msg = f"Unknown theme '{name}'. Valid themes: {', '.join(THEME_NAMES)}"
        raise ValueError(msg) from None


def next_theme_name(
        name: str,
) -> str:
    """Name of the theme after ``name`` in cycling order."""
    if name not in THEMES:
        return DEFAULT_THEME
    return THEME_NAMES[(THEME_NAMES.index(name) + 1) % len(THEME_NAMES)]

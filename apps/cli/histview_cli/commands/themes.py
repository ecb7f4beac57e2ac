"""histview themes command.

Lists the available color themes.

Execution Context:
    CLI command - invoked via `histview themes`

Dependencies:
    - click: CLI framework
    - rich: Terminal output
    - histview_core: Theme table

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table
from rich.text import Text

from histview_core.models import TokenClass
from histview_core.theme import DEFAULT_THEME
from histview_core.theme import THEME_NAMES
from histview_core.theme import get_theme

console = Console()

SAMPLE_TOKENS = (
    ("def", TokenClass.KEYWORD),
    (" ", TokenClass.PLAIN),
    ("main", TokenClass.IDENTIFIER),
    ("(", TokenClass.OPERATOR),
    ("n", TokenClass.IDENTIFIER),
    (": ", TokenClass.OPERATOR),
    ("int", TokenClass.TYPE),
    (") ", TokenClass.OPERATOR),
    ('"ok"', TokenClass.STRING),
    (" 42 ", TokenClass.NUMBER),
    ("# note", TokenClass.COMMENT),
)


# ---- Themes Command -----------------------------------------------------------------------------------------


@click.command()
def themes() -> None:
    """List color themes.

    Shows every theme with its lane palette and a highlighted sample.

    Example:
        histview themes
    """
    table = Table(title="Themes")
    table.add_column("Name", style="bold")
    table.add_column("Lanes")
    table.add_column("Sample")

    for name in THEME_NAMES:
        theme = get_theme(name)
        lanes = Text()
        for index in range(len(theme.lanes)):
            lanes.append("██", style=theme.lane_style(index))
        sample = Text()
        for text, token in SAMPLE_TOKENS:
            sample.append(text, style=theme.token_style(token))
        label = f"{name} (default)" if name == DEFAULT_THEME else name
        table.add_row(label, lanes, sample)

    console.print(table)

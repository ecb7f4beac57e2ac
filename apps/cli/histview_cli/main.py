"""histview CLI entry point.

Orchestrator for the histview command-line interface. Registers all
command modules and provides the main entry point.

Execution Context:
    CLI application - run via `python main.py` or `histview` command

Dependencies:
    - click: CLI framework
    - rich: Log record rendering
    - histview_core: Core library

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import logging
import sys

import click
from rich.logging import RichHandler

from histview_cli import __version__
from histview_cli.commands.diff import diff
from histview_cli.commands.log import log
from histview_cli.commands.themes import themes


# ---- CLI Group ----------------------------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="histview")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Log debug output to stderr.",
)
def cli(
        verbose: bool,
) -> None:
    """histview - Commit history viewer.

    Draws the commit graph of a git repository with typed glyphs and
    lane colors, and shows syntax-highlighted diffs. Never modifies the
    repository.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=verbose, rich_tracebacks=True)],
        force=True,
    )


# ---- Register Commands --------------------------------------------------------------------------------------


cli.add_command(log)
cli.add_command(diff)
cli.add_command(themes)


# ---- Main Function ------------------------------------------------------------------------------------------


def main() -> int:
    """Main entry point for histview CLI.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    try:
        cli()
        return 0
    except Exception as cli_error:
        click.echo(f"Error: {cli_error}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())

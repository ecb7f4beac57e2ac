"""histview log command.

Shows the commit graph of a repository.

Execution Context:
    CLI command - invoked via `histview log`

Dependencies:
    - click: CLI framework
    - rich: Terminal output
    - histview_core: Log parsing, graph building and row composition

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

from dataclasses import replace

import click
from rich.console import Console

from histview_cli.commands.utils import build_config
from histview_cli.commands.utils import find_repository
from histview_cli.commands.utils import run_git
from histview_core.graph import DEFAULT_MAX_COMMITS
from histview_core.graph import build_graph
from histview_core.log import LOG_FORMAT
from histview_core.log import parse_log
from histview_core.render import compose_rows
from histview_core.render import row_to_text
from histview_core.theme import DEFAULT_THEME
from histview_core.theme import THEME_NAMES
from histview_core.theme import get_theme

console = Console()


# ---- Log Command --------------------------------------------------------------------------------------------


@click.command()
@click.argument(
    "path",
    required=False,
    default=".",
    type=click.Path(exists=True, file_okay=False),
)
@click.option(
    "--max-count",
    "-n",
    type=int,
    default=DEFAULT_MAX_COMMITS,
    envvar="HISTVIEW_MAX_COMMITS",
    show_default=True,
    help="Maximum number of commits to show.",
)
@click.option(
    "--theme",
    "-t",
    type=click.Choice(THEME_NAMES),
    default=DEFAULT_THEME,
    envvar="HISTVIEW_THEME",
    show_default=True,
    help="Color theme.",
)
@click.option(
    "--all/--current",
    "all_refs",
    default=True,
    help="Show every branch, or only the history of HEAD.",
)
@click.option(
    "--no-dates",
    is_flag=True,
    help="Hide relative commit dates.",
)
def log(
        path: str,
        max_count: int,
        theme: str,
        all_refs: bool,
        no_dates: bool,
) -> None:
    """Show the commit graph.

    Reads history with git (read-only), assigns lanes once and prints one
    row per commit with its glyph, short hash, labels and summary.

    Examples:
        histview log
        histview log -n 50 --theme nord
        histview log --current ../other-repo
    """
    try:
        config = build_config(
            theme=theme,
            max_commits=max_count,
            show_relative_time=not no_dates,
        )
        repo_path = find_repository(path)

        # One extra commit tells whether the window was cut.
        args = ["log", f"--format={LOG_FORMAT}", "--decorate=full", f"--max-count={config.max_commits + 1}"]
        if all_refs:
            args.append("--all")
        commits = parse_log(run_git(args, repo_path), config.short_hash_length)

        if not commits:
            console.print("[dim]No commits yet[/dim]")
            return

        graph = build_graph(commits, max_commits=config.max_commits)
        rows = compose_rows(graph, get_theme(config.theme), show_relative_time=config.show_relative_time)
        for row in rows:
            console.print(row_to_text(row), highlight=False, soft_wrap=True)

        if graph.truncation:
            # The log was fetched one past the limit; ask git for the real total.
            count_args = ["rev-list", "--count", "--all" if all_refs else "HEAD"]
            notice = replace(graph.truncation, total=int(run_git(count_args, repo_path).strip()))
            console.print(f"[yellow]{notice.message}; use -n to see more[/yellow]")

    except Exception as log_error:
        msg = f"Log failed: {log_error}"
        raise click.ClickException(msg) from log_error


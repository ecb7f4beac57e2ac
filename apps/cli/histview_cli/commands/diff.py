"""histview diff command.

Shows a syntax-highlighted diff of a commit, the staged set or the
working tree.

Execution Context:
    CLI command - invoked via `histview diff [target]`

Dependencies:
    - click: CLI framework
    - rich: Terminal output
    - histview_core: Diff parsing, tokenizing and line composition

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import click
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule

from histview_cli.commands.utils import build_config
from histview_cli.commands.utils import find_repository
from histview_cli.commands.utils import run_git
from histview_core.diff import DEFAULT_MAX_DIFF_LINES
from histview_core.diff import format_diff_summary
from histview_core.render import DiffView
from histview_core.render import line_to_text
from histview_core.theme import DEFAULT_THEME
from histview_core.theme import THEME_NAMES

console = Console()

DIFF_OPTIONS = ["--no-color", "--no-ext-diff"]


# ---- Diff Command -------------------------------------------------------------------------------------------


def diff_arguments(
        target: str | None,
        staged: bool,
) -> tuple[list[str], str]:
    """Select the git command for a diff source.

    Returns:
        git arguments and a description of the compared states.
    """
    if target and staged:
        raise click.UsageError("TARGET and --staged cannot be combined")
    if target:
        return ["show", "--format=", *DIFF_OPTIONS, target], f"commit [yellow]{target}[/yellow]"
    if staged:
        return ["diff", "--cached", *DIFF_OPTIONS], "[cyan]index[/cyan] to [yellow]HEAD[/yellow]"
    return ["diff", *DIFF_OPTIONS], "[cyan]working tree[/cyan] to [yellow]index[/yellow]"


@click.command()
@click.argument(
    "target",
    required=False,
)
@click.option(
    "--staged",
    "--cached",
    is_flag=True,
    help="Show staged changes instead of the working tree.",
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
    "--max-lines",
    type=int,
    default=DEFAULT_MAX_DIFF_LINES,
    show_default=True,
    help="Maximum number of lines shown per file.",
)
@click.option(
    "--repo",
    "-C",
    "path",
    default=".",
    type=click.Path(exists=True, file_okay=False),
    help="Repository directory.",
)
def diff(
        target: str | None,
        staged: bool,
        theme: str,
        max_lines: int,
        path: str,
) -> None:
    """Show changes with syntax highlighting.

    Without arguments, shows unstaged changes in the working tree. With
    --staged, shows the changes in the index. With a TARGET, shows the
    changes introduced by that commit.

    Examples:
        histview diff                 # Working tree vs index
        histview diff --staged        # Index vs HEAD
        histview diff abc1234         # Changes of a commit
    """
    args, description = diff_arguments(target, staged)
    try:
        config = build_config(theme=theme, max_diff_lines=max_lines)
        repo_path = find_repository(path)
        view = DiffView(run_git(args, repo_path), config)

        if not view.document.files:
            console.print("[green]No differences[/green]")
            return

        console.print(Panel(
            f"Comparing {description}",
            title="histview diff",
            border_style="blue",
        ))

        lines = view.render(all_lines=True)
        position = 0
        for diff_file in view.document.files:
            console.print(Rule(f"[bold]{diff_file.path}[/bold] [dim]({diff_file.language})[/dim]"))
            for line in lines[position:position + len(diff_file.lines)]:
                console.print(line_to_text(line), highlight=False, soft_wrap=True)
            position += len(diff_file.lines)
            if diff_file.truncation:
                console.print(f"[yellow]{diff_file.truncation.message}[/yellow]")

        console.print()
        console.print(format_diff_summary(view.stats))

    except Exception as diff_error:
        msg = f"Diff failed: {diff_error}"
        raise click.ClickException(msg) from diff_error

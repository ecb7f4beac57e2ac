"""Tests for the histview CLI commands.

Runs the click commands through CliRunner with git replaced by canned
output, so no repository is needed.

Execution Context:
    Test module - run via pytest

Dependencies:
    - pytest: Test framework
    - click: CliRunner
    - histview_cli: Module under test
"""
from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from histview_cli.commands.utils import GitCommandError
from histview_cli.commands.utils import build_config
from histview_cli.commands.utils import run_git
from histview_cli.main import cli
from histview_core.log import FIELD_SEPARATOR
from histview_core.log import RECORD_SEPARATOR

HASH_A = "a1" * 20
HASH_B = "b2" * 20

LOG_OUTPUT = "".join(
    FIELD_SEPARATOR.join(fields) + RECORD_SEPARATOR + "\n"
    for fields in (
        [HASH_A, HASH_B, "HEAD -> refs/heads/main", "Test User", "t@example.com",
         "2026-01-30T12:00:00+00:00", "Add graph view", ""],
        [HASH_B, "", "tag: refs/tags/v0.1", "Test User", "t@example.com",
         "2026-01-29T12:00:00+00:00", "Initial commit", ""],
    )
)

DIFF_OUTPUT = """\
diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,2 +1,2 @@
-x = 1
+x = 2
 y = 3
"""


# ---- Fixtures ------------------------------------------------------------------------------------------------


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture
def fake_repo():
    """Resolve every path to a fake repository root."""
    with patch("histview_cli.commands.log.find_repository", return_value=Path("/repo")), \
            patch("histview_cli.commands.diff.find_repository", return_value=Path("/repo")):
        yield Path("/repo")


# ---- Group Tests ---------------------------------------------------------------------------------------------


class TestCliGroup:
    """Tests for the top-level group."""

    def test_version(self, runner: CliRunner) -> None:
        """Test the --version option."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "histview, version 0.1.0" in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        """Test that every command is registered."""
        result = runner.invoke(cli, ["--help"])

        for name in ("log", "diff", "themes"):
            assert name in result.output

    def test_themes(self, runner: CliRunner) -> None:
        """Test that the themes command lists the closed set."""
        result = runner.invoke(cli, ["--verbose", "themes"])

        assert result.exit_code == 0
        assert "dark (default)" in result.output
        for name in ("light", "monokai", "nord"):
            assert name in result.output


# ---- Log Command Tests ---------------------------------------------------------------------------------------


class TestLogCommand:
    """Tests for histview log."""

    def test_prints_rows(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test that each commit is printed with its labels."""
        with patch("histview_cli.commands.log.run_git", return_value=LOG_OUTPUT) as mock_git:
            result = runner.invoke(cli, ["log", "--no-dates"])

        assert result.exit_code == 0, result.output
        lines = result.output.splitlines()
        assert lines[0].startswith("●")
        assert f"{HASH_A[:7]} (main) Add graph view" in lines[0]
        assert f"{HASH_B[:7]} (v0.1) Initial commit" in lines[1]
        args = mock_git.call_args.args[0]
        assert "--all" in args
        assert "--max-count=101" in args
        assert mock_git.call_args.args[1] == fake_repo

    def test_current_and_limit(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test --current and -n reach git and the notice counts every commit."""
        with patch("histview_cli.commands.log.run_git", side_effect=[LOG_OUTPUT, "57\n"]) as mock_git:
            result = runner.invoke(cli, ["log", "--current", "-n", "1"])

        assert result.exit_code == 0, result.output
        log_args, count_args = (call.args[0] for call in mock_git.call_args_list)
        assert "--all" not in log_args
        assert "--max-count=2" in log_args
        assert count_args == ["rev-list", "--count", "HEAD"]
        assert "Showing first 1 of 57 commits; use -n to see more" in result.output

    def test_empty_repository(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test output for a repository without commits."""
        with patch("histview_cli.commands.log.run_git", return_value=""):
            result = runner.invoke(cli, ["log"])

        assert result.exit_code == 0
        assert "No commits yet" in result.output

    def test_theme_from_environment(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test that HISTVIEW_THEME is validated against the theme set."""
        result = runner.invoke(cli, ["log"], env={"HISTVIEW_THEME": "solarized"})

        assert result.exit_code == 2

    def test_invalid_limit(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test that a non-positive limit is reported."""
        result = runner.invoke(cli, ["log", "-n", "0"])

        assert result.exit_code == 1
        assert "max_commits must be a positive integer" in result.output

    def test_git_failure(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test that git errors become click errors."""
        with patch("histview_cli.commands.log.run_git", side_effect=GitCommandError("bad revision")):
            result = runner.invoke(cli, ["log"])

        assert result.exit_code == 1
        assert "Log failed: bad revision" in result.output


# ---- Diff Command Tests --------------------------------------------------------------------------------------


class TestDiffCommand:
    """Tests for histview diff."""

    def test_working_tree_diff(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test highlighted output with a summary."""
        with patch("histview_cli.commands.diff.run_git", return_value=DIFF_OUTPUT) as mock_git:
            result = runner.invoke(cli, ["diff"])

        assert result.exit_code == 0, result.output
        assert "src/app.py" in result.output
        assert "+x = 2" in result.output
        assert "1 insertion(+), 1 deletion(-)" in result.output
        assert mock_git.call_args.args[0][0] == "diff"
        assert "--cached" not in mock_git.call_args.args[0]

    def test_staged_and_target(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test the git commands selected for --staged and a TARGET."""
        with patch("histview_cli.commands.diff.run_git", return_value=DIFF_OUTPUT) as mock_git:
            runner.invoke(cli, ["diff", "--staged"])
            staged = mock_git.call_args.args[0]
            runner.invoke(cli, ["diff", "abc1234"])
            target = mock_git.call_args.args[0]

        assert staged[:2] == ["diff", "--cached"]
        assert target[0] == "show"
        assert target[-1] == "abc1234"

    def test_target_with_staged_is_usage_error(self, runner: CliRunner) -> None:
        """Test that TARGET and --staged are exclusive."""
        result = runner.invoke(cli, ["diff", "--staged", "abc1234"])

        assert result.exit_code == 2

    def test_no_differences(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test output for an empty diff."""
        with patch("histview_cli.commands.diff.run_git", return_value=""):
            result = runner.invoke(cli, ["diff"])

        assert result.exit_code == 0
        assert "No differences" in result.output

    def test_truncation_notice(self, runner: CliRunner, fake_repo: Path) -> None:
        """Test that --max-lines cuts long files with a notice."""
        with patch("histview_cli.commands.diff.run_git", return_value=DIFF_OUTPUT):
            result = runner.invoke(cli, ["diff", "--max-lines", "5"])

        assert result.exit_code == 0, result.output
        assert "Showing first 5 of 8 diff lines" in result.output


# ---- Utility Tests -------------------------------------------------------------------------------------------


class TestUtils:
    """Tests for git execution and config helpers."""

    def test_run_git_returns_stdout(self) -> None:
        """Test a successful git call."""
        completed = MagicMock(returncode=0, stdout="ok\n", stderr="")
        with patch("histview_cli.commands.utils.subprocess.run", return_value=completed) as mock_run:
            assert run_git(["status"], "/repo") == "ok\n"

        assert mock_run.call_args.args[0] == ["git", "--no-pager", "status"]
        assert mock_run.call_args.kwargs["cwd"] == "/repo"

    def test_run_git_failure(self) -> None:
        """Test that a non-zero exit raises with git's message."""
        completed = MagicMock(returncode=128, stdout="", stderr="fatal: not a git repository\n")
        with patch("histview_cli.commands.utils.subprocess.run", return_value=completed):
            with pytest.raises(GitCommandError) as exc_info:
                run_git(["log"])

        assert "not a git repository" in str(exc_info.value)

    def test_run_git_missing_binary(self) -> None:
        """Test that a missing git executable raises GitCommandError."""
        with patch("histview_cli.commands.utils.subprocess.run", side_effect=FileNotFoundError("git")):
            with pytest.raises(GitCommandError):
                run_git(["log"])

    def test_build_config(self) -> None:
        """Test that unset options keep defaults and values are validated."""
        config = build_config(theme="nord", max_commits=None)

        assert config.theme == "nord"
        assert config.max_commits == 100
        with pytest.raises(ValueError):
            build_config(max_diff_lines=0)

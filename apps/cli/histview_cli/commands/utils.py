"""Utility functions for histview CLI commands.

Runs read-only git commands and turns CLI options into a validated
ViewerConfig.

Execution Context:
    CLI command utilities - imported by command modules

Dependencies:
    - subprocess: git process execution
    - histview_core: Viewer configuration

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from histview_core.config import ViewerConfig

logger = logging.getLogger(__name__)


class GitCommandError(RuntimeError):
    """git exited with a non-zero status or could not be started."""


def run_git(
        args: list[str],
        path: str | Path = ".",
) -> str:
    """Run a git command and return its standard output.

    Args:
        args: Arguments after ``git``.
        path: Directory to run git in.

    Returns:
        Decoded standard output.

    Raises:
        GitCommandError: If git is missing or fails.
    """
    command = ["git", "--no-pager", *args]
    logger.debug(f"Running {' '.join(command)} in {path}")
    try:
        result = subprocess.run(
            command,
            cwd=str(path),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as os_error:
        msg = f"Could not run git: {os_error}"
        raise GitCommandError(msg) from os_error

    if result.returncode != 0:
        msg = result.stderr.strip() or f"git {args[0]} exited with status {result.returncode}"
        raise GitCommandError(msg)
    return result.stdout


def find_repository(
        path: str | Path = ".",
) -> Path:
    """Get the top-level directory of the repository containing ``path``.

    Raises:
        GitCommandError: If ``path`` is not inside a git repository.
    """
    return Path(run_git(["rev-parse", "--show-toplevel"], path).strip())


def build_config(
        **values: object,
) -> ViewerConfig:
    """Create a validated ViewerConfig from CLI option values.

    Options left unset (None) keep their defaults.

    Raises:
        ValueError: If a value is invalid.
    """
    config = ViewerConfig(**{name: value for name, value in values.items() if value is not None})
    return config.validate()

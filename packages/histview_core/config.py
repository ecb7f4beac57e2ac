"""Viewer configuration.

Holds the values the display layer hands to the engine: the active theme
and the bounds that keep a build pass and a tokenization run finite.
Loading them from files or the environment is left to the caller.

Execution Context:
    Library module - constructed by the CLI and passed to the views

Dependencies:
    - histview_core.theme: Closed set of theme names

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import fields
from typing import Any

from histview_core.diff import DEFAULT_MAX_DIFF_LINES
from histview_core.graph import DEFAULT_MAX_COMMITS
from histview_core.models import DEFAULT_SHORT_HASH_LENGTH
from histview_core.theme import DEFAULT_THEME
from histview_core.theme import THEME_NAMES

logger = logging.getLogger(__name__)


DEFAULT_PAGE_SIZE = 20
MAX_SHORT_HASH_LENGTH = 40


# ---- Viewer Config ------------------------------------------------------------------------------------------


@dataclass
class ViewerConfig:
    """Settings of one viewing session.

    Attributes:
        theme: Name of the active theme.
        max_commits: Bound on the commits fed to the lane builder.
        max_diff_lines: Per-file bound on tokenized diff lines.
        short_hash_length: Length of displayed hash prefixes.
        page_size: Rows or lines visible at once.
        show_relative_time: Show relative dates in the commit list.
    """

    theme: str = DEFAULT_THEME
    max_commits: int = DEFAULT_MAX_COMMITS
    max_diff_lines: int = DEFAULT_MAX_DIFF_LINES
    short_hash_length: int = DEFAULT_SHORT_HASH_LENGTH
    page_size: int = DEFAULT_PAGE_SIZE
    show_relative_time: bool = True

    def validate(
            self,
    ) -> ViewerConfig:
        """Check every value.

        Returns:
            The config itself, for chaining.

        Raises:
            ValueError: If the theme is unknown or a bound is not positive.
        """
        if self.theme not in THEME_NAMES:
            msg = f"Unknown theme '{self.theme}'. Valid themes: {', '.join(THEME_NAMES)}"
            raise ValueError(msg)
        for name in ("max_commits", "max_diff_lines", "page_size"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                msg = f"{name} must be a positive integer, got {value!r}"
                raise ValueError(msg)
        length = self.short_hash_length
        if not isinstance(length, int) or isinstance(length, bool) or not 4 <= length <= MAX_SHORT_HASH_LENGTH:
            msg = f"short_hash_length must be between 4 and {MAX_SHORT_HASH_LENGTH}, got {length!r}"
            raise ValueError(msg)
        return self

    def to_dict(
            self,
    ) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization.

        Returns:
            Dictionary representation.
        """
        return {f.name: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(
            cls,
            data: dict[str, Any],
    ) -> ViewerConfig:
        """Create config from dictionary.

        Unknown keys are ignored. Values that fail validation fall back to
        their defaults and are logged.

        Args:
            data: Dictionary with config fields.

        Returns:
            Valid ViewerConfig instance.
        """
        config = cls()
        for f in fields(cls):
            if f.name not in data:
                continue
            default = getattr(config, f.name)
            setattr(config, f.name, data[f.name])
            try:
                config.validate()
            except ValueError as config_error:
                logger.warning(f"Ignoring config value: {config_error}")
                setattr(config, f.name, default)
        return config

"""histview Core Library.

Commit-history visualization engine: turns a reverse-chronological commit
list into a lane-assigned graph with typed glyphs, and raw diff text into
theme-aware, syntax-highlighted spans.

Execution Context:
    Library package - imported by the CLI and other front ends

Dependencies:
    - rich: Styles and Text for render descriptions

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

from histview_core.classify import classify_commit
from histview_core.classify import resolve_glyph
from histview_core.config import ViewerConfig
from histview_core.diff import diff_stats
from histview_core.diff import parse_diff
from histview_core.graph import CommitGraph
from histview_core.graph import build_graph
from histview_core.highlight import tokenize_diff
from histview_core.languages import detect_language
from histview_core.log import parse_log
from histview_core.models import Commit
from histview_core.models import CommitNode
from histview_core.models import CommitType
from histview_core.models import GitRef
from histview_core.models import RefType
from histview_core.render import DiffView
from histview_core.render import HistoryView
from histview_core.render import compose_diff_lines
from histview_core.render import compose_rows
from histview_core.theme import THEME_NAMES
from histview_core.theme import get_theme

__version__ = "0.1.0"

__all__ = [
    "THEME_NAMES",
    "Commit",
    "CommitGraph",
    "CommitNode",
    "CommitType",
    "DiffView",
    "GitRef",
    "HistoryView",
    "RefType",
    "ViewerConfig",
    "__version__",
    "build_graph",
    "classify_commit",
    "compose_diff_lines",
    "compose_rows",
    "detect_language",
    "diff_stats",
    "get_theme",
    "parse_diff",
    "parse_log",
    "resolve_glyph",
    "tokenize_diff",
]

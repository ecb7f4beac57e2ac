"""Commit classification and glyph dispatch.

Labels a single commit with exactly one CommitType and resolves the glyph
drawn for a row from the closed variant (type, branch point, detached).

Execution Context:
    Library module - imported by the graph builder and render composer

Dependencies:
    - re: Message marker matching

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import re

from histview_core.models import Commit
from histview_core.models import CommitType
from histview_core.models import RefType


# ---- Message Markers ----------------------------------------------------------------------------------------


REVERT_PATTERNS = (
    re.compile(r'^Revert\s+"'),
    re.compile(r"^revert(\([^)]*\))?!?:", re.IGNORECASE),
    re.compile(r"^This reverts commit [0-9a-f]{4,40}", re.MULTILINE),
)

SQUASH_PATTERNS = (
    re.compile(r"^squash!\s"),
    re.compile(r"^Squashed commit", re.IGNORECASE),
    re.compile(r"^squash(\([^)]*\))?:", re.IGNORECASE),
)


# ---- Glyph Table --------------------------------------------------------------------------------------------


HOLLOW_GLYPH = "○"
FALLBACK_GLYPH = "●"

# Keyed by (commit type, branch point). Detached rows use HOLLOW_GLYPH.
GLYPHS: dict[tuple[CommitType, bool], str] = {
    (CommitType.INITIAL, False): "◉",
    (CommitType.INITIAL, True): "◉",
    (CommitType.MERGE, False): "◆",
    (CommitType.MERGE, True): "◆",
    (CommitType.TAG, False): "◈",
    (CommitType.TAG, True): "◈",
    (CommitType.REVERT, False): "⊘",
    (CommitType.REVERT, True): "⊘",
    (CommitType.SQUASH, False): "⊕",
    (CommitType.SQUASH, True): "⊕",
    (CommitType.REGULAR, False): "●",
    (CommitType.REGULAR, True): "◐",
    (CommitType.BRANCH, False): "◐",
    (CommitType.BRANCH, True): "◐",
}


# ---- Classification -----------------------------------------------------------------------------------------


def _matches_any(
        patterns: tuple[re.Pattern[str], ...],
        message: str,
) -> bool:
    return any(pattern.search(message) for pattern in patterns)


def is_revert_message(
        message: str,
) -> bool:
    """Check whether a commit message carries a revert marker."""
    return _matches_any(REVERT_PATTERNS, message.lstrip())


def is_squash_message(
        message: str,
) -> bool:
    """Check whether a commit message carries a squash marker."""
    return _matches_any(SQUASH_PATTERNS, message.lstrip())


def classify_commit(
        commit: Commit,
) -> CommitType:
    """Label a commit with exactly one type.

    First match wins: no parents, several parents, tag reference, revert
    marker, squash marker. Everything else is REGULAR. The result depends
    only on the parent count, the references and the message.

    Args:
        commit: Commit record to classify.

    Returns:
        CommitType of the commit (never BRANCH).
    """
    parent_count = len(commit.parents)
    if parent_count == 0:
        return CommitType.INITIAL
    if parent_count >= 2:
        return CommitType.MERGE
    if any(ref.ref_type is RefType.TAG for ref in commit.refs):
        return CommitType.TAG
    message = commit.message or ""
    if is_revert_message(message):
        return CommitType.REVERT
    if is_squash_message(message):
        return CommitType.SQUASH
    return CommitType.REGULAR


def display_type(
        commit_type: CommitType,
        is_branch_point: bool,
) -> CommitType:
    """Apply the branch-point overlay to a classification.

    Only REGULAR commits turn into BRANCH; dedicated types keep their label.
    """
    if is_branch_point and commit_type is CommitType.REGULAR:
        return CommitType.BRANCH
    return commit_type


def resolve_glyph(
        commit_type: CommitType,
        is_branch_point: bool = False,
        is_detached: bool = False,
) -> str:
    """Resolve the glyph for a row.

    Precedence: detached, then the commit type, then the branch-point
    overlay (which only affects REGULAR commits).

    Args:
        commit_type: Classification label.
        is_branch_point: Branch-point flag from the lane builder.
        is_detached: Whether the commit is unreachable from any tip.

    Returns:
        Single glyph character.
    """
    if is_detached:
        return HOLLOW_GLYPH
    return GLYPHS.get((commit_type, is_branch_point), FALLBACK_GLYPH)

"""Data models for the histview visualization engine.

Defines the commit records consumed from the commit source, the derived
graph nodes produced by the lane builder, and the diff structures produced
by the tokenizer.

Execution Context:
    Library module - imported by every other histview_core module

Dependencies:
    - dataclasses: Data class decorators
    - enum: Closed label sets

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from enum import Enum
from typing import Any


DEFAULT_SHORT_HASH_LENGTH = 7
LANE_PALETTE_SIZE = 8


# ---- Enumerations -------------------------------------------------------------------------------------------


class RefType(str, Enum):
    """Kind of reference decorating a commit."""

    HEAD = "head"
    BRANCH = "branch"
    TAG = "tag"
    REMOTE = "remote"


class CommitType(str, Enum):
    """Classification label of a commit.

    BRANCH is never produced by the classifier itself; it names the glyph
    variant used when a regular commit is flagged as a branch point.
    """

    INITIAL = "initial"
    MERGE = "merge"
    TAG = "tag"
    REVERT = "revert"
    SQUASH = "squash"
    BRANCH = "branch"
    REGULAR = "regular"


class ConnectorKind(str, Enum):
    """Shape of a connector drawn in a graph row."""

    STRAIGHT = "straight"
    MERGE_IN = "merge-in"
    BRANCH_OUT = "branch-out"
    CROSSING = "crossing"


class TokenClass(str, Enum):
    """Semantic category of a span of diff text."""

    KEYWORD = "keyword"
    TYPE = "type"
    STRING = "string"
    COMMENT = "comment"
    NUMBER = "number"
    OPERATOR = "operator"
    IDENTIFIER = "identifier"
    PLAIN = "plain"
    DIFF_ADDED = "diff-added"
    DIFF_REMOVED = "diff-removed"
    DIFF_CONTEXT = "diff-context"
    DIFF_HEADER = "diff-header"


class LineKind(str, Enum):
    """Role of a line inside unified diff text."""

    ADDED = "added"
    REMOVED = "removed"
    CONTEXT = "context"
    HEADER = "header"


# ---- Commit Records -----------------------------------------------------------------------------------------


@dataclass(frozen=True)
class GitRef:
    """Reference pointing at a commit.

    Attributes:
        name: Short reference name (e.g., 'main', 'v1.0', 'origin/main').
        ref_type: Kind of reference.
    """

    name: str
    ref_type: RefType


@dataclass(frozen=True)
class Commit:
    """Commit record as delivered by the commit source.

    Attributes:
        hash: Full commit hash.
        parents: Ordered parent hashes (first parent first).
        message: Full commit message.
        author: Author name.
        timestamp: Author date (timezone aware).
        refs: References decorating this commit.
        email: Author email.
        short_hash: Fixed-length hash prefix; derived when omitted.
    """

    hash: str
    parents: tuple[str, ...] = ()
    message: str = ""
    author: str = ""
    timestamp: datetime | None = None
    refs: tuple[GitRef, ...] = ()
    email: str = ""
    short_hash: str = ""

    def __post_init__(
            self,
    ) -> None:
        # Lists are accepted for convenience but stored as tuples.
        object.__setattr__(self, "parents", tuple(self.parents))
        object.__setattr__(self, "refs", tuple(self.refs))
        if not self.short_hash:
            object.__setattr__(self, "short_hash", self.hash[:DEFAULT_SHORT_HASH_LENGTH])

    @property
    def summary(
            self,
    ) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0].strip()

    def ref_names(
            self,
            *ref_types: RefType,
    ) -> list[str]:
        """Get names of references, optionally filtered by type.

        Args:
            *ref_types: Reference types to keep (all when omitted).

        Returns:
            Reference names in decoration order.
        """
        return [r.name for r in self.refs if not ref_types or r.ref_type in ref_types]

    def to_dict(
            self,
    ) -> dict[str, Any]:
        """Convert commit to dictionary for JSON serialization.

        Returns:
            Dictionary representation of the commit.
        """
        return {
            "hash": self.hash,
            "short_hash": self.short_hash,
            "parents": list(self.parents),
            "message": self.message,
            "author": self.author,
            "email": self.email,
            "timestamp": self.timestamp.isoformat() if self.timestamp else None,
            "refs": [{"name": r.name, "ref_type": r.ref_type.value} for r in self.refs],
        }

    @classmethod
    def from_dict(
            cls,
            data: dict[str, Any],
    ) -> Commit:
        """Create commit from dictionary.

        Args:
            data: Dictionary with commit fields.

        Returns:
            Commit instance.
        """
        timestamp = data.get("timestamp")
        return cls(
            hash=data["hash"],
            short_hash=data.get("short_hash", ""),
            parents=tuple(data.get("parents", ())),
            message=data.get("message", ""),
            author=data.get("author", ""),
            email=data.get("email", ""),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else None,
            refs=tuple(
                GitRef(name=r["name"], ref_type=RefType(r["ref_type"]))
                for r in data.get("refs", ())
            ),
        )


# ---- Graph Structures ---------------------------------------------------------------------------------------


@dataclass(frozen=True)
class Connector:
    """Connector drawn in one graph row.

    Attributes:
        kind: Connector shape.
        from_lane: Lane the connector starts at. Branch-out connectors
            start at the commit lane, merge-in connectors at the lane of
            the merged parent.
        to_lane: Lane the connector ends at (the commit lane for merge-in).
    """

    kind: ConnectorKind
    from_lane: int
    to_lane: int


@dataclass
class Lane:
    """Vertical track in the graph.

    Attributes:
        index: Column index, contiguous from 0.
        expected: Hash this lane expects next, None when free.
    """

    index: int
    expected: str | None = None

    @property
    def active(
            self,
    ) -> bool:
        """Whether the lane currently waits for a commit."""
        return self.expected is not None


@dataclass
class CommitNode:
    """Commit wrapped with the attributes derived by the build pass.

    Attributes:
        commit: Underlying commit record.
        commit_type: Classification label.
        row: Row index in the graph (0 is newest).
        lane: Lane index of the commit glyph.
        connectors: Connectors drawn in this row.
        lanes_above: Lanes active when entering the row.
        lanes_below: Lanes active when leaving the row.
        width: Number of lane columns open at this row.
        is_branch_point: Parent of two or more commits in the set.
        is_detached: Unreachable from any branch tip or HEAD.
        color_index: Lane-derived palette index.
    """

    commit: Commit
    commit_type: CommitType = CommitType.REGULAR
    row: int = 0
    lane: int = 0
    connectors: list[Connector] = field(default_factory=list)
    lanes_above: frozenset[int] = frozenset()
    lanes_below: frozenset[int] = frozenset()
    width: int = 1
    is_branch_point: bool = False
    is_detached: bool = False
    color_index: int = 0

    @property
    def hash(
            self,
    ) -> str:
        """Full hash of the wrapped commit."""
        return self.commit.hash

    def connectors_of(
            self,
            kind: ConnectorKind,
    ) -> list[Connector]:
        """Get this row's connectors of one kind."""
        return [c for c in self.connectors if c.kind is kind]


@dataclass(frozen=True)
class TruncationNotice:
    """Input exceeded a configured bound and was cut.

    Attributes:
        subject: What was truncated ('commits' or 'diff lines').
        limit: Configured bound.
        total: Number of items seen before truncation.
    """

    subject: str
    limit: int
    total: int

    @property
    def message(
            self,
    ) -> str:
        """Human readable notice for the display layer."""
        return f"Showing first {self.limit} of {self.total} {self.subject}"


# ---- Diff Structures ----------------------------------------------------------------------------------------


@dataclass(frozen=True)
class Span:
    """Run of text tagged with one token class."""

    text: str
    token: TokenClass


@dataclass
class DiffLine:
    """One line of unified diff text with its classified spans.

    Attributes:
        kind: Role of the line in the diff.
        text: Raw line text including the diff prefix.
        spans: Ordered, non-overlapping spans covering ``text``.
        old_number: Line number in the old file, if any.
        new_number: Line number in the new file, if any.
    """

    kind: LineKind
    text: str
    spans: list[Span] = field(default_factory=list)
    old_number: int | None = None
    new_number: int | None = None


@dataclass
class DiffHunk:
    """Contiguous region of changes inside one file.

    Attributes:
        header: The ``@@ ... @@`` line.
        language: Language tag of the owning file.
        old_start: First line in the old file.
        old_count: Number of old lines covered.
        new_start: First line in the new file.
        new_count: Number of new lines covered.
        lines: Lines of the hunk, header excluded.
    """

    header: str
    language: str
    old_start: int = 0
    old_count: int = 0
    new_start: int = 0
    new_count: int = 0
    lines: list[DiffLine] = field(default_factory=list)


@dataclass
class DiffFile:
    """Diff of a single file.

    Attributes:
        path: Path of the file (new path for renames).
        language: Language tag derived from the path.
        lines: Every line of the file's diff, headers included.
        hunks: Hunks parsed from the lines.
        truncation: Set when the file exceeded the line bound.
    """

    path: str
    language: str
    lines: list[DiffLine] = field(default_factory=list)
    hunks: list[DiffHunk] = field(default_factory=list)
    truncation: TruncationNotice | None = None

    @property
    def additions(
            self,
    ) -> int:
        """Count added lines."""
        return sum(1 for line in self.lines if line.kind is LineKind.ADDED)

    @property
    def deletions(
            self,
    ) -> int:
        """Count removed lines."""
        return sum(1 for line in self.lines if line.kind is LineKind.REMOVED)

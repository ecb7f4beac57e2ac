"""Commit graph lane builder.

Walks a newest-first commit sequence exactly once and assigns every commit
a lane, the connectors drawn in its row, the branch-point and detached
flags, and a lane-derived color index.

Execution Context:
    Library module - called once per fetched history window

Dependencies:
    - logging: Reports truncation and palette overflow

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from dataclasses import field
from typing import Iterable
from typing import Iterator
from typing import Sequence

from histview_core.classify import classify_commit
from histview_core.models import LANE_PALETTE_SIZE
from histview_core.models import Commit
from histview_core.models import CommitNode
from histview_core.models import Connector
from histview_core.models import ConnectorKind
from histview_core.models import Lane
from histview_core.models import RefType
from histview_core.models import TruncationNotice

logger = logging.getLogger(__name__)


# ---- Configuration Constants --------------------------------------------------------------------------------


DEFAULT_MAX_COMMITS = 100

# Refs that make a commit a tip for reachability purposes. Tags do not.
TIP_REF_TYPES = frozenset({RefType.HEAD, RefType.BRANCH, RefType.REMOTE})


# ---- Lane Allocation ----------------------------------------------------------------------------------------


class LaneAllocator:
    """Lane table scoped to a single build pass.

    Maps each expected parent hash to the lanes waiting for it and hands
    out the lowest free lane index on request.
    """

    def __init__(
            self,
    ) -> None:
        self.lanes: list[Lane] = []
        self._waiting: dict[str, list[int]] = {}
        self.peak = 0

    def active(
            self,
    ) -> frozenset[int]:
        """Indices of lanes currently waiting for a commit."""
        return frozenset(lane.index for lane in self.lanes if lane.active)

    def expecting(
            self,
            commit_hash: str,
    ) -> list[int]:
        """Lanes waiting for ``commit_hash``, lowest first."""
        return sorted(self._waiting.get(commit_hash, ()))

    def claim(
            self,
            exclude: Iterable[int] = (),
    ) -> int:
        """Return the lowest free lane index, growing the table if needed.

        Args:
            exclude: Free lanes that must not be handed out.

        Returns:
            Lane index. The lane stays free until ``expect`` is called.
        """
        skipped = set(exclude)
        for lane in self.lanes:
            if not lane.active and lane.index not in skipped:
                return lane.index
        self.lanes.append(Lane(index=len(self.lanes)))
        return len(self.lanes) - 1

    def expect(
            self,
            index: int,
            commit_hash: str,
    ) -> None:
        """Make lane ``index`` wait for ``commit_hash``."""
        lane = self.lanes[index]
        if lane.active:
            self.release(index)
        lane.expected = commit_hash
        self._waiting.setdefault(commit_hash, []).append(index)
        self.peak = max(self.peak, len(self.active()))

    def release(
            self,
            index: int,
    ) -> None:
        """Free lane ``index``."""
        lane = self.lanes[index]
        if lane.expected is None:
            return
        waiting = self._waiting.get(lane.expected, [])
        if index in waiting:
            waiting.remove(index)
        if not waiting:
            self._waiting.pop(lane.expected, None)
        lane.expected = None


# ---- Graph Result -------------------------------------------------------------------------------------------


@dataclass
class CommitGraph:
    """Result of one build pass.

    Attributes:
        nodes: One node per commit, newest first.
        lane_count: Number of distinct lane indices allocated.
        peak_lanes: Largest number of lanes open at once.
        palette_size: Palette size used for color indices.
        truncation: Set when the input exceeded the commit bound.
    """

    nodes: list[CommitNode] = field(default_factory=list)
    lane_count: int = 0
    peak_lanes: int = 0
    palette_size: int = LANE_PALETTE_SIZE
    truncation: TruncationNotice | None = None

    def __len__(
            self,
    ) -> int:
        return len(self.nodes)

    def __iter__(
            self,
    ) -> Iterator[CommitNode]:
        return iter(self.nodes)

    def __getitem__(
            self,
            row: int,
    ) -> CommitNode:
        return self.nodes[row]

    def window(
            self,
            start: int,
            count: int,
    ) -> list[CommitNode]:
        """Nodes of the visible row window."""
        start = max(start, 0)
        return self.nodes[start:start + max(count, 0)]

    def find(
            self,
            commit_hash: str,
    ) -> CommitNode | None:
        """Look up a node by full hash or unique prefix."""
        for node in self.nodes:
            if node.hash == commit_hash:
                return node
        matches = [node for node in self.nodes if node.hash.startswith(commit_hash)]
        return matches[0] if len(matches) == 1 else None

    def lane_assignments(
            self,
    ) -> list[int]:
        """Lane index per row."""
        return [node.lane for node in self.nodes]


# ---- Helpers ------------------------------------------------------------------------------------------------


def _dedupe(
        commits: Sequence[Commit],
) -> list[Commit]:
    seen: set[str] = set()
    unique = []
    for commit in commits:
        if commit.hash in seen:
            logger.debug(f"Skipping duplicate commit {commit.short_hash}")
            continue
        seen.add(commit.hash)
        unique.append(commit)
    return unique


def find_detached(
        commits: Sequence[Commit],
) -> set[str]:
    """Find commits unreachable from any branch tip or HEAD.

    Reachability follows parent links inside the given set only. When no
    commit carries a HEAD, branch or remote reference the window holds no
    tips at all and nothing is reported.

    Args:
        commits: Commits of the window.

    Returns:
        Hashes of detached commits.
    """
    by_hash = {commit.hash: commit for commit in commits}
    tips = [
        commit.hash for commit in commits
        if any(ref.ref_type in TIP_REF_TYPES for ref in commit.refs)
    ]
    if not tips:
        return set()

    reachable: set[str] = set(tips)
    queue = deque(tips)
    while queue:
        for parent in by_hash[queue.popleft()].parents:
            if parent in by_hash and parent not in reachable:
                reachable.add(parent)
                queue.append(parent)
    return set(by_hash) - reachable


def _row_connectors(
        lane: int,
        above: frozenset[int],
        below: frozenset[int],
        branch_lanes: list[int],
        merge_lanes: list[int],
) -> list[Connector]:
    passing = sorted((above & below) - {lane})
    connectors = [Connector(ConnectorKind.STRAIGHT, index, index) for index in passing]
    if lane in below:
        connectors.append(Connector(ConnectorKind.STRAIGHT, lane, lane))

    horizontal = [Connector(ConnectorKind.BRANCH_OUT, lane, index) for index in branch_lanes]
    horizontal += [Connector(ConnectorKind.MERGE_IN, index, lane) for index in merge_lanes]
    connectors.extend(horizontal)

    crossed: set[int] = set()
    for connector in horizontal:
        low, high = sorted((connector.from_lane, connector.to_lane))
        crossed.update(index for index in passing if low < index < high)
    connectors.extend(Connector(ConnectorKind.CROSSING, index, index) for index in sorted(crossed))
    return connectors


# ---- Build Pass ---------------------------------------------------------------------------------------------


def build_graph(
        commits: Sequence[Commit],
        max_commits: int = DEFAULT_MAX_COMMITS,
        palette_size: int = LANE_PALETTE_SIZE,
) -> CommitGraph:
    """Assign lanes and connectors to a newest-first commit sequence.

    Each commit reuses the lowest lane expecting it, or takes the lowest
    free lane. Its first parent becomes the new expectation of that lane and
    every further parent opens a new lane joined by a merge-in connector.
    A commit expected by several lanes is a branch point; the extra lanes
    end at its row with branch-out connectors. Parents outside the walked
    set close the lane without a connector below.

    Args:
        commits: Commits ordered children before parents (newest first).
        max_commits: Bound on the number of rows built.
        palette_size: Number of lane colors; color indices wrap around it.

    Returns:
        CommitGraph with one node per commit.
    """
    graph = CommitGraph(palette_size=palette_size)

    window = _dedupe(commits)
    if len(window) > max_commits:
        graph.truncation = TruncationNotice("commits", max_commits, len(window))
        logger.info(graph.truncation.message)
        window = window[:max_commits]

    known = {commit.hash for commit in window}
    detached = find_detached(window)
    processed: set[str] = set()
    allocator = LaneAllocator()

    for row, commit in enumerate(window):
        above = allocator.active()
        expecting = allocator.expecting(commit.hash)
        lane = expecting[0] if expecting else allocator.claim()
        branch_lanes = expecting[1:]
        for index in expecting:
            allocator.release(index)

        # Parents already walked or outside the window can never be satisfied.
        parents = [
            parent for parent in dict.fromkeys(commit.parents)
            if parent in known and parent not in processed and parent != commit.hash
        ]
        merge_lanes = []
        if parents:
            allocator.expect(lane, parents[0])
            for parent in parents[1:]:
                index = allocator.claim(exclude=[*branch_lanes, lane])
                allocator.expect(index, parent)
                merge_lanes.append(index)
        processed.add(commit.hash)

        below = allocator.active()
        graph.nodes.append(CommitNode(
            commit=commit,
            commit_type=classify_commit(commit),
            row=row,
            lane=lane,
            connectors=_row_connectors(lane, above, below, branch_lanes, merge_lanes),
            lanes_above=above,
            lanes_below=below,
            width=max(above | below | {lane}) + 1,
            is_branch_point=len(expecting) > 1,
            is_detached=commit.hash in detached,
            color_index=lane % palette_size,
        ))

    graph.lane_count = len(allocator.lanes)
    graph.peak_lanes = max(allocator.peak, 1 if graph.nodes else 0)
    if graph.lane_count > palette_size:
        logger.warning(
            f"{graph.lane_count} lanes exceed the {palette_size}-color palette; "
            f"lane colors wrap around"
        )
    return graph

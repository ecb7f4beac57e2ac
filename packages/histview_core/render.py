"""Render composer.

Assembles per-row descriptions of the commit list and per-line
descriptions of a diff for the display layer. Descriptions carry text and
resolved colors only; converting them to rich Text is the last step and
drawing is left to the caller.

Execution Context:
    Library module - used by the CLI and any interactive front end

Dependencies:
    - rich: Text and Style for the display form of descriptions

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timezone
from typing import Sequence

from rich.style import Style
from rich.text import Text

from histview_core.classify import display_type
from histview_core.classify import resolve_glyph
from histview_core.config import ViewerConfig
from histview_core.diff import DiffDocument
from histview_core.diff import DiffStats
from histview_core.diff import diff_stats
from histview_core.diff import parse_diff
from histview_core.graph import CommitGraph
from histview_core.graph import build_graph
from histview_core.models import Commit
from histview_core.models import CommitNode
from histview_core.models import CommitType
from histview_core.models import ConnectorKind
from histview_core.models import DiffLine
from histview_core.models import LANE_PALETTE_SIZE
from histview_core.models import LineKind
from histview_core.models import RefType
from histview_core.models import TokenClass
from histview_core.theme import BOLD_TOKENS
from histview_core.theme import ITALIC_TOKENS
from histview_core.theme import Theme
from histview_core.theme import get_theme


# ---- Graph Characters ---------------------------------------------------------------------------------------


VERTICAL = "│"
HORIZONTAL = "─"
CROSSING = "┼"
MERGE_RIGHT = "╮"   # merged lane to the right of the commit, continuing down
MERGE_LEFT = "╭"
BRANCH_RIGHT = "╯"  # sibling lane to the right of the commit, ending here
BRANCH_LEFT = "╰"

LABEL_REF_TYPES = (RefType.BRANCH, RefType.TAG)


# ---- Relative Time ------------------------------------------------------------------------------------------


def format_relative_time(
        timestamp: datetime | None,
        now: datetime | None = None,
) -> str:
    """Format a timestamp relative to ``now``.

    Args:
        timestamp: Timezone aware datetime (naive values are taken as UTC).
        now: Reference time; defaults to the current UTC time.

    Returns:
        String like 'just now', '5m ago', '3h ago', '2d ago', '1w ago',
        '4mo ago' or '2y ago'. Empty string when no timestamp is known.
    """
    if timestamp is None:
        return ""
    now = now or datetime.now(timezone.utc)
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = int((now - timestamp).total_seconds())
    if seconds < 60:
        return "just now"
    minutes = seconds // 60
    if minutes < 60:
        return f"{minutes}m ago"
    hours = minutes // 60
    if hours < 24:
        return f"{hours}h ago"
    days = hours // 24
    if days < 7:
        return f"{days}d ago"
    if days < 30:
        return f"{days // 7}w ago"
    if days < 365:
        return f"{days // 30}mo ago"
    return f"{days // 365}y ago"


# ---- Descriptions -------------------------------------------------------------------------------------------


@dataclass(frozen=True)
class GraphCell:
    """One character of the graph column."""

    char: str
    color: str | None = None


@dataclass(frozen=True)
class StyledSpan:
    """Run of text with its resolved color."""

    text: str
    color: str
    token: TokenClass = TokenClass.PLAIN

    @property
    def style(
            self,
    ) -> Style:
        return Style(
            color=self.color,
            bold=self.token in BOLD_TOKENS,
            italic=self.token in ITALIC_TOKENS,
        )


@dataclass
class RowRender:
    """Render description of one commit row.

    Attributes:
        row: Row index in the graph.
        hash: Full commit hash.
        short_hash: Displayed hash prefix.
        cells: Graph column, two characters per lane.
        glyph: Commit glyph drawn in the commit lane.
        commit_type: Type after the branch-point overlay.
        summary: First line of the message.
        author: Author name.
        relative_time: Relative author date.
        labels: Local branch and tag names.
        selected: Whether the cursor is on this row.
        colors: Resolved UI colors keyed by element name.
    """

    row: int
    hash: str
    short_hash: str
    cells: list[GraphCell]
    glyph: str
    commit_type: CommitType
    summary: str
    author: str
    relative_time: str
    labels: list[str] = field(default_factory=list)
    selected: bool = False
    colors: dict[str, str] = field(default_factory=dict)

    @property
    def graph(
            self,
    ) -> str:
        """Graph column as plain text."""
        return "".join(cell.char for cell in self.cells)


@dataclass
class LineRender:
    """Render description of one diff line.

    Attributes:
        index: Line index in the displayed document.
        kind: Role of the line.
        gutter: Old and new line numbers, padded.
        gutter_color: Color of the gutter.
        spans: Text spans with resolved colors.
    """

    index: int
    kind: LineKind
    gutter: str
    gutter_color: str
    spans: list[StyledSpan] = field(default_factory=list)

    @property
    def text(
            self,
    ) -> str:
        """Line text without the gutter."""
        return "".join(span.text for span in self.spans)


# ---- Row Composition ----------------------------------------------------------------------------------------


def _graph_cells(
        node: CommitNode,
        theme: Theme,
        glyph: str,
        width: int,
        palette_size: int = LANE_PALETTE_SIZE,
) -> list[GraphCell]:
    cells = [GraphCell(" ")] * (width * 2)

    def put(position: int, char: str, lane: int) -> None:
        cells[position] = GraphCell(char, theme.lane_color(lane % palette_size))

    # Horizontals first so lane columns drawn later take precedence.
    corners = []
    for connector in node.connectors:
        if connector.kind is ConnectorKind.BRANCH_OUT:
            other = connector.to_lane
            corners.append((other, BRANCH_RIGHT if other > node.lane else BRANCH_LEFT))
        elif connector.kind is ConnectorKind.MERGE_IN:
            other = connector.from_lane
            corners.append((other, MERGE_RIGHT if other > node.lane else MERGE_LEFT))
        else:
            continue
        low, high = sorted((node.lane, other))
        for position in range(low * 2 + 1, high * 2):
            put(position, HORIZONTAL, other)

    for connector in node.connectors_of(ConnectorKind.STRAIGHT):
        put(connector.from_lane * 2, VERTICAL, connector.from_lane)
    for connector in node.connectors_of(ConnectorKind.CROSSING):
        put(connector.from_lane * 2, CROSSING, connector.from_lane)
    for lane, char in corners:
        put(lane * 2, char, lane)

    glyph_color = theme.detached if node.is_detached else theme.lane_color(node.color_index)
    cells[node.lane * 2] = GraphCell(glyph, glyph_color)
    return cells


def compose_row(
        node: CommitNode,
        theme: Theme,
        graph_width: int,
        selected: bool = False,
        now: datetime | None = None,
        show_relative_time: bool = True,
        palette_size: int = LANE_PALETTE_SIZE,
) -> RowRender:
    """Compose the description of a single row.

    Args:
        node: Graph node of the row.
        theme: Active theme.
        graph_width: Lane columns reserved for the graph.
        selected: Whether the cursor is on this row.
        now: Reference time for relative dates.
        show_relative_time: Include the relative author date.
        palette_size: Palette size the graph computed color indices with.

    Returns:
        RowRender of the node.
    """
    commit = node.commit
    glyph = resolve_glyph(node.commit_type, node.is_branch_point, node.is_detached)
    colors = {
        "hash": theme.commit_hash,
        "date": theme.commit_date,
        "author": theme.commit_author,
        "label": theme.branch_name,
        "text": theme.text,
    }
    if selected:
        colors["background"] = theme.selected_bg
    return RowRender(
        row=node.row,
        hash=commit.hash,
        short_hash=commit.short_hash,
        cells=_graph_cells(node, theme, glyph, max(graph_width, node.width), palette_size),
        glyph=glyph,
        commit_type=display_type(node.commit_type, node.is_branch_point),
        summary=commit.summary,
        author=commit.author,
        relative_time=format_relative_time(commit.timestamp, now) if show_relative_time else "",
        labels=commit.ref_names(*LABEL_REF_TYPES),
        selected=selected,
        colors=colors,
    )


def compose_rows(
        graph: CommitGraph,
        theme: Theme,
        start: int = 0,
        count: int | None = None,
        selected: int | None = None,
        now: datetime | None = None,
        show_relative_time: bool = True,
) -> list[RowRender]:
    """Compose the visible window of the commit list.

    Args:
        graph: Result of the single build pass.
        theme: Active theme.
        start: First visible row.
        count: Number of visible rows (all remaining rows when None).
        selected: Row index under the cursor.
        now: Reference time for relative dates.
        show_relative_time: Include relative author dates.

    Returns:
        One RowRender per visible row.
    """
    count = len(graph) if count is None else count
    window = graph.window(start, count)
    graph_width = max((node.width for node in window), default=0)
    return [
        compose_row(node, theme, graph_width, node.row == selected, now, show_relative_time, graph.palette_size)
        for node in window
    ]


# ---- Diff Composition ---------------------------------------------------------------------------------------


def _number(
        value: int | None,
) -> str:
    return "" if value is None else str(value)


def compose_diff_lines(
        lines: Sequence[DiffLine],
        theme: Theme,
        start: int = 0,
        count: int | None = None,
) -> list[LineRender]:
    """Compose the visible window of a tokenized diff.

    Plain spans take the color of their line kind so that untouched text
    keeps the diff-prefix styling; every other span is colored by its token
    class.

    Args:
        lines: Tokenized diff lines.
        theme: Active theme.
        start: First visible line.
        count: Number of visible lines (all remaining lines when None).

    Returns:
        One LineRender per visible line.
    """
    start = max(start, 0)
    end = len(lines) if count is None else min(len(lines), start + count)
    renders = []
    for index in range(start, end):
        line = lines[index]
        spans = [
            StyledSpan(
                text=span.text,
                color=theme.line_color(line.kind) if span.token is TokenClass.PLAIN else theme.token_color(span.token),
                token=span.token,
            )
            for span in line.spans
        ]
        renders.append(LineRender(
            index=index,
            kind=line.kind,
            gutter=f"{_number(line.old_number):>5} {_number(line.new_number):>5} ",
            gutter_color=theme.line_number,
            spans=spans,
        ))
    return renders


# ---- Display Form -------------------------------------------------------------------------------------------


def row_to_text(
        row: RowRender,
) -> Text:
    """Convert a row description to rich Text."""
    text = Text()
    for cell in row.cells:
        text.append(cell.char, style=Style(color=cell.color) if cell.color else None)
    text.append(" ")
    text.append(row.short_hash, style=Style(color=row.colors.get("hash")))
    if row.labels:
        text.append(f" ({', '.join(row.labels)})", style=Style(color=row.colors.get("label"), bold=True))
    text.append(f" {row.summary}", style=Style(color=row.colors.get("text")))
    if row.relative_time:
        text.append(f" {row.relative_time}", style=Style(color=row.colors.get("date")))
    if row.author:
        text.append(f" <{row.author}>", style=Style(color=row.colors.get("author")))
    if row.selected:
        text.stylize(Style(bgcolor=row.colors["background"]))
    return text


def line_to_text(
        line: LineRender,
        gutter: bool = True,
) -> Text:
    """Convert a diff line description to rich Text."""
    text = Text()
    if gutter:
        text.append(line.gutter, style=Style(color=line.gutter_color))
    for span in line.spans:
        text.append(span.text, style=span.style)
    return text


# ---- Views --------------------------------------------------------------------------------------------------


class HistoryView:
    """Commit list view over one fetched window.

    The graph is built once on construction. Cursor moves recompose only
    the rows they touch, viewport shifts recompose the visible window from
    the existing build, and theme switches only re-resolve colors.
    """

    def __init__(
            self,
            commits: Sequence[Commit],
            config: ViewerConfig | None = None,
            now: datetime | None = None,
    ) -> None:
        self.config = config or ViewerConfig()
        self.theme = get_theme(self.config.theme)
        self.graph = build_graph(commits, max_commits=self.config.max_commits)
        self.height = self.config.page_size
        self.now = now
        self.offset = 0
        self.cursor = 0
        self.rows: list[RowRender] = []
        self.render()

    @property
    def selected(
            self,
    ) -> CommitNode | None:
        """Node under the cursor."""
        return self.graph[self.cursor] if len(self.graph) else None

    def _compose(
            self,
            row: int,
    ) -> RowRender:
        width = max((node.width for node in self.graph.window(self.offset, self.height)), default=0)
        return compose_row(
            self.graph[row],
            self.theme,
            width,
            selected=row == self.cursor,
            now=self.now,
            show_relative_time=self.config.show_relative_time,
            palette_size=self.graph.palette_size,
        )

    def render(
            self,
    ) -> list[RowRender]:
        """Recompose the whole visible window."""
        self.rows = compose_rows(
            self.graph,
            self.theme,
            self.offset,
            self.height,
            selected=self.cursor,
            now=self.now,
            show_relative_time=self.config.show_relative_time,
        )
        return self.rows

    def scroll(
            self,
            delta: int,
    ) -> list[RowRender]:
        """Shift the viewport by ``delta`` rows and recompose it."""
        limit = max(len(self.graph) - self.height, 0)
        self.offset = min(max(self.offset + delta, 0), limit)
        self.cursor = min(max(self.cursor, self.offset), self.offset + self.height - 1)
        self.cursor = min(self.cursor, max(len(self.graph) - 1, 0))
        return self.render()

    def move_cursor(
            self,
            delta: int,
    ) -> list[int]:
        """Move the selection cursor.

        Args:
            delta: Rows to move (negative moves up).

        Returns:
            Row indices that were recomposed.
        """
        if not len(self.graph):
            return []
        previous = self.cursor
        self.cursor = min(max(self.cursor + delta, 0), len(self.graph) - 1)
        if self.cursor == previous:
            return []
        if not self.offset <= self.cursor < self.offset + self.height:
            if self.cursor < self.offset:
                self.offset = self.cursor
            else:
                self.offset = self.cursor - self.height + 1
            self.render()
            return [row.row for row in self.rows]

        for row in (previous, self.cursor):
            self.rows[row - self.offset] = self._compose(row)
        return [previous, self.cursor]

    def set_theme(
            self,
            name: str,
    ) -> list[RowRender]:
        """Switch theme and re-resolve colors of the visible rows."""
        self.theme = get_theme(name)
        return self.render()


class DiffView:
    """Diff view over one tokenized document.

    Tokenization happens once on construction; scrolling and theme switches
    only recompose descriptions.
    """

    def __init__(
            self,
            text: str,
            config: ViewerConfig | None = None,
            path_hint: str | None = None,
    ) -> None:
        self.config = config or ViewerConfig()
        self.theme = get_theme(self.config.theme)
        self.document: DiffDocument = parse_diff(text, path_hint, self.config.max_diff_lines)
        self.lines: list[DiffLine] = [line for diff_file in self.document.files for line in diff_file.lines]
        self.stats: DiffStats = diff_stats(self.document)
        self.height = self.config.page_size
        self.offset = 0

    def render(
            self,
            all_lines: bool = False,
    ) -> list[LineRender]:
        """Compose the visible window (or every line)."""
        if all_lines:
            return compose_diff_lines(self.lines, self.theme)
        return compose_diff_lines(self.lines, self.theme, self.offset, self.height)

    def scroll(
            self,
            delta: int,
    ) -> list[LineRender]:
        """Shift the viewport by ``delta`` lines and recompose it."""
        limit = max(len(self.lines) - self.height, 0)
        self.offset = min(max(self.offset + delta, 0), limit)
        return self.render()

    def set_theme(
            self,
            name: str,
    ) -> list[LineRender]:
        """Switch theme and re-resolve colors."""
        self.theme = get_theme(name)
        return self.render()

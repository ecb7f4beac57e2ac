"""Diff tokenizer and highlighter.

Classifies each line of unified diff text by its prefix, then re-tokenizes
the line content with one small state machine parameterized by a
LanguageSpec record. The output carries semantic token classes only;
colors are resolved later by the theme.

Execution Context:
    Library module - imported by the diff parser and render composer

Dependencies:
    - logging: Reports lines that degraded to plain text

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from histview_core.languages import LanguageSpec
from histview_core.languages import get_language
from histview_core.models import DiffLine
from histview_core.models import LineKind
from histview_core.models import Span
from histview_core.models import TokenClass

logger = logging.getLogger(__name__)


# ---- Configuration Constants --------------------------------------------------------------------------------


OPERATOR_CHARS = frozenset("+-*/%=<>!&|^~?:;.,()[]{}@$\\")

FILE_HEADER_PREFIXES = (
    "diff --git ",
    "diff --cc ",
    "index ",
    "--- ",
    "+++ ",
    "new file mode",
    "deleted file mode",
    "old mode",
    "new mode",
    "similarity index",
    "dissimilarity index",
    "rename from",
    "rename to",
    "copy from",
    "copy to",
    "Binary files",
)

HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")

BASELINES = {
    LineKind.ADDED: TokenClass.DIFF_ADDED,
    LineKind.REMOVED: TokenClass.DIFF_REMOVED,
    LineKind.CONTEXT: TokenClass.DIFF_CONTEXT,
    LineKind.HEADER: TokenClass.DIFF_HEADER,
}


# ---- Lexer State --------------------------------------------------------------------------------------------


@dataclass
class LexState:
    """State threaded across the lines of one hunk.

    Attributes:
        in_block_comment: A block comment opened and not yet closed.
    """

    in_block_comment: bool = False


class _SpanBuilder:
    """Collects spans, merging neighbours that share a token class.

    Pieces of the current run are buffered and joined once the token class
    changes, so a long run costs linear time.
    """

    def __init__(
            self,
    ) -> None:
        self._spans: list[Span] = []
        self._pending: list[str] = []
        self._token: TokenClass | None = None

    def add(
            self,
            text: str,
            token: TokenClass,
    ) -> None:
        if not text:
            return
        if token is not self._token:
            self._flush()
            self._token = token
        self._pending.append(text)

    def _flush(
            self,
    ) -> None:
        if self._pending:
            self._spans.append(Span("".join(self._pending), self._token))
            self._pending = []

    @property
    def spans(
            self,
    ) -> list[Span]:
        """Finished spans; closes the current run."""
        self._flush()
        self._token = None
        return self._spans


# ---- Line Tokenizer -----------------------------------------------------------------------------------------


def _starts_with_marker(
        content: str,
        index: int,
        marker: str,
) -> bool:
    # Markers are one or two characters: the current char plus one lookahead.
    if content[index] != marker[0]:
        return False
    return len(marker) == 1 or content[index + 1:index + 2] == marker[1]


def tokenize_content(
        content: str,
        language: LanguageSpec,
        baseline: TokenClass,
        state: LexState,
) -> list[Span]:
    """Tokenize the content of one line (diff prefix excluded).

    Args:
        content: Line text without its diff prefix.
        language: Lexical record driving the state machine.
        baseline: Token class for whitespace and unmatched text.
        state: Block comment state carried between lines.

    Returns:
        Spans covering ``content`` in order.
    """
    out = _SpanBuilder()
    length = len(content)
    index = 0
    block = language.block_comment

    if state.in_block_comment and block:
        close = content.find(block[1])
        if close == -1:
            out.add(content, TokenClass.COMMENT)
            return out.spans
        index = close + len(block[1])
        out.add(content[:index], TokenClass.COMMENT)
        state.in_block_comment = False

    while index < length:
        char = content[index]

        if block and _starts_with_marker(content, index, block[0]):
            close = content.find(block[1], index + len(block[0]))
            if close == -1:
                out.add(content[index:], TokenClass.COMMENT)
                state.in_block_comment = True
                break
            end = close + len(block[1])
            out.add(content[index:end], TokenClass.COMMENT)
            index = end
            continue

        if any(_starts_with_marker(content, index, marker) for marker in language.line_comments):
            out.add(content[index:], TokenClass.COMMENT)
            break

        if char in language.string_delimiters:
            end = index + 1
            while end < length and content[end] != char:
                end += 2 if content[end] == "\\" else 1
            end = min(end + 1, length)
            out.add(content[index:end], TokenClass.STRING)
            index = end
            continue

        if char.isdigit():
            end = index + 1
            while end < length:
                current = content[end]
                if current.isalnum() or current == "_":
                    end += 1
                elif current == "." and content[end + 1:end + 2].isdigit():
                    end += 1
                else:
                    break
            out.add(content[index:end], TokenClass.NUMBER)
            index = end
            continue

        if char.isalpha() or char == "_":
            end = index + 1
            while end < length and (content[end].isalnum() or content[end] == "_"):
                end += 1
            word = content[index:end]
            if word in language.keywords:
                out.add(word, TokenClass.KEYWORD)
            elif word in language.types:
                out.add(word, TokenClass.TYPE)
            else:
                out.add(word, TokenClass.IDENTIFIER)
            index = end
            continue

        if char in OPERATOR_CHARS:
            out.add(char, TokenClass.OPERATOR)
        else:
            out.add(char, baseline)
        index += 1

    return out.spans


# ---- Diff Tokenizer -----------------------------------------------------------------------------------------


def parse_hunk_header(
        line: str,
) -> tuple[int, int, int, int] | None:
    """Parse ``@@ -a,b +c,d @@`` into (old_start, old_count, new_start, new_count).

    Returns:
        The four numbers, or None when the header is malformed.
    """
    match = HUNK_HEADER.match(line)
    if not match:
        return None
    old_start, old_count, new_start, new_count = match.groups()
    return (
        int(old_start),
        int(old_count) if old_count is not None else 1,
        int(new_start),
        int(new_count) if new_count is not None else 1,
    )


def classify_prefix(
        line: str,
) -> LineKind:
    """Classify a diff line by its prefix alone."""
    if line.startswith(FILE_HEADER_PREFIXES) or line.startswith(("@@", "\\")):
        return LineKind.HEADER
    if line.startswith("+"):
        return LineKind.ADDED
    if line.startswith("-"):
        return LineKind.REMOVED
    return LineKind.CONTEXT


def _line_spans(
        line: str,
        kind: LineKind,
        language: LanguageSpec | None,
        state: LexState,
) -> list[Span]:
    if language is None:
        return [Span(line, TokenClass.PLAIN)] if line else []
    baseline = BASELINES[kind]
    if kind is LineKind.HEADER:
        return [Span(line, baseline)] if line else []
    try:
        spans = [Span(line[:1], baseline)] if line else []
        return spans + tokenize_content(line[1:], language, baseline, state)
    except Exception as lex_error:
        logger.debug(f"Highlighting degraded to plain text: {lex_error}")
        return [Span(line, TokenClass.PLAIN)]


def tokenize_diff(
        text: str,
        language: str,
) -> list[DiffLine]:
    """Tokenize unified diff text of one file.

    Lines inside a hunk are classified strictly by the counts of the hunk
    header; outside of hunks file header lines are recognized by prefix.
    Block comment state is carried across the lines of a hunk.

    Args:
        text: Raw diff text of a single file.
        language: Language tag ('plain' disables content tokenizing).

    Returns:
        One DiffLine per input line, with spans and line numbers.
    """
    spec = get_language(language)
    state = LexState()
    lines: list[DiffLine] = []
    old_number = new_number = 0
    old_left = new_left = 0
    numbered = False
    loose = False  # inside a hunk whose header could not be parsed

    for raw in text.splitlines():
        if numbered and not raw.startswith(("@@", "diff --git ", "\\")):
            kind = {"+": LineKind.ADDED, "-": LineKind.REMOVED}.get(raw[:1], LineKind.CONTEXT)
        else:
            kind = classify_prefix(raw)
            if raw.startswith(("@@", "diff --git ")):
                loose = numbered = False
            elif loose and raw.startswith(("--- ", "+++ ")):
                kind = LineKind.REMOVED if raw.startswith("-") else LineKind.ADDED

        line = DiffLine(kind=kind, text=raw)
        if raw.startswith("@@"):
            # Hunks are not contiguous; a comment left open does not carry over.
            state.in_block_comment = False
            numbers = parse_hunk_header(raw)
            numbered = numbers is not None
            if numbers is None:
                logger.debug(f"Malformed hunk header: {raw!r}")
                loose = True
            else:
                old_number, old_left, new_number, new_left = numbers
                numbered = old_left > 0 or new_left > 0
        elif numbered and kind is not LineKind.HEADER:
            if kind is not LineKind.ADDED:
                line.old_number = old_number
                old_number += 1
                old_left = max(old_left - 1, 0)
            if kind is not LineKind.REMOVED:
                line.new_number = new_number
                new_number += 1
                new_left = max(new_left - 1, 0)
            numbered = old_left > 0 or new_left > 0

        line.spans = _line_spans(raw, kind, spec, state)
        lines.append(line)

    return lines

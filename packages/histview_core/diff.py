"""Unified diff parsing module.

Splits unified diff text (of a commit, the staged set or the working tree)
into per-file documents, infers each file's language from its path hints,
tokenizes the lines and groups them into hunks.

Execution Context:
    Library module - imported by the render composer and CLI diff command

Dependencies:
    - histview_core.highlight: Line tokenizer

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from dataclasses import field

from histview_core.highlight import parse_hunk_header
from histview_core.highlight import tokenize_diff
from histview_core.languages import detect_language
from histview_core.models import DiffFile
from histview_core.models import DiffHunk
from histview_core.models import LineKind
from histview_core.models import TruncationNotice

logger = logging.getLogger(__name__)


# ---- Configuration Constants --------------------------------------------------------------------------------


DEFAULT_MAX_DIFF_LINES = 5000
DEV_NULL = "/dev/null"


# ---- Data Classes -------------------------------------------------------------------------------------------


@dataclass
class DiffStats:
    """Line counts of a diff.

    Attributes:
        additions: Number of added lines.
        deletions: Number of removed lines.
        files_changed: Number of files in the diff.
    """

    additions: int = 0
    deletions: int = 0
    files_changed: int = 0

    @property
    def net_change(
            self,
    ) -> int:
        """Added minus removed lines."""
        return self.additions - self.deletions


@dataclass
class DiffDocument:
    """Parsed diff made of one or more files.

    Attributes:
        files: Per-file diffs in input order.
        preamble: Lines preceding the first file (e.g. commit headers).
    """

    files: list[DiffFile] = field(default_factory=list)
    preamble: list[str] = field(default_factory=list)

    @property
    def has_changes(
            self,
    ) -> bool:
        """Check if any file carries changes."""
        return any(f.additions or f.deletions for f in self.files)

    @property
    def truncations(
            self,
    ) -> list[TruncationNotice]:
        """Truncation notices of all files."""
        return [f.truncation for f in self.files if f.truncation]


# ---- Path Inference -----------------------------------------------------------------------------------------


def _strip_prefix(
        path: str,
) -> str:
    path = path.strip().strip('"')
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def infer_path(
        header_lines: list[str],
        fallback: str | None = None,
) -> str:
    """Infer the file path from the header lines of one file.

    Prefers the ``+++`` target, then the ``---`` source (for deletions),
    then the ``diff --git`` line.

    Args:
        header_lines: Lines of the file's diff up to its first hunk.
        fallback: Path hint supplied by the diff source.

    Returns:
        File path, or the fallback (empty string when none).
    """
    new_path = old_path = git_path = None
    for line in header_lines:
        if line.startswith("+++ "):
            new_path = line[4:].split("\t")[0]
        elif line.startswith("--- "):
            old_path = line[4:].split("\t")[0]
        elif line.startswith("rename to "):
            new_path = line[len("rename to "):]
        elif line.startswith("diff --git ") and " b/" in line:
            git_path = line.rsplit(" b/", 1)[1]
        elif line.startswith("@@"):
            break

    for candidate in (new_path, old_path):
        if candidate and candidate.strip() != DEV_NULL:
            return _strip_prefix(candidate)
    if git_path:
        return git_path.strip().strip('"')
    return fallback or ""


# ---- Parsing ------------------------------------------------------------------------------------------------


def _split_files(
        lines: list[str],
) -> tuple[list[str], list[list[str]]]:
    preamble: list[str] = []
    chunks: list[list[str]] = []
    for line in lines:
        if line.startswith(("diff --git ", "diff --cc ")):
            chunks.append([line])
        elif chunks:
            chunks[-1].append(line)
        else:
            preamble.append(line)

    if not chunks:
        return _split_bare_files(preamble)
    return preamble, chunks


def _split_bare_files(
        lines: list[str],
) -> tuple[list[str], list[list[str]]]:
    """Split a patch without git headers on its ``---``/``+++`` pairs.

    Hunk counts are followed so that removed and added content lines that
    look like file headers stay inside their hunk.
    """
    preamble: list[str] = []
    chunks: list[list[str]] = []
    old_left = new_left = 0
    for index, line in enumerate(lines):
        if old_left > 0 or new_left > 0:
            if line.startswith("+"):
                new_left -= 1
            elif line.startswith("-"):
                old_left -= 1
            elif not line.startswith("\\"):
                old_left -= 1
                new_left -= 1
            chunks[-1].append(line)
            continue

        if line.startswith("--- ") and lines[index + 1:index + 2] and lines[index + 1].startswith("+++ "):
            chunks.append([line])
            continue
        if line.startswith("@@"):
            numbers = parse_hunk_header(line)
            if numbers is not None:
                _, old_left, _, new_left = numbers
            if not chunks:
                chunks.append([])
        if chunks:
            chunks[-1].append(line)
        else:
            preamble.append(line)
    return preamble, chunks


def parse_file(
        lines: list[str],
        path_hint: str | None = None,
        max_lines: int = DEFAULT_MAX_DIFF_LINES,
) -> DiffFile:
    """Tokenize the diff lines of a single file.

    Args:
        lines: Raw lines belonging to one file.
        path_hint: Path to use when the headers carry none.
        max_lines: Bound on the number of lines tokenized.

    Returns:
        DiffFile with tokenized lines and hunks.
    """
    path = infer_path(lines, path_hint)
    language = detect_language(path)
    diff_file = DiffFile(path=path, language=language)

    if len(lines) > max_lines:
        diff_file.truncation = TruncationNotice("diff lines", max_lines, len(lines))
        logger.info(f"{path or 'diff'}: {diff_file.truncation.message}")
        lines = lines[:max_lines]

    diff_file.lines = tokenize_diff("\n".join(lines), language)

    hunk: DiffHunk | None = None
    for line in diff_file.lines:
        if line.kind is LineKind.HEADER and line.text.startswith("@@"):
            numbers = parse_hunk_header(line.text) or (0, 0, 0, 0)
            hunk = DiffHunk(header=line.text, language=language)
            hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count = numbers
            diff_file.hunks.append(hunk)
        elif hunk is not None:
            hunk.lines.append(line)
    return diff_file


def parse_diff(
        text: str,
        path_hint: str | None = None,
        max_lines: int = DEFAULT_MAX_DIFF_LINES,
) -> DiffDocument:
    """Parse unified diff text into per-file documents.

    Args:
        text: Raw unified diff text, possibly covering several files.
        path_hint: Path used for a single headerless file.
        max_lines: Per-file bound on the number of lines tokenized.

    Returns:
        DiffDocument with one DiffFile per file.
    """
    preamble, chunks = _split_files(text.splitlines())
    document = DiffDocument(preamble=preamble)
    for chunk in chunks:
        document.files.append(parse_file(chunk, path_hint if len(chunks) == 1 else None, max_lines))
    return document


# ---- Statistics ---------------------------------------------------------------------------------------------


def diff_stats(
        document: DiffDocument,
) -> DiffStats:
    """Count additions, deletions and changed files.

    Args:
        document: Parsed diff.

    Returns:
        DiffStats for the whole document.
    """
    return DiffStats(
        additions=sum(f.additions for f in document.files),
        deletions=sum(f.deletions for f in document.files),
        files_changed=len(document.files),
    )


def format_diff_summary(
        stats: DiffStats,
) -> str:
    """Format DiffStats as a one-line summary.

    Args:
        stats: Counts to format.

    Returns:
        Summary such as '2 file(s) changed, 10 insertion(+), 5 deletion(-)'.
    """
    if stats.files_changed == 0:
        return "No changes detected."
    counts = f"{stats.additions} insertion(+), {stats.deletions} deletion(-)"
    if stats.files_changed > 1:
        return f"{stats.files_changed} file(s) changed, {counts}"
    return counts

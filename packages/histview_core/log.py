"""Commit source parser.

Turns the output of ``git log --format=LOG_FORMAT --decorate=full`` into an
ordered, deduplicated sequence of Commit records, newest first. Running
git is left to the caller.

Execution Context:
    Library module - called by the CLI log command

Dependencies:
    - logging: Reports skipped records

Metadata:
    Version: 0.1.0
    Author: histview Team
"""
from __future__ import annotations

import logging
from datetime import datetime

from histview_core.models import DEFAULT_SHORT_HASH_LENGTH
from histview_core.models import Commit
from histview_core.models import GitRef
from histview_core.models import RefType

logger = logging.getLogger(__name__)


# ---- Record Format ------------------------------------------------------------------------------------------


FIELD_SEPARATOR = "\x1f"
RECORD_SEPARATOR = "\x1e"

# hash, parents, decorations, author, email, ISO date, subject, body
LOG_FIELDS = ("%H", "%P", "%D", "%an", "%ae", "%aI", "%s", "%b")
LOG_FORMAT = "%x1f".join(LOG_FIELDS) + "%x1e"

HEAD_POINTER = "HEAD -> "
TAG_PREFIX = "tag: "
REF_PREFIXES = (
    ("refs/heads/", RefType.BRANCH),
    ("refs/tags/", RefType.TAG),
    ("refs/remotes/", RefType.REMOTE),
)


# ---- Decorations --------------------------------------------------------------------------------------------


def _parse_ref(
        name: str,
        tagged: bool = False,
) -> GitRef | None:
    for prefix, ref_type in REF_PREFIXES:
        if name.startswith(prefix):
            return GitRef(name[len(prefix):], ref_type)
    if name.startswith("refs/"):
        logger.debug(f"Ignoring decoration {name}")
        return None
    # Short decorations carry no namespace.
    return GitRef(name, RefType.TAG if tagged else RefType.BRANCH)


def parse_decorations(
        decorations: str,
) -> list[GitRef]:
    """Parse a ``%D`` decoration string.

    Args:
        decorations: Comma separated list such as
            'HEAD -> refs/heads/main, tag: refs/tags/v1.0, refs/remotes/origin/main'.

    Returns:
        References in decoration order.
    """
    refs: list[GitRef] = []
    for item in decorations.split(","):
        item = item.strip()
        if not item:
            continue
        if item == "HEAD":
            refs.append(GitRef("HEAD", RefType.HEAD))
            continue
        if item.startswith(HEAD_POINTER):
            refs.append(GitRef("HEAD", RefType.HEAD))
            item = item[len(HEAD_POINTER):]
        tagged = item.startswith(TAG_PREFIX)
        if tagged:
            item = item[len(TAG_PREFIX):]
        ref = _parse_ref(item, tagged)
        if ref:
            refs.append(ref)
    return refs


# ---- Records ------------------------------------------------------------------------------------------------


def parse_record(
        record: str,
        short_hash_length: int = DEFAULT_SHORT_HASH_LENGTH,
) -> Commit:
    """Parse one log record.

    Args:
        record: Fields of one commit joined by FIELD_SEPARATOR.
        short_hash_length: Length of the derived short hash.

    Returns:
        Commit record.

    Raises:
        ValueError: If the record is missing fields, the hash is empty or
            the date is not ISO 8601.
    """
    parts = record.strip("\n").split(FIELD_SEPARATOR)
    if len(parts) < len(LOG_FIELDS):
        msg = f"expected {len(LOG_FIELDS)} fields, got {len(parts)}"
        raise ValueError(msg)
    commit_hash, parents, decorations, author, email, date, subject = parts[:7]
    body = FIELD_SEPARATOR.join(parts[7:]).strip()
    commit_hash = commit_hash.strip()
    if not commit_hash:
        msg = "empty commit hash"
        raise ValueError(msg)

    timestamp = datetime.fromisoformat(date.strip()) if date.strip() else None
    message = f"{subject}\n\n{body}" if body else subject
    return Commit(
        hash=commit_hash,
        parents=tuple(parents.split()),
        message=message,
        author=author,
        email=email,
        timestamp=timestamp,
        refs=tuple(parse_decorations(decorations)),
        short_hash=commit_hash[:short_hash_length],
    )


def parse_log(
        output: str,
        short_hash_length: int = DEFAULT_SHORT_HASH_LENGTH,
) -> list[Commit]:
    """Parse ``git log`` output into commits, newest first.

    Malformed records are skipped and logged; duplicate hashes keep their
    first occurrence.

    Args:
        output: Raw output of ``git log --format=LOG_FORMAT --decorate=full``.
        short_hash_length: Length of derived short hashes.

    Returns:
        List of Commit records.
    """
    commits: list[Commit] = []
    seen: set[str] = set()
    for record in output.split(RECORD_SEPARATOR):
        if not record.strip():
            continue
        try:
            commit = parse_record(record, short_hash_length)
        except ValueError as record_error:
            logger.warning(f"Skipping malformed log record: {record_error}")
            continue
        if commit.hash in seen:
            logger.debug(f"Skipping duplicate commit {commit.short_hash}")
            continue
        seen.add(commit.hash)
        commits.append(commit)
    return commits

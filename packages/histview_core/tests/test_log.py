"""Tests for git log output parsing.

Execution Context:
    Test module - run via pytest

Dependencies:
    - pytest: Test framework
    - histview_core.log: Module under test
"""
from __future__ import annotations

import logging
from datetime import timedelta

import pytest

from histview_core.log import FIELD_SEPARATOR
from histview_core.log import LOG_FORMAT
from histview_core.log import RECORD_SEPARATOR
from histview_core.log import parse_decorations
from histview_core.log import parse_log
from histview_core.log import parse_record
from histview_core.models import GitRef
from histview_core.models import RefType

HASH_A = "a" * 40
HASH_B = "b" * 40
HASH_C = "c" * 40


def record(
        commit_hash: str,
        parents: str = "",
        decorations: str = "",
        date: str = "2026-01-30T12:00:00+01:00",
        subject: str = "Subject",
        body: str = "",
) -> str:
    """Build one record the way git prints LOG_FORMAT."""
    fields = [commit_hash, parents, decorations, "Test User", "test@example.com", date, subject, body]
    return FIELD_SEPARATOR.join(fields) + RECORD_SEPARATOR + "\n"


# ---- Decoration Tests ----------------------------------------------------------------------------------------


class TestParseDecorations:
    """Tests for %D decoration parsing."""

    def test_full_decorations(self) -> None:
        """Test HEAD, branch, tag and remote references."""
        refs = parse_decorations(
            "HEAD -> refs/heads/main, tag: refs/tags/v1.0, refs/remotes/origin/main, refs/heads/dev"
        )

        assert refs == [
            GitRef("HEAD", RefType.HEAD),
            GitRef("main", RefType.BRANCH),
            GitRef("v1.0", RefType.TAG),
            GitRef("origin/main", RefType.REMOTE),
            GitRef("dev", RefType.BRANCH),
        ]

    def test_detached_head(self) -> None:
        """Test a bare HEAD decoration."""
        assert parse_decorations("HEAD") == [GitRef("HEAD", RefType.HEAD)]

    def test_short_decorations(self) -> None:
        """Test decorations printed without namespaces."""
        assert parse_decorations("HEAD -> main, tag: v2") == [
            GitRef("HEAD", RefType.HEAD),
            GitRef("main", RefType.BRANCH),
            GitRef("v2", RefType.TAG),
        ]

    def test_other_namespaces_ignored(self) -> None:
        """Test that refs outside heads, tags and remotes are dropped."""
        assert parse_decorations("refs/stash, ") == []
        assert parse_decorations("") == []


# ---- Record Tests --------------------------------------------------------------------------------------------


class TestParseRecord:
    """Tests for single records."""

    def test_fields(self) -> None:
        """Test that every field lands in the commit."""
        commit = parse_record(record(HASH_A, f"{HASH_B} {HASH_C}", "HEAD -> refs/heads/main", body="Details\n"))

        assert commit.hash == HASH_A
        assert commit.parents == (HASH_B, HASH_C)
        assert commit.author == "Test User"
        assert commit.email == "test@example.com"
        assert commit.message == "Subject\n\nDetails"
        assert commit.summary == "Subject"
        assert commit.ref_names(RefType.BRANCH) == ["main"]

    def test_date_is_timezone_aware(self) -> None:
        """Test that ISO dates keep their offset."""
        commit = parse_record(record(HASH_A))

        assert commit.timestamp.tzinfo is not None
        assert commit.timestamp.utcoffset() == timedelta(hours=1)

    def test_short_hash_length(self) -> None:
        """Test the configurable short hash length."""
        assert parse_record(record(HASH_A), short_hash_length=10).short_hash == "a" * 10

    def test_missing_fields_raise(self) -> None:
        """Test that truncated records are rejected."""
        with pytest.raises(ValueError):
            parse_record(FIELD_SEPARATOR.join([HASH_A, "", ""]))

    def test_bad_date_raises(self) -> None:
        """Test that unparseable dates are rejected."""
        with pytest.raises(ValueError):
            parse_record(record(HASH_A, date="yesterday"))


# ---- Log Tests -----------------------------------------------------------------------------------------------


class TestParseLog:
    """Tests for whole log outputs."""

    def test_order_preserved(self) -> None:
        """Test that records come back newest first as given."""
        output = record(HASH_A, HASH_B) + record(HASH_B, HASH_C) + record(HASH_C)

        assert [c.hash for c in parse_log(output)] == [HASH_A, HASH_B, HASH_C]

    def test_malformed_records_skipped(self, caplog) -> None:
        """Test that broken records are skipped and logged."""
        output = record(HASH_A) + "garbage" + RECORD_SEPARATOR + record(HASH_B, date="not a date")

        with caplog.at_level(logging.WARNING, logger="histview_core.log"):
            commits = parse_log(output)

        assert [c.hash for c in commits] == [HASH_A]
        assert caplog.text.count("Skipping malformed log record") == 2

    def test_duplicates_dropped(self) -> None:
        """Test that repeated hashes keep the first record."""
        output = record(HASH_A, subject="first") + record(HASH_A, subject="second")

        assert [c.summary for c in parse_log(output)] == ["first"]

    def test_empty_output(self) -> None:
        """Test that empty output yields no commits."""
        assert parse_log("") == []
        assert parse_log("\n") == []

    def test_format_uses_git_escapes(self) -> None:
        """Test that the format string asks git for the separators."""
        assert LOG_FORMAT.startswith("%H%x1f%P%x1f%D")
        assert LOG_FORMAT.endswith("%b%x1e")

"""Shared test configuration and fixtures for histview_core tests.

Provides:
- ``make_commit``: factory for Commit records with readable fake hashes.
- Canonical histories (linear, merge, crossing) reused across modules.
- A sample multi-file unified diff.
"""
from __future__ import annotations

from datetime import datetime
from datetime import timedelta
from datetime import timezone
from typing import Callable

import pytest

from histview_core.models import Commit
from histview_core.models import GitRef
from histview_core.models import RefType


BASE_TIME = datetime(2026, 1, 30, 12, 0, tzinfo=timezone.utc)


def fake_hash(
        name: str,
) -> str:
    """Build a 40 character hash whose prefix is readable in failures."""
    return (name.lower().encode().hex() + "0" * 40)[:40]


def make(
        name: str,
        *parents: str,
        message: str | None = None,
        refs: tuple[GitRef, ...] = (),
        age_hours: int = 0,
) -> Commit:
    """Create a commit named ``name`` whose parents are given by name."""
    return Commit(
        hash=fake_hash(name),
        parents=tuple(fake_hash(parent) for parent in parents),
        message=message if message is not None else f"Commit {name}",
        author="Test User",
        email="test@example.com",
        timestamp=BASE_TIME - timedelta(hours=age_hours),
        refs=refs,
    )


# ---- Fixtures ------------------------------------------------------------------------------------------------


@pytest.fixture
def make_commit() -> Callable[..., Commit]:
    """Factory fixture for commits referring to parents by name."""
    return make


@pytest.fixture
def now() -> datetime:
    """Fixed reference time for relative dates."""
    return BASE_TIME


@pytest.fixture
def linear_history() -> list[Commit]:
    """C3 -> C2 -> C1, newest first, with main checked out at C3."""
    return [
        make("C3", "C2", refs=(GitRef("HEAD", RefType.HEAD), GitRef("main", RefType.BRANCH))),
        make("C2", "C1", age_hours=1),
        make("C1", age_hours=2),
    ]


@pytest.fixture
def merge_history() -> list[Commit]:
    """C4 merges C3b into the line C2 -> C1; C3b branched off C2."""
    return [
        make(
            "C4", "C2", "C3b",
            message="Merge branch 'feature'",
            refs=(GitRef("HEAD", RefType.HEAD), GitRef("main", RefType.BRANCH)),
        ),
        make("C3b", "C2", age_hours=1),
        make("C2", "C1", age_hours=2, refs=(GitRef("v1.0", RefType.TAG),)),
        make("C1", age_hours=3),
    ]


@pytest.fixture
def crossing_history() -> list[Commit]:
    """Merge at B whose merged lane is drawn across the open lane of X."""
    return [
        make("A", "B", refs=(GitRef("main", RefType.BRANCH),)),
        make("X", "Y", refs=(GitRef("other", RefType.BRANCH),)),
        make("B", "C", "Z"),
        make("Y"),
        make("Z"),
        make("C"),
    ]


SAMPLE_DIFF = """\
diff --git a/src/app.py b/src/app.py
index 1111111..2222222 100644
--- a/src/app.py
+++ b/src/app.py
@@ -1,2 +1,2 @@
-x = 1
+x = 2
 y = 3
diff --git a/old.txt b/old.txt
deleted file mode 100644
index 3333333..0000000
--- a/old.txt
+++ /dev/null
@@ -1 +0,0 @@
-gone
"""


@pytest.fixture
def sample_diff() -> str:
    """Two-file diff: one modified Python file and one deleted text file."""
    return SAMPLE_DIFF

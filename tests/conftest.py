"""Shared fixtures for Ignore Committer tests."""

import pytest

from ignore_committer.models import BranchHead, Commit, RevisionRef, SourceContext
from ignore_committer.trace import RecordingTraceSink

CURRENT_SHA = "2" * 40
PREVIOUS_SHA = "1" * 40


def make_changeset(*authors: str) -> list[Commit]:
    """Build a most-recent-first changeset, one commit per author."""
    total = len(authors)
    return [
        Commit(author_email=author, commit_id=f"c{total - index}")
        for index, author in enumerate(authors)
    ]


@pytest.fixture
def changeset_of():
    """Factory building a changeset from author emails."""
    return make_changeset


@pytest.fixture
def recorder():
    """Trace sink collecting lines in memory."""
    return RecordingTraceSink()


@pytest.fixture
def head():
    return BranchHead("feature/build-strategy")


@pytest.fixture
def context(tmp_path):
    """Git source context whose owner is a temporary directory."""
    return SourceContext(source="git", owner=str(tmp_path))


@pytest.fixture
def current_revision():
    return RevisionRef.native(CURRENT_SHA)


@pytest.fixture
def previous_revision():
    return RevisionRef.native(PREVIOUS_SHA)

"""
Changeset resolution.

This module provides:
- ChangesetProvider protocol for listing commits between two revisions
- ChangesetResolver, which validates the context, normalizes revisions and
  queries the provider
- GitChangesetProvider, backed by `git log` on a local work tree
- StaticChangesetProvider, returning a fixed changeset
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Optional, Protocol

from ignore_committer.errors import ClientUnavailableError, OwnerUnavailableError
from ignore_committer.models import BranchHead, ChangeSet, Commit, RevisionRef, SourceContext
from ignore_committer.revisions import (
    RevisionResolver,
    TaggedRevisionResolver,
    normalize_revision,
)

logger = logging.getLogger(__name__)

_FULL_HASH_RE = re.compile(r"^[0-9a-fA-F]{40}$")


class ChangesetProvider(Protocol):
    """Lists the commits in (baseline, current], most recent first."""

    def list_commits(
        self,
        context: SourceContext,
        head: BranchHead,
        current: RevisionRef,
        baseline: Optional[RevisionRef],
    ) -> ChangeSet: ...


class ChangesetResolver:
    """Turns (head, current, last built) into the changeset since the last build."""

    def __init__(
        self,
        provider: ChangesetProvider,
        revision_resolver: Optional[RevisionResolver] = None,
    ) -> None:
        self.provider = provider
        self.revision_resolver = revision_resolver or TaggedRevisionResolver()

    def resolve(
        self,
        context: SourceContext,
        head: BranchHead,
        current: RevisionRef,
        last_built: Optional[RevisionRef] = None,
        last_seen: Optional[RevisionRef] = None,
    ) -> ChangeSet:
        """
        Resolve the changeset since the last build.

        Args:
            context: Source and owner used to build a client.
            head: Branch being evaluated.
            current: Current revision of the branch.
            last_built: Last built revision, None on the first build.
            last_seen: Accepted for host compatibility, not used.

        Returns:
            Commits in (last_built, current], most recent first.

        Raises:
            OwnerUnavailableError: If the context has no owner.
            ClientUnavailableError: If the provider cannot build a client.
            MalformedRevisionError: If a foreign revision is too short.
        """
        if context.owner is None:
            raise OwnerUnavailableError()

        native_current = normalize_revision(self.revision_resolver, head, current)
        native_baseline = normalize_revision(self.revision_resolver, head, last_built)

        logger.debug(
            "Listing commits on %s from %s to %s",
            head,
            native_baseline or "<root>",
            native_current,
        )
        return self.provider.list_commits(context, head, native_current, native_baseline)


class StaticChangesetProvider:
    """Provider returning a fixed changeset regardless of the range."""

    def __init__(self, commits: Optional[ChangeSet] = None) -> None:
        self.commits = list(commits or [])

    def list_commits(
        self,
        context: SourceContext,
        head: BranchHead,
        current: RevisionRef,
        baseline: Optional[RevisionRef],
    ) -> ChangeSet:
        return list(self.commits)


class GitChangesetProvider:
    """Provider reading commits from a local git work tree."""

    SUPPORTED_SOURCES = ("git",)

    # Format: sha|email|name|subject
    LOG_FORMAT = "%H|%ae|%an|%s"

    def __init__(self, binary: str = "git", timeout_seconds: Optional[int] = 60) -> None:
        self.binary = binary
        self.timeout_seconds = timeout_seconds

    def list_commits(
        self,
        context: SourceContext,
        head: BranchHead,
        current: RevisionRef,
        baseline: Optional[RevisionRef],
    ) -> ChangeSet:
        """
        Run git log for the revision range.

        Raises:
            ClientUnavailableError: If the source is not git or the owner
                is not a git work tree.
            RuntimeError: If git log fails.
        """
        repo_path = self._check_client(context)

        rev_range = f"{baseline}..{current}" if baseline is not None else str(current)
        result = self._run(repo_path, ["log", f"--format={self.LOG_FORMAT}", rev_range, "--"])
        if result.returncode != 0:
            raise RuntimeError(f"git log failed: {result.stderr.strip()}")

        return parse_git_log(result.stdout)

    def _check_client(self, context: SourceContext) -> str:
        if context.source not in self.SUPPORTED_SOURCES:
            raise ClientUnavailableError(f"unsupported backend '{context.source}'")

        repo_path = str(context.owner)
        if not Path(repo_path).is_dir():
            raise ClientUnavailableError(f"repository path not found: {repo_path}")

        try:
            result = self._run(repo_path, ["rev-parse", "--is-inside-work-tree"])
        except FileNotFoundError as e:
            raise ClientUnavailableError(f"{self.binary} binary not found", cause=e)

        if result.returncode != 0 or result.stdout.strip() != "true":
            raise ClientUnavailableError(f"not a git repository: {repo_path}")
        return repo_path

    def _run(self, repo_path: str, args: list[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            [self.binary, "-C", repo_path, *args],
            capture_output=True,
            text=True,
            timeout=self.timeout_seconds,
        )


def rev_parse(
    repo_path: str,
    revision: str,
    binary: str = "git",
    timeout_seconds: Optional[int] = 60,
) -> Optional[str]:
    """
    Resolve a ref name or short hash to a full commit hash.

    Args:
        repo_path: Git work tree to resolve in.
        revision: Anything `git rev-parse` accepts (HEAD, branch, short sha).
        binary: Path to git binary.
        timeout_seconds: Timeout for the git command.

    Returns:
        The full 40 character hash, or None if git cannot confirm a commit.
    """
    try:
        result = subprocess.run(
            [binary, "-C", repo_path, "rev-parse", "--verify", "--quiet", f"{revision}^{{commit}}"],
            capture_output=True,
            text=True,
            timeout=timeout_seconds,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("Could not resolve revision %s: %s", revision, e)
        return None

    full_hash = result.stdout.strip()
    if result.returncode != 0 or not _FULL_HASH_RE.match(full_hash):
        return None
    return full_hash.lower()


def parse_git_log(output: str) -> ChangeSet:
    """Parse `git log --format=%H|%ae|%an|%s` output into commits."""
    commits: ChangeSet = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue

        parts = line.split("|", 3)
        if len(parts) < 2:
            logger.warning("Skipping unparseable git log line: %s", line)
            continue

        commits.append(
            Commit(
                author_email=parts[1],
                commit_id=parts[0],
                author_name=parts[2] if len(parts) > 2 else "",
                message=parts[3] if len(parts) > 3 else "",
            )
        )
    return commits

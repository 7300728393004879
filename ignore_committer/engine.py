"""
Verdict engine.

Classifies each commit author against the ignore-list and applies the
precedence policy:

- ignored author, non-excluded builds not allowed -> no build (stop)
- non-ignored author, non-excluded builds allowed -> build (stop)
- anything else -> keep scanning
- scan exhausted -> build unless non-excluded builds are allowed
"""

from __future__ import annotations

from ignore_committer.models import ChangeSet, Commit, IgnoreList, Policy
from ignore_committer.trace import TraceSink


class VerdictEngine:
    """Stateless evaluator for a changeset under a policy."""

    def evaluate(self, changeset: ChangeSet, policy: Policy, trace: TraceSink) -> bool:
        """
        Decide whether the changeset requires a build.

        Args:
            changeset: Commits since the last build, most recent first.
            policy: Ignore-list source and flags.
            trace: Sink receiving the decision log.

        Returns:
            True if a build is required.
        """
        ignored = policy.ignore_list()
        allow = policy.allow_build_if_not_excluded_author
        trace.info(f"Ignored authors: {ignored}")

        if policy.check_only_head and changeset:
            return self._evaluate_head(changeset[0], ignored, allow, trace)

        for commit in changeset:
            author = _author(commit)
            if ignored.contains(author):
                if not allow:
                    trace.info(
                        f"Changeset contains ignored author {author} ({commit.commit_id}), "
                        f"and allowBuildIfNotExcludedAuthor is {_flag(allow)}, "
                        "therefore build is not required"
                    )
                    return False
            elif allow:
                trace.info(
                    f"Changeset contains non-ignored author {author} ({commit.commit_id}), "
                    f"and allowBuildIfNotExcludedAuthor is {_flag(allow)}, "
                    "therefore build is required"
                )
                return True

        # Every commit was non-decisive: all ignored with allow set, or all
        # non-ignored with allow unset (vacuously so for an empty changeset).
        build_required = not allow
        trace.info(
            "All commits in the changeset are made by "
            f"{'excluded' if allow else 'non-excluded'} authors, "
            f"therefore build is {'required' if build_required else 'not required'}"
        )
        return build_required

    def _evaluate_head(
        self,
        commit: Commit,
        ignored: IgnoreList,
        allow: bool,
        trace: TraceSink,
    ) -> bool:
        author = _author(commit)
        if ignored.contains(author):
            if allow:
                trace.info(
                    f"HEAD commit {commit.commit_id} is by excluded author {author}, "
                    "therefore build is not required"
                )
            else:
                trace.info(
                    f"HEAD commit {commit.commit_id} is by ignored author {author}, "
                    f"and allowBuildIfNotExcludedAuthor is {_flag(allow)}, "
                    "therefore build is not required"
                )
            return False

        if allow:
            trace.info(
                f"HEAD commit {commit.commit_id} is by non-ignored author {author}, "
                f"and allowBuildIfNotExcludedAuthor is {_flag(allow)}, "
                "therefore build is required"
            )
        else:
            trace.info(
                f"HEAD commit {commit.commit_id} is by non-excluded author {author}, "
                "therefore build is required"
            )
        return True


def _author(commit: Commit) -> str:
    return (commit.author_email or "").strip().lower()


def _flag(value: bool) -> str:
    return "true" if value else "false"

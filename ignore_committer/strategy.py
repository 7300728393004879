"""
Ignore Committer build strategy.

This is the single entry point the host calls. It resolves the changeset,
runs the verdict engine and maps every failure to "build required".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ignore_committer.changeset import ChangesetProvider, ChangesetResolver
from ignore_committer.engine import VerdictEngine
from ignore_committer.errors import DecisionError, DecisionErrorType
from ignore_committer.models import BranchHead, Policy, RevisionRef, SourceContext, Verdict
from ignore_committer.registry import register_strategy
from ignore_committer.revisions import RevisionResolver
from ignore_committer.trace import RecordingTraceSink, TraceSink, replay

logger = logging.getLogger(__name__)

STRATEGY_NAME = "ignore-committer"
DISPLAY_NAME = "Ignore Committer Strategy"


class Evaluator(Protocol):
    """Anything able to decide whether a branch needs an automatic build."""

    def decide(
        self,
        context: SourceContext,
        head: BranchHead,
        current: RevisionRef,
        last_built: Optional[RevisionRef],
        last_seen: Optional[RevisionRef],
        trace_sink: TraceSink,
    ) -> bool: ...


@dataclass
class DecisionResult:
    """Either a verdict or the error that prevented one."""

    value: Optional[bool] = None
    error: Optional[DecisionError] = None

    @classmethod
    def ok(cls, value: bool) -> DecisionResult:
        return cls(value=value)

    @classmethod
    def err(cls, error: DecisionError) -> DecisionResult:
        return cls(error=error)

    @property
    def is_ok(self) -> bool:
        return self.error is None

    def to_build_required(self) -> bool:
        """Fail-open: every error variant means a build is required."""
        if self.error is not None:
            return True
        return bool(self.value)

    def error_message(self) -> str:
        """Trace line describing the error."""
        if self.error is None:
            return ""
        if self.error.error_type in (
            DecisionErrorType.OWNER_UNAVAILABLE,
            DecisionErrorType.CLIENT_UNAVAILABLE,
        ):
            return str(self.error)
        return f"Exception: {self.error}"


@register_strategy(STRATEGY_NAME, display_name=DISPLAY_NAME)
class IgnoreCommitterStrategy:
    """
    Skip builds triggered only by ignored commit authors.

    Build is required if the changeset has no commits by ignored authors, or
    if at least one author is not ignored and allow_build_if_not_excluded_author
    is set.
    """

    def __init__(
        self,
        policy: Policy,
        provider: ChangesetProvider,
        revision_resolver: Optional[RevisionResolver] = None,
    ) -> None:
        self.policy = policy
        self.resolver = ChangesetResolver(provider, revision_resolver)
        self.engine = VerdictEngine()

    @property
    def ignored_authors(self) -> str:
        """Comma-separated list of ignored commit authors."""
        return self.policy.ignored_authors

    @property
    def allow_build_if_not_excluded_author(self) -> bool:
        """Whether one non-ignored author is enough to trigger a build."""
        return self.policy.allow_build_if_not_excluded_author

    @property
    def check_only_head(self) -> bool:
        return self.policy.check_only_head

    @property
    def display_name(self) -> str:
        return DISPLAY_NAME

    def evaluate(
        self,
        context: SourceContext,
        head: BranchHead,
        current: RevisionRef,
        last_built: Optional[RevisionRef] = None,
        last_seen: Optional[RevisionRef] = None,
    ) -> Verdict:
        """Run one evaluation and return the verdict with its trace."""
        recorder = RecordingTraceSink()
        result = self._run(context, head, current, last_built, last_seen, recorder)

        if not result.is_ok:
            logger.error("Decision failed for %s, building anyway: %s", head, result.error)
            recorder.error(result.error_message())

        return Verdict(build_required=result.to_build_required(), trace=recorder.lines)

    def decide(
        self,
        context: SourceContext,
        head: BranchHead,
        current: RevisionRef,
        last_built: Optional[RevisionRef],
        last_seen: Optional[RevisionRef],
        trace_sink: TraceSink,
    ) -> bool:
        """
        Decide whether the branch needs an automatic build.

        Never raises; any failure yields True.
        """
        verdict = self.evaluate(context, head, current, last_built, last_seen)
        replay(verdict.trace, trace_sink)
        return verdict.build_required

    def _run(
        self,
        context: SourceContext,
        head: BranchHead,
        current: RevisionRef,
        last_built: Optional[RevisionRef],
        last_seen: Optional[RevisionRef],
        trace: TraceSink,
    ) -> DecisionResult:
        try:
            changeset = self.resolver.resolve(context, head, current, last_built, last_seen)
            return DecisionResult.ok(self.engine.evaluate(changeset, self.policy, trace))
        except Exception as e:
            return DecisionResult.err(DecisionError.from_exception(e))

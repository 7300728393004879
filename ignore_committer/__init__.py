"""
Ignore Committer - build-trigger decisions based on commit authors.

Skips automatic builds when the changeset since the last build was authored
only by ignored committers.
"""

__version__ = "1.0.0"

from ignore_committer.models import (
    BranchHead,
    Commit,
    IgnoreList,
    Policy,
    RevisionKind,
    RevisionRef,
    SourceContext,
    TraceLevel,
    TraceLine,
    Verdict,
)
from ignore_committer.errors import (
    ClientUnavailableError,
    DecisionError,
    DecisionErrorType,
    MalformedRevisionError,
    OwnerUnavailableError,
)
from ignore_committer.changeset import (
    ChangesetProvider,
    ChangesetResolver,
    GitChangesetProvider,
    StaticChangesetProvider,
)
from ignore_committer.engine import VerdictEngine
from ignore_committer.strategy import DecisionResult, Evaluator, IgnoreCommitterStrategy
from ignore_committer.trace import LoggingTraceSink, RecordingTraceSink, TraceSink

__all__ = [
    "__version__",
    # Models
    "BranchHead",
    "Commit",
    "IgnoreList",
    "Policy",
    "RevisionKind",
    "RevisionRef",
    "SourceContext",
    "TraceLevel",
    "TraceLine",
    "Verdict",
    # Errors
    "ClientUnavailableError",
    "DecisionError",
    "DecisionErrorType",
    "MalformedRevisionError",
    "OwnerUnavailableError",
    # Resolution
    "ChangesetProvider",
    "ChangesetResolver",
    "GitChangesetProvider",
    "StaticChangesetProvider",
    # Decision
    "VerdictEngine",
    "DecisionResult",
    "Evaluator",
    "IgnoreCommitterStrategy",
    # Tracing
    "LoggingTraceSink",
    "RecordingTraceSink",
    "TraceSink",
]

"""
Data models for build-trigger decisions.

This module provides:
- Commit records produced by changeset providers
- Tagged revision handles (native vs. foreign)
- The immutable ignore-list and policy
- Trace lines and the final Verdict
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


_FULL_HASH_RE = re.compile(r"^[0-9a-fA-F]{40}$")


@dataclass
class Commit:
    """A single changeset entry."""

    author_email: str
    commit_id: str
    author_name: str = ""
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "author_email": self.author_email,
            "commit_id": self.commit_id,
            "author_name": self.author_name,
            "message": self.message,
        }


# Most-recent-first; the first element is the branch tip.
ChangeSet = list[Commit]


class RevisionKind(Enum):
    """Origin of a revision handle."""

    NATIVE = "native"    # Full identifier, directly resolvable
    FOREIGN = "foreign"  # Produced elsewhere, must be degraded to a prefix


@dataclass(frozen=True)
class RevisionRef:
    """
    Opaque handle to a point in version-control history.

    Tagged as either native (carries a full identifier) or foreign
    (only its string form is trusted).
    """

    kind: RevisionKind
    value: str

    @classmethod
    def native(cls, full_id: str) -> RevisionRef:
        return cls(kind=RevisionKind.NATIVE, value=full_id)

    @classmethod
    def foreign(cls, text: str) -> RevisionRef:
        return cls(kind=RevisionKind.FOREIGN, value=text)

    @classmethod
    def parse(cls, text: str) -> RevisionRef:
        """
        Build a handle from user input.

        A 40 character hex string is treated as a native revision, anything
        else (short hashes, ref names, decorated identifiers) as foreign.
        """
        text = text.strip()
        if _FULL_HASH_RE.match(text):
            return cls.native(text.lower())
        return cls.foreign(text)

    @property
    def is_native(self) -> bool:
        return self.kind is RevisionKind.NATIVE

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class BranchHead:
    """The branch being evaluated."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass
class SourceContext:
    """
    Explicit version-control context handed to the resolver.

    Attributes:
        source: Backend kind, e.g. "git".
        owner: Location a client is built from (a repository working
            directory for git). None means the owner is unavailable.
    """

    source: str = "git"
    owner: Optional[str] = None


@dataclass(frozen=True)
class IgnoreList:
    """Normalized, ordered set of ignored author emails."""

    entries: tuple[str, ...] = ()

    @classmethod
    def parse(cls, raw: Optional[str]) -> IgnoreList:
        """
        Parse a comma-separated configuration string.

        Each entry is trimmed and lower-cased; blank entries are dropped, so
        an empty string yields an empty list that ignores nobody.
        """
        raw = raw or ""
        normalized = (_normalize_email(part) for part in raw.split(","))
        return cls(entries=tuple(entry for entry in normalized if entry))

    def contains(self, email: Optional[str]) -> bool:
        """Case- and whitespace-insensitive membership test."""
        normalized = _normalize_email(email or "")
        return bool(normalized) and normalized in self.entries

    def __contains__(self, email: object) -> bool:
        return isinstance(email, str) and self.contains(email)

    def __str__(self) -> str:
        return "[" + ", ".join(self.entries) + "]"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@dataclass(frozen=True)
class Policy:
    """Immutable strategy configuration, supplied once at construction."""

    ignored_authors: str = ""
    allow_build_if_not_excluded_author: bool = False
    check_only_head: bool = False

    def ignore_list(self) -> IgnoreList:
        return IgnoreList.parse(self.ignored_authors)


class TraceLevel(Enum):
    """Severity of a trace line."""

    INFO = "info"
    ERROR = "error"


@dataclass(frozen=True)
class TraceLine:
    """One human-readable line of the decision audit trail."""

    level: TraceLevel
    message: str

    @property
    def is_error(self) -> bool:
        return self.level is TraceLevel.ERROR

    def render(self) -> str:
        if self.is_error:
            return f"ERROR: {self.message}"
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level.value, "message": self.message}


@dataclass
class Verdict:
    """Result of one evaluation: the decision plus its audit trail."""

    build_required: bool
    trace: list[TraceLine] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(line.is_error for line in self.trace)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "build_required": self.build_required,
            "trace": [line.to_dict() for line in self.trace],
        }

"""Revision handle normalization."""

from __future__ import annotations

from typing import Optional, Protocol

from ignore_committer.errors import MalformedRevisionError
from ignore_committer.models import BranchHead, RevisionKind, RevisionRef

# Length of a 160-bit hex content hash.
REVISION_PREFIX_LENGTH = 40


class RevisionResolver(Protocol):
    """Turns arbitrary revision handles into native ones."""

    def is_native_revision(self, ref: RevisionRef) -> bool: ...

    def to_native_revision(self, head: BranchHead, prefix: str) -> RevisionRef: ...


class TaggedRevisionResolver:
    """Resolver that branches on the RevisionKind tag."""

    def is_native_revision(self, ref: RevisionRef) -> bool:
        return ref.kind is RevisionKind.NATIVE

    def to_native_revision(self, head: BranchHead, prefix: str) -> RevisionRef:
        return RevisionRef.native(prefix)


def normalize_revision(
    resolver: RevisionResolver,
    head: BranchHead,
    ref: Optional[RevisionRef],
) -> Optional[RevisionRef]:
    """
    Degrade a foreign revision to a native one.

    Args:
        resolver: Revision resolver for the backend.
        head: Branch the revision belongs to.
        ref: Revision handle, or None for "no revision".

    Returns:
        None when ref is None, ref itself when already native, otherwise a
        native revision built from the first REVISION_PREFIX_LENGTH
        characters of its string form.

    Raises:
        MalformedRevisionError: If the string form is too short.
    """
    if ref is None:
        return None
    if resolver.is_native_revision(ref):
        return ref

    text = str(ref)
    if len(text) < REVISION_PREFIX_LENGTH:
        raise MalformedRevisionError(text, REVISION_PREFIX_LENGTH)
    return resolver.to_native_revision(head, text[:REVISION_PREFIX_LENGTH])

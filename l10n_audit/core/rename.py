"""
Rename Resolution — Where did this document live at an older revision?

Fallback chain, made explicit as ResolutionKind:
    DIRECT   path exists at from_revision under its current name
    RENAMED  path was found under an older name via rename-following history
    NEW      no prior name; the document was introduced inside the range

Query failures resolve to NEW. A best-effort diff against an empty baseline
is more useful than aborting the document.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..services.git import RevisionQuery


class ResolutionKind(Enum):
    """How a document's path at the older revision was determined."""
    DIRECT = "direct"
    RENAMED = "renamed"
    NEW = "new"


@dataclass(frozen=True)
class RenameTrace:
    """Result of resolving one document's former path. Never cached."""
    current_path: str
    from_revision: str
    to_revision: str
    kind: ResolutionKind
    resolved_old_path: Optional[str] = None

    @property
    def old_path(self) -> Optional[str]:
        """Path to read at from_revision (None when the document is new)."""
        return self.resolved_old_path


class RenameResolver:
    """Resolves a document's path at an older revision."""

    def __init__(self, query: RevisionQuery):
        self.query = query

    def resolve(self, from_revision: str, to_revision: str, current_path: str) -> RenameTrace:
        """
        Resolve the name `current_path` held at `from_revision`.

        Searches the range (from_revision, to_revision] only when the direct
        existence check fails. The oldest name in that rename-following
        history is the one the document held nearest to from_revision.
        """
        if self.query.exists_at(from_revision, current_path):
            return RenameTrace(
                current_path=current_path,
                from_revision=from_revision,
                to_revision=to_revision,
                kind=ResolutionKind.DIRECT,
                resolved_old_path=current_path,
            )

        names = self.query.follow_history(from_revision, to_revision, current_path)
        oldest = names[-1] if names else None

        # Oldest name must be real at from_revision, else it was added in range
        if (
            oldest is None
            or oldest == current_path
            or not self.query.exists_at(from_revision, oldest)
        ):
            return RenameTrace(
                current_path=current_path,
                from_revision=from_revision,
                to_revision=to_revision,
                kind=ResolutionKind.NEW,
            )

        return RenameTrace(
            current_path=current_path,
            from_revision=from_revision,
            to_revision=to_revision,
            kind=ResolutionKind.RENAMED,
            resolved_old_path=oldest,
        )

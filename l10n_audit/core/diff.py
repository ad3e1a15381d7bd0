"""
Diff Computation — Bounded, rename-aware content delta

Compares blobs by content identity (rev:path on both sides), not trees.
A renamed file diffed as a tree under its new name would show up as
entirely new and hide the real edit.

Output is capped in characters. Overflow is truncation with a flag;
failure is an explicit placeholder. Neither raises.
"""

from dataclasses import dataclass
from typing import Optional

from ..services.git import RevisionQuery, GitResult
from .rename import RenameTrace, ResolutionKind


DEFAULT_MAX_DIFF_CHARS = 50000
TRUNCATION_MARKER = "\n... (diff too large, truncated) ..."
DIFF_ERROR_PLACEHOLDER = "Error generating diff"


@dataclass(frozen=True)
class DiffResult:
    """Textual difference between two document revisions."""
    text: str
    truncated: bool = False
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def is_empty(self) -> bool:
        """Valid diff with no textual change."""
        return not self.failed and not self.text

    @classmethod
    def error_result(cls, error: str) -> 'DiffResult':
        return cls(text=DIFF_ERROR_PLACEHOLDER, error=error)


def truncate_diff(text: str, max_chars: int = DEFAULT_MAX_DIFF_CHARS) -> DiffResult:
    """
    Cap `text` at `max_chars` characters.

    Over the cap the result is the first `max_chars` characters followed by
    TRUNCATION_MARKER, with truncated=True.
    """
    if len(text) <= max_chars:
        return DiffResult(text=text)
    return DiffResult(text=text[:max_chars] + TRUNCATION_MARKER, truncated=True)


class DiffComputer:
    """Computes DiffResults for resolved document traces."""

    def __init__(
        self,
        query: RevisionQuery,
        max_chars: int = DEFAULT_MAX_DIFF_CHARS,
        word_diff: bool = True,
    ):
        self.query = query
        self.max_chars = max_chars
        self.word_diff = word_diff

    def compute(self, trace: RenameTrace) -> DiffResult:
        """
        Diff the document between trace.from_revision and trace.to_revision.

        DIRECT/RENAMED compare from_revision:old_path to to_revision:current_path.
        NEW has no prior blob; the range diff of the current path shows the
        whole introduction as an addition.
        """
        if trace.kind == ResolutionKind.NEW or trace.old_path is None:
            result = self.query.diff_range(
                trace.from_revision,
                trace.to_revision,
                trace.current_path,
                word_diff=self.word_diff,
            )
        else:
            result = self.query.diff_blobs(
                trace.from_revision,
                trace.old_path,
                trace.to_revision,
                trace.current_path,
                word_diff=self.word_diff,
            )
        return self._to_diff_result(result)

    def _to_diff_result(self, result: GitResult) -> DiffResult:
        if not result.ok:
            return DiffResult.error_result(result.error or "git diff failed")
        return truncate_diff(result.stdout, self.max_chars)

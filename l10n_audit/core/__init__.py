"""
Core — Audit logic for l10n-audit

- History: Latest revision per path from one streamed git log
- Rename: Which path a document had at an earlier revision
- Diff: Bounded diff between two revisions of one document
- Status: Pure staleness classification
- Front-matter: Recorded source revision of a localized document
- Audit: Per-document state machine and fan-out (l10n_audit.core.audit)
"""

from .history import HistoryStreamParser, HistoryIndexBuilder, build_index
from .rename import RenameResolver, RenameTrace, ResolutionKind
from .diff import (
    DiffComputer, DiffResult, truncate_diff,
    DEFAULT_MAX_DIFF_CHARS, TRUNCATION_MARKER, DIFF_ERROR_PLACEHOLDER,
)
from .status import AuditStatus, classify
from .frontmatter import (
    LocalizationRecord, read_localization, parse_front_matter,
    split_front_matter, lookup_field, DEFAULT_METADATA_FIELD,
)

__all__ = [
    # History
    "HistoryStreamParser", "HistoryIndexBuilder", "build_index",
    # Rename
    "RenameResolver", "RenameTrace", "ResolutionKind",
    # Diff
    "DiffComputer", "DiffResult", "truncate_diff",
    "DEFAULT_MAX_DIFF_CHARS", "TRUNCATION_MARKER", "DIFF_ERROR_PLACEHOLDER",
    # Status
    "AuditStatus", "classify",
    # Front-matter
    "LocalizationRecord", "read_localization", "parse_front_matter",
    "split_front_matter", "lookup_field", "DEFAULT_METADATA_FIELD",
]

"""
Services — External integration layer for l10n-audit

- Git: Revision queries against the content repository
- Pulls: Open pull requests from a prs.json dump
- Report: Output files for the static viewer (l10n_audit.services.report)
"""

from .git import RevisionQuery, GitResult, HistoryStream, blob_ref
from .pulls import PullRequestInfo, PullRequestIndex, load_pull_requests, index_pull_requests

__all__ = [
    # Git
    "RevisionQuery", "GitResult", "HistoryStream", "blob_ref",
    # Pulls
    "PullRequestInfo", "PullRequestIndex", "load_pull_requests", "index_pull_requests",
]

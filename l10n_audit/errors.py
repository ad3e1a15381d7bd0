"""
Errors — Run-level failures

Only structural failures live here. Per-document problems never raise;
they are absorbed into the document's AuditEntry.
"""


class L10nAuditError(Exception):
    """Base class for failures that abort an audit run."""


class HistoryFeedError(L10nAuditError):
    """The revision history could not be read completely or was malformed."""


class ConfigError(L10nAuditError):
    """Configuration is invalid; raised before any git work starts."""

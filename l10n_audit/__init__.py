"""
l10n-audit — Localization staleness audit

Compares a localized documentation tree against the source tree it was
translated from and reports, per document, whether the translation is
current, outdated (with a diff of what changed), lacks a recorded source
revision, or does not exist.

Usage:
    l10n-audit run
    l10n-audit run --locale ja --workers 16
    l10n-audit index
    l10n-audit config --set repository.target_locale=ja
"""

__version__ = "0.1.0"

# Errors
from .errors import L10nAuditError, HistoryFeedError, ConfigError

# Configuration
from .config import Config, ConfigManager, get_config

# Core layer
from .core.status import AuditStatus, classify
from .core.history import HistoryIndexBuilder, HistoryStreamParser
from .core.rename import RenameResolver, RenameTrace, ResolutionKind
from .core.diff import DiffComputer, DiffResult
from .core.frontmatter import LocalizationRecord, read_localization
from .core.audit import AuditEntry, AuditReport, AuditOrchestrator, DocumentAuditor, run_audit

# Services layer
from .services.git import RevisionQuery, GitResult
from .services.pulls import PullRequestIndex, load_pull_requests
from .services.report import ReportWriter

__all__ = [
    "__version__",
    "L10nAuditError", "HistoryFeedError", "ConfigError",
    "Config", "ConfigManager", "get_config",
    "AuditStatus", "classify",
    "HistoryIndexBuilder", "HistoryStreamParser",
    "RenameResolver", "RenameTrace", "ResolutionKind",
    "DiffComputer", "DiffResult",
    "LocalizationRecord", "read_localization",
    "AuditEntry", "AuditReport", "AuditOrchestrator", "DocumentAuditor", "run_audit",
    "RevisionQuery", "GitResult",
    "PullRequestIndex", "load_pull_requests",
    "ReportWriter",
]

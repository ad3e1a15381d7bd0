"""
Audit — Per-document staleness audit fanned out over the history index

For every source document in the index:

    read localized file -> classify -> gather supporting content

    up_to_date    localized content, no diff
    outdated      localized content + rename-aware diff recorded..latest
    missing_meta  source content (no baseline to diff from)
    untranslated  source content, or SOURCE_UNAVAILABLE

A missing_meta document whose source cannot be read is reported as
untranslated.

Documents are independent. Each is one task on the bounded I/O pool; the
only shared state is the read-only index. Results are gathered, then
sorted by path so two runs over the same state produce the same report.

One AuditEntry per indexed document is guaranteed: a task that fails for
any reason degrades to an untranslated entry instead of failing the run.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Any

from ..config import Config
from ..errors import ConfigError
from ..orchestrator import TaskOrchestrator, OrchestratorConfig, io_task
from ..services.git import RevisionQuery
from ..services.pulls import PullRequestIndex, PullRequestInfo
from .diff import DiffComputer, DiffResult
from .frontmatter import read_localization
from .history import HistoryIndexBuilder
from .rename import RenameResolver
from .status import AuditStatus, classify


SOURCE_UNAVAILABLE = "(source document could not be read)"


@dataclass(frozen=True)
class AuditEntry:
    """Audit outcome for one document. Never mutated after creation."""
    path: str                                  # Relative to the locale root
    status: AuditStatus
    latest_revision: str
    recorded_source_revision: Optional[str] = None
    diff: Optional[DiffResult] = None
    content: Optional[str] = None
    size: int = 0                              # Re-localization workload
    url: str = ""
    pull_request: Optional[PullRequestInfo] = None
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Report record. Key names are what report consumers read."""
        data = {
            "path": self.path,
            "status": self.status.value,
            "size": self.size,
            "pr": self.pull_request.to_dict() if self.pull_request else None,
            "sourceCommit": self.recorded_source_revision,
            "currentCommit": self.latest_revision,
            "diff": self.diff.text if self.diff else None,
            "diffTruncated": self.diff.truncated if self.diff else False,
            "content": self.content,
            "url": self.url,
        }
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class AuditReport:
    """All entries of one run plus run facts."""
    entries: List[AuditEntry] = field(default_factory=list)
    indexed_paths: int = 0
    history_records: int = 0
    index_seconds: float = 0.0
    audit_seconds: float = 0.0

    def counts(self) -> Dict[str, int]:
        """Entries per status, every status present."""
        counts = {status.value: 0 for status in AuditStatus}
        for entry in self.entries:
            counts[entry.status.value] += 1
        return counts

    def by_status(self, status: AuditStatus) -> List[AuditEntry]:
        return [e for e in self.entries if e.status == status]

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.entries]


def document_url(base_url: str, locale: str, relative_path: str, suffix: str = ".md") -> str:
    """
    Public URL of a localized document.

        web/api/index.md -> <base>/<locale>/docs/web/api
    """
    slug = relative_path
    if suffix and slug.endswith(suffix):
        slug = slug[:-len(suffix)]
    if slug == "index":
        slug = ""
    elif slug.endswith("/index"):
        slug = slug[:-len("/index")]
    return f"{base_url.rstrip('/')}/{locale}/docs/{slug}"


class DocumentAuditor:
    """
    Audits a single document.

    Stateless between calls, so one instance is shared by every worker.
    """

    def __init__(
        self,
        config: Config,
        query: RevisionQuery,
        pull_requests: Optional[PullRequestIndex] = None,
    ):
        self.config = config
        self.query = query
        self.resolver = RenameResolver(query)
        self.differ = DiffComputer(
            query,
            max_chars=config.audit.max_diff_chars,
            word_diff=config.audit.word_diff,
        )
        self.pull_requests = pull_requests

        repo = config.repository
        self.content_root = Path(repo.content_repo)
        self.translated_root = Path(repo.translated_repo) / repo.target_subtree
        self.source_prefix = repo.source_subtree + "/"

    def relative_path(self, source_path: str) -> str:
        """files/en-us/web/index.md -> web/index.md"""
        if source_path.startswith(self.source_prefix):
            return source_path[len(self.source_prefix):]
        return source_path

    def audit(self, source_path: str, latest_revision: str) -> AuditEntry:
        """Run the per-document state machine."""
        relative = self.relative_path(source_path)
        localized = read_localization(
            self.translated_root / relative,
            relative,
            metadata_field=self.config.audit.metadata_field,
        )

        status = classify(
            localized.recorded_source_revision,
            latest_revision,
            localized.readable,
        )

        diff: Optional[DiffResult] = None
        size = 0
        if status == AuditStatus.UP_TO_DATE:
            content = localized.raw_content
        elif status == AuditStatus.OUTDATED:
            content = localized.raw_content
            trace = self.resolver.resolve(
                localized.recorded_source_revision, latest_revision, source_path
            )
            diff = self.differ.compute(trace)
            size = 0 if diff.failed else len(diff.text)
        else:
            content, size = self.read_source(source_path)
            if content == SOURCE_UNAVAILABLE:
                status = AuditStatus.UNTRANSLATED

        return AuditEntry(
            path=relative,
            status=status,
            latest_revision=latest_revision,
            recorded_source_revision=localized.recorded_source_revision,
            diff=diff,
            content=content,
            size=size,
            url=self._url(relative),
            pull_request=self.pull_requests.get(relative) if self.pull_requests else None,
            error=localized.error if localized.readable else None,
        )

    def read_source(self, source_path: str) -> "tuple[str, int]":
        """Source document text and size in bytes, or the unavailable marker."""
        full_path = self.content_root / source_path
        try:
            size = full_path.stat().st_size
        except OSError:
            size = 0
        try:
            return full_path.read_text(encoding="utf-8"), size
        except (OSError, UnicodeDecodeError):
            return SOURCE_UNAVAILABLE, size

    def fallback_entry(self, source_path: str, latest_revision: str, error: str) -> AuditEntry:
        """Least-informative entry for a document whose task failed."""
        relative = self.relative_path(source_path)
        return AuditEntry(
            path=relative,
            status=AuditStatus.UNTRANSLATED,
            latest_revision=latest_revision,
            content=SOURCE_UNAVAILABLE,
            url=self._url(relative),
            pull_request=self.pull_requests.get(relative) if self.pull_requests else None,
            error=error,
        )

    def _url(self, relative: str) -> str:
        repo = self.config.repository
        return document_url(
            self.config.audit.docs_base_url,
            repo.target_locale,
            relative,
            repo.document_suffix,
        )


class AuditOrchestrator:
    """
    Fans one audit task per indexed document out over a bounded pool.

    Usage:
        auditor = AuditOrchestrator(config)
        report = auditor.run(index)
    """

    def __init__(
        self,
        config: Config,
        query: Optional[RevisionQuery] = None,
        pull_requests: Optional[PullRequestIndex] = None,
        orchestrator_config: Optional[OrchestratorConfig] = None,
        on_entry: Optional[Callable[[AuditEntry], None]] = None,
    ):
        """
        Args:
            config: Run configuration
            query: Git queries for the content repo (default: built from config)
            pull_requests: Optional pull request index to annotate entries
            orchestrator_config: Worker pool settings (default: from environment)
            on_entry: Called on the calling thread once per finished entry
        """
        self.config = config
        self.query = query or RevisionQuery(Path(config.repository.content_repo))
        self.auditor = DocumentAuditor(config, self.query, pull_requests)
        self.orchestrator_config = orchestrator_config or OrchestratorConfig.from_env()
        self.on_entry = on_entry

    def select_documents(self, index: Mapping[str, str]) -> Dict[str, str]:
        """Index entries under the source subtree with the document suffix."""
        prefix = self.auditor.source_prefix
        suffix = self.config.repository.document_suffix
        return {
            path: revision
            for path, revision in index.items()
            if path.startswith(prefix) and path.endswith(suffix)
        }

    def run(self, index: Mapping[str, str]) -> AuditReport:
        """Audit every selected document. Never raises for a single document."""
        started = time.perf_counter()
        documents = self.select_documents(index)
        entries: List[AuditEntry] = []

        with TaskOrchestrator(self.orchestrator_config) as orchestrator:
            timeout = self.orchestrator_config.task_timeout
            pending = [
                (path, revision, orchestrator.submit(io_task(
                    fn=self.auditor.audit,
                    args=(path, revision),
                    name=path,
                )))
                for path, revision in documents.items()
            ]

            for path, revision, future in pending:
                try:
                    task_result = future.result(timeout=timeout)
                    if task_result.success:
                        entry = task_result.result
                    else:
                        entry = self.auditor.fallback_entry(
                            path, revision, task_result.error or "Task failed"
                        )
                except Exception as e:
                    entry = self.auditor.fallback_entry(path, revision, f"{type(e).__name__}: {e}")

                entries.append(entry)
                if self.on_entry:
                    self.on_entry(entry)

        entries.sort(key=lambda e: e.path)
        return AuditReport(
            entries=entries,
            indexed_paths=len(index),
            audit_seconds=time.perf_counter() - started,
        )


def open_content_repo(config: Config) -> RevisionQuery:
    """
    Validate config and return queries for the content repository.

    Raises:
        ConfigError: if config is invalid or content_repo is not a git work tree
    """
    config.validate()
    query = RevisionQuery(Path(config.repository.content_repo))
    if not query.is_git_repo:
        raise ConfigError(
            f"Content repository {config.repository.content_repo} is not a git work tree"
        )
    return query


def run_audit(
    config: Config,
    pull_requests: Optional[PullRequestIndex] = None,
    orchestrator_config: Optional[OrchestratorConfig] = None,
    on_index_built: Optional[Callable[[Mapping[str, str]], None]] = None,
    on_entry: Optional[Callable[[AuditEntry], None]] = None,
) -> AuditReport:
    """
    Full run: build the history index, then audit every document.

    Raises:
        ConfigError: if config is invalid
        HistoryFeedError: if the history could not be read completely
    """
    query = open_content_repo(config)

    started = time.perf_counter()
    builder = HistoryIndexBuilder(query)
    index = builder.build(config.repository.source_subtree)
    index_seconds = time.perf_counter() - started

    if on_index_built:
        on_index_built(index)

    auditor = AuditOrchestrator(
        config,
        query=query,
        pull_requests=pull_requests,
        orchestrator_config=orchestrator_config,
        on_entry=on_entry,
    )
    report = auditor.run(index)
    report.history_records = builder.record_count
    report.index_seconds = index_seconds
    return report

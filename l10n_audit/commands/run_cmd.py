"""
RunCommand — Full audit and report

Phases:
    [1/4] Load pull requests (optional annotation)
    [2/4] Index the source history
    [3/4] Audit every document on the worker pool
    [4/4] Write the report

Progress is printed from core callbacks; the core itself never prints.
"""

import time
from typing import Optional

from ..commands.base import BaseCommand
from ..core.audit import AuditEntry, AuditReport, run_audit
from ..core.status import AuditStatus
from ..orchestrator import OrchestratorConfig
from ..presentation.symbols import safe_print, symbol_for_status, truncate
from ..services.pulls import load_pull_requests
from ..services.report import ReportWriter


# Print a progress line every N audited documents
PROGRESS_EVERY = 500

# Problem documents listed in the summary
MAX_PROBLEMS_SHOWN = 5


class RunCommand(BaseCommand):
    """Audit the localized tree against the source history."""

    def run(
        self,
        content_repo: Optional[str] = None,
        translated_repo: Optional[str] = None,
        locale: Optional[str] = None,
        output_dir: Optional[str] = None,
        max_diff_chars: Optional[int] = None,
        workers: Optional[int] = None,
        sequential: bool = False,
        write_report: bool = True,
    ) -> AuditReport:
        """
        Run the audit.

        Raises:
            ConfigError: if the effective configuration is invalid
            HistoryFeedError: if the source history cannot be read
        """
        symbols = self.symbols
        started = time.perf_counter()

        config = self._cli.effective_config({
            "repository": {
                "content_repo": content_repo,
                "translated_repo": translated_repo,
                "target_locale": locale,
            },
            "audit": {"max_diff_chars": max_diff_chars},
            "output": {"output_dir": output_dir},
        })

        orchestrator_config = OrchestratorConfig.from_env()
        if workers is not None:
            orchestrator_config.io_workers = workers
        if sequential:
            orchestrator_config.enabled = False
        orchestrator_config.validate()

        repo = config.repository
        safe_print(f"Auditing {repo.target_subtree} against {repo.source_subtree}")

        # Phase 1: pull requests
        safe_print("[1/4] Loading pull requests...")
        pull_requests = load_pull_requests(
            self._cli.resolve_path(config.output.pr_data_path), repo.target_locale
        )
        if pull_requests.warning:
            safe_print(f"  {symbols.check_warn} {pull_requests.warning}")
        else:
            safe_print(
                f"  {symbols.tree_end} {pull_requests.total_pull_requests} pull request(s), "
                f"{len(pull_requests)} document(s) in progress"
            )

        translated_root = self._cli.resolve_path(repo.translated_repo) / repo.target_subtree
        if not translated_root.is_dir():
            safe_print(f"  {symbols.check_warn} {translated_root} does not exist; every document will be untranslated")

        # Phase 2 and 3: index + audit
        safe_print(f"[2/4] Indexing history of {repo.source_subtree}...")
        done = [0]

        def on_index_built(index):
            safe_print(f"  {symbols.tree_end} {len(index)} path(s) indexed")
            workers_label = "sequential" if not orchestrator_config.enabled else f"{orchestrator_config.io_workers} workers"
            safe_print(f"[3/4] Auditing documents ({workers_label})...")

        def on_entry(entry: AuditEntry):
            done[0] += 1
            if done[0] % PROGRESS_EVERY == 0:
                safe_print(f"  {symbols.working} {done[0]} document(s) audited")

        report = run_audit(
            config,
            pull_requests=pull_requests,
            orchestrator_config=orchestrator_config,
            on_index_built=on_index_built,
            on_entry=on_entry,
        )
        safe_print(f"  {symbols.tree_end} {len(report.entries)} document(s) audited")

        # Phase 4: report
        write_seconds = 0.0
        if write_report:
            safe_print("[4/4] Writing report...")
            write_started = time.perf_counter()
            files = ReportWriter(config.output, base_dir=self.project_dir).write(report.to_list())
            write_seconds = time.perf_counter() - write_started
            safe_print(f"  {symbols.tree_branch} {files.data_path}")
            safe_print(f"  {symbols.tree_branch} {files.meta_path}")
            if files.index_path:
                safe_print(f"  {symbols.tree_end} {files.index_path}")
            else:
                safe_print(f"  {symbols.tree_end} (no viewer template at {config.output.template_path})")
        else:
            safe_print("[4/4] Report skipped (--no-report)")

        self._print_summary(report, write_seconds, time.perf_counter() - started)
        return report

    def _print_summary(self, report: AuditReport, write_seconds: float, total_seconds: float):
        symbols = self.symbols
        counts = report.counts()

        safe_print("")
        safe_print("Summary:")
        for status in AuditStatus:
            safe_print(f"  {symbol_for_status(symbols, status.value)} {status.value:<13} {counts[status.value]}")

        truncated = sum(1 for e in report.entries if e.diff is not None and e.diff.truncated)
        if truncated:
            safe_print(f"  {symbols.bullet} {truncated} diff(s) truncated")

        problems = [
            (e.path, e.diff.error if e.diff is not None and e.diff.failed else e.error)
            for e in report.entries
            if (e.diff is not None and e.diff.failed) or e.error
        ]
        if problems:
            safe_print(f"  {symbols.check_warn} {len(problems)} document(s) with problems:")
            for path, error in problems[:MAX_PROBLEMS_SHOWN]:
                safe_print(f"    {symbols.arrow} {path}: {truncate(error, 100)}")
            if len(problems) > MAX_PROBLEMS_SHOWN:
                safe_print(f"    ... and {len(problems) - MAX_PROBLEMS_SHOWN} more (see report)")

        safe_print("")
        safe_print(
            f"Timing: index {report.index_seconds:.1f}s, audit {report.audit_seconds:.1f}s, "
            f"report {write_seconds:.1f}s, total {total_seconds:.1f}s"
        )
        safe_print(f"{symbols.check_pass} Done: {len(report.entries)} document(s)")


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register run command parser."""
    p = subparsers.add_parser('run', help='Audit every document and write the report')
    p.add_argument('--content-repo', help='Source content repository (overrides config)')
    p.add_argument('--translated-repo', help='Localized content repository (overrides config)')
    p.add_argument('--locale', help='Target locale, e.g. zh-tw (overrides config)')
    p.add_argument('--output', help='Report output directory (overrides config)')
    p.add_argument('--max-diff-chars', type=int, help='Diff length cap in characters')
    p.add_argument('--workers', type=int, help='Concurrent document audits')
    p.add_argument('--sequential', action='store_true', help='Audit one document at a time')
    p.add_argument('--no-report', action='store_true', help='Print the summary only')
    return p


def handle(cli, args):
    """Handle run command dispatch."""
    cli._run_cmd.run(
        content_repo=args.content_repo,
        translated_repo=args.translated_repo,
        locale=args.locale,
        output_dir=args.output,
        max_diff_chars=args.max_diff_chars,
        workers=args.workers,
        sequential=args.sequential,
        write_report=not args.no_report,
    )

"""
IOPool — Bounded thread pool for document tasks

Document audits spend their time waiting on git subprocesses and file
reads, so threads suffice. max_workers caps how many git processes run
at once when the index holds thousands of documents.
"""

from concurrent.futures import ThreadPoolExecutor, Future

from .task import Task, run_task
from .config import OrchestratorConfig


class IOPool:
    """ThreadPool for I/O-bound document tasks."""

    def __init__(self, config: OrchestratorConfig):
        self._config = config
        self._executor = ThreadPoolExecutor(
            max_workers=config.io_workers,
            thread_name_prefix="l10n-audit-io-"
        )
        self._shutdown = False

    def submit(self, task: Task) -> Future:
        """
        Submit a task for execution.

        Returns a Future resolving to a TaskResult (never raising).
        """
        if self._shutdown:
            raise RuntimeError("Pool is shut down")
        return self._executor.submit(run_task, task)

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown the pool."""
        self._shutdown = True
        self._executor.shutdown(wait=wait)

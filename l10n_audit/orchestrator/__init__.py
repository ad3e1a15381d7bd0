"""
Task Orchestrator — Bounded parallel execution for document audits

Usage:
    from l10n_audit.orchestrator import TaskOrchestrator, io_task

    with TaskOrchestrator() as orchestrator:
        futures = [
            orchestrator.submit(io_task(fn=audit_one, args=(path,), name=path))
            for path in paths
        ]
        results = [f.result() for f in futures]   # TaskResult, never raises

Configuration via environment variables:
    L10N_AUDIT_PARALLEL_ENABLED=true    # Enable/disable parallelization
    L10N_AUDIT_IO_WORKERS=8             # Max concurrent tasks
    L10N_AUDIT_TASK_TIMEOUT=120         # Per-task wait (seconds)
"""

import threading
from typing import Optional
from concurrent.futures import Future

from .task import Task, TaskStatus, TaskResult, io_task, run_task
from .config import OrchestratorConfig
from .pools import IOPool


class TaskOrchestrator:
    """
    Coordinator for parallel task execution.

    Every submitted task resolves to a TaskResult; exceptions inside a task
    become FAILED results so one task cannot break its siblings.

    Thread Safety:
    - All public methods are thread-safe
    - Internal state protected by locks
    """

    def __init__(self, config: Optional[OrchestratorConfig] = None):
        """
        Initialize the orchestrator.

        Args:
            config: Configuration. If None, loads from environment.
        """
        self._config = config or OrchestratorConfig.from_env()
        self._config.validate()

        self._lock = threading.Lock()
        self._started = False
        self._shutdown = False
        self._io_pool: Optional[IOPool] = None

    def _ensure_started(self) -> None:
        """Lazily create the pool on first use."""
        if self._started:
            return

        with self._lock:
            if self._started:
                return
            if self._config.enabled:
                self._io_pool = IOPool(self._config)
            self._started = True

    def submit(self, task: Task) -> Future:
        """
        Submit a task for execution.

        Returns:
            Future that resolves to TaskResult

        Raises:
            RuntimeError: If orchestrator is shut down
        """
        self._ensure_started()

        if self._shutdown:
            raise RuntimeError("Orchestrator is shut down")

        if not self._config.enabled:
            return self._execute_sequential(task)

        return self._io_pool.submit(task)

    def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown the orchestrator.

        Args:
            wait: If True, wait for running tasks to complete
        """
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True

            if self._io_pool:
                self._io_pool.shutdown(wait=wait)

    def __enter__(self) -> 'TaskOrchestrator':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown(wait=True)

    def _execute_sequential(self, task: Task) -> Future:
        """
        Execute task inline (parallelization disabled).

        Returns a completed Future for API compatibility.
        """
        future = Future()
        future.set_result(run_task(task))
        return future


__all__ = [
    "TaskOrchestrator",
    "Task",
    "TaskStatus",
    "TaskResult",
    "io_task",
    "OrchestratorConfig",
    "IOPool",
]

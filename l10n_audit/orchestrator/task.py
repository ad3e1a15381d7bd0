"""
Task — Unit of parallel work

- Task: one call to run on the worker pool
- TaskResult: outcome of running it (never an exception)

Tasks are immutable after creation and carry everything needed to run.
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Any, Dict, Optional
from datetime import datetime, timezone
import xxhash


class TaskStatus(Enum):
    """Terminal task states."""
    COMPLETED = "completed"
    FAILED = "failed"


# Disambiguates tasks created within the same clock tick
_task_counter = itertools.count()


@dataclass(frozen=True)
class Task:
    """
    Unit of parallelizable work.

    Immutable after creation. Carries all context needed for execution.
    """
    # Identity
    id: str = field(default_factory=lambda: _generate_task_id())

    # Execution
    fn: Callable = field(default=None)
    args: tuple = field(default_factory=tuple)
    kwargs: Dict[str, Any] = field(default_factory=dict)

    # Metadata (for progress display)
    name: str = ""

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Task):
            return self.id == other.id
        return False


@dataclass
class TaskResult:
    """Outcome of task execution."""
    task_id: str
    status: TaskStatus
    result: Any = None
    error: Optional[str] = None

    # Timing
    started_at: Optional[str] = None
    completed_at: Optional[str] = None
    duration_ms: Optional[float] = None

    @property
    def success(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    @property
    def failed(self) -> bool:
        return self.status == TaskStatus.FAILED


def _generate_task_id() -> str:
    """Generate a short unique task ID using xxhash."""
    seed = f"{datetime.now(timezone.utc).isoformat()}:{next(_task_counter)}"
    return xxhash.xxh64(seed.encode()).hexdigest()[:12]


def run_task(task: Task) -> TaskResult:
    """
    Execute a task, turning any exception into a FAILED result.

    Shared by the pool workers and the sequential fallback.
    """
    started_at = datetime.now(timezone.utc)

    try:
        value = task.fn(*task.args, **task.kwargs)
        status, error = TaskStatus.COMPLETED, None
    except Exception as e:
        value, status, error = None, TaskStatus.FAILED, f"{type(e).__name__}: {e}"

    completed_at = datetime.now(timezone.utc)
    return TaskResult(
        task_id=task.id,
        status=status,
        result=value,
        error=error,
        started_at=started_at.isoformat(),
        completed_at=completed_at.isoformat(),
        duration_ms=(completed_at - started_at).total_seconds() * 1000,
    )


def io_task(
    fn: Callable,
    args: tuple = (),
    kwargs: Dict[str, Any] = None,
    name: str = "",
) -> Task:
    """
    Create an I/O-bound task (git subprocesses, file reads).

    Args:
        fn: Function to execute
        args: Positional arguments tuple for fn
        kwargs: Keyword arguments dict for fn
        name: Optional task name for progress display

    Example:
        task = io_task(fn=auditor.audit, args=(path, revision), name=path)
    """
    return Task(
        fn=fn,
        args=args,
        kwargs=kwargs or {},
        name=name,
    )

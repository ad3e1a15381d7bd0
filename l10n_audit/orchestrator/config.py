"""
OrchestratorConfig — Worker pool settings

Loads parallelization settings from environment variables with defaults
that work on any machine.

Environment variables:
- L10N_AUDIT_PARALLEL_ENABLED: Enable/disable parallel auditing (default: true)
- L10N_AUDIT_IO_WORKERS: Max concurrent document tasks, and so git processes (default: 8)
- L10N_AUDIT_TASK_TIMEOUT: Seconds to wait for one document's result (default: 120)
"""

import os
from dataclasses import dataclass

from ..errors import ConfigError


@dataclass
class OrchestratorConfig:
    """
    Configuration for the task orchestrator.

    io_workers bounds the number of git subprocesses in flight at once.
    """

    # Feature toggle
    enabled: bool = True

    # Worker pool size
    io_workers: int = 8

    # Timeouts
    task_timeout: float = 120.0            # Per-task wait (seconds)

    @classmethod
    def from_env(cls) -> 'OrchestratorConfig':
        """Load configuration from environment variables."""
        return cls(
            enabled=_get_bool_env("L10N_AUDIT_PARALLEL_ENABLED", True),
            io_workers=_get_int_env("L10N_AUDIT_IO_WORKERS", 8),
            task_timeout=_get_float_env("L10N_AUDIT_TASK_TIMEOUT", 120.0),
        )

    def validate(self) -> None:
        """Validate configuration values."""
        if self.io_workers < 1:
            raise ConfigError("L10N_AUDIT_IO_WORKERS must be >= 1")
        if self.task_timeout <= 0:
            raise ConfigError("L10N_AUDIT_TASK_TIMEOUT must be > 0")

    def to_dict(self) -> dict:
        """Serialize for display."""
        return {
            "enabled": self.enabled,
            "io_workers": self.io_workers,
            "task_timeout": self.task_timeout,
        }


def _get_bool_env(key: str, default: bool) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key, "").lower()
    if value in ("true", "1", "yes", "on"):
        return True
    if value in ("false", "0", "no", "off"):
        return False
    return default


def _get_int_env(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key, "")
    if value:
        try:
            return int(value)
        except ValueError:
            pass
    return default


def _get_float_env(key: str, default: float) -> float:
    """Get float from environment variable."""
    value = os.environ.get(key, "")
    if value:
        try:
            return float(value)
        except ValueError:
            pass
    return default

"""
Shared pytest fixtures for the l10n-audit test suite.

Usage in tests:
    def test_something(audit_repos):
        sha = audit_repos.commit_source({"web/index.md": "# Web"})
        ...

    def test_with_data(sample_repos):
        # sample_repos comes with one document per audit status
        report = AuditOrchestrator(sample_repos.config()).run(index)
"""

import pytest

from l10n_audit.orchestrator import OrchestratorConfig
from tests.factories import AuditRepoFactory, git_is_available


@pytest.fixture
def audit_repos(tmp_path):
    """
    Empty content repository plus localized tree.

    Skips when git is not available.
    """
    if not git_is_available():
        pytest.skip("Git is not available")
    return AuditRepoFactory(tmp_path)


@pytest.fixture
def sample_repos(audit_repos):
    """
    One document per status:

    - web/current.md    up_to_date   (translation records HEAD's revision)
    - web/changed.md    outdated     (source edited after translation)
    - web/nometa.md     missing_meta (translation without sourceCommit)
    - web/missing.md    untranslated (no translation)
    """
    first = audit_repos.commit_source({
        "web/changed.md": "# Changed\n\nOriginal paragraph.\n",
        "web/nometa.md": "# No meta\n",
        "web/missing.md": "# Missing\n",
    }, message="Initial docs")
    audit_repos.write_translation("web/changed.md", "# 已變更\n", source_commit=first)
    audit_repos.write_translation("web/nometa.md", "# 無中繼資料\n")

    audit_repos.commit_source({"web/changed.md": "# Changed\n\nEdited paragraph.\n"}, message="Edit")
    current = audit_repos.commit_source({"web/current.md": "# Current\n"}, message="Add current")
    audit_repos.write_translation("web/current.md", "# 目前\n", source_commit=current)

    audit_repos.first_revision = first
    return audit_repos


@pytest.fixture
def sequential_config():
    """Worker pool disabled; tasks run inline."""
    return OrchestratorConfig(enabled=False, io_workers=1, task_timeout=30.0)


@pytest.fixture
def parallel_config():
    """Small worker pool."""
    return OrchestratorConfig(enabled=True, io_workers=4, task_timeout=30.0)

"""
Tests for the CLI — run, index and config commands end to end

Tests verify:
- `run` audits, prints the summary and writes the report
- `index` summarises the history (or dumps it as JSON)
- `config` shows, gets and sets values
- Run-aborting errors exit with status 1 and a clear message
"""

import orjson
import pytest

from l10n_audit.cli import main, AuditCLI
from l10n_audit.config import ConfigManager
from tests.factories import requires_git


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path, monkeypatch):
    """Keep the real ~/.l10n-audit and shell environment out of CLI tests."""
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", tmp_path / "user-home" / "config.yaml")
    for key in ("L10N_AUDIT_CONTENT_REPO", "L10N_AUDIT_TRANSLATED_REPO",
                "L10N_AUDIT_TARGET_LOCALE", "L10N_AUDIT_MAX_DIFF_CHARS",
                "L10N_AUDIT_PARALLEL_ENABLED", "L10N_AUDIT_IO_WORKERS"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("L10N_AUDIT_ASCII_ONLY", "1")


@pytest.fixture
def project(sample_repos):
    """Sample repositories plus a project config pointing at them."""
    sample_repos.write_project_config()
    return sample_repos


# =============================================================================
# run
# =============================================================================

@requires_git
class TestRunCommand:

    def test_run_writes_report(self, project, capsys):
        main(["--project", str(project.project), "run"])

        out = capsys.readouterr().out
        assert "[1/4]" in out and "[4/4] Writing report" in out
        assert "outdated      1" in out
        assert "Done: 4 document(s)" in out

        records = orjson.loads((project.project / "public" / "data.json").read_bytes())
        assert [r["path"] for r in records] == [
            "web/changed.md", "web/current.md", "web/missing.md", "web/nometa.md",
        ]
        meta = orjson.loads((project.project / "public" / "meta.json").read_bytes())
        assert "{{DIFF}}" in meta["prompt"]

    def test_run_no_report_sequential(self, project, capsys):
        main(["--project", str(project.project), "run", "--no-report", "--sequential"])

        out = capsys.readouterr().out
        assert "sequential" in out
        assert "Report skipped" in out
        assert not (project.project / "public").exists()

    def test_run_overrides(self, project, tmp_path, capsys):
        out_dir = tmp_path / "custom-out"

        main(["--project", str(project.project), "run", "--output", str(out_dir), "--workers", "2"])

        assert (out_dir / "data.json").exists()
        assert "2 workers" in capsys.readouterr().out

    def test_run_bad_repository_exits_1(self, project, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--project", str(project.project), "run", "--content-repo", str(tmp_path / "nope")])

        assert exc.value.code == 1
        assert "Error:" in capsys.readouterr().err

    def test_run_bad_locale_exits_1(self, project, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--project", str(project.project), "run", "--locale", "en-US"])

        assert exc.value.code == 1
        assert "must differ" in capsys.readouterr().err

    def test_pull_request_warning(self, project, capsys):
        main(["--project", str(project.project), "run", "--no-report"])
        assert "skipping pull request matching" in capsys.readouterr().out


# =============================================================================
# index
# =============================================================================

@requires_git
class TestIndexCommand:

    def test_summary(self, project, capsys):
        main(["--project", str(project.project), "index"])

        out = capsys.readouterr().out
        assert "3 commit record(s) read" in out
        assert "4 path(s) indexed" in out
        assert "web: 4" in out

    def test_json(self, project, capsys):
        main(["--project", str(project.project), "index", "--json"])

        index = orjson.loads(capsys.readouterr().out)
        assert set(index) == {
            "files/en-us/web/changed.md", "files/en-us/web/current.md",
            "files/en-us/web/missing.md", "files/en-us/web/nometa.md",
        }


# =============================================================================
# config
# =============================================================================

class TestConfigCommand:

    def test_show(self, tmp_path, capsys):
        main(["--project", str(tmp_path), "config"])

        out = capsys.readouterr().out
        assert "Configuration:" in out
        assert "io_workers" in out

    def test_set_then_get(self, tmp_path, capsys):
        main(["--project", str(tmp_path), "config", "--set", "repository.target_locale=ja"])
        assert "Set repository.target_locale = ja" in capsys.readouterr().out

        main(["--project", str(tmp_path), "config", "--get", "repository.target_locale"])
        assert capsys.readouterr().out.strip() == "ja"

    def test_set_user_scope(self, tmp_path, capsys):
        main(["--project", str(tmp_path), "config", "--set", "audit.max_diff_chars=10", "--user"])

        assert ConfigManager.USER_CONFIG_FILE.exists()
        assert not (tmp_path / ".l10n-audit" / "config.yaml").exists()

    def test_set_invalid(self, tmp_path, capsys):
        main(["--project", str(tmp_path), "config", "--set", "audit.max_diff_chars=0"])
        assert "max_diff_chars must be >= 1" in capsys.readouterr().out

    def test_set_missing_equals(self, tmp_path, capsys):
        main(["--project", str(tmp_path), "config", "--set", "audit.max_diff_chars"])
        assert "KEY=VALUE" in capsys.readouterr().out

    def test_get_unknown(self, tmp_path, capsys):
        main(["--project", str(tmp_path), "config", "--get", "audit.nope"])
        assert "Unknown setting" in capsys.readouterr().out

    def test_broken_config_exits_1(self, tmp_path, capsys):
        (tmp_path / ".l10n-audit").mkdir()
        (tmp_path / ".l10n-audit" / "config.yaml").write_text("audit: [", encoding="utf-8")

        with pytest.raises(SystemExit) as exc:
            main(["--project", str(tmp_path), "config"])

        assert exc.value.code == 1


# =============================================================================
# Entry point
# =============================================================================

class TestEntryPoint:

    def test_no_command_prints_help(self, capsys):
        main([])
        assert "usage: l10n-audit" in capsys.readouterr().out

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert "l10n-audit 0.1.0" in capsys.readouterr().out

    def test_effective_config_resolves_paths(self, tmp_path):
        cli = AuditCLI(tmp_path)

        config = cli.effective_config({"repository": {"content_repo": "src", "target_locale": None}})

        assert config.repository.content_repo == str(tmp_path / "src")
        assert config.repository.target_locale == "zh-tw"

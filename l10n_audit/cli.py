"""
CLI -- Command interface for l10n-audit

    l10n-audit run       Audit every document and write the report
    l10n-audit index     Build the history index and summarise it
    l10n-audit config    Show or change configuration

Exit status is 1 when a run aborts (unreadable history, invalid config),
0 otherwise. Per-document problems never change the exit status; they show
up in the report.
"""

import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Dict, Any, List

from .config import Config, ConfigManager
from .errors import L10nAuditError
from .presentation.symbols import get_symbols, safe_print
from .commands.run_cmd import RunCommand
from .commands.index_cmd import IndexCommand
from .commands.config_cmd import ConfigCommand
from . import __version__


class AuditCLI:
    """Shared resources for one CLI invocation."""

    def __init__(self, project_dir: Path, user_config_path: Optional[Path] = None):
        self.project_dir = Path(project_dir)
        self.config_manager = ConfigManager(self.project_dir, user_config_path=user_config_path)
        self.config = self.config_manager.load()
        self.symbols = get_symbols(self.config.display.symbols)

        self._run_cmd = RunCommand(self)
        self._index_cmd = IndexCommand(self)
        self._config_cmd = ConfigCommand(self)

    def resolve_path(self, path: str) -> Path:
        """Resolve a configured path against the project directory."""
        candidate = Path(path).expanduser()
        return candidate if candidate.is_absolute() else self.project_dir / candidate

    def effective_config(self, overrides: Optional[Dict[str, Dict[str, Any]]] = None) -> Config:
        """
        Loaded config with one-run overrides applied and repository paths
        made absolute.

        Args:
            overrides: {section: {setting: value}}; None values are ignored
        """
        data = self.config.to_dict()
        for section, values in (overrides or {}).items():
            for setting, value in values.items():
                if value is not None:
                    data[section][setting] = value

        data["repository"]["content_repo"] = str(self.resolve_path(data["repository"]["content_repo"]))
        data["repository"]["translated_repo"] = str(self.resolve_path(data["repository"]["translated_repo"]))
        config = Config.from_dict(data)
        config.validate()
        return config


def main(argv: Optional[List[str]] = None):
    """
    Main entry point for l10n-audit.

    Parser definitions and dispatch logic are in individual command modules.
    """
    parser = argparse.ArgumentParser(
        prog="l10n-audit",
        description="l10n-audit -- Find localized documents that fell behind their source",
    )

    parser.add_argument(
        '--project', '-p',
        default=os.environ.get("L10N_AUDIT_PROJECT_PATH", "."),
        help='Project directory holding .l10n-audit/ (default: L10N_AUDIT_PROJECT_PATH or current)'
    )

    parser.add_argument(
        '--version', '-V',
        action='version',
        version=f'l10n-audit {__version__}'
    )

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    from .commands import register_all, dispatch
    register_all(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    try:
        cli = AuditCLI(Path(args.project))
        dispatch(args.command, cli, args)
    except L10nAuditError as e:
        symbols = get_symbols()
        safe_print(f"{symbols.check_fail} Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()

"""
ConfigCommand — Configuration display and changes

    l10n-audit config                               Show effective configuration
    l10n-audit config --get repository.target_locale
    l10n-audit config --set repository.target_locale=ja [--user]
"""

from ..commands.base import BaseCommand
from ..orchestrator import OrchestratorConfig
from ..presentation.symbols import safe_print


class ConfigCommand(BaseCommand):
    """Command for configuration management."""

    def show_config(self):
        """Show current configuration, including worker pool settings."""
        safe_print(self.config_manager.display())
        safe_print("")
        safe_print("Parallel (environment):")
        for setting, value in OrchestratorConfig.from_env().to_dict().items():
            safe_print(f"  {setting}: {value}")

    def get_config(self, key: str):
        """Print a single value."""
        value = self.config_manager.get(key)
        if value is None:
            safe_print(f"{self.symbols.check_fail} Unknown setting: {key}")
            return
        safe_print(value)

    def set_config(self, key: str, value: str, scope: str = "project"):
        """Set a configuration value."""
        symbols = self.symbols
        error = self.config_manager.set(key, value, scope)

        if error:
            safe_print(f"{symbols.check_fail} {error}")
            return

        if scope == "project":
            saved_to = self.config_manager.project_config_path
        else:
            saved_to = self.config_manager.user_config_path
        safe_print(f"{symbols.check_pass} Set {key} = {value}")
        safe_print(f"  {symbols.tree_end} saved to {saved_to}")


# =============================================================================
# Command Registration (Self-Registration Pattern)
# =============================================================================

def register_parser(subparsers):
    """Register config command parser."""
    p = subparsers.add_parser('config', help='View or set configuration')
    p.add_argument('--set', metavar='KEY=VALUE',
                   help='Set config value (e.g., repository.target_locale=ja)')
    p.add_argument('--get', metavar='KEY',
                   help='Print one config value (e.g., audit.max_diff_chars)')
    p.add_argument('--user', action='store_true',
                   help='Apply to user config instead of project')
    return p


def handle(cli, args):
    """Handle config command dispatch."""
    if args.set:
        if '=' not in args.set:
            safe_print("Error: Use format KEY=VALUE (e.g., repository.target_locale=ja)")
        else:
            key, value = args.set.split('=', 1)
            scope = "user" if args.user else "project"
            cli._config_cmd.set_config(key, value, scope)
    elif args.get:
        cli._config_cmd.get_config(args.get)
    else:
        cli._config_cmd.show_config()

"""
Configuration — Run-scoped settings

Config hierarchy (highest to lowest priority):
  1. Command-line flags (applied by the CLI for one run)
  2. Project config (.l10n-audit/config.yaml)
  3. User config (~/.l10n-audit/config.yaml)
  4. Environment variables
  5. Defaults

The loaded Config is passed explicitly through the audit; nothing reads
settings from module globals.
"""

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional, Dict, Any

from .errors import ConfigError
from .core.diff import DEFAULT_MAX_DIFF_CHARS
from .core.frontmatter import DEFAULT_METADATA_FIELD
from .presentation.symbols import get_symbols


DEFAULT_SOURCE_LOCALE = "en-us"
DEFAULT_TARGET_LOCALE = "zh-tw"
DEFAULT_DOCS_BASE_URL = "https://developer.mozilla.org"


@dataclass
class RepositoryConfig:
    """Where the source and localized trees live."""
    content_repo: str = "./mdn-content"
    translated_repo: str = "./mdn-translated-content"
    source_locale: str = DEFAULT_SOURCE_LOCALE
    target_locale: str = DEFAULT_TARGET_LOCALE
    document_suffix: str = ".md"

    @property
    def source_subtree(self) -> str:
        """Source tree path inside the content repo (git pathspec)."""
        return f"files/{self.source_locale.lower()}"

    @property
    def target_subtree(self) -> str:
        """Localized tree path inside the translated repo."""
        return f"files/{self.target_locale.lower()}"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.content_repo:
            return "repository.content_repo must be set"
        if not self.translated_repo:
            return "repository.translated_repo must be set"
        for name, locale in (("source_locale", self.source_locale), ("target_locale", self.target_locale)):
            if not locale or "/" in locale or locale.strip() != locale:
                return f"Invalid {name} '{locale}'"
        if self.source_locale.lower() == self.target_locale.lower():
            return "source_locale and target_locale must differ"
        return None


@dataclass
class AuditConfig:
    """How documents are compared."""
    metadata_field: str = DEFAULT_METADATA_FIELD  # Dotted path into front-matter
    max_diff_chars: int = DEFAULT_MAX_DIFF_CHARS  # Cap measured in characters
    word_diff: bool = True
    docs_base_url: str = DEFAULT_DOCS_BASE_URL

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.metadata_field or any(not part for part in self.metadata_field.split(".")):
            return f"Invalid metadata field path '{self.metadata_field}'"
        if self.max_diff_chars < 1:
            return "audit.max_diff_chars must be >= 1"
        return None


@dataclass
class OutputConfig:
    """Where the report and its collaborators' files live."""
    output_dir: str = "./public"
    pr_data_path: str = "./prs.json"
    prompt_path: str = "prompt.txt"
    template_path: str = "template.html"


@dataclass
class DisplayConfig:
    """Display preferences."""
    symbols: str = "auto"  # "unicode" | "ascii" | "auto"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_symbols = ("unicode", "ascii", "auto")
        if self.symbols not in valid_symbols:
            return f"Unknown symbols setting '{self.symbols}'. Valid: {', '.join(valid_symbols)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    repository: RepositoryConfig = field(default_factory=RepositoryConfig)
    audit: AuditConfig = field(default_factory=AuditConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def validate(self) -> None:
        """
        Validate every section.

        Raises:
            ConfigError: with the first problem found
        """
        for section in (self.repository, self.audit, self.display):
            error = section.validate()
            if error:
                raise ConfigError(error)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "repository": {
                "content_repo": self.repository.content_repo,
                "translated_repo": self.repository.translated_repo,
                "source_locale": self.repository.source_locale,
                "target_locale": self.repository.target_locale,
                "document_suffix": self.repository.document_suffix,
            },
            "audit": {
                "metadata_field": self.audit.metadata_field,
                "max_diff_chars": self.audit.max_diff_chars,
                "word_diff": self.audit.word_diff,
                "docs_base_url": self.audit.docs_base_url,
            },
            "output": {
                "output_dir": self.output.output_dir,
                "pr_data_path": self.output.pr_data_path,
                "prompt_path": self.output.prompt_path,
                "template_path": self.output.template_path,
            },
            "display": {
                "symbols": self.display.symbols,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        repo_data = data.get("repository", {}) or {}
        audit_data = data.get("audit", {}) or {}
        output_data = data.get("output", {}) or {}
        display_data = data.get("display", {}) or {}

        defaults = cls()
        return cls(
            repository=RepositoryConfig(
                content_repo=str(repo_data.get("content_repo", defaults.repository.content_repo)),
                translated_repo=str(repo_data.get("translated_repo", defaults.repository.translated_repo)),
                source_locale=str(repo_data.get("source_locale", DEFAULT_SOURCE_LOCALE)),
                target_locale=str(repo_data.get("target_locale", DEFAULT_TARGET_LOCALE)),
                document_suffix=str(repo_data.get("document_suffix", ".md")),
            ),
            audit=AuditConfig(
                metadata_field=str(audit_data.get("metadata_field", DEFAULT_METADATA_FIELD)),
                max_diff_chars=_as_int(audit_data.get("max_diff_chars"), DEFAULT_MAX_DIFF_CHARS),
                word_diff=_as_bool(audit_data.get("word_diff"), True),
                docs_base_url=str(audit_data.get("docs_base_url", DEFAULT_DOCS_BASE_URL)),
            ),
            output=OutputConfig(
                output_dir=str(output_data.get("output_dir", defaults.output.output_dir)),
                pr_data_path=str(output_data.get("pr_data_path", defaults.output.pr_data_path)),
                prompt_path=str(output_data.get("prompt_path", defaults.output.prompt_path)),
                template_path=str(output_data.get("template_path", defaults.output.template_path)),
            ),
            display=DisplayConfig(
                symbols=str(display_data.get("symbols", "auto")),
            ),
        )


# Environment variable -> (section, setting)
ENV_OVERRIDES = {
    "L10N_AUDIT_CONTENT_REPO": ("repository", "content_repo"),
    "L10N_AUDIT_TRANSLATED_REPO": ("repository", "translated_repo"),
    "L10N_AUDIT_TARGET_LOCALE": ("repository", "target_locale"),
    "L10N_AUDIT_MAX_DIFF_CHARS": ("audit", "max_diff_chars"),
}


class ConfigManager:
    """
    Manages configuration loading and persistence.

    Hierarchy:
      1. Project config (.l10n-audit/config.yaml)
      2. User config (~/.l10n-audit/config.yaml)
      3. Environment variables
      4. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".l10n-audit"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"
    PROJECT_CONFIG_DIR = ".l10n-audit"
    PROJECT_CONFIG_FILE = "config.yaml"

    def __init__(self, project_dir: Optional[Path] = None, user_config_path: Optional[Path] = None):
        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self._user_config_path = Path(user_config_path) if user_config_path else self.USER_CONFIG_FILE
        self._config: Optional[Config] = None

    @property
    def project_config_path(self) -> Path:
        return self.project_dir / self.PROJECT_CONFIG_DIR / self.PROJECT_CONFIG_FILE

    @property
    def user_config_path(self) -> Path:
        return self._user_config_path

    def load(self) -> Config:
        """
        Load configuration from all sources.

        Raises:
            ConfigError: if a config file exists but is not valid YAML
        """
        if self._config is not None:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: Environment
        for env_key, (section, setting) in ENV_OVERRIDES.items():
            if os.environ.get(env_key):
                config_data.setdefault(section, {})[setting] = os.environ[env_key]

        # Layer 2: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 3: Project config (highest file priority)
        config_data = self._merge(config_data, self._read_yaml(self.project_config_path))

        self._config = Config.from_dict(config_data)
        return self._config

    def _read_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read config {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must be a mapping")
        return data

    def save_project(self, config: Config):
        """Save configuration to project config file."""
        self.project_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.project_config_path, 'w', encoding="utf-8") as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

        self._config = config

    def save_user(self, config: Config):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.user_config_path, 'w', encoding="utf-8") as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

        self._config = config

    def set(self, key: str, value: str, scope: str = "project") -> Optional[str]:
        """
        Set a configuration value.

        Args:
            key: Dot-separated key (e.g., "repository.target_locale")
            value: Value to set
            scope: "project" or "user"

        Returns:
            Error message or None if successful
        """
        config = self.load()

        parts = key.split(".")
        if len(parts) != 2:
            return f"Invalid key format: {key}. Use 'section.setting' (e.g., 'repository.target_locale')"

        section_name, setting = parts
        data = config.to_dict()

        if section_name not in data:
            return f"Unknown section: {section_name}. Valid: {', '.join(data.keys())}"
        if setting not in data[section_name]:
            valid = ", ".join(data[section_name].keys())
            return f"Unknown {section_name} setting: {setting}. Valid: {valid}"

        data[section_name][setting] = value
        try:
            updated = Config.from_dict(data)
            updated.validate()
        except ConfigError as e:
            return str(e)

        if scope == "project":
            self.save_project(updated)
        else:
            self.save_user(updated)

        return None

    def get(self, key: str) -> Optional[str]:
        """Get a configuration value."""
        parts = key.split(".")
        if len(parts) != 2:
            return None

        section_name, setting = parts
        section = self.load().to_dict().get(section_name, {})
        if setting not in section:
            return None

        value = section[setting]
        if isinstance(value, bool):
            return str(value).lower()
        return str(value)

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        symbols = get_symbols(config.display.symbols)

        lines = ["Configuration:"]
        for section_name, values in config.to_dict().items():
            lines.append("")
            lines.append(f"{section_name.capitalize()}:")
            for setting, value in values.items():
                lines.append(f"  {setting}: {value}")

        lines.extend([
            "",
            "Config files:",
            f"  User: {self.user_config_path} {symbols.check_pass if self.user_config_path.exists() else '(none)'}",
            f"  Project: {self.project_config_path} {symbols.check_pass if self.project_config_path.exists() else '(none)'}",
        ])

        return "\n".join(lines)


def _as_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Expected an integer, got {value!r}")


def _as_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    return str(value).lower() in ("true", "1", "yes", "on")


# Convenience function
def get_config(project_dir: Optional[Path] = None) -> Config:
    """Load configuration for a project."""
    return ConfigManager(project_dir).load()

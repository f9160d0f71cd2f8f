"""Configuration module for docs-sync.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml
- APP_ENV=test → config_test.yaml
- Default      → config.yaml

Paths may be overridden from the environment (or a .env file).
Fails fast with clear error messages if configuration is missing or invalid.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from docsync/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable."""
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        try:
            loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Top level of {config_path} must be a mapping")
    return loaded


def _get_section(yaml_config: dict, name: str) -> dict:
    """Get a top-level YAML section, which must be a mapping if present."""
    section = yaml_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"'{name}' section must be a mapping")
    return section


def _get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get optional environment variable with default; empty counts as unset."""
    value = os.environ.get(key)
    if not value:
        return default
    return value


def _resolve_path(value: Optional[str], name: str) -> str:
    """Resolve a configured path against the project root."""
    if value is None or not str(value).strip():
        raise ConfigurationError(f"'{name}' must not be empty")
    path = Path(str(value)).expanduser()
    if not path.is_absolute():
        path = _get_project_root() / path
    return str(path)


@dataclass(frozen=True)
class CategoryRuleConfig:
    """One ordered keyword rule for category assignment."""
    label: str
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class SyncConfig:
    """Source directory and managed partition settings."""
    docs_dir: str
    extension: str
    managed_category: str
    read_workers: int
    category_rules: Optional[Tuple[CategoryRuleConfig, ...]]  # None: built-in rules


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration."""
    path: str


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    sync: SyncConfig
    database: DatabaseConfig
    logging: LoggingConfig


def _parse_category_rules(
    raw: Optional[List[dict]],
) -> Optional[Tuple[CategoryRuleConfig, ...]]:
    """Parse the ordered category rule list from YAML."""
    if raw is None:
        return None

    if not isinstance(raw, list):
        raise ConfigurationError("'sync.category_rules' must be a list of rules")

    rules = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Category rule #{index} must be a mapping")
        label = entry.get("label")
        keywords = entry.get("keywords") or []
        if not label:
            raise ConfigurationError(f"Category rule #{index} is missing a label")
        if not isinstance(keywords, list):
            raise ConfigurationError(f"Category rule '{label}' keywords must be a list")
        if not keywords:
            raise ConfigurationError(f"Category rule '{label}' needs at least one keyword")
        rules.append(
            CategoryRuleConfig(
                label=str(label),
                keywords=tuple(str(k).lower() for k in keywords),
            )
        )
    return tuple(rules)


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads the YAML file for settings, then applies DOCS_SYNC_* overrides
    from the environment (.env is read first).

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    # Load environment variables from .env file
    load_dotenv()

    yaml_config = _load_yaml_config()

    # Build Sync config
    sync_section = _get_section(yaml_config, "sync")

    extension = str(sync_section.get("extension", ".md")).lower()
    if not extension.startswith(".") or len(extension) < 2:
        raise ConfigurationError(
            f"'sync.extension' must look like '.md', got '{extension}'"
        )

    try:
        read_workers = int(sync_section.get("read_workers", 1))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"'sync.read_workers' must be an integer: {e}") from e
    if read_workers < 1:
        raise ConfigurationError("'sync.read_workers' must be at least 1")

    sync_config = SyncConfig(
        docs_dir=_resolve_path(
            _get_optional_env("DOCS_SYNC_DOCS_DIR", sync_section.get("docs_dir", "docs")),
            "sync.docs_dir",
        ),
        extension=extension,
        managed_category=str(sync_section.get("managed_category", "Docs")),
        read_workers=read_workers,
        category_rules=_parse_category_rules(sync_section.get("category_rules")),
    )

    # Build Database config
    db_section = _get_section(yaml_config, "database")

    database_config = DatabaseConfig(
        path=_resolve_path(
            _get_optional_env("DOCS_SYNC_DB_PATH", db_section.get("path", "bot.db")),
            "database.path",
        ),
    )

    # Build Logging config
    logging_section = _get_section(yaml_config, "logging")

    level = str(
        _get_optional_env("DOCS_SYNC_LOG_LEVEL", logging_section.get("level", "INFO"))
    ).upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(f"'logging.level' must be one of {LOG_LEVELS}, got '{level}'")

    logging_config = LoggingConfig(level=level)

    return AppConfig(
        sync=sync_config,
        database=database_config,
        logging=logging_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config

# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to the inferencer, the CLI and the mapping store.
#
# CLASSES:
# --------
# - MySQLConfig (dataclass)
#     host: str          (default "localhost")
#     port: int          (default 3306)
#     user: str          (default "root")
#     password: str      (default "root")
#     database: str      (default "app_db")
#
# - MappingConfig (dataclass)
#     namespace: str                     (default "")
#     repository_class: str | None       (default None)
#     schema: str | None                 (default None, all schemas)
#     cross_schema: list[(from, to)]     (default [])
#     table_prefixes: dict[prefix, ns]   (default {})
#
# - AppConfig (dataclass)
#     mysql: MySQLConfig
#     mapping: MappingConfig
#     output_dir: str    (default "mappings/")
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# ENVIRONMENT:
# ------------
#   MYSQL_HOST, MYSQL_PORT, MYSQL_USER, MYSQL_PASSWORD, MYSQL_DATABASE
#   MAPPER_NAMESPACE          → "App.Entity"
#   MAPPER_REPOSITORY_CLASS   → "App.Repository.BaseRepository"
#   MAPPER_SCHEMA             → "shop"
#   MAPPER_CROSS_SCHEMA       → "shop:billing,billing:shop"
#   MAPPER_TABLE_PREFIXES     → "wp_=Wordpress,cms_=Cms"
#   MAPPER_OUTPUT_DIR         → "mappings/"
#
# USAGE:
# ------
#   from reverse_mapper.config import get_config
#   config = get_config()
#   print(config.mysql.host)
#   print(config.mapping.namespace)
#
# ==============================================

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from pathlib import Path

from dotenv import load_dotenv

from reverse_mapper.errors import ConfigError


@dataclass
class MySQLConfig:
    """MySQL database configuration."""
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = "root"
    database: str = "app_db"


@dataclass
class MappingConfig:
    """Naming and scoping options of the inferencer."""
    namespace: str = ""
    repository_class: Optional[str] = None
    schema: Optional[str] = None
    cross_schema: List[Tuple[str, str]] = field(default_factory=list)
    table_prefixes: Dict[str, str] = field(default_factory=dict)


@dataclass
class AppConfig:
    """Main application configuration."""
    mysql: MySQLConfig
    mapping: MappingConfig
    output_dir: str = "mappings/"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def parse_cross_schema(value: str) -> List[Tuple[str, str]]:
    """
    Parse "from:to,from:to" into schema pairs.

    Raises:
        ConfigError: An entry is not of the form "from:to"
    """
    pairs = []
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        parts = [part.strip() for part in entry.split(":")]
        if len(parts) != 2 or not all(parts):
            raise ConfigError(f"MAPPER_CROSS_SCHEMA entry must be 'from:to', got '{entry}'")
        pairs.append((parts[0], parts[1]))
    return pairs


def parse_table_prefixes(value: str) -> Dict[str, str]:
    """
    Parse "prefix=Namespace,..." into a prefix → namespace dict.

    Raises:
        ConfigError: An entry is not of the form "prefix=Namespace"
    """
    prefixes = {}
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        prefix, sep, namespace = entry.partition("=")
        if not sep or not prefix.strip() or not namespace.strip():
            raise ConfigError(f"MAPPER_TABLE_PREFIXES entry must be 'prefix=Namespace', got '{entry}'")
        prefixes[prefix.strip()] = namespace.strip()
    return prefixes


def _int_env(name: str, default: str) -> int:
    value = os.getenv(name, default)
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got '{value}'")


def load_config() -> AppConfig:
    """
    Build a fresh AppConfig from the current environment.

    Returns:
        AppConfig: Application configuration

    Raises:
        ConfigError: A variable holds a malformed value
    """
    mysql_config = MySQLConfig(
        host=os.getenv("MYSQL_HOST", "localhost"),
        port=_int_env("MYSQL_PORT", "3306"),
        user=os.getenv("MYSQL_USER", "root"),
        password=os.getenv("MYSQL_PASSWORD", "root"),
        database=os.getenv("MYSQL_DATABASE", "app_db")
    )

    mapping_config = MappingConfig(
        namespace=os.getenv("MAPPER_NAMESPACE", ""),
        repository_class=os.getenv("MAPPER_REPOSITORY_CLASS") or None,
        schema=os.getenv("MAPPER_SCHEMA") or None,
        cross_schema=parse_cross_schema(os.getenv("MAPPER_CROSS_SCHEMA", "")),
        table_prefixes=parse_table_prefixes(os.getenv("MAPPER_TABLE_PREFIXES", ""))
    )

    return AppConfig(
        mysql=mysql_config,
        mapping=mapping_config,
        output_dir=os.getenv("MAPPER_OUTPUT_DIR", "mappings/")
    )


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    _config_instance = load_config()
    return _config_instance


def reset_config() -> None:
    """Forget the cached singleton (tests)."""
    global _config_instance
    _config_instance = None

"""
Configuration management for DataMagic.

Provides the settings dataclass and utilities for loading it
from YAML files and environment variables.
"""

import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional
import yaml


# Environment variable -> settings attribute
ENV_OVERRIDES = {
    "DATAMAGIC_ES_URL": "es_url",
    "DATAMAGIC_ENV": "env",
    "DATA_PATH": "data_path",
    "DATAMAGIC_LOG_LEVEL": "log_level",
}


@dataclass
class Settings:
    """
    Main settings container for DataMagic.

    Attributes:
        es_url: Search engine URL
        env: Environment name, used as the prefix of every index name
        data_path: Directory holding data.yaml and the CSV files to import
        default_per_page: Page size used when a request gives none
        max_per_page: Upper bound on the page size of any request
        force_utf8: Drop invalid UTF-8 sequences when reading data files
        log_level: Logging level
        request_timeout: Search engine request timeout in seconds
    """
    es_url: str = "http://localhost:9200"
    env: str = "development"
    data_path: str = "./data"

    default_per_page: int = 20
    max_per_page: int = 100

    force_utf8: bool = False
    log_level: str = "INFO"
    request_timeout: int = 30

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create Settings from dictionary."""
        return cls(**data)

    def to_dict(self) -> dict:
        """Convert Settings to dictionary."""
        return asdict(self)

    def apply_env(self, environ: Optional[dict] = None) -> "Settings":
        """Override settings from environment variables, in place."""
        environ = os.environ if environ is None else environ
        for var, attr in ENV_OVERRIDES.items():
            value = environ.get(var)
            if value:
                setattr(self, attr, value)
        return self


def get_default_config_path() -> Path:
    """Get path to default configuration file."""
    env_config = os.environ.get("DATAMAGIC_CONFIG")
    if env_config:
        return Path(env_config)

    return Path("./datamagic.yaml")


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from a YAML file, then apply environment overrides.

    Args:
        config_path: Path to config file. If None, uses default.

    Returns:
        Settings object with loaded configuration

    Example:
        >>> settings = load_config()
        >>> settings = load_config("./datamagic.yaml")
    """
    if config_path is None:
        path = get_default_config_path()
    else:
        path = Path(config_path)

    settings = Settings()

    if path.exists():
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        if data:
            settings = Settings.from_dict(data)

    return settings.apply_env()

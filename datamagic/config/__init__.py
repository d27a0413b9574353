"""
Configuration module for DataMagic.

This module provides process settings, loaded from YAML files and
environment variables, and the per-dataset ``data.yaml`` configuration.

Example:
    >>> from datamagic.config import load_config, DataConfig
    >>>
    >>> settings = load_config()
    >>> print(settings.es_url)
    >>>
    >>> data_config = DataConfig.load(settings.data_path)
    >>> print(data_config.field_type("city"))
"""

from .settings import (
    Settings,
    load_config,
    get_default_config_path,
)
from .data_config import (
    DataConfig,
    FileConfig,
)

__all__ = [
    "Settings",
    "load_config",
    "get_default_config_path",
    "DataConfig",
    "FileConfig",
]

"""
Per-dataset configuration read from ``data.yaml``.

A data directory carries a ``data.yaml`` describing the index its files
load into, the api endpoint each file is served under, optional column
renames, and the declared type of fields that need special matching::

    index: city-data
    types:
      city: name
      population: integer
    files:
      cities100.csv:
        api: cities
        fields:
          NAME: city
          POPULATION: population

One DataConfig is built per facade and handed, by reference, to both the
importer and the query compiler's type resolver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union
import yaml

from ..core.exceptions import ConfigurationError


DATA_FILE = "data.yaml"
DEFAULT_INDEX = "general"
DEFAULT_API = "data"


@dataclass
class FileConfig:
    """Import settings for a single data file."""
    api: str = DEFAULT_API
    fields: Optional[Dict[str, str]] = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FileConfig":
        data = data or {}
        fields = data.get("fields")
        if fields is not None and not isinstance(fields, dict):
            raise ConfigurationError(
                f"'fields' must map source columns to field names, got {type(fields).__name__}"
            )
        return cls(
            api=str(data.get("api") or DEFAULT_API),
            fields={str(k): str(v) for k, v in fields.items()} if fields else None,
        )


@dataclass
class DataConfig:
    """
    Dataset configuration: index, files, api endpoints and field types.

    Attributes:
        index: Unscoped name of the index the files load into
        files: File name -> import settings
        types: Field name -> declared type ("name", "integer", ...)
        api_endpoints: Api name -> unscoped index name
    """
    index: str = DEFAULT_INDEX
    files: Dict[str, FileConfig] = field(default_factory=dict)
    types: Dict[str, str] = field(default_factory=dict)
    api_endpoints: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "DataConfig":
        """Create a DataConfig from parsed ``data.yaml`` content."""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"{DATA_FILE} must contain a mapping, got {type(data).__name__}"
            )

        files = data.get("files") or {}
        types = data.get("types") or {}
        if not isinstance(files, dict) or not isinstance(types, dict):
            raise ConfigurationError(f"'files' and 'types' in {DATA_FILE} must be mappings")

        return cls(
            index=str(data.get("index") or DEFAULT_INDEX),
            files={str(name): FileConfig.from_dict(conf) for name, conf in files.items()},
            types={str(name): str(kind).lower() for name, kind in types.items()},
        )

    @classmethod
    def load(cls, directory: Union[str, Path]) -> "DataConfig":
        """
        Load ``data.yaml`` from a data directory.

        Raises:
            ConfigurationError: If the file is missing or is not valid YAML
        """
        path = Path(directory) / DATA_FILE
        if not path.is_file():
            raise ConfigurationError(f"No {DATA_FILE} found in {directory}")

        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid {path}: {e}") from e

        return cls.from_dict(data)

    def field_type(self, name: str) -> Optional[str]:
        """Declared type of a field, or None when the field is not typed."""
        return self.types.get(name)

    def file_config(self, file_name: str) -> FileConfig:
        """Import settings for a file; untracked files get the defaults."""
        return self.files.get(file_name) or FileConfig()

    def register_endpoint(self, api: str, index: str) -> None:
        self.api_endpoints[api] = index

    def index_for_api(self, api: str) -> Optional[str]:
        return self.api_endpoints.get(api)

"""
DataMagic - loads delimited data files into search indices and searches them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from elasticsearch import Elasticsearch

from ..config import DataConfig, Settings
from ..geo import Geocoder, default_geocoder
from ..query import CompiledQuery, QueryCompiler, TypeResolver, normalize_keys
from ..utils.logging import get_logger
from ..utils.validation import validate_index_name
from .exceptions import ConfigurationError, InvalidDataError, ValidationError
from .importer import CsvImporter, FileResult, ImportResult, ImportSummary


logger = get_logger(__name__)


class DataMagic:
    """
    Facade over a search engine holding imported data sets.

    Owns the engine client, the dataset configuration and the query
    compiler built on it. Every index name is scoped by the configured
    environment, so ``cities`` in ``production`` lives in the
    ``production-cities`` index.

    Example:
        >>> dm = DataMagic(load_config())
        >>>
        >>> # Load a data directory described by its data.yaml
        >>> summary = dm.import_all("./data/cities")
        >>>
        >>> # Search an api endpoint configured there
        >>> dm.search({"state": "CA", "population__range": "100000.."},
        ...           {"api": "cities", "sort": "population:desc"})
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client=None,
        data_config: Optional[DataConfig] = None,
        geocoder: Optional[Geocoder] = None,
    ):
        """
        Initialize DataMagic.

        Args:
            settings: Process settings (defaults when None)
            client: Search engine client; created from settings.es_url when None
            data_config: Dataset configuration (empty when None)
            geocoder: Zip code lookup (bundled table when None)
        """
        self.settings = settings or Settings()
        self._client = client
        self.geocoder = geocoder or default_geocoder()
        self.files: Dict[str, List[str]] = {}
        self.configure(data_config or DataConfig())

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    @property
    def client(self):
        """Search engine client, created on first use."""
        if self._client is None:
            self._client = Elasticsearch(
                self.settings.es_url,
                request_timeout=self.settings.request_timeout,
            )
            logger.info(f"Connected search client to {self.settings.es_url}")
        return self._client

    def configure(self, data_config: DataConfig) -> None:
        """Use a dataset configuration for both importing and searching."""
        self.data_config = data_config
        self.compiler = QueryCompiler(
            data_config,
            self.geocoder,
            default_per_page=self.settings.default_per_page,
            max_per_page=self.settings.max_per_page,
        )

    def scoped_index_name(self, index_name: str) -> str:
        return validate_index_name(f"{self.settings.env}-{index_name}")

    # =========================================================================
    # INDEX MANAGEMENT
    # =========================================================================

    def delete_index(self, index_name: str) -> None:
        """Delete one index of the current environment."""
        scoped = self.scoped_index_name(index_name)
        self.client.indices.delete(index=scoped)
        self.client.indices.clear_cache()
        self.files.pop(scoped, None)
        logger.info(f"Deleted index '{scoped}'")

    def delete_all(self) -> None:
        """Delete every index of the current environment."""
        indices = list(self.client.indices.get(index=f"{self.settings.env}-*"))
        for scoped in indices:
            self.client.indices.delete(index=scoped)
        self.client.indices.clear_cache()
        self.files.clear()
        logger.info(f"Deleted {len(indices)} indices for '{self.settings.env}'")

    # =========================================================================
    # IMPORT
    # =========================================================================

    def import_csv(
        self,
        index_name: str,
        datafile,
        fields: Optional[Dict[str, str]] = None,
        force_utf8: Optional[bool] = None,
    ) -> ImportResult:
        """
        Import a CSV file into an index.

        Args:
            index_name: Unscoped index name
            datafile: Readable file-like object
            fields: Source column -> field name; unmapped columns are dropped
            force_utf8: Drop invalid UTF-8; settings.force_utf8 when None

        Returns:
            ImportResult with the row count, field names and row errors
        """
        scoped = self.scoped_index_name(index_name)
        importer = CsvImporter(self.client, TypeResolver(self.data_config))
        return importer.import_csv(
            scoped,
            datafile,
            fields=fields,
            force_utf8=self.settings.force_utf8 if force_utf8 is None else force_utf8,
        )

    def import_all(self, directory: Optional[Union[str, Path]] = None) -> ImportSummary:
        """
        Import every CSV file under a data directory.

        The directory's data.yaml becomes the active dataset configuration
        and each file's api endpoint is registered against its index.
        A file that fails to import is recorded in the summary and skipped.

        Args:
            directory: Data directory; settings.data_path when None

        Returns:
            ImportSummary

        Raises:
            ConfigurationError: If data.yaml is missing or invalid
        """
        directory = Path(directory or self.settings.data_path)
        data_config = DataConfig.load(directory)
        data_config.api_endpoints = {
            **self.data_config.api_endpoints,
            **data_config.api_endpoints,
        }
        self.configure(data_config)

        summary = ImportSummary(index=data_config.index)
        paths = sorted(p for p in directory.glob("**/*.csv") if p.is_file())

        for path in paths:
            file_config = data_config.file_config(path.name)
            data_config.register_endpoint(file_config.api, data_config.index)

            logger.info(f"reading {path}")
            try:
                with open(path, "rb") as datafile:
                    result = self.import_csv(data_config.index, datafile, fields=file_config.fields)
            except (ValidationError, InvalidDataError, OSError) as e:
                logger.warning(f"Error: skipping {path}, {e}")
                summary.files.append(FileResult(str(path), False, error=str(e)))
                continue

            logger.info(f"imported {result.rows} rows")
            self.files.setdefault(result.index, []).append(str(path))
            summary.files.append(FileResult(str(path), True, rows=result.rows))

        return summary

    # =========================================================================
    # SEARCH
    # =========================================================================

    def index_name_from_options(self, options: Mapping[Any, Any]) -> str:
        """
        Resolve the scoped index a request targets.

        ``api`` names an endpoint configured in data.yaml, ``index`` names
        an index directly. When both are given, ``api`` wins.

        Raises:
            ConfigurationError: If the api has no configured endpoint
            ValidationError: If neither api nor index is given
        """
        options = normalize_keys(options)
        api, index = options.get("api"), options.get("index")

        if api and index:
            logger.warning("search options api will override index, only one expected")

        if api:
            index_name = self.data_config.index_for_api(str(api))
            if index_name is None:
                raise ConfigurationError(f"No configuration found for api '{api}'")
        elif index:
            index_name = str(index)
        else:
            raise ValidationError("Search requires an 'api' or 'index' option")

        return self.scoped_index_name(index_name)

    def compile(
        self,
        params: Optional[Mapping[Any, Any]] = None,
        options: Optional[Mapping[Any, Any]] = None,
    ) -> CompiledQuery:
        """Compile a search request against the active dataset configuration."""
        return self.compiler.compile(params, options)

    def search(
        self,
        params: Optional[Mapping[Any, Any]] = None,
        options: Optional[Mapping[Any, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Search an index and return the matching documents.

        Args:
            params: Field filters, keyed ``field`` or ``field__operator``
            options: ``api`` or ``index``, plus the compile options

        Returns:
            One mapping per hit, in rank order
        """
        options = options or {}
        index_name = self.index_name_from_options(options)

        return self.execute(self.compile(params, options), index_name)

    def execute(self, compiled: CompiledQuery, index_name: str) -> List[Dict[str, Any]]:
        """Submit an already compiled query to a scoped index."""
        body = compiled.to_dict()

        logger.debug(f"Searching '{index_name}': {body}")
        response = self.client.search(index=index_name, body=body)

        return [
            hit["_source"] if "_source" in hit else hit.get("fields", {})
            for hit in response["hits"]["hits"]
        ]

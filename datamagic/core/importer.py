"""
CSV import into search engine indices.

Rows are indexed one document at a time and every row reports its own
outcome: a row the engine rejects is recorded and skipped, never fatal to
the rest of the file. Likewise a directory import records each file's
outcome and carries on.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from elasticsearch import ApiError, SerializationError, TransportError

from ..query.clauses import name_field
from ..query.types import FieldType, TypeResolver
from ..utils.logging import get_logger
from .exceptions import InvalidDataError, ValidationError


logger = get_logger(__name__)

DOCUMENT_ERRORS = (ApiError, TransportError, SerializationError)


@dataclass
class RowResult:
    """Outcome of indexing one row (1-based, header excluded)."""
    row: int
    success: bool
    error: Optional[str] = None


@dataclass
class ImportResult:
    """Outcome of importing one CSV file."""
    index: str
    rows: int = 0
    fields: List[str] = field(default_factory=list)
    errors: List[RowResult] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "rows": self.rows,
            "fields": self.fields,
            "errors": [
                {"row": e.row, "error": e.error} for e in self.errors
            ],
        }


@dataclass
class FileResult:
    """Outcome of importing one file of a directory."""
    path: str
    success: bool
    rows: int = 0
    error: Optional[str] = None


@dataclass
class ImportSummary:
    """Aggregate outcome of a directory import."""
    index: str
    files: List[FileResult] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return sum(f.rows for f in self.files)

    @property
    def succeeded(self) -> List[FileResult]:
        return [f for f in self.files if f.success]

    @property
    def failed(self) -> List[FileResult]:
        return [f for f in self.files if not f.success]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "total_rows": self.total_rows,
            "files": [
                {"path": f.path, "success": f.success, "rows": f.rows, "error": f.error}
                for f in self.files
            ],
        }


class CsvImporter:
    """
    Indexes the rows of a CSV file as documents.

    Args:
        client: Search engine client
        resolver: Field types; NAME fields also get a lower-cased copy
            under ``_<field>`` for case-insensitive matching
    """

    def __init__(self, client, resolver: Optional[TypeResolver] = None):
        self.client = client
        self.resolver = resolver or TypeResolver()

    def import_csv(
        self,
        index_name: str,
        datafile,
        fields: Optional[Dict[str, str]] = None,
        force_utf8: bool = False,
    ) -> ImportResult:
        """
        Import a CSV file into an index.

        Args:
            index_name: Target index (already scoped)
            datafile: Readable file-like object yielding text or bytes
            fields: Source column -> field name; unmapped columns are dropped
            force_utf8: Drop invalid UTF-8 sequences instead of failing

        Returns:
            ImportResult

        Raises:
            ValidationError: If datafile is not readable
            InvalidDataError: If the file is malformed, no row was indexed,
                or the index could not be refreshed
        """
        if not hasattr(datafile, "read"):
            raise ValidationError(f"Can't read datafile {datafile!r}")

        reader = csv.DictReader(io.StringIO(self._decode(datafile.read(), force_utf8)))
        if not reader.fieldnames:
            raise InvalidDataError("Invalid file format: no header row")
        reader.fieldnames = [name.strip() for name in reader.fieldnames]

        result = ImportResult(index=index_name)
        result.fields = list(fields.values()) if fields else list(reader.fieldnames)

        row_number = 0
        try:
            for row_number, row in enumerate(reader, start=1):
                document = self._document(row, fields)
                try:
                    self.client.index(index=index_name, document=document)
                except DOCUMENT_ERRORS as e:
                    logger.warning(f"row {row_number}: {e}")
                    result.errors.append(RowResult(row_number, False, str(e)))
                    continue
                result.rows += 1
        except csv.Error as e:
            logger.warning(f"row {row_number + 1}: {e}")
            result.errors.append(RowResult(row_number + 1, False, str(e)))

        if result.rows == 0:
            raise InvalidDataError("Invalid file format or zero rows")

        try:
            self.client.indices.refresh(index=index_name)
        except DOCUMENT_ERRORS as e:
            raise InvalidDataError(f"Could not refresh index '{index_name}': {e}") from e

        return result

    def _decode(self, data, force_utf8: bool) -> str:
        if isinstance(data, bytes):
            try:
                return data.decode("utf-8", errors="ignore" if force_utf8 else "strict")
            except UnicodeDecodeError as e:
                raise InvalidDataError(f"Data is not valid UTF-8: {e}") from e

        if force_utf8:
            return data.encode("utf-8", errors="ignore").decode("utf-8")
        return data

    def _document(
        self,
        row: Dict[Optional[str], Any],
        fields: Optional[Dict[str, str]],
    ) -> Dict[str, Any]:
        # csv puts surplus values under a None key
        row = {key: value for key, value in row.items() if key is not None}

        if fields:
            row = {fields[key]: value for key, value in row.items() if key in fields}

        for name, value in list(row.items()):
            if value and self.resolver.resolve(name) == FieldType.NAME:
                row[name_field(name)] = value.lower()

        return row

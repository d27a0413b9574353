"""
Zip code geocoding for location searches.
"""

from __future__ import annotations

import csv
from pathlib import Path
from functools import lru_cache
from typing import Dict, Mapping, Optional, Protocol, Tuple, Union

import zipcodes

from ..core.exceptions import ConfigurationError


Coordinates = Dict[str, float]


class Geocoder(Protocol):
    """Resolves a zip code to ``{"lat": ..., "lon": ...}``, or None if unknown."""

    def coordinates_for_zip(self, zip_code: str) -> Optional[Coordinates]:
        ...


class ZipcodeGeocoder:
    """
    Zip code lookup for location searches.

    By default every US zip code is resolved through the ``zipcodes``
    package's bundled table. A custom table can be given directly as a
    mapping of zip code to ``(lat, lon)``, or read from a CSV file with
    ``zip``, ``lat`` and ``lon`` columns.

    Example:
        >>> geocoder = ZipcodeGeocoder()
        >>> geocoder.coordinates_for_zip("94132")
        {'lat': 37.72..., 'lon': -122.47...}
    """

    def __init__(
        self,
        table: Optional[Mapping[str, Tuple[float, float]]] = None,
        path: Optional[Union[str, Path]] = None,
    ):
        if table is None and path is not None:
            table = load_zipcodes(path)

        self._table: Optional[Dict[str, Tuple[float, float]]] = None
        if table is not None:
            self._table = {
                normalize_zip(z): (float(lat), float(lon)) for z, (lat, lon) in table.items()
            }

    def __len__(self) -> int:
        if self._table is None:
            return len(zipcodes.list_all())
        return len(self._table)

    def __contains__(self, zip_code: str) -> bool:
        return self.coordinates_for_zip(zip_code) is not None

    def coordinates_for_zip(self, zip_code: str) -> Optional[Coordinates]:
        zip_code = normalize_zip(zip_code)

        if self._table is not None:
            entry = self._table.get(zip_code)
            if entry is None:
                return None
            lat, lon = entry
            return {"lat": lat, "lon": lon}

        try:
            matches = zipcodes.matching(zip_code)
        except (TypeError, ValueError):
            # malformed zip codes are unknown, not errors
            return None

        for match in matches:
            if match.get("lat") and match.get("long"):
                return {"lat": float(match["lat"]), "lon": float(match["long"])}

        return None


@lru_cache(maxsize=1)
def default_geocoder() -> ZipcodeGeocoder:
    """Shared geocoder over the full US zip code table."""
    return ZipcodeGeocoder()


def normalize_zip(zip_code: str) -> str:
    """Five-digit form of a zip code: ``"94132-1722"`` -> ``"94132"``."""
    text = str(zip_code).strip().split("-", 1)[0]
    return text.zfill(5) if text.isdigit() else text


def load_zipcodes(path: Union[str, Path]) -> Dict[str, Tuple[float, float]]:
    """
    Read a zip code table from CSV.

    Raises:
        ConfigurationError: If the file is missing or lacks the required columns
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError(f"Zip code table not found: {path}")

    table = {}
    with open(path, "r", newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)
        missing = {"zip", "lat", "lon"} - set(reader.fieldnames or [])
        if missing:
            raise ConfigurationError(
                f"Zip code table {path} is missing columns: {', '.join(sorted(missing))}"
            )
        for row in reader:
            table[row["zip"]] = (float(row["lat"]), float(row["lon"]))

    return table

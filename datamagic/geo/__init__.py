"""
Geocoding for location searches.
"""

from .geocoder import (
    Geocoder,
    ZipcodeGeocoder,
    default_geocoder,
    load_zipcodes,
    normalize_zip,
)

__all__ = [
    "Geocoder",
    "ZipcodeGeocoder",
    "default_geocoder",
    "load_zipcodes",
    "normalize_zip",
]

"""
Utility functions for DataMagic.
"""

from .validation import (
    validate_index_name,
    coerce_int,
    coerce_list,
)
from .logging import setup_logger, get_logger

__all__ = [
    "validate_index_name",
    "coerce_int",
    "coerce_list",
    "setup_logger",
    "get_logger",
]

"""
Input validation utilities.
"""

from typing import Any, List, Optional
import re

from ..core.exceptions import InvalidValueError, ValidationError


# Index names: lowercase alphanumerics, underscores, hyphens, dots
INDEX_NAME_PATTERN = re.compile(r'^[a-z0-9_\-\.]+$')

MAX_INDEX_NAME_LENGTH = 255


def validate_index_name(name: str) -> str:
    """
    Validate a search engine index name.

    Args:
        name: The index name to validate

    Returns:
        The validated name

    Raises:
        ValidationError: If the name is invalid
    """
    if not isinstance(name, str):
        raise ValidationError(
            f"Index name must be a string, got {type(name).__name__}"
        )

    if not name:
        raise ValidationError("Index name cannot be empty")

    if len(name) > MAX_INDEX_NAME_LENGTH:
        raise ValidationError(
            f"Index name too long: {len(name)} characters "
            f"(max {MAX_INDEX_NAME_LENGTH})"
        )

    if not INDEX_NAME_PATTERN.match(name):
        raise ValidationError(
            f"Invalid index name '{name}': must contain only lowercase "
            "alphanumeric characters, underscores, hyphens, or dots"
        )

    return name


def coerce_int(name: str, value: Any, default: int) -> int:
    """
    Coerce a request option to an integer.

    Options usually arrive as query-string text, so ``"3"`` is accepted
    as well as ``3``. Missing and empty values fall back to ``default``.

    Raises:
        InvalidValueError: If the value is not an integer
    """
    if value is None or value == "":
        return default

    if isinstance(value, bool):
        raise InvalidValueError(f"Option '{name}' must be an integer, got {value!r}")

    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidValueError(
            f"Option '{name}' must be an integer, got {value!r}"
        ) from None


def coerce_list(value: Any) -> Optional[List[str]]:
    """
    Coerce a list option given either as a sequence or as comma-separated text.

    Returns None for missing or empty values.
    """
    if value is None:
        return None

    if isinstance(value, str):
        items = [item.strip() for item in value.split(",")]
    else:
        items = [str(item).strip() for item in value]

    items = [item for item in items if item]
    return items or None

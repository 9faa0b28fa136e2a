"""Shared validation utilities"""

from typing import Optional

from ..errors import MissingField


def require_text(value: Optional[str], field: str, strip: bool = True) -> str:
    """
    Ensure a required free-text field is present.

    Args:
        value: Raw field value
        field: Field name reported in the error
        strip: Return the value with surrounding whitespace removed

    Returns:
        The (optionally stripped) value

    Raises:
        MissingField: If the value is None, empty or only whitespace
    """
    if value is None or not value.strip():
        raise MissingField(field)
    return value.strip() if strip else value

from typing import Any


def is_missing(value: Any) -> bool:
    """None, or a string that is empty once surrounding whitespace is removed"""
    return value is None or (isinstance(value, str) and not value.strip())

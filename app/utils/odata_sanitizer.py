"""
OData Sanitizer

Escapes user input before it is placed inside an OData $filter expression sent
to Microsoft Graph, and rejects values that look like filter injection.
"""

import re
from typing import Optional

MAX_FILTER_VALUE_LENGTH = 256

_CONTROL_CHARACTERS = re.compile(r'[\r\n\t\0]')
_WHITESPACE_RUN = re.compile(r'\s+')
_INJECTION_PATTERN = re.compile(r"(\s+(or|and|eq|ne|gt|ge|lt|le|not)\s+)|['\"\\]", re.IGNORECASE)


def sanitize_for_filter(value: Optional[str]) -> str:
    """
    Make a value safe to embed between single quotes in an OData filter.

    Example:
        >>> sanitize_for_filter("O'Brien")
        "O''Brien"
    """
    if not value:
        return ""
    sanitized = value.strip()
    if len(sanitized) > MAX_FILTER_VALUE_LENGTH:
        sanitized = sanitized[:MAX_FILTER_VALUE_LENGTH]
    sanitized = sanitized.replace("'", "''")
    sanitized = _CONTROL_CHARACTERS.sub("", sanitized)
    return _WHITESPACE_RUN.sub(" ", sanitized)


def is_valid_filter_value(value: Optional[str]) -> bool:
    """False for values containing OData operators, quotes or backslashes."""
    if not value:
        return True
    if _INJECTION_PATTERN.search(value):
        return False
    return value.count("'") % 2 == 0


def create_equality_filter(field_name: str, value: str) -> str:
    return f"{field_name} eq '{sanitize_for_filter(value)}'"


def create_starts_with_filter(field_name: str, value: str) -> str:
    return f"startswith({field_name}, '{sanitize_for_filter(value)}')"

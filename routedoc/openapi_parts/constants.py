"""Centralized constants for the schema compiler and document builder.

Output depends on these tables directly; changing them changes every
generated document.
"""
from typing import Any, Dict, Tuple

# Regex sources emitted for string character-class rules
PATTERNS: Dict[str, str] = {
    "alphanum": "^[a-zA-Z0-9]*$",
    "alphanumLower": "^[a-z0-9]*$",
    "alphanumUpper": "^[A-Z0-9]*$",
    "token": "^[a-zA-Z0-9_]*$",
}

# String rules that set a format and clear any pattern, applied in this order
STRING_FORMATS: Tuple[Tuple[str, str], ...] = (
    ("email", "email"),
    ("isoDate", "date-time"),
    ("guid", "uuid"),
)

DATE_ONLY_FORMAT = "YYYY-MM-DD"
DEFAULT_CLASS_TARGET = "schemas"
DEFAULT_HEADER_PREFIX = "x-"
COMPONENT_BUCKETS: Tuple[str, ...] = ("schemas", "parameters")

# Request containers checked by the validation decorator, in order.
# convert: coerce string input to the documented scalar type
# allow_unknown: keys not declared by the schema are accepted
CONTAINERS: Dict[str, Dict[str, Any]] = {
    "query": {"convert": True, "allow_unknown": False},
    "body": {"convert": True, "allow_unknown": False},
    "headers": {"convert": True, "allow_unknown": True},
    "params": {"convert": True, "allow_unknown": False},
}

__all__ = [
    "PATTERNS",
    "STRING_FORMATS",
    "DATE_ONLY_FORMAT",
    "DEFAULT_CLASS_TARGET",
    "DEFAULT_HEADER_PREFIX",
    "COMPONENT_BUCKETS",
    "CONTAINERS",
]

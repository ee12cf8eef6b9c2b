"""Scalar rule extraction.

Each extractor reads the rule list, flags and allowed values of one scalar
node and returns the OpenAPI keywords it implies. Extractors never recurse;
composite kinds are handled by `compiler`.
"""
from typing import Any, Callable, Dict

from ..nodes import SchemaNode
from .constants import DATE_ONLY_FORMAT, PATTERNS, STRING_FORMATS
from .helpers import (
    case_suffix,
    is_bool,
    is_number,
    is_string,
    limit_value,
    min_max,
    valids_and_invalids,
)


def extract_number(node: SchemaNode) -> Dict[str, Any]:
    swagger: Dict[str, Any] = {}
    if node.has_rule("integer"):
        swagger["type"] = "integer"
    else:
        swagger["type"] = "number"
        swagger["format"] = "double" if node.has_rule("precision") else "float"

    sign = node.rule("sign")
    if sign:
        if sign.arg("sign") == "positive":
            swagger["minimum"] = 1
        elif sign.arg("sign") == "negative":
            swagger["maximum"] = -1

    low = node.rule("min")
    if low:
        swagger["minimum"] = limit_value(node, low.arg("limit"))
    high = node.rule("max")
    if high:
        swagger["maximum"] = limit_value(node, high.arg("limit"))

    swagger.update(valids_and_invalids(node, is_number))
    return swagger


def extract_string(node: SchemaNode) -> Dict[str, Any]:
    swagger: Dict[str, Any] = {"type": "string"}

    if node.has_rule("alphanum"):
        strict = node.flags.get("convert") is False
        swagger["pattern"] = PATTERNS["alphanum" + (case_suffix(node) if strict else "")]
    if node.has_rule("token"):
        swagger["pattern"] = PATTERNS["token"]
    pattern = node.rule("pattern")
    if pattern:
        regex = pattern.arg("regex")
        swagger["pattern"] = getattr(regex, "pattern", regex)

    # format wins over pattern regardless of rule order
    for rule_name, fmt in STRING_FORMATS:
        if node.has_rule(rule_name):
            swagger["format"] = fmt
            swagger.pop("pattern", None)

    swagger.update(min_max(node))
    swagger.update(valids_and_invalids(node, is_string))
    return swagger


def extract_binary(node: SchemaNode) -> Dict[str, Any]:
    swagger: Dict[str, Any] = {"type": "string", "format": "binary"}
    if node.flags.get("encoding") == "base64":
        swagger["format"] = "byte"
    swagger.update(min_max(node))
    return swagger


def extract_date(node: SchemaNode) -> Dict[str, Any]:
    swagger: Dict[str, Any] = {"type": "string", "format": "date-time"}
    if node.flags.get("format") == DATE_ONLY_FORMAT:
        swagger["format"] = "date"
    return swagger


def extract_boolean(node: SchemaNode) -> Dict[str, Any]:
    swagger: Dict[str, Any] = {"type": "boolean"}
    swagger.update(valids_and_invalids(node, is_bool))
    return swagger


def extract_any(node: SchemaNode) -> Dict[str, Any]:
    swagger: Dict[str, Any] = {}
    # legacy multipart hint
    if node.metadata.get("swaggerType") == "file":
        swagger["type"] = "file"
        swagger["in"] = "formData"
    swagger.update(valids_and_invalids(node, lambda v: is_string(v) or is_number(v)))
    return swagger


EXTRACTORS: Dict[str, Callable[[SchemaNode], Dict[str, Any]]] = {
    "number": extract_number,
    "string": extract_string,
    "binary": extract_binary,
    "date": extract_date,
    "boolean": extract_boolean,
    "any": extract_any,
}


def extract(node: SchemaNode) -> Dict[str, Any]:
    """Return the OpenAPI keywords for a scalar node (KeyError for composite kinds)."""
    return EXTRACTORS[node.metadata.get("baseType") or node.kind](node)


__all__ = [
    "EXTRACTORS",
    "extract",
    "extract_number",
    "extract_string",
    "extract_binary",
    "extract_date",
    "extract_boolean",
    "extract_any",
]

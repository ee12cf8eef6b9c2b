"""Helper functions shared by the rule extractor, compiler and registry."""
import json
from typing import Any, Callable, Dict, Iterable, List

from ..nodes import Ref, SchemaNode


def ref_def(bucket: str, name: str) -> Dict[str, str]:
    return {"$ref": f"#/components/{bucket}/{name}"}


def ref_name(schema: Any, bucket: str = "schemas"):
    """Return the component name when `schema` is a bare `$ref` into `bucket`, else None."""
    if not isinstance(schema, dict) or set(schema) != {"$ref"}:
        return None
    prefix = f"#/components/{bucket}/"
    target = schema["$ref"]
    return target[len(prefix):] if target.startswith(prefix) else None


def canonical(schema: Any) -> str:
    """Deterministic serialized form used for structural equality.

    The top-level `title` is left out: the title only carries the name, and the
    name is the thing being looked up.
    """
    if isinstance(schema, dict):
        schema = {k: v for k, v in schema.items() if k != "title"}
    return json.dumps(schema, sort_keys=True, separators=(",", ":"), default=str)


def unique(schemas: Iterable[Any]) -> List[Any]:
    """Drop deep-equal duplicates, keeping first occurrence order."""
    out: List[Any] = []
    for s in schemas:
        if s not in out:
            out.append(s)
    return out


def min_max(node: SchemaNode, suffix: str = "Length") -> Dict[str, Any]:
    swagger: Dict[str, Any] = {}
    for rule in node.rules:
        limit = limit_value(node, rule.arg("limit"))
        if rule.name == "min":
            swagger[f"min{suffix}"] = limit
        elif rule.name == "max":
            swagger[f"max{suffix}"] = limit
        elif rule.name == "length":
            swagger[f"min{suffix}"] = limit
            swagger[f"max{suffix}"] = limit
    return swagger


def case_suffix(node: SchemaNode) -> str:
    rule = node.rule("case")
    if rule and rule.arg("direction") == "lower":
        return "Lower"
    if rule and rule.arg("direction") == "upper":
        return "Upper"
    return ""


def ref_value(ref: Ref, node: SchemaNode, fallback: Any) -> Any:
    ref_values = node.metadata.get("refValues") or {}
    return ref_values.get(ref.key, fallback)


def limit_value(node: SchemaNode, limit: Any, fallback: Any = 0) -> Any:
    return ref_value(limit, node, fallback) if isinstance(limit, Ref) else limit


def valids_and_invalids(node: SchemaNode, accept: Callable[[Any], bool]) -> Dict[str, Any]:
    swagger: Dict[str, Any] = {}
    valids = [v for v in node.valids if accept(v)]
    if node.flags.get("only") and valids:
        swagger["enum"] = valids
    invalids = [v for v in node.invalids if accept(v)]
    if invalids:
        swagger["not"] = {"enum": invalids}
    return swagger


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


__all__ = [
    "ref_def",
    "ref_name",
    "canonical",
    "unique",
    "min_max",
    "case_suffix",
    "ref_value",
    "limit_value",
    "valids_and_invalids",
    "is_number",
    "is_string",
    "is_bool",
]

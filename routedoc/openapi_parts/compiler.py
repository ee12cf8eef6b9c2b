"""Schema node to OpenAPI schema compiler.

`compile_node` converts one node (and its descendants) into an OpenAPI 3.0
schema object. Scalar kinds are handed to `rules`; objects, arrays,
alternatives and `when` conditionals recurse here. Components registered on
the way (nodes carrying a `className` meta) are collected on an explicit
`BuildContext` that is passed by reference through the whole walk, so later
siblings see what earlier ones registered.

Order of operations per node:
  1. schemaOverride meta: compile the override node instead (no nesting)
  2. swagger + swaggerOverride meta: literal schema, skips 3-7
  3. className already known: `$ref` without recompiling
  4. forbidden presence: `False` (caller omits the field)
  5. dispatch by kind
  6. merge `when` expansion
  7. nullable, description, example(s), title, default, swagger meta merge
  8. className: register and return a `$ref`
"""
from __future__ import annotations
import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Set, Union

from ..errors import CyclicSchemaError, NestedOverrideError, NoSchemaProvided, UnrecognizedType
from ..nodes import Conditional, SchemaNode, as_node
from .constants import DEFAULT_CLASS_TARGET
from .helpers import min_max, ref_def, unique
from .rules import EXTRACTORS

logger = logging.getLogger(__name__)

Components = Dict[str, Dict[str, Any]]
Compiled = Union[Dict[str, Any], bool]


@dataclass
class BuildContext:
    """Component state for one compile call.

    known: components supplied by the caller (read only)
    created: components registered during this walk
    active: ids of the nodes on the current recursion path
    """
    known: Components = field(default_factory=dict)
    created: Components = field(default_factory=dict)
    active: Set[int] = field(default_factory=set)

    def has(self, bucket: str, name: str) -> bool:
        return name in self.created.get(bucket, {}) or name in self.known.get(bucket, {})

    def register(self, bucket: str, name: str, schema: Any) -> None:
        self.created.setdefault(bucket, {})[name] = schema
        logger.debug("Registered component %s/%s", bucket, name)


@dataclass
class CompileResult:
    schema: Any
    components: Components


def compile_schema(node: Any, known_components: Optional[Mapping[str, Mapping[str, Any]]] = None):
    """Compile `node` against `known_components`.

    Returns a `CompileResult` holding the schema and the components newly
    registered by the walk, or `False` when the node is forbidden.
    """
    ctx = BuildContext(known={k: dict(v) for k, v in (known_components or {}).items()})
    schema = compile_node(node, ctx)
    if schema is False:
        return False
    return CompileResult(schema=schema, components=ctx.created)


def compile_node(node: Any, ctx: BuildContext, overridden: bool = False) -> Compiled:
    if node is None or (isinstance(node, Mapping) and not node):
        raise NoSchemaProvided()
    node = as_node(node)
    meta = node.metadata

    override = meta.get("schemaOverride")
    if override is not None:
        if overridden:
            raise NestedOverrideError()
        return compile_node(override, ctx, overridden=True)

    class_name = meta.get("className")
    class_target = meta.get("classTarget") or DEFAULT_CLASS_TARGET
    swagger_meta = meta.get("swagger")

    if swagger_meta is not None and meta.get("swaggerOverride"):
        return _finish(ctx, class_name, class_target, copy.deepcopy(swagger_meta))

    if class_name and ctx.has(class_target, class_name):
        return ref_def(class_target, class_name)

    if node.presence == "forbidden":
        return False

    marker = id(node)
    if marker in ctx.active:
        raise CyclicSchemaError(node.kind)
    ctx.active.add(marker)
    try:
        swagger = _dispatch(node, ctx)
        if node.whens:
            swagger.update(_expand_whens(node, ctx))
    finally:
        ctx.active.discard(marker)

    _annotate(node, swagger)
    if swagger_meta:
        swagger.update(swagger_meta)

    return _finish(ctx, class_name, class_target, swagger)


def _finish(ctx: BuildContext, class_name: Optional[str], class_target: str, swagger: Dict[str, Any]):
    if class_name:
        ctx.register(class_target, class_name, swagger)
        return ref_def(class_target, class_name)
    return swagger


def _dispatch(node: SchemaNode, ctx: BuildContext) -> Dict[str, Any]:
    kind = node.metadata.get("baseType") or node.kind
    if kind in EXTRACTORS:
        return EXTRACTORS[kind](node)
    if kind in COMPOSITES:
        return COMPOSITES[kind](node, ctx)
    raise UnrecognizedType(kind)


def _annotate(node: SchemaNode, swagger: Dict[str, Any]) -> None:
    flags = node.flags
    if None in node.valids:
        swagger["nullable"] = True
    if flags.get("description"):
        swagger["description"] = flags["description"]
    if len(node.examples) == 1:
        swagger["example"] = node.examples[0]
    elif node.examples:
        swagger["examples"] = list(node.examples)
    if flags.get("label"):
        swagger["title"] = flags["label"]
    # callables are generated per request and cannot be documented
    default = flags.get("default")
    if default is not None and not callable(default):
        swagger["default"] = default


# -------- composite kinds --------

def _compile_object(node: SchemaNode, ctx: BuildContext) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    required = []
    additional: Any = {}

    for key, child in node.children:
        schema = compile_node(child, ctx)
        if schema is False:
            continue
        properties[key] = schema
        if child.presence == "required":
            required.append(key)

    if not node.children and node.key_pattern is not None:
        _, rule = node.key_pattern
        schema = compile_node(rule, ctx)
        if schema is not False:
            additional = schema

    swagger: Dict[str, Any] = {"type": "object", "properties": properties}
    if required:
        swagger["required"] = required
    if node.flags.get("unknown") is not True:
        swagger["additionalProperties"] = False
    if additional:
        swagger["additionalProperties"] = additional
    return swagger


def _compile_array(node: SchemaNode, ctx: BuildContext) -> Dict[str, Any]:
    compiled = (compile_node(item, ctx) for item in node.items)
    schemas = unique(s for s in compiled if s is not False)

    swagger: Dict[str, Any] = {"type": "array"}
    if len(schemas) > 1:
        swagger["items"] = {"oneOf": schemas}
    else:
        swagger["items"] = schemas[0] if schemas else {}
    swagger.update(min_max(node, "Items"))
    if node.has_rule("unique"):
        swagger["uniqueItems"] = True
    return swagger


def _compile_alternatives(node: SchemaNode, ctx: BuildContext) -> Dict[str, Any]:
    mode = f"{node.flags.get('match') or 'any'}Of"
    branches = []
    for entry in node.matches:
        if isinstance(entry, Conditional):
            branches.extend(entry.branches())
        else:
            branches.append(entry)
    return _compile_branches(branches, ctx, mode)


def _expand_whens(node: SchemaNode, ctx: BuildContext) -> Dict[str, Any]:
    mode = "anyOf" if len(node.whens) > 1 else "oneOf"
    branches = [branch for when in node.whens for branch in when.branches()]
    return _compile_branches(branches, ctx, mode)


def _compile_branches(branches: Iterable[SchemaNode], ctx: BuildContext, mode: str) -> Dict[str, Any]:
    schemas = []
    for branch in branches:
        schema = compile_node(branch, ctx)
        if schema is False:
            continue
        if as_node(branch).presence == "required":
            schema = {**schema, "x-required": True}
        schemas.append(schema)
    schemas = unique(schemas)
    return {mode: schemas} if schemas else {}


COMPOSITES: Dict[str, Callable[[SchemaNode, BuildContext], Dict[str, Any]]] = {
    "object": _compile_object,
    "array": _compile_array,
    "alternatives": _compile_alternatives,
}

__all__ = ["BuildContext", "CompileResult", "compile_schema", "compile_node", "COMPOSITES"]

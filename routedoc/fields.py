"""Constructors for schema nodes.

These are deliberately tiny; all behavior lives on `SchemaNode`. Names that
would shadow builtins carry a trailing underscore (`object_`, `any_`).
"""
from typing import Any, Mapping, Optional

from .nodes import Ref, SchemaNode, as_node


def string() -> SchemaNode:
    return SchemaNode('string')


def number() -> SchemaNode:
    return SchemaNode('number')


def boolean() -> SchemaNode:
    return SchemaNode('boolean')


def date() -> SchemaNode:
    return SchemaNode('date')


def binary() -> SchemaNode:
    return SchemaNode('binary')


def any_() -> SchemaNode:
    return SchemaNode('any')


def object_(mapping: Optional[Mapping[str, Any]] = None, **kwargs) -> SchemaNode:
    return SchemaNode('object').keys(mapping, **kwargs)


def array(*items: Any) -> SchemaNode:
    return SchemaNode('array').items_of(*items)


def alternatives(*nodes: Any) -> SchemaNode:
    return SchemaNode('alternatives').try_(*nodes)


def file() -> SchemaNode:
    """Legacy multipart upload marker (`type: file, in: formData`)."""
    return SchemaNode('any').meta(swaggerType='file')


def ref(key: str) -> Ref:
    return Ref(key)


__all__ = [
    'string',
    'number',
    'boolean',
    'date',
    'binary',
    'any_',
    'object_',
    'array',
    'alternatives',
    'file',
    'ref',
    'as_node',
]

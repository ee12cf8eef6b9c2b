"""Validation schemas that document themselves.

Describe request and response shapes once with `routedoc.fields`, validate
Flask requests against them with `validate_request`, and publish the same
shapes as an OpenAPI 3.0 document with `build_openapi_spec`.
"""
from . import fields  # noqa: F401
from .decorators.validation import validate_request  # noqa: F401
from .docs import build_document, create_docs_blueprint  # noqa: F401
from .errors import (  # noqa: F401
    CyclicSchemaError,
    LabelConflictError,
    MissingLabelError,
    NestedOverrideError,
    NoSchemaProvided,
    NotASchemaError,
    RouteDefinitionError,
    RouteDocError,
    UndeclaredParameterError,
    UnrecognizedType,
)
from .nodes import Ref, SchemaNode  # noqa: F401
from .openapi import build_openapi_spec, compile_schema  # noqa: F401
from .route_schema import MediaType, RequestBody, Response, Route, RouteSchema  # noqa: F401

__version__ = '0.1.0'

__all__ = [
    'fields',
    'validate_request',
    'build_document',
    'create_docs_blueprint',
    'build_openapi_spec',
    'compile_schema',
    'Ref',
    'SchemaNode',
    'MediaType',
    'RequestBody',
    'Response',
    'Route',
    'RouteSchema',
    'RouteDocError',
    'NoSchemaProvided',
    'NotASchemaError',
    'UnrecognizedType',
    'NestedOverrideError',
    'MissingLabelError',
    'LabelConflictError',
    'CyclicSchemaError',
    'UndeclaredParameterError',
    'RouteDefinitionError',
]

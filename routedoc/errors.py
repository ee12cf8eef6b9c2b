"""Errors raised while compiling schemas and assembling documents.

Every error aborts the whole build; nothing here is recovered locally.
"""
from __future__ import annotations
from typing import Optional


class RouteDocError(Exception):
    """Base class for routedoc errors."""


class NoSchemaProvided(RouteDocError, ValueError):
    def __init__(self, message: str = 'No schema was passed.'):
        super().__init__(message)


class NotASchemaError(RouteDocError, TypeError):
    def __init__(self, value):
        super().__init__(f"Passed value of type {type(value).__name__} does not appear to be a schema node.")
        self.value = value


class UnrecognizedType(RouteDocError, TypeError):
    def __init__(self, kind: str):
        super().__init__(f"{kind} is not a recognized schema type.")
        self.kind = kind


class NestedOverrideError(RouteDocError):
    def __init__(self):
        super().__init__(
            'Cannot override the schema for one which is being used in another override '
            '(no nested schema overrides).'
        )


class MissingLabelError(RouteDocError):
    def __init__(self):
        super().__init__(
            'Encountered a schema without a label. '
            'Define a label() or declare the schema in schemas() for reuse.'
        )


class LabelConflictError(RouteDocError):
    def __init__(self, name: str, bucket: str = 'schemas'):
        super().__init__(
            f'Label "{name}" is already used for a different {bucket} shape. '
            'Make the shapes match or use a different label.'
        )
        self.name = name
        self.bucket = bucket


class CyclicSchemaError(RouteDocError):
    def __init__(self, kind: Optional[str] = None):
        super().__init__(f"Schema node ({kind or 'unknown'}) contains itself as a descendant.")
        self.kind = kind


class UndeclaredParameterError(RouteDocError):
    def __init__(self, name: str, path: str):
        super().__init__(f"Parameter '{name}' used by {path} is not declared in parameters().")
        self.name = name
        self.path = path


class RouteDefinitionError(RouteDocError, ValueError):
    pass


__all__ = [
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

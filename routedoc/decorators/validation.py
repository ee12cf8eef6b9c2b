"""Request validation decorator for Flask views.

Validates the incoming request against the same schemas the document
builder publishes, so the docs and the runtime checks cannot drift apart.

Usage:

@bp.get('/product')
@validate_request(ProductSchema.get_product)
def get_product():
    product_id = g.validated['query']['productId']
    ...

Containers are checked in `CONTAINERS` order (query, body, headers, params).
Responses on failure:
  415  the body content type has no declared schema
  422  a container does not match its schema
Both carry `{"requestID": ..., "error": ...}`.
"""
from __future__ import annotations
import logging
from functools import wraps
from typing import Any, Callable, Dict, Optional, Tuple, Union

from flask import g, request
from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import best_match
from werkzeug.datastructures import FileStorage

from ..openapi_parts.compiler import compile_schema
from ..openapi_parts.constants import CONTAINERS
from ..route_schema import Route

logger = logging.getLogger(__name__)

FORM_TYPES = ('multipart/form-data', 'application/x-www-form-urlencoded')
_BOOLEANS = {'true': True, 'false': False}


def _is_string(checker, instance) -> bool:
    return isinstance(instance, (str, bytes))


def _is_file(checker, instance) -> bool:
    return isinstance(instance, (bytes, FileStorage))


RequestValidator = validators.extend(
    Draft202012Validator,
    type_checker=Draft202012Validator.TYPE_CHECKER.redefine_many({'string': _is_string, 'file': _is_file}),
)


def to_json_schema(schema: Any) -> Any:
    """Translate OpenAPI 3.0 `nullable` into JSON Schema null types, recursively."""
    if isinstance(schema, list):
        return [to_json_schema(s) for s in schema]
    if not isinstance(schema, dict):
        return schema
    out = {k: to_json_schema(v) for k, v in schema.items()}
    if out.pop('nullable', False):
        if isinstance(out.get('type'), str):
            out['type'] = [out['type'], 'null']
        if 'enum' in out and None not in out['enum']:
            out['enum'] = out['enum'] + [None]
    return out


class CompiledContainer:
    """A compiled container schema plus the validator built from it."""

    def __init__(self, node: Any, allow_unknown: bool = False):
        result = compile_schema(node)
        schema = result.schema if result else {}
        components = result.components if result else {}
        if allow_unknown and isinstance(schema, dict):
            schema = {k: v for k, v in schema.items() if k != 'additionalProperties'}
        self.schema = schema
        self.components = components
        document = to_json_schema({**schema, 'components': components})
        self.validator = RequestValidator(document, format_checker=Draft202012Validator.FORMAT_CHECKER)

    def resolve(self, schema: Any) -> Dict[str, Any]:
        ref = schema.get('$ref') if isinstance(schema, dict) else None
        if ref and ref.startswith('#/components/'):
            bucket, name = ref[len('#/components/'):].split('/', 1)
            return self.components.get(bucket, {}).get(name, {})
        return schema if isinstance(schema, dict) else {}

    @property
    def properties(self) -> Dict[str, Any]:
        return self.resolve(self.schema).get('properties') or {}

    def error(self, data: Any) -> Optional[str]:
        err = best_match(self.validator.iter_errors(data))
        if err is None:
            return None
        where = '.'.join(str(p) for p in err.absolute_path)
        return f"{where}: {err.message}" if where else err.message


def coerce_value(value: Any, schema: Dict[str, Any],
                 resolve: Optional[Callable[[Any], Dict[str, Any]]] = None) -> Any:
    kind = schema.get('type')
    if kind == 'array' and isinstance(value, list):
        items = schema.get('items') or {}
        items = resolve(items) if resolve else items
        return [coerce_value(v, items, resolve) for v in value]
    if not isinstance(value, str):
        return value
    try:
        if kind == 'integer':
            return int(value)
        if kind == 'number':
            return float(value)
    except ValueError:
        return value
    if kind == 'boolean':
        return _BOOLEANS.get(value.lower(), value)
    return value


def coerce(data: Dict[str, Any], container: CompiledContainer) -> Dict[str, Any]:
    props = container.properties
    return {
        key: coerce_value(value, container.resolve(props[key]), container.resolve) if key in props else value
        for key, value in data.items()
    }


def _request_id() -> Optional[str]:
    return request.headers.get('x-request-id') or g.get('request_id')


def _container_data(name: str, container: CompiledContainer) -> Dict[str, Any]:
    if name == 'query':
        props = container.properties
        return {
            key: request.args.getlist(key) if container.resolve(props.get(key, {})).get('type') == 'array'
            else request.args.get(key)
            for key in request.args.keys()
        }
    if name == 'headers':
        return {key: request.headers[key] for key in container.properties if key in request.headers}
    if name == 'params':
        return dict(request.view_args or {})
    return {}


def _body_data() -> Any:
    if request.mimetype in FORM_TYPES:
        data: Dict[str, Any] = request.form.to_dict()
        upload = request.files.get('file')
        if upload is not None:
            data['file'] = upload.read()
            data['mimetype'] = upload.mimetype
        return data
    return request.get_json(silent=True)


def validate_request(route: Union[Route, Callable[[], Route]]):
    """Decorate a view so its request is checked against `route` before the view runs.

    `route` may be a Route or the zero-argument route factory that builds it.
    Validated (and coerced) values are stored on `g.validated[container]`.
    """
    if not isinstance(route, Route):
        route = route()

    containers: Dict[str, CompiledContainer] = {}
    for name in ('query', 'headers', 'params'):
        node = route.container(name)
        if node is not None:
            containers[name] = CompiledContainer(node, allow_unknown=CONTAINERS[name]['allow_unknown'])
    bodies: Dict[str, CompiledContainer] = {}
    if route.body is not None:
        for mime, media in route.body.content.items():
            bodies[mime] = CompiledContainer(media.schema, allow_unknown=CONTAINERS['body']['allow_unknown'])

    def fail(status: int, message: str) -> Tuple[Dict[str, Any], int]:
        logger.debug("Rejected %s %s (%d): %s", request.method, request.path, status, message)
        return {'requestID': _request_id(), 'error': message}, status

    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            validated: Dict[str, Any] = {}
            for name, options in CONTAINERS.items():
                if name == 'body':
                    if not bodies:
                        continue
                    content_type = request.mimetype
                    container = bodies.get(content_type)
                    if container is None:
                        return fail(415, f"Unsupported content type: {content_type or 'none'}")
                    data = _body_data()
                else:
                    container = containers.get(name)
                    if container is None:
                        continue
                    data = _container_data(name, container)
                if options['convert'] and isinstance(data, dict):
                    data = coerce(data, container)
                message = container.error(data)
                if message:
                    return fail(422, message)
                validated[name] = data
            g.validated = validated
            return fn(*args, **kwargs)
        return wrapper
    return outer


__all__ = ['validate_request', 'RequestValidator', 'CompiledContainer', 'to_json_schema', 'coerce', 'coerce_value']

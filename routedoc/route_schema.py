"""Route definitions and the base class that groups them.

A `RouteSchema` subclass is the component source of one API area: it names
its tag, its reusable schemas and parameters, and lists its routes
explicitly in `routes()`.

Usage:
    class ProductSchema(RouteSchema):
        @classmethod
        def tag(cls):
            return {'name': 'Products', 'description': 'Product endpoints'}

        @classmethod
        def schemas(cls):
            return {'Product': PRODUCT}

        @classmethod
        def parameters(cls):
            return {'ProductIdParam': f.object_({'productId': f.string().guid().required()})}

        @classmethod
        def get_product(cls):
            return cls.create_route(path='/product', method='get', summary='Get product',
                                    query=cls.parameters()['ProductIdParam'],
                                    responses={200: {'description': 'OK', 'content': {'application/json': PRODUCT}}})

        @classmethod
        def routes(cls):
            return [cls.get_product()]
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import RouteDefinitionError
from .nodes import SchemaNode


@dataclass(frozen=True)
class MediaType:
    schema: Any
    examples: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class RequestBody:
    content: Dict[str, MediaType]
    description: str = ''
    required: bool = False


@dataclass(frozen=True)
class Response:
    description: str = ''
    content: Dict[str, MediaType] = field(default_factory=dict)


@dataclass(frozen=True)
class Route:
    path: str
    method: str
    summary: str
    tags: Tuple[str, ...] = ()
    headers: Any = None
    query: Any = None
    params: Any = None
    body: Optional[RequestBody] = None
    responses: Dict[str, Response] = field(default_factory=dict)

    def container(self, name: str) -> Any:
        """Schema for a request container (`headers`, `query`, `params`); None when undeclared."""
        return getattr(self, name, None) if name in ('headers', 'query', 'params') else None


def _media(content: Optional[Mapping[str, Any]]) -> Dict[str, MediaType]:
    """Wrap each content value in a MediaType.

    Plain mappings are object schemas (a field may be called `schema`); pass a
    MediaType explicitly to attach examples.
    """
    out: Dict[str, MediaType] = {}
    for mime, value in (content or {}).items():
        if isinstance(value, MediaType):
            out[mime] = value
        else:
            out[mime] = MediaType(schema=value)
    return out


def _request_body(body: Union[RequestBody, Mapping[str, Any], None]) -> Optional[RequestBody]:
    if body is None or isinstance(body, RequestBody):
        return body
    return RequestBody(
        content=_media(body.get('content')),
        description=body.get('description') or '',
        required=bool(body.get('required')),
    )


def _responses(responses: Optional[Mapping[Any, Any]]) -> Dict[str, Response]:
    out: Dict[str, Response] = {}
    for status, value in (responses or {}).items():
        if isinstance(value, Response):
            out[str(status)] = value
        else:
            out[str(status)] = Response(description=value.get('description') or '', content=_media(value.get('content')))
    return out


class RouteSchema:
    """Base class for a group of routes sharing one tag and one component source."""

    @classmethod
    def tag(cls) -> Dict[str, str]:
        raise NotImplementedError('Subclasses must implement tag() returning {"name", "description"}.')

    @classmethod
    def tags(cls) -> List[Dict[str, str]]:
        tag = cls.tag()
        if not isinstance(tag, Mapping) or not tag.get('name'):
            raise RouteDefinitionError(f"{cls.__name__}.tag() must return a mapping with a 'name'.")
        return [dict(tag)]

    @classmethod
    def schemas(cls) -> Dict[str, SchemaNode]:
        raise NotImplementedError('Subclasses must implement schemas().')

    @classmethod
    def parameters(cls) -> Dict[str, SchemaNode]:
        raise NotImplementedError('Subclasses must implement parameters().')

    @classmethod
    def routes(cls) -> List[Route]:
        raise NotImplementedError('Subclasses must implement routes() listing every route.')

    @classmethod
    def components(cls) -> Dict[str, Dict[str, SchemaNode]]:
        return {'schemas': cls.schemas(), 'parameters': cls.parameters()}

    @classmethod
    def create_route(cls, *, path: str, method: str, summary: str, headers: Any = None, query: Any = None,
                     params: Any = None, body: Any = None, responses: Optional[Mapping[Any, Any]] = None) -> Route:
        if not path or not method or not summary:
            raise RouteDefinitionError('Path, method, and summary are required to define an API route.')
        return Route(
            path=path,
            method=method.lower(),
            summary=summary,
            tags=tuple(t['name'] for t in cls.tags()),
            headers=headers,
            query=query,
            params=params,
            body=_request_body(body),
            responses=_responses(responses),
        )

    @classmethod
    def paths(cls) -> Dict[str, Dict[str, Route]]:
        """Group `routes()` by path then method, in declaration order."""
        out: Dict[str, Dict[str, Route]] = {}
        for route in cls.routes():
            methods = out.setdefault(route.path, {})
            if route.method in methods:
                raise RouteDefinitionError(f"Duplicate route {route.method.upper()} {route.path}")
            methods[route.method] = route
        return out


__all__ = ['MediaType', 'RequestBody', 'Response', 'Route', 'RouteSchema']

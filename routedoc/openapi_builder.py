"""Deterministic OpenAPI document builder.

Consumes a route source (a `RouteSchema` subclass or anything exposing
`components()`, `tags()` and `paths()`) and emits:

    {"definition": {"tags": [...], "paths": {...},
                    "components": {"schemas": {...}, "parameters": {...}}}}

Steps:
- declared schemas are compiled and registered under their own keys
- declared parameters become parameter envelopes (name, in, required, schema)
- every route gets parameter `$ref`s, a request body and responses whose
  schemas are resolved to component names by the registry

This is the canonical builder module; `routedoc/openapi.py` re-exports from here.
"""
import logging
from typing import Any, Dict, List, Mapping, Optional

from .config import get_settings
from .errors import UndeclaredParameterError
from .nodes import as_node
from .openapi_parts.helpers import ref_def
from .openapi_parts.registry import ComponentRegistry
from .route_schema import MediaType, RequestBody, Response, Route

logger = logging.getLogger(__name__)

__all__ = ["build_openapi_spec", "build_parameter"]


def build_parameter(registry: ComponentRegistry, node: Any, header_prefix: str) -> Optional[Dict[str, Any]]:
    """Turn a single-key object schema into a parameter envelope (None when it has no keys)."""
    schema = registry.compile(node)
    if not isinstance(schema, dict):
        return None
    properties = schema.get("properties") or {}
    if not properties:
        return None
    name = next(iter(properties))
    if len(properties) > 1:
        logger.warning("Parameter schema declares %d keys; only %s is documented", len(properties), name)

    definition = dict(properties[name])
    description = definition.pop("description", "")
    return {
        "name": name,
        "in": "header" if name.startswith(header_prefix) else "query",
        "required": name in (schema.get("required") or []),
        "schema": definition,
        "description": description,
    }


def _collect_parameters(route: Route, param_refs: Mapping[str, str], registry: ComponentRegistry,
                        strict: bool) -> List[Dict[str, Any]]:
    parameters: List[Dict[str, Any]] = []

    for container in ("headers", "query"):
        node = route.container(container)
        if node is None:
            continue
        for key, child in as_node(node).children:
            if child.presence == "forbidden":
                continue
            ref = param_refs.get(key)
            if ref is None:
                if strict:
                    raise UndeclaredParameterError(key, route.path)
                logger.warning("Parameter %s on %s %s is not declared; referencing it by key",
                               key, route.method.upper(), route.path)
                ref = key
            parameters.append(ref_def("parameters", ref))

    # path parameters are always required and documented inline
    if route.params is not None:
        for key, child in as_node(route.params).children:
            schema = registry.compile(child)
            if schema is False:
                continue
            definition = dict(schema)
            param = {"name": key, "in": "path", "required": True}
            description = definition.pop("description", None)
            if description:
                param["description"] = description
            param["schema"] = definition
            parameters.append(param)

    return parameters


def _content(content: Mapping[str, MediaType], registry: ComponentRegistry) -> Dict[str, Any]:
    built: Dict[str, Any] = {}
    for mime, media in content.items():
        name = registry.name_for(media.schema)
        built[mime] = {"schema": ref_def("schemas", name)}
        if media.examples:
            built[mime]["examples"] = media.examples
    return built


def _request_body(body: RequestBody, registry: ComponentRegistry) -> Dict[str, Any]:
    return {
        "description": body.description,
        "required": body.required,
        "content": _content(body.content, registry),
    }


def _responses(responses: Mapping[str, Response], registry: ComponentRegistry) -> Dict[str, Any]:
    return {
        str(status): {"description": response.description, "content": _content(response.content, registry)}
        for status, response in responses.items()
    }


def build_openapi_spec(source: Any, *, strict_parameters: Optional[bool] = None,
                       header_prefix: Optional[str] = None) -> Dict[str, Any]:
    settings = get_settings()
    strict = settings["STRICT_PARAMETERS"] if strict_parameters is None else strict_parameters
    prefix = header_prefix or settings["HEADER_PREFIX"]

    registry = ComponentRegistry()
    components = source.components()

    for name, node in (components.get("schemas") or {}).items():
        registry.declare(name, node)

    for ref_name, node in (components.get("parameters") or {}).items():
        param = build_parameter(registry, node, prefix)
        if param is not None:
            registry.register_parameter(ref_name, param)

    param_refs = {p["name"]: ref for ref, p in registry.parameters.items() if isinstance(p, dict) and "name" in p}

    paths: Dict[str, Any] = {}
    for path, methods in source.paths().items():
        for method, route in methods.items():
            op: Dict[str, Any] = {
                "tags": list(route.tags),
                "summary": route.summary,
                "parameters": _collect_parameters(route, param_refs, registry, strict),
            }
            if route.body is not None:
                op["requestBody"] = _request_body(route.body, registry)
            op["responses"] = _responses(route.responses, registry)
            paths.setdefault(path, {})[method] = op

    logger.debug("Built document with %d paths and %d schemas", len(paths), len(registry.schemas))
    return {
        "definition": {
            "tags": source.tags(),
            "paths": paths,
            "components": dict(registry.components),
        }
    }

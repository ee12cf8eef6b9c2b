"""Flask blueprint publishing the generated document.

Routes:
  /openapi.json  full OpenAPI document for the given route source
  /docs          Redoc page reading /openapi.json (CDN, no local install)
"""
from typing import Any, Dict, Mapping, Optional

from flask import Blueprint, url_for

from .config import get_settings
from .openapi_builder import build_openapi_spec


def build_document(source: Any, settings: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    settings = get_settings(settings)
    definition = build_openapi_spec(
        source,
        strict_parameters=settings['STRICT_PARAMETERS'],
        header_prefix=settings['HEADER_PREFIX'],
    )['definition']
    return {
        'openapi': settings['OPENAPI_VERSION'],
        'info': {'title': settings['API_TITLE'], 'version': settings['API_VERSION']},
        **definition,
    }


def create_docs_blueprint(source: Any, name: str = 'routedoc', settings: Optional[Mapping[str, Any]] = None) -> Blueprint:
    bp = Blueprint(name, __name__)
    cache: Dict[str, Any] = {}

    @bp.get('/openapi.json')
    def openapi_spec():
        if 'document' not in cache:
            cache['document'] = build_document(source, settings)
        return cache['document']

    @bp.get('/docs')
    def docs_index():
        spec_url = url_for(f'{name}.openapi_spec')
        return (
            "<!DOCTYPE html><html><head><title>API Docs</title>"
            "<link rel=\"stylesheet\" href=\"https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.css\" />"
            f"</head><body><redoc spec-url='{spec_url}'></redoc>"
            "<script src='https://cdn.jsdelivr.net/npm/redoc@next/bundles/redoc.standalone.js'></script>"
            "</body></html>"
        )

    return bp


__all__ = ['build_document', 'create_docs_blueprint']

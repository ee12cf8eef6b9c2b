"""Environment-driven settings.

Values come from the process environment (a `.env` file is loaded when
present) and can be overridden per call, the same way a Flask app's
`config` is overridden in tests.
"""
import logging
import os
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from .openapi_parts.constants import DEFAULT_HEADER_PREFIX

load_dotenv()

_TRUTHY = {'1', 'true', 'yes', 'on'}


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def get_settings(overrides: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    settings: Dict[str, Any] = {
        'OPENAPI_VERSION': os.getenv('ROUTEDOC_OPENAPI_VERSION', '3.0.3'),
        'API_TITLE': os.getenv('ROUTEDOC_API_TITLE', 'API'),
        'API_VERSION': os.getenv('ROUTEDOC_API_VERSION', '0.1.0'),
        'HEADER_PREFIX': os.getenv('ROUTEDOC_HEADER_PREFIX', DEFAULT_HEADER_PREFIX),
        'STRICT_PARAMETERS': _env_bool('ROUTEDOC_STRICT_PARAMETERS'),
        'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO').upper(),
    }
    if overrides:
        settings.update(overrides)
    return settings


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Set the level of the `routedoc` logger tree (defaults to LOG_LEVEL)."""
    logger = logging.getLogger('routedoc')
    name = (level or get_settings()['LOG_LEVEL']).upper()
    logger.setLevel(getattr(logging, name, logging.INFO))
    return logger


__all__ = ['get_settings', 'configure_logging']

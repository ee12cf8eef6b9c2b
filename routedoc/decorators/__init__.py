from .validation import validate_request  # noqa: F401

__all__ = ['validate_request']

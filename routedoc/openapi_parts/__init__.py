"""Modular pieces of the schema compiler.

`rules` extracts scalar keywords, `compiler` walks the node tree, `registry`
names and deduplicates components; the document builder imports all three.
"""
from .compiler import BuildContext, CompileResult, compile_node, compile_schema  # noqa: F401
from .registry import ComponentRegistry  # noqa: F401
from .rules import extract  # noqa: F401

__all__ = [
    "constants",
    "BuildContext",
    "CompileResult",
    "ComponentRegistry",
    "compile_node",
    "compile_schema",
    "extract",
]

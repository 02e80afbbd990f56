"""
Schema AST module.

Contains the SchemaNode model and the parser that builds it.
"""

from __future__ import annotations

from .nodes import SchemaNode
from .parser import SchemaParser, merge_all_of

__all__ = [
    "SchemaNode",
    "SchemaParser",
    "merge_all_of",
]

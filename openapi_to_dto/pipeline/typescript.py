"""
TypeScript spelling helpers shared by the DTO renderer and the endpoint views.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..utils import to_camel_case
from .analyzer.ir_nodes import BOOLEAN, NUMBER, OBJECT, STRING, UNTYPED

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_STRING_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        "'": "\\'",
        "\n": "\\n",
        "\r": "\\r",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

# Constructor used by @Type, @ApiProperty and @ApiResponse for non-entity types
_CONSTRUCTORS = {
    STRING: "String",
    NUMBER: "Number",
    BOOLEAN: "Boolean",
    OBJECT: "Object",
    UNTYPED: "Object",
}


def ts_literal(value: Any) -> str:
    """A JSON value as a TypeScript literal (strings single-quoted)."""
    if isinstance(value, str):
        return "'" + value.translate(_STRING_ESCAPES) + "'"
    return json.dumps(value)


def constructor_name(name: str) -> str:
    """Runtime constructor of a type name ("string" -> "String"); entity names are kept."""
    return _CONSTRUCTORS.get(name, name)


def is_identifier(text: str) -> bool:
    return bool(_IDENTIFIER.match(text))


def identifier(text: str) -> str:
    """A valid identifier for text ("page[size]" -> "pageSize", "2fa" -> "_2fa")."""
    name = text if is_identifier(text) else to_camel_case(text)
    if not is_identifier(name):
        name = f"_{name}"
    return name

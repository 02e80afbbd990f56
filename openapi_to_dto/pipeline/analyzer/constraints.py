"""
Constraint annotations for properties.

Each schema keyword that carries validation meaning becomes an ordered,
syntax-agnostic Constraint; the template layer decides how to spell it.
"""

from __future__ import annotations

from ..schema_ast.nodes import SchemaNode
from .ir_nodes import OBJECT, Constraint, TypeKind, TypeRef

# format -> constraint kind
_STRING_FORMATS = {
    "email": "email",
    "uuid": "uuid",
    "date": "date",
    "date-time": "dateTime",
}


def _nested_target(type_ref: TypeRef) -> str:
    """Entity name for nested validation, or the generic object type."""
    element = type_ref.element
    return element.name if element.kind == TypeKind.ENTITY else OBJECT


def build_constraints(schema: SchemaNode, type_ref: TypeRef, required: bool) -> list[Constraint]:
    """
    Derive the constraint annotations of one property.

    Args:
        schema: The property schema (allOf already merged)
        type_ref: The property's resolved type
        required: Whether the property is required

    Returns:
        Constraints in emission order
    """
    constraints: list[Constraint] = []

    def add(kind: str, value=None) -> None:
        constraints.append(Constraint(kind, value))

    if not required:
        add("optional")

    if schema.ref is not None:
        if type_ref.kind == TypeKind.ENUM:
            add("enum", type_ref.name)
        elif type_ref.kind in (TypeKind.ENTITY, TypeKind.UNTYPED):
            add("nested", _nested_target(type_ref))

    elif schema.type == "string" or schema.is_string_enum:
        add("string")
        if schema.format in _STRING_FORMATS:
            add(_STRING_FORMATS[schema.format])
        if type_ref.kind == TypeKind.ENUM:
            add("enum", type_ref.name)
        if schema.min_length is not None:
            add("minLength", schema.min_length)
        if schema.max_length is not None:
            add("maxLength", schema.max_length)
        if schema.pattern:
            add("pattern", schema.pattern)

    elif schema.type in ("number", "integer"):
        add("integer" if schema.type == "integer" else "number")
        if schema.minimum is not None:
            add("minimum", schema.minimum)
        if schema.maximum is not None:
            add("maximum", schema.maximum)

    elif schema.type == "boolean":
        add("boolean")

    elif schema.type == "array":
        add("array")
        if schema.min_items is not None:
            add("minItems", schema.min_items)
        if schema.max_items is not None:
            add("maxItems", schema.max_items)
        items = schema.items
        if items is not None and (items.ref or items.is_inline_object):
            add("nestedEach", _nested_target(type_ref))

    elif schema.is_inline_object:
        add("nested", _nested_target(type_ref))

    return constraints

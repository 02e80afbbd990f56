"""
Schema node definition for OpenAPI / JSON Schema fragments.

A SchemaNode is the read-only input of the resolution core. Nodes are
built once per generation pass by the SchemaParser and never mutated
afterwards; derived shapes (allOf merges) are new nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


# Nodes compare and hash by identity: the same raw mapping reached through
# several paths is one node, and visited sets rely on that.
@dataclass(eq=False)
class SchemaNode:
    """A parsed schema fragment."""

    # Original location in the document (for debugging)
    source_path: str = ""

    # "object", "array", "string", "number", "integer", "boolean" or None
    type: str | None = None
    nullable: bool = False
    format: str | None = None

    # Validation constraints
    pattern: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    minimum: float | None = None
    maximum: float | None = None
    min_items: int | None = None
    max_items: int | None = None
    enum: list[Any] | None = None

    # Documentation
    description: str | None = None
    example: Any = None
    has_example: bool = False

    # None when the schema does not declare "properties" at all
    properties: dict[str, SchemaNode] | None = None
    required: list[str] = field(default_factory=list)

    ref: str | None = None
    all_of: list[SchemaNode] = field(default_factory=list)
    items: SchemaNode | None = None

    # x-* vendor extensions
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def is_inline_object(self) -> bool:
        """An object declared in place: has properties and is not a $ref."""
        return self.ref is None and self.properties is not None and self.type in (None, "object")

    @property
    def is_string_enum(self) -> bool:
        if not self.enum:
            return False
        if self.type == "string":
            return True
        return self.type is None and all(isinstance(v, str) for v in self.enum)

    @property
    def property_names(self) -> frozenset[str]:
        return frozenset(self.properties or ())

    def is_required(self, name: str) -> bool:
        return name in self.required

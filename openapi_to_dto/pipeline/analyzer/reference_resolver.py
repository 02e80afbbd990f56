"""
Reference resolver for $ref lookups against component schemas.

Only references into components.schemas name entities; anything else is
reported as unresolvable and the caller degrades to the untyped marker.
"""

from __future__ import annotations

from ..schema_ast.nodes import SchemaNode

_COMPONENT_PREFIX = "#/components/schemas/"


def ref_name(ref: str) -> str:
    """The final path segment of a $ref ("#/components/schemas/Order" -> "Order")."""
    segment = ref.rstrip("/").split("/")[-1]
    return segment.replace("~1", "/").replace("~0", "~")


class ReferenceResolver:
    """Resolves $ref strings to component schemas."""

    def __init__(self, components: dict[str, SchemaNode]):
        """
        Initialize the resolver.

        Args:
            components: Parsed component schemas by name, in declaration order
        """
        self.components = components

    def component_name(self, ref: str) -> str | None:
        """Name of the component a $ref points at, or None when it does not exist."""
        # External refs that survived bundling still count when their fragment
        # names a component of this document
        if _COMPONENT_PREFIX.lstrip("#") not in ref:
            return None
        name = ref_name(ref)
        return name if name in self.components else None

    def lookup(self, ref: str) -> SchemaNode | None:
        """The component node a $ref points at, or None."""
        name = self.component_name(ref)
        return self.components[name] if name is not None else None

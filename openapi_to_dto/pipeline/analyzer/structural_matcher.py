"""
Structural matching of anonymous object schemas against named entities.

Two object schemas are equivalent when both declare properties and their
property-name sets are equal. Property types are not compared, so distinct
shapes sharing field names merge onto the first registered entity.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..schema_ast.nodes import SchemaNode


def schemas_match(left: SchemaNode, right: SchemaNode) -> bool:
    """Whether two schemas declare the same property names (order-independent)."""
    if left.properties is None or right.properties is None:
        return False
    return left.property_names == right.property_names


class StructuralMatcher:
    """Finds an already-named entity structurally equivalent to a schema."""

    def __init__(self):
        # entity name -> schema, in registration order (first match wins)
        self._known: dict[str, SchemaNode] = {}

    def register(self, name: str, schema: SchemaNode) -> None:
        """Make a named entity available for matching. Re-registering is a no-op."""
        self._known.setdefault(name, schema)

    @property
    def known(self) -> dict[str, SchemaNode]:
        return dict(self._known)

    def match(self, schema: SchemaNode, known: Iterable[tuple[str, SchemaNode]] | None = None) -> str | None:
        """
        Find the first known entity equivalent to schema.

        Args:
            schema: An anonymous object schema
            known: Candidates to search instead of the registered entities

        Returns:
            The matching entity name, or None
        """
        candidates = self._known.items() if known is None else known
        for name, candidate in candidates:
            if candidate is schema or schemas_match(schema, candidate):
                return name
        return None

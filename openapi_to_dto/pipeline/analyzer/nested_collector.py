"""
Nested entity collector.

Discovers inline objects (property values and array items) that have no
structural match, synthesizes names for them and queues their schemas so
the pass resolves each synthesized entity exactly once.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Iterator

from ..schema_ast.nodes import SchemaNode
from .name_resolver import NamingContext
from .structural_matcher import StructuralMatcher


def unwrap_arrays(schema: SchemaNode) -> tuple[SchemaNode, int]:
    """Follow inline array items down to the element schema, counting the levels."""
    depth = 0
    while schema.type == "array" and schema.items is not None and schema.items.ref is None:
        schema = schema.items
        depth += 1
    return schema, depth


class NestedEntityCollector:
    """Names and queues anonymous object schemas for deferred resolution."""

    def __init__(
        self,
        naming: NamingContext,
        matcher: StructuralMatcher,
        merge: Callable[[SchemaNode], SchemaNode],
    ):
        """
        Initialize the collector.

        Args:
            naming: Naming context of the pass
            matcher: Matcher holding every entity named so far
            merge: Folds allOf compositions before a schema is inspected
        """
        self.naming = naming
        self.matcher = matcher
        self.merge = merge

        self._schemas: dict[str, SchemaNode] = {}
        self._origins: dict[str, str] = {}
        self._queue: deque[str] = deque()

    @property
    def discovered(self) -> dict[str, SchemaNode]:
        """Every synthesized entity and its schema, in discovery order."""
        return dict(self._schemas)

    def synthesize(self, parent_name: str, field_name: str, schema: SchemaNode, item_depth: int = 0) -> str:
        """
        Name an inline object and queue it for resolution.

        The name is stable for a (parent, field, depth) triple; the first
        schema registered under a name is the one that gets resolved.

        Returns:
            The synthesized entity name
        """
        name = self.naming.nested_name(parent_name, field_name, item_depth)
        if name not in self._schemas:
            self._schemas[name] = schema
            self._origins[name] = f"{parent_name}.{field_name}"
            self.matcher.register(name, schema)
            self._queue.append(name)
        return name

    def collect(self, parent_name: str, schema: SchemaNode) -> list[str]:
        """
        Recursively synthesize names for the inline objects under schema.

        Objects with a structural match are skipped, as are objects placed
        directly on a response entity (those resolve as untyped). Each level
        of recursion uses the freshly synthesized name as the next parent.

        Args:
            parent_name: Entity that owns schema
            schema: The entity's (merged) schema

        Returns:
            Newly synthesized names, in discovery order
        """
        created: list[str] = []
        for field_name, prop in (schema.properties or {}).items():
            element, depth = unwrap_arrays(self.merge(prop))
            if not element.is_inline_object:
                continue
            if self.matcher.match(element) is not None:
                continue
            if depth == 0 and self.naming.is_response_entity(parent_name):
                continue

            name = self.synthesize(parent_name, field_name, element, depth)
            created.append(name)
            created.extend(self.collect(name, element))
        return created

    def origin(self, name: str) -> str:
        """"Parent.field" a synthesized entity was created for."""
        return self._origins.get(name, "")

    def drain(self) -> Iterator[tuple[str, SchemaNode]]:
        """Yield queued (name, schema) pairs until the queue is empty.

        Resolving a yielded entity may queue more; those are yielded too.
        """
        while self._queue:
            name = self._queue.popleft()
            yield name, self._schemas[name]

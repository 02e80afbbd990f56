"""
Enum collector.

Harvests string enumerations from properties, array items and nested
objects into named EnumDescriptors, deduplicated by name across the pass.
"""

from __future__ import annotations

from ...utils import to_upper_snake_case
from ..schema_ast.nodes import SchemaNode
from .ir_nodes import EnumDescriptor, EnumMember
from .name_resolver import NamingContext


def build_enum(name: str, values: list) -> EnumDescriptor:
    """Build an enum descriptor, keying each literal as UPPER_SNAKE_CASE.

    Every distinct literal is kept. When two literals map to the same key
    ("in-progress", "in_progress") the later ones are numbered:
    IN_PROGRESS, IN_PROGRESS_2.
    """
    members: list[EnumMember] = []
    seen_keys: set[str] = set()
    seen_values: list = []
    for value in values:
        if value in seen_values:
            continue
        seen_values.append(value)

        base = to_upper_snake_case(value)
        key = base
        counter = 2
        while key in seen_keys:
            key = f"{base}_{counter}"
            counter += 1
        seen_keys.add(key)
        members.append(EnumMember(key=key, value=value))
    return EnumDescriptor(name=name, members=members)


class EnumCollector:
    """Collects enums for one pass; the first definition of a name wins."""

    def __init__(self, naming: NamingContext):
        self.naming = naming
        self._enums: dict[str, EnumDescriptor] = {}

    @property
    def enums(self) -> list[EnumDescriptor]:
        """Collected enums in first-seen order."""
        return list(self._enums.values())

    def collect(self, schema: SchemaNode) -> list[EnumDescriptor]:
        """
        Collect the enums declared inside schema.

        $ref targets are not followed; they are collected when their own
        schema is processed.

        Args:
            schema: The schema to walk

        Returns:
            Enums found in this schema, deduplicated (each name once)
        """
        found: dict[str, EnumDescriptor] = {}
        self._walk(schema, found, set())
        for name, descriptor in found.items():
            self._enums.setdefault(name, descriptor)
        return list(found.values())

    def register(self, name: str, values: list) -> EnumDescriptor:
        """Register an enum under an already-synthesized name; the first definition wins."""
        if name not in self._enums:
            self._enums[name] = build_enum(name, values)
        return self._enums[name]

    def collect_named(self, schema_name: str, schema: SchemaNode) -> EnumDescriptor | None:
        """Collect a component that is itself a string enum."""
        if not schema.is_string_enum:
            return None
        descriptor = build_enum(self.naming.enum_name(schema_name), schema.enum)
        return self._enums.setdefault(descriptor.name, descriptor)

    def _walk(self, schema: SchemaNode, found: dict[str, EnumDescriptor], visited: set[int]) -> None:
        # Keyed by node identity: shared subschemas are visited once
        if id(schema) in visited:
            return
        visited.add(id(schema))

        for prop_name, prop in (schema.properties or {}).items():
            # Enum arrays ("tags": ["a", "b"]) are named after the property too
            element = prop
            while element.type == "array" and element.items is not None and element.items.ref is None:
                element = element.items

            if element.is_string_enum:
                name = self.naming.enum_name(prop_name)
                if name not in found:
                    found[name] = build_enum(name, element.enum)

            if element.is_inline_object:
                self._walk(element, found, visited)
            for member in element.all_of:
                if member.is_inline_object:
                    self._walk(member, found, visited)

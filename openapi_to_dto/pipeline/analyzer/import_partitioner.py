"""
Import partitioning between a resource unit and the shared unit.

Components carrying the shared marker (and every component they reference,
so the shared unit is self-contained) are emitted once into the shared
unit; everything else a resource references is declared locally.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from ..schema_ast.nodes import SchemaNode
from ..schema_ast.parser import merge_all_of
from .enum_collector import EnumCollector
from .ir_nodes import ImportPartition
from .name_resolver import NamingContext
from .reference_resolver import ReferenceResolver
from .type_resolver import is_entity_schema


def iter_refs(schema: SchemaNode) -> Iterator[str]:
    """Every $ref string reachable inside schema (each node visited once)."""
    stack = [schema]
    seen: set[int] = set()
    while stack:
        node = stack.pop()
        if id(node) in seen:
            continue
        seen.add(id(node))
        if node.ref is not None:
            yield node.ref
        stack.extend((node.properties or {}).values())
        stack.extend(node.all_of)
        if node.items is not None:
            stack.append(node.items)


@dataclass
class SharedRegistry:
    """Component schemas and generated names that live in the shared unit."""

    schema_names: list[str] = field(default_factory=list)
    names: frozenset[str] = frozenset()

    def __contains__(self, name: object) -> bool:
        return name in self.names

    def is_shared_schema(self, schema_name: str) -> bool:
        return schema_name in self.schema_names

    @classmethod
    def from_components(
        cls,
        components: dict[str, SchemaNode],
        marker: str = "x-shared",
        entity_suffix: str = "Dto",
    ) -> SharedRegistry:
        """
        Build the registry from parsed component schemas.

        A component is shared when its marker metadata is truthy, or when a
        shared component references it.

        Args:
            components: Parsed component schemas by name
            marker: Vendor extension flagging a shared schema
            entity_suffix: Suffix used for entity names

        Returns:
            The registry
        """
        references = ReferenceResolver(components)
        pending = [name for name, node in components.items() if node.metadata.get(marker)]
        shared: set[str] = set()
        while pending:
            name = pending.pop()
            if name in shared:
                continue
            shared.add(name)
            for ref in iter_refs(components[name]):
                target = references.component_name(ref)
                if target is not None and target not in shared:
                    pending.append(target)

        naming = NamingContext(entity_suffix)
        enums = EnumCollector(naming)
        schema_names = [name for name in components if name in shared]
        names: set[str] = set()
        for name in schema_names:
            merged = merge_all_of(components[name], references.lookup)
            if merged.is_string_enum:
                names.add(naming.enum_name(name))
            elif is_entity_schema(merged):
                names.add(naming.entity_name(name))
                names.update(enum.name for enum in enums.collect(merged))

        return cls(schema_names=schema_names, names=frozenset(names))


def partition_imports(
    referenced: Iterable[str],
    shared: Iterable[str],
    emitted: Iterable[str] = (),
) -> ImportPartition:
    """
    Split referenced names into local and shared imports.

    A name emitted by the unit itself is always local, even when the shared
    unit declares the same name. Both lists are sorted, so the result does
    not depend on input order and partitioning twice gives the same result.

    Args:
        referenced: Entity and enum names referenced by the unit
        shared: Names declared by the shared unit
        emitted: Names declared by the unit itself

    Returns:
        The partition
    """
    shared_names = set(shared) - set(emitted)
    names = set(referenced)
    return ImportPartition(
        local=sorted(names - shared_names),
        shared=sorted(names & shared_names),
    )

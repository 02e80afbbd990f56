"""
Pass analyzer that transforms parsed component schemas to IR.

One DtoAnalyzer is one generation pass: it owns the naming context, the
structural matcher, the enum collector and the nested entity queue, and
produces entities in dependency order with their enums and imports.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from ..config import GeneratorConfig
from ..payload_index import PayloadIndex
from ..schema_ast.nodes import SchemaNode
from ..schema_ast.parser import SchemaParser, merge_all_of
from .dependency_graph import DependencyGraph, TopologicalSorter
from .enum_collector import EnumCollector
from .import_partitioner import SharedRegistry, partition_imports
from .ir_nodes import EntityDescriptor, GenerationResult, OperationDescriptor
from .name_resolver import NamingContext
from .nested_collector import NestedEntityCollector
from .operation_resolver import OperationResolver
from .original_ref_lookup import OriginalRefLookup
from .reference_resolver import ReferenceResolver
from .structural_matcher import StructuralMatcher
from .type_resolver import TypeResolver, is_entity_schema

logger = logging.getLogger(__name__)


class DtoAnalyzer:
    """Runs one generation pass over a spec document."""

    def __init__(
        self,
        spec: dict[str, Any],
        config: GeneratorConfig | None = None,
        shared: SharedRegistry | None = None,
        matchable: Iterable[str] | None = None,
    ):
        """
        Initialize the pass.

        Args:
            spec: The (bundled) spec document
            config: Generation configuration
            shared: Names declared by the shared unit, for import partitioning
            matchable: Components an inline object may structurally match
                (default: all of them)
        """
        self.config = config or GeneratorConfig()
        self.shared = shared or SharedRegistry()
        self._matchable = None if matchable is None else set(matchable)

        self.parser = SchemaParser()
        self.components = self.parser.parse_components(spec)
        self.references = ReferenceResolver(self.components)

        self.naming = NamingContext(self.config.entity_suffix)
        self.matcher = StructuralMatcher()
        self.enums = EnumCollector(self.naming)
        self.collector = NestedEntityCollector(self.naming, self.matcher, self.merge)
        self.resolver = TypeResolver(self.naming, self.references, self.matcher, self.collector, self.enums)

        # Built entities by name, in build order
        self._entities: dict[str, EntityDescriptor] = {}

        # Response entity name -> (schema, operation id), registered by resolve_operations
        self._response_entities: dict[str, tuple[SchemaNode, str]] = {}

        self._register_components()

    def merge(self, schema: SchemaNode) -> SchemaNode:
        return merge_all_of(schema, self.references.lookup)

    def _register_components(self) -> None:
        """Reserve every component's entity name and make entities matchable."""
        for schema_name, node in self.components.items():
            name = self.naming.entity_name(schema_name)
            self.naming.reserve(name)
            merged = self.merge(node)
            if is_entity_schema(merged) and (self._matchable is None or schema_name in self._matchable):
                self.matcher.register(name, merged)

    def resolve_operations(self, index: PayloadIndex, original_refs: OriginalRefLookup | None = None) -> list[OperationDescriptor]:
        """
        Resolve the payload types of every indexed operation.

        Must run before analyze() so response entities are built by it.

        Args:
            index: Payloads of the bundled document
            original_refs: Lookup into the unbundled document

        Returns:
            Operation descriptors in document order
        """
        resolver = OperationResolver(self.naming, self.resolver, self.parser, self._add_response_entity, original_refs)
        return resolver.resolve_all(index)

    def _add_response_entity(self, name: str, schema: SchemaNode, operation_id: str) -> None:
        if name not in self._response_entities:
            self._response_entities[name] = (schema, operation_id)
            self.matcher.register(name, schema)

    def analyze(self, schema_names: Iterable[str] | None = None) -> GenerationResult:
        """
        Build the pass's entities, enums and imports.

        Args:
            schema_names: Components owned by this pass (default: all of them)

        Returns:
            The generation result, entities in dependency order
        """
        names = list(self.components) if schema_names is None else [n for n in schema_names if n in self.components]

        # First pass: component schemas
        for schema_name in names:
            self._analyze_component(schema_name)

        # Second pass: inline response bodies
        for name, (schema, operation_id) in list(self._response_entities.items()):
            self._build_entity(name, schema, operation_id)

        # Third pass: nested entities discovered so far (and any they discover)
        for name, schema in self.collector.drain():
            self._build_entity(name, schema, self.collector.origin(name))

        return self._build_result()

    def _analyze_component(self, schema_name: str) -> None:
        node = self.merge(self.components[schema_name])
        if node.is_string_enum:
            self.enums.collect_named(schema_name, node)
        elif is_entity_schema(node):
            self._build_entity(self.naming.entity_name(schema_name), node, schema_name)
        else:
            logger.debug("Component %s is an alias; resolved in place", schema_name)

    def _build_entity(self, name: str, schema: SchemaNode, origin: str) -> None:
        """Resolve every property of an entity. Each name is built once."""
        if name in self._entities:
            return

        merged = self.merge(schema)
        self.enums.collect(merged)
        self.collector.collect(name, merged)

        properties = [
            self.resolver.resolve_property(prop_name, prop, merged.is_required(prop_name), name)
            for prop_name, prop in (merged.properties or {}).items()
        ]

        imports: list[str] = []
        for prop in properties:
            for referenced in prop.type_ref.referenced_names():
                if referenced != name and referenced not in imports:
                    imports.append(referenced)

        self._entities[name] = EntityDescriptor(name=name, properties=properties, imports=imports, origin=origin)
        logger.debug("Built entity %s (%d properties) from %s", name, len(properties), origin)

    def _build_result(self) -> GenerationResult:
        graph = DependencyGraph()
        for entity in self._entities.values():
            graph.add(entity.name, entity.imports)
        ordering = TopologicalSorter(strict=self.config.strict_cycles).sort(graph)

        entities = [self._entities[name] for name in ordering.order]
        enums = self.enums.enums

        referenced: list[str] = []
        for entity in entities:
            referenced.extend(entity.imports)
        emitted = [e.name for e in entities] + [e.name for e in enums]

        return GenerationResult(
            entities=entities,
            enums=enums,
            imports=partition_imports(referenced, self.shared.names, emitted),
            broken_edges=ordering.broken_edges,
        )

"""
Type resolver.

Maps one schema node to a TypeRef: scalar, enum, entity reference, array,
or a synthesized nested entity. Direct self-references and unresolvable
references resolve to the untyped marker.
"""

from __future__ import annotations

from ..schema_ast.nodes import SchemaNode
from ..schema_ast.parser import merge_all_of
from .constraints import build_constraints
from .enum_collector import EnumCollector
from .ir_nodes import (
    BOOLEAN,
    NUMBER,
    OBJECT,
    STRING,
    PropertyDescriptor,
    TypeRef,
    array_ref,
    entity_ref,
    enum_ref,
    scalar_ref,
    untyped_ref,
)
from .name_resolver import NamingContext
from .nested_collector import NestedEntityCollector
from .reference_resolver import ReferenceResolver
from .structural_matcher import StructuralMatcher

_SCALARS = {
    "string": STRING,
    "number": NUMBER,
    "integer": NUMBER,
    "boolean": BOOLEAN,
}


def is_entity_schema(schema: SchemaNode) -> bool:
    """Whether a (merged) component schema becomes an entity.

    Enums, scalars, arrays and $ref aliases are resolved in place instead.
    """
    if schema.ref is not None or schema.enum or schema.items is not None:
        return False
    return schema.properties is not None or schema.type in (None, "object")


class TypeResolver:
    """Resolves schema nodes to type references within one pass."""

    def __init__(
        self,
        naming: NamingContext,
        references: ReferenceResolver,
        matcher: StructuralMatcher,
        collector: NestedEntityCollector,
        enums: EnumCollector,
    ):
        self.naming = naming
        self.references = references
        self.matcher = matcher
        self.collector = collector
        self.enums = enums

    def merge(self, schema: SchemaNode) -> SchemaNode:
        """Fold an allOf composition, resolving $ref members against components."""
        return merge_all_of(schema, self.references.lookup)

    def resolve(self, schema: SchemaNode, current_entity: str | None = None, property_name: str | None = None) -> TypeRef:
        """
        Resolve a schema to a type reference. The schema is not modified.

        Args:
            schema: The schema to resolve
            current_entity: Entity declaring the property, if any
            property_name: Property holding the schema (names enums and nested entities)

        Returns:
            The resolved TypeRef
        """
        return self._resolve(schema, current_entity, property_name, 0, frozenset())

    def resolve_property(self, name: str, schema: SchemaNode, required: bool, current_entity: str) -> PropertyDescriptor:
        """Resolve one property of an entity, with its constraint annotations."""
        merged = self.merge(schema)
        type_ref = self.resolve(merged, current_entity, name)
        return PropertyDescriptor(
            name=name,
            type_ref=type_ref,
            required=required,
            description=merged.description,
            constraints=build_constraints(merged, type_ref, required),
            example=merged.example,
            has_example=merged.has_example,
            enum_values=list(merged.enum) if merged.is_string_enum else None,
        )

    def _resolve(
        self,
        schema: SchemaNode,
        current_entity: str | None,
        property_name: str | None,
        item_depth: int,
        ref_chain: frozenset[str],
    ) -> TypeRef:
        schema = self.merge(schema)

        if schema.ref is not None:
            return self._resolve_ref(schema.ref, current_entity, property_name, item_depth, ref_chain)

        if schema.is_string_enum and property_name:
            name = self.naming.enum_name(property_name)
            self.enums.register(name, schema.enum)
            return enum_ref(name)

        if schema.type in _SCALARS:
            return scalar_ref(_SCALARS[schema.type])

        if schema.type == "array":
            if schema.items is None:
                return array_ref(untyped_ref())
            item = self._resolve(schema.items, current_entity, property_name, item_depth + 1, ref_chain)
            return array_ref(item)

        if schema.is_inline_object:
            return self._resolve_inline_object(schema, current_entity, property_name, item_depth)

        if schema.type == "object":
            return scalar_ref(OBJECT)

        return untyped_ref()

    def _resolve_ref(
        self,
        ref: str,
        current_entity: str | None,
        property_name: str | None,
        item_depth: int,
        ref_chain: frozenset[str],
    ) -> TypeRef:
        """Resolve a $ref to an entity, a component enum, or the aliased type."""
        component = self.references.component_name(ref)
        if component is None:
            return untyped_ref()

        target = self.merge(self.references.components[component])

        if target.is_string_enum:
            # Emitted by the pass that owns the component
            return enum_ref(self.naming.enum_name(component))

        if is_entity_schema(target):
            name = self.naming.entity_name(component)
            if name == current_entity:
                return untyped_ref()
            return entity_ref(name)

        # Scalar/array alias: resolve the target in place
        if component in ref_chain:
            return untyped_ref()
        return self._resolve(target, current_entity, property_name, item_depth, ref_chain | {component})

    def _resolve_inline_object(
        self,
        schema: SchemaNode,
        current_entity: str | None,
        property_name: str | None,
        item_depth: int,
    ) -> TypeRef:
        """Reuse a structurally equivalent entity or synthesize a nested one."""
        matched = self.matcher.match(schema)
        if matched is not None:
            return untyped_ref() if matched == current_entity else entity_ref(matched)

        # Inline objects directly on a response body stay untyped
        if item_depth == 0 and self.naming.is_response_entity(current_entity):
            return untyped_ref()

        if current_entity is None or not property_name:
            return untyped_ref()

        return entity_ref(self.collector.synthesize(current_entity, property_name, schema, item_depth))

"""
Operation payload resolution.

Resolves the request and response payload types of every operation,
preferring the schema names recorded in the unbundled document, and the
declared types of its parameters. Inline response objects without a
structural match become response entities.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..payload_index import REQUEST_BODY, OperationPayloads, PayloadIndex
from ..schema_ast.nodes import SchemaNode
from ..schema_ast.parser import SchemaParser
from .ir_nodes import (
    BOOLEAN,
    NUMBER,
    STRING,
    VOID,
    OperationDescriptor,
    ParameterDescriptor,
    ResponseDescriptor,
    TypeRef,
    array_ref,
    entity_ref,
    scalar_ref,
)
from .name_resolver import NamingContext
from .original_ref_lookup import OriginalRefLookup, canonical_ref_name
from .type_resolver import TypeResolver

logger = logging.getLogger(__name__)

# Parameter schema type -> declared type; anything else is a string
_PARAMETER_SCALARS = {"string": STRING, "integer": NUMBER, "number": NUMBER, "boolean": BOOLEAN}


def parameter_type(schema: dict[str, Any]) -> TypeRef:
    """Declared type of a path, query or header parameter."""
    if schema.get("type") == "array":
        items = schema.get("items")
        item_type = items.get("type") if isinstance(items, dict) else None
        return array_ref(scalar_ref(_PARAMETER_SCALARS.get(item_type, STRING)))
    return scalar_ref(_PARAMETER_SCALARS.get(schema.get("type"), STRING))


def resolve_parameter(raw: dict[str, Any]) -> ParameterDescriptor:
    """Parameter descriptor of a raw parameter object. Path parameters are always required."""
    schema = raw.get("schema") if isinstance(raw.get("schema"), dict) else {}
    location = str(raw.get("in", "query"))
    return ParameterDescriptor(
        name=str(raw["name"]),
        location=location,
        type_ref=parameter_type(schema),
        required=raw.get("required") is True or location == "path",
        description=raw.get("description"),
        schema_type=schema.get("type"),
        pattern=schema.get("pattern"),
        format=schema.get("format"),
    )


class OperationResolver:
    """Resolves operation payloads within a pass."""

    def __init__(
        self,
        naming: NamingContext,
        resolver: TypeResolver,
        parser: SchemaParser,
        add_response_entity: Callable[[str, SchemaNode, str], None],
        original_refs: OriginalRefLookup | None = None,
    ):
        """
        Initialize the resolver.

        Args:
            naming: Naming context of the pass
            resolver: Type resolver of the pass
            parser: Parser shared with the pass (node identity matters)
            add_response_entity: Callback registering (name, schema, origin) as a response entity
            original_refs: Lookup into the unbundled document, if available
        """
        self.naming = naming
        self.resolver = resolver
        self.parser = parser
        self.add_response_entity = add_response_entity
        self.original_refs = original_refs

    def resolve_all(self, index: PayloadIndex) -> list[OperationDescriptor]:
        """Resolve every indexed operation, in document order."""
        return [self.resolve(operation) for operation in index]

    def resolve(self, operation: OperationPayloads) -> OperationDescriptor:
        descriptor = OperationDescriptor(
            operation_id=operation.operation_id,
            method=operation.method,
            path=operation.path,
            summary=operation.summary,
            tags=list(operation.tags),
            parameters=[resolve_parameter(raw) for raw in operation.parameters],
        )

        if operation.has_request_body:
            descriptor.request_type = self._payload_type(operation.operation_id, REQUEST_BODY, operation.request_schema)

        several_successes = operation.success_count > 1
        for response in operation.responses:
            naming_status = None if response.is_success and not several_successes else response.status
            descriptor.responses.append(
                ResponseDescriptor(
                    status=response.status,
                    type_ref=self._payload_type(operation.operation_id, response.status, response.schema, naming_status),
                    description=response.description,
                )
            )

        logger.debug("Resolved operation %s (%s %s)", operation.operation_id, operation.method.upper(), operation.path)
        return descriptor

    def _payload_type(
        self,
        operation_id: str,
        selector: str,
        raw: dict | None,
        naming_status: str | None = None,
    ) -> TypeRef:
        """
        Resolve one payload schema.

        Args:
            operation_id: The operation's id
            selector: REQUEST_BODY or the response status
            raw: The bundled payload schema (None when there is no body)
            naming_status: Status to put in a synthesized response name

        Returns:
            The payload type; "void" when there is no body
        """
        if raw is None:
            return scalar_ref(VOID)

        node = self.parser.parse(raw)

        recovered = self._recover_original(operation_id, selector)
        if recovered is not None:
            return recovered

        if selector != REQUEST_BODY:
            merged = self.resolver.merge(node)
            if merged.is_inline_object and self.resolver.matcher.match(merged) is None:
                name = self.naming.response_name(operation_id, naming_status)
                self.add_response_entity(name, merged, operation_id)
                return entity_ref(name)

        return self.resolver.resolve(node)

    def _recover_original(self, operation_id: str, selector: str) -> TypeRef | None:
        """Type named by the unbundled document, if it names an existing component."""
        if self.original_refs is None:
            return None
        original = self.original_refs.find(operation_id, selector)
        if original is None:
            return None

        name = canonical_ref_name(original)
        if name not in self.resolver.references.components:
            return None

        type_ref = self.resolver.resolve(SchemaNode(ref=f"#/components/schemas/{name}"))
        original_schema = self.original_refs.index.schema(operation_id, selector) or {}
        if original_schema.get("type") == "array":
            return array_ref(type_ref)
        return type_ref

"""
Schema parser that builds SchemaNodes from raw OpenAPI mappings.

Parsing does not resolve references: $ref values are kept as strings and
looked up later by the analyzer.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from typing import Any

from .nodes import SchemaNode

_SCALAR_KEYS = {
    "format": "format",
    "pattern": "pattern",
    "minLength": "min_length",
    "maxLength": "max_length",
    "minimum": "minimum",
    "maximum": "maximum",
    "minItems": "min_items",
    "maxItems": "max_items",
    "description": "description",
}


class SchemaParser:
    """Parses raw schema mappings into SchemaNodes.

    The parser memoizes by identity of the raw mapping, so one mapping
    reachable through several paths becomes one node, and a mapping that
    contains itself does not recurse forever.
    """

    def __init__(self):
        # id(raw) -> (raw, node); raw is kept alive so ids cannot be reused
        self._memo: dict[int, tuple[Any, SchemaNode]] = {}

    def parse(self, raw: Any, path: str = "#") -> SchemaNode:
        """
        Parse a schema mapping.

        Args:
            raw: The raw schema (anything that is not a mapping parses as untyped)
            path: Location of the schema in its document

        Returns:
            The parsed SchemaNode
        """
        if not isinstance(raw, dict):
            return SchemaNode(source_path=path)

        cached = self._memo.get(id(raw))
        if cached is not None:
            return cached[1]

        node = SchemaNode(source_path=path)
        self._memo[id(raw)] = (raw, node)
        self._fill(node, raw, path)
        return node

    def parse_components(self, spec: dict[str, Any]) -> dict[str, SchemaNode]:
        """Parse every entry of components.schemas, keeping declaration order."""
        schemas = (spec.get("components") or {}).get("schemas") or {}
        return {name: self.parse(raw, f"#/components/schemas/{name}") for name, raw in schemas.items()}

    def _fill(self, node: SchemaNode, raw: dict[str, Any], path: str) -> None:
        """Copy the supported keywords of raw into node."""
        node.type, node.nullable = self._parse_type(raw)
        if raw.get("nullable") is True:
            node.nullable = True

        for key, attr in _SCALAR_KEYS.items():
            if key in raw:
                setattr(node, attr, raw[key])

        if isinstance(raw.get("enum"), list):
            node.enum = [v for v in raw["enum"] if v is not None]

        if "example" in raw:
            node.example = raw["example"]
            node.has_example = True

        if isinstance(raw.get("$ref"), str):
            node.ref = raw["$ref"]

        if isinstance(raw.get("properties"), dict):
            node.properties = {name: self.parse(prop, f"{path}/properties/{name}") for name, prop in raw["properties"].items()}

        if isinstance(raw.get("required"), list):
            node.required = [name for name in raw["required"] if isinstance(name, str)]

        if isinstance(raw.get("allOf"), list):
            node.all_of = [self.parse(member, f"{path}/allOf/{i}") for i, member in enumerate(raw["allOf"])]

        if "items" in raw:
            node.items = self.parse(raw["items"], f"{path}/items")

        node.metadata = {key: value for key, value in raw.items() if key.startswith("x-")}

    @staticmethod
    def _parse_type(raw: dict[str, Any]) -> tuple[str | None, bool]:
        """Read "type", folding ["T", "null"] into (T, nullable)."""
        value = raw.get("type")
        if isinstance(value, list):
            non_null = [t for t in value if t != "null"]
            return (non_null[0] if non_null else None), len(non_null) != len(value)
        if isinstance(value, str):
            return value, False
        return None, False


def merge_all_of(node: SchemaNode, lookup: Callable[[str], SchemaNode | None]) -> SchemaNode:
    """
    Merge an allOf composition into a single object node.

    Later members override earlier ones on property collisions and required
    sets are unioned. Properties declared next to the allOf are applied last.
    An allOf holding a single $ref and nothing else is read as that $ref.

    Args:
        node: The node to merge (returned as-is when it has no allOf)
        lookup: Resolves a $ref string to its component node, or None

    Returns:
        A new merged node, or node itself
    """
    return _merge_all_of(node, lookup, set())


def _merge_all_of(node: SchemaNode, lookup: Callable[[str], SchemaNode | None], seen_refs: set[str]) -> SchemaNode:
    if not node.all_of:
        return node

    if len(node.all_of) == 1 and node.all_of[0].ref and node.properties is None:
        return replace(node, ref=node.all_of[0].ref, all_of=[])

    properties: dict[str, SchemaNode] = {}
    required: list[str] = []

    def absorb(member: SchemaNode) -> None:
        properties.update(member.properties or {})
        for name in member.required:
            if name not in required:
                required.append(name)

    for member in node.all_of:
        if member.ref:
            if member.ref in seen_refs:
                continue
            target = lookup(member.ref)
            if target is None:
                continue
            member = _merge_all_of(target, lookup, seen_refs | {member.ref})
        else:
            member = _merge_all_of(member, lookup, seen_refs)
        absorb(member)

    absorb(node)
    return replace(node, type="object", properties=properties, required=required, all_of=[])

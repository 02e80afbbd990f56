"""
Original reference lookup.

Bundling inlines external references and loses the schema names they
carried. The unbundled document still has them, so payload types are
recovered from it first.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any

from ..payload_index import REQUEST_BODY, PayloadIndex
from .reference_resolver import ref_name


def canonical_ref_name(ref: str) -> str:
    """
    Schema name a reference designates.

    Examples:
        "#/components/schemas/User" -> "User"
        "./schemas/user.yaml#/User" -> "User"
        "./schemas/User.yaml" -> "User"
    """
    file_part, _, fragment = ref.partition("#")
    if fragment.strip("/"):
        return ref_name(fragment)
    return PurePosixPath(file_part).stem


class OriginalRefLookup:
    """Finds the $ref an operation payload had before bundling."""

    def __init__(self, index: PayloadIndex):
        self.index = index

    @classmethod
    def from_spec(cls, original_spec: dict[str, Any], content_type: str = "application/json") -> OriginalRefLookup:
        return cls(PayloadIndex.from_spec(original_spec, content_type))

    def find(self, operation_id: str, selector: str | int) -> str | None:
        """
        The original $ref of a payload schema.

        Direct references are found for request bodies and responses; a
        response that is an array of a referenced schema yields the item
        reference.

        Args:
            operation_id: The operation's id
            selector: REQUEST_BODY, or a response status code

        Returns:
            The $ref string, or None
        """
        schema = self.index.schema(operation_id, selector)
        if schema is None:
            return None
        if isinstance(schema.get("$ref"), str):
            return schema["$ref"]
        if selector == REQUEST_BODY or schema.get("type") != "array":
            return None
        items = schema.get("items")
        if isinstance(items, dict) and isinstance(items.get("$ref"), str):
            return items["$ref"]
        return None

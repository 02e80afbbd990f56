"""
Naming context for one generation pass.

Produces entity, response, nested and enum names. Every synthesized name is
memoized by what it was synthesized for and made collision-free against
all names reserved so far in the pass.
"""

from __future__ import annotations

from ...utils import to_pascal_case


class NamingContext:
    """Deterministic, collision-free name registry scoped to one pass."""

    def __init__(self, entity_suffix: str = "Dto"):
        """
        Initialize the context.

        Args:
            entity_suffix: Suffix appended to every entity name
        """
        self.entity_suffix = entity_suffix
        self._reserved: set[str] = set()
        self._response_names: set[str] = set()

        # (parent, field, item_depth) -> nested entity name
        self._nested: dict[tuple[str, str, int], str] = {}

        # (operation_id, status) -> response entity name
        self._responses: dict[tuple[str, str | None], str] = {}

    def entity_name(self, schema_name: str) -> str:
        """Name of the entity generated for a component schema."""
        return f"{to_pascal_case(schema_name)}{self.entity_suffix}"

    def enum_name(self, property_name: str) -> str:
        """Name of the enum collected for a property (or enum component)."""
        return f"{to_pascal_case(property_name)}Enum"

    def base_name(self, entity_name: str) -> str:
        """Entity name without its suffix ("OrderDto" -> "Order")."""
        if self.entity_suffix and entity_name.endswith(self.entity_suffix):
            return entity_name[: -len(self.entity_suffix)]
        return entity_name

    def reserve(self, name: str) -> None:
        """Mark a name as taken (component entities are reserved up front)."""
        self._reserved.add(name)

    def is_reserved(self, name: str) -> bool:
        return name in self._reserved

    def response_name(self, operation_id: str, status: str | None = None) -> str:
        """
        Name of the entity synthesized for an inline response body.

        Args:
            operation_id: The operation's id
            status: Status code; given for error responses and when an operation has several 2xx responses

        Returns:
            A reserved name such as "ListUsersResponseDto" or "ListUsers201ResponseDto"
        """
        key = (operation_id, status)
        if key not in self._responses:
            stem = f"{to_pascal_case(operation_id)}{to_pascal_case(status or '')}Response"
            name = self._claim(stem)
            self._responses[key] = name
            self._response_names.add(name)
        return self._responses[key]

    def is_response_entity(self, name: str | None) -> bool:
        """Whether name was synthesized for an operation's response body."""
        return name in self._response_names

    def nested_name(self, parent_name: str, field_name: str, item_depth: int = 0) -> str:
        """
        Name of the entity synthesized for an inline object.

        Args:
            parent_name: Entity that declares the field
            field_name: Property holding the inline object
            item_depth: Number of array levels between the field and the object

        Returns:
            A reserved name such as "OrderCustomerDto" or "ListUsersResponseDataItemDto"
        """
        key = (parent_name, field_name, item_depth)
        if key not in self._nested:
            stem = f"{self.base_name(parent_name)}{to_pascal_case(field_name)}{'Item' * item_depth}"
            self._nested[key] = self._claim(stem)
        return self._nested[key]

    def _claim(self, stem: str) -> str:
        """Reserve stem + suffix, numbering it when already taken."""
        name = f"{stem}{self.entity_suffix}"
        counter = 2
        while name in self._reserved:
            name = f"{stem}{counter}{self.entity_suffix}"
            counter += 1
        self._reserved.add(name)
        return name

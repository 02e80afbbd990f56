"""
IR (Intermediate Representation) node definitions.

These nodes are the output of a generation pass: named entities with
resolved property types and constraint annotations, deduplicated enums,
and import partitions. They are handed to the template layer as-is.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Type reference spellings shared with the template layer
UNTYPED = "any"
STRING = "string"
NUMBER = "number"
BOOLEAN = "boolean"
OBJECT = "object"
VOID = "void"
ARRAY_SUFFIX = "[]"


class TypeKind(Enum):
    """Kind of a resolved type reference."""

    SCALAR = "scalar"  # string, number, boolean, object
    ENUM = "enum"  # A collected enum
    ENTITY = "entity"  # A named entity (component or synthesized)
    ARRAY = "array"  # T[]
    UNTYPED = "untyped"  # Escape marker for cycles and unresolvable shapes


@dataclass(frozen=True)
class TypeRef:
    """A resolved type reference."""

    kind: TypeKind = TypeKind.UNTYPED
    name: str = UNTYPED

    # Element type for arrays
    item: TypeRef | None = None

    @property
    def expression(self) -> str:
        """The type as written in a property declaration ("OrderDto[]")."""
        if self.kind == TypeKind.ARRAY and self.item is not None:
            return f"{self.item.expression}{ARRAY_SUFFIX}"
        return self.name

    @property
    def element(self) -> TypeRef:
        """The innermost non-array type."""
        ref = self
        while ref.kind == TypeKind.ARRAY and ref.item is not None:
            ref = ref.item
        return ref

    def referenced_names(self) -> list[str]:
        """Entity and enum names this type points at."""
        element = self.element
        if element.kind in (TypeKind.ENTITY, TypeKind.ENUM):
            return [element.name]
        return []


def untyped_ref() -> TypeRef:
    return TypeRef(kind=TypeKind.UNTYPED, name=UNTYPED)


def scalar_ref(name: str) -> TypeRef:
    return TypeRef(kind=TypeKind.SCALAR, name=name)


def entity_ref(name: str) -> TypeRef:
    return TypeRef(kind=TypeKind.ENTITY, name=name)


def enum_ref(name: str) -> TypeRef:
    return TypeRef(kind=TypeKind.ENUM, name=name)


def array_ref(item: TypeRef) -> TypeRef:
    return TypeRef(kind=TypeKind.ARRAY, name="array", item=item)


@dataclass(frozen=True)
class Constraint:
    """A syntax-agnostic validation annotation, e.g. Constraint("minLength", 1)."""

    kind: str
    value: Any = None


@dataclass
class PropertyDescriptor:
    """A property of an entity."""

    name: str = ""
    type_ref: TypeRef = field(default_factory=untyped_ref)
    required: bool = False
    description: str | None = None
    constraints: list[Constraint] = field(default_factory=list)

    # Passed through for documentation metadata in templates
    example: Any = None
    has_example: bool = False
    enum_values: list[Any] | None = None

    @property
    def optional_marker(self) -> str:
        return "" if self.required else "?"

    @property
    def declared_name(self) -> str:
        """Name with the optional marker ("email?")."""
        return f"{self.name}{self.optional_marker}"

    @property
    def type(self) -> str:
        return self.type_ref.expression

    def constraint(self, kind: str) -> Constraint | None:
        """The first constraint of the given kind, if any."""
        return next((c for c in self.constraints if c.kind == kind), None)


@dataclass
class EntityDescriptor:
    """A named composite type."""

    name: str = ""
    properties: list[PropertyDescriptor] = field(default_factory=list)

    # Referenced entity and enum names, in order of first reference
    imports: list[str] = field(default_factory=list)

    # Component schema name, operation id, or parent.field for synthesized entities
    origin: str = ""


@dataclass
class EnumMember:
    """One (key, literal value) pair of an enum."""

    key: str = ""
    value: Any = None


@dataclass
class EnumDescriptor:
    """A deduplicated string enumeration."""

    name: str = ""
    members: list[EnumMember] = field(default_factory=list)

    @property
    def keys(self) -> list[str]:
        return [m.key for m in self.members]


@dataclass
class ImportPartition:
    """Referenced names split by where they are declared."""

    local: list[str] = field(default_factory=list)
    shared: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {"local": list(self.local), "shared": list(self.shared)}


@dataclass
class ResponseDescriptor:
    """The resolved payload type of one response status."""

    status: str = ""
    type_ref: TypeRef = field(default_factory=untyped_ref)
    description: str | None = None

    @property
    def type(self) -> str:
        return self.type_ref.expression

    @property
    def is_success(self) -> bool:
        return self.status.startswith("2")


@dataclass
class ParameterDescriptor:
    """A path, query, header or cookie parameter of an operation."""

    name: str = ""
    location: str = "query"
    type_ref: TypeRef = field(default_factory=lambda: scalar_ref(STRING))
    required: bool = False
    description: str | None = None

    # Schema keywords passed through for documentation metadata
    schema_type: str | None = None
    pattern: str | None = None
    format: str | None = None

    @property
    def type(self) -> str:
        return self.type_ref.expression


@dataclass
class OperationDescriptor:
    """Resolved request and response payload types of an operation."""

    operation_id: str = ""
    method: str = ""
    path: str = ""
    summary: str | None = None
    tags: list[str] = field(default_factory=list)
    parameters: list[ParameterDescriptor] = field(default_factory=list)
    request_type: TypeRef | None = None
    responses: list[ResponseDescriptor] = field(default_factory=list)

    def referenced_names(self) -> list[str]:
        names: list[str] = []
        refs = [self.request_type] if self.request_type else []
        refs.extend(r.type_ref for r in self.responses)
        for ref in refs:
            for name in ref.referenced_names():
                if name not in names:
                    names.append(name)
        return names


@dataclass
class GenerationResult:
    """Everything one generation pass produced, ready for emission."""

    # In dependency order
    entities: list[EntityDescriptor] = field(default_factory=list)
    enums: list[EnumDescriptor] = field(default_factory=list)
    imports: ImportPartition = field(default_factory=ImportPartition)

    # Edges dropped while ordering cyclic entities
    broken_edges: list[tuple[str, str]] = field(default_factory=list)

    @property
    def entity_names(self) -> list[str]:
        return [e.name for e in self.entities]

    @property
    def enum_names(self) -> list[str]:
        return [e.name for e in self.enums]

    def entity(self, name: str) -> EntityDescriptor | None:
        return next((e for e in self.entities if e.name == name), None)

    def is_empty(self) -> bool:
        return not self.entities and not self.enums

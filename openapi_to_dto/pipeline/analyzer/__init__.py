"""
Analyzer module for transforming component schemas to IR.
"""

from .analyzer import DtoAnalyzer
from .dependency_graph import DependencyGraph, SortResult, TopologicalSorter
from .enum_collector import EnumCollector, build_enum
from .import_partitioner import SharedRegistry, partition_imports
from .ir_nodes import (
    Constraint,
    EntityDescriptor,
    EnumDescriptor,
    EnumMember,
    GenerationResult,
    ImportPartition,
    OperationDescriptor,
    ParameterDescriptor,
    PropertyDescriptor,
    ResponseDescriptor,
    TypeKind,
    TypeRef,
)
from .name_resolver import NamingContext
from .nested_collector import NestedEntityCollector
from .operation_resolver import OperationResolver
from .original_ref_lookup import OriginalRefLookup, canonical_ref_name
from .reference_resolver import ReferenceResolver, ref_name
from .structural_matcher import StructuralMatcher, schemas_match
from .type_resolver import TypeResolver, is_entity_schema

__all__ = [
    "Constraint",
    "DependencyGraph",
    "DtoAnalyzer",
    "EntityDescriptor",
    "EnumCollector",
    "EnumDescriptor",
    "EnumMember",
    "GenerationResult",
    "ImportPartition",
    "NamingContext",
    "NestedEntityCollector",
    "OperationDescriptor",
    "OperationResolver",
    "OriginalRefLookup",
    "ParameterDescriptor",
    "PropertyDescriptor",
    "ReferenceResolver",
    "ResponseDescriptor",
    "SharedRegistry",
    "SortResult",
    "StructuralMatcher",
    "TopologicalSorter",
    "TypeKind",
    "TypeRef",
    "TypeResolver",
    "build_enum",
    "canonical_ref_name",
    "is_entity_schema",
    "partition_imports",
    "ref_name",
    "schemas_match",
]

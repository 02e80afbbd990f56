"""
DTO generator for one spec document.

Runs the shared pass (components carrying the shared marker) and the
resource pass (everything else plus operation payloads) and returns both
results. Each pass owns its naming and matching state, so a pass never
sees names synthesized by the other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .analyzer import DtoAnalyzer, OriginalRefLookup, SharedRegistry, partition_imports
from .analyzer.ir_nodes import GenerationResult, ImportPartition, OperationDescriptor
from .config import GeneratorConfig
from .payload_index import PayloadIndex
from .schema_ast import SchemaParser

logger = logging.getLogger(__name__)


@dataclass
class SpecGeneration:
    """Both output units of one spec, plus its resolved operations."""

    resource_name: str = ""
    shared: GenerationResult = field(default_factory=GenerationResult)
    resource: GenerationResult = field(default_factory=GenerationResult)
    operations: list[OperationDescriptor] = field(default_factory=list)

    # Names the operations reference, split like the resource imports
    operation_imports: ImportPartition = field(default_factory=ImportPartition)


class DtoGenerator:
    """Generates the DTO IR of a spec document."""

    def __init__(self, config: GeneratorConfig | None = None):
        self.config = config or GeneratorConfig()

    def shared_registry(self, spec: dict[str, Any]) -> SharedRegistry:
        """Components (and generated names) of spec that belong to the shared unit."""
        components = SchemaParser().parse_components(spec)
        return SharedRegistry.from_components(components, self.config.shared_marker, self.config.entity_suffix)

    def generate(
        self,
        spec: dict[str, Any],
        original_spec: dict[str, Any] | None = None,
        resource_name: str = "",
    ) -> SpecGeneration:
        """
        Generate the shared and resource units of a spec.

        Args:
            spec: The bundled spec document
            original_spec: The unbundled document, used to recover payload schema names
            resource_name: Name of the resource (used for logging and output paths)

        Returns:
            The spec's generation
        """
        registry = self.shared_registry(spec)
        component_names = list((spec.get("components") or {}).get("schemas") or {})
        shared_names = [n for n in component_names if registry.is_shared_schema(n)]
        resource_names = [n for n in component_names if not registry.is_shared_schema(n)]

        # Inline objects of the shared unit only match shared components
        shared = DtoAnalyzer(spec, self.config, registry, matchable=shared_names).analyze(shared_names)

        analyzer = DtoAnalyzer(spec, self.config, registry)
        original_refs = OriginalRefLookup.from_spec(original_spec, self.config.content_type) if original_spec is not None else None
        operations = analyzer.resolve_operations(PayloadIndex.from_spec(spec, self.config.content_type), original_refs)
        resource = analyzer.analyze(resource_names)

        referenced = [name for operation in operations for name in operation.referenced_names()]
        emitted = resource.entity_names + resource.enum_names
        operation_imports = partition_imports(referenced, registry.names, emitted)

        logger.info(
            "Generated %s: %d entities, %d enums (%d shared entities, %d operations)",
            resource_name or "spec",
            len(resource.entities),
            len(resource.enums),
            len(shared.entities),
            len(operations),
        )
        for dependent, dependency in resource.broken_edges + shared.broken_edges:
            logger.debug("%s: cycle broken at %s -> %s", resource_name or "spec", dependent, dependency)

        return SpecGeneration(
            resource_name=resource_name,
            shared=shared,
            resource=resource,
            operations=operations,
            operation_imports=operation_imports,
        )

"""
Generator orchestrator.

Processes every spec of a directory in turn. Writes the DTO file, the
abstract controller and the service stub of each resource, then a single
merged shared DTO file for all of them.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .analyzer import DependencyGraph, TopologicalSorter, partition_imports
from .analyzer.ir_nodes import EntityDescriptor, EnumDescriptor, GenerationResult
from .config import GeneratorConfig
from .endpoints import build_endpoints, controller_tags, select_imports
from .generator import DtoGenerator, SpecGeneration
from .renderer import TemplateRenderer
from .spec_loader import bundle, extract_resource_name, find_specs, load_document
from .writer import write_file

logger = logging.getLogger(__name__)


def merge_shared(results: list[GenerationResult], strict_cycles: bool = False) -> GenerationResult:
    """
    Merge the shared units of several specs.

    The first definition of a name wins; entities are re-sorted so
    dependencies still precede dependents.

    Args:
        results: Shared results, in spec order
        strict_cycles: Raise on cycles instead of breaking them

    Returns:
        The merged result
    """
    entities: dict[str, EntityDescriptor] = {}
    enums: dict[str, EnumDescriptor] = {}
    for result in results:
        for entity in result.entities:
            entities.setdefault(entity.name, entity)
        for enum in result.enums:
            enums.setdefault(enum.name, enum)

    graph = DependencyGraph()
    for entity in entities.values():
        graph.add(entity.name, entity.imports)
    ordering = TopologicalSorter(strict=strict_cycles).sort(graph)

    referenced = [name for entity in entities.values() for name in entity.imports]
    return GenerationResult(
        entities=[entities[name] for name in ordering.order],
        enums=list(enums.values()),
        imports=partition_imports(referenced, ()),
        broken_edges=ordering.broken_edges,
    )


class GeneratorOrchestrator:
    """Generates DTO, controller and service files for a directory of specs."""

    def __init__(self, specs_dir: str | Path, output_dir: str | Path, config: GeneratorConfig | None = None):
        """
        Initialize the orchestrator.

        Args:
            specs_dir: Directory holding the spec documents
            output_dir: Root of the generated files
            config: Generation configuration
        """
        self.specs_dir = Path(specs_dir)
        self.output_dir = Path(output_dir)
        self.config = config or GeneratorConfig()
        self.renderer = TemplateRenderer(self.config.template_dir)
        self._shared_results: list[GenerationResult] = []

    @property
    def shared_path(self) -> Path:
        return self.output_dir / self.config.shared_folder / f"{self.config.shared_file}.ts"

    @property
    def shared_import_path(self) -> str:
        """Shared module path as seen from a resource folder."""
        return f"../{self.config.shared_folder}/{self.config.shared_file}"

    def generate(self) -> list[Path]:
        """
        Generate the files of every spec.

        Returns:
            Written file paths

        Raises:
            SpecLoadError: If a spec cannot be loaded
            DependencyCycleError: In strict mode, if entities depend on each other cyclically
        """
        spec_paths = find_specs(self.specs_dir)
        if not spec_paths:
            logger.warning("No OpenAPI specs found in %s", self.specs_dir)
            return []

        self._shared_results = []
        written: list[Path] = []
        for spec_path in spec_paths:
            written.extend(self.generate_from_spec(spec_path))

        shared = merge_shared(self._shared_results, self.config.strict_cycles)
        if not shared.is_empty():
            written.append(write_file(self.shared_path, self.renderer.render_dtos(shared)))
            logger.info("Wrote %d shared entities to %s", len(shared.entities), self.shared_path)

        return written

    def generate_from_spec(self, spec_path: str | Path) -> list[Path]:
        """Generate the resource files of one spec and remember its shared unit."""
        spec_path = Path(spec_path)
        resource_name = extract_resource_name(spec_path)
        logger.info("Processing %s (resource %s)", spec_path.name, resource_name)

        generation = self.generate_spec(spec_path, resource_name)
        self._shared_results.append(generation.shared)

        resource_dir = self.output_dir / resource_name
        written: list[Path] = []

        if generation.resource.is_empty():
            logger.info("No resource DTOs for %s", resource_name)
        else:
            content = self.renderer.render_dtos(generation.resource, self.shared_import_path)
            written.append(write_file(resource_dir / f"{resource_name}.dto.ts", content))

        endpoints = build_endpoints(generation.operations, self.config.include_error_types)
        if not endpoints:
            return written

        dto_import_path = f"./{resource_name}.dto"
        if self.config.generate_controllers:
            imports = select_imports(generation.operation_imports, [n for e in endpoints for n in e.names])
            tags = controller_tags(generation.operations)
            content = self.renderer.render_controller(resource_name, endpoints, tags, imports, dto_import_path, self.shared_import_path)
            written.append(write_file(resource_dir / f"{resource_name}.controller.base.ts", content))

        if self.config.generate_services:
            imports = select_imports(generation.operation_imports, [n for e in endpoints for n in e.service_names])
            content = self.renderer.render_service(resource_name, endpoints, imports, dto_import_path, self.shared_import_path)
            written.append(write_file(resource_dir / f"{resource_name}.service.ts", content))

        logger.debug("%s: %d endpoints", resource_name, len(endpoints))
        return written

    def generate_spec(self, spec_path: Path, resource_name: str) -> SpecGeneration:
        """Load, bundle and analyze one spec with fresh state."""
        original = load_document(spec_path)
        bundled = bundle(spec_path)
        return DtoGenerator(self.config).generate(bundled, original, resource_name)

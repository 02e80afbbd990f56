"""
Pipeline - OpenAPI components to DTO generator.

1. Phase 1 (Loader): Find, load and bundle spec documents
2. Phase 2 (Parser): Parse component schemas into SchemaNodes
3. Phase 3 (Analyzer): Resolve types, enums, nested entities and imports into IR
4. Phase 4 (Endpoints): Turn resolved operations into controller and service methods
5. Phase 5 (Renderer): Render IR and endpoints through Jinja2 templates
6. Phase 6 (Writer): Write resource, controller, service and shared files atomically
"""

from __future__ import annotations

from .config import GeneratorConfig
from .endpoints import Endpoint, build_endpoints
from .generator import DtoGenerator, SpecGeneration
from .orchestrator import GeneratorOrchestrator, merge_shared
from .payload_index import PayloadIndex
from .renderer import TemplateRenderer
from .spec_loader import bundle, extract_resource_name, find_specs, load_document
from .writer import AtomicWriter, OutputValidationError, write_file

__all__ = [
    "AtomicWriter",
    "DtoGenerator",
    "Endpoint",
    "GeneratorConfig",
    "GeneratorOrchestrator",
    "OutputValidationError",
    "PayloadIndex",
    "SpecGeneration",
    "TemplateRenderer",
    "build_endpoints",
    "bundle",
    "extract_resource_name",
    "find_specs",
    "load_document",
    "merge_shared",
    "write_file",
]

"""OpenAPI to DTO Generator

A Python package for generating NestJS-style DTO classes from the component
schemas of OpenAPI specs. Inline objects are named and deduplicated,
enums are collected, entities are ordered by dependency, and schemas
marked as shared are emitted once for all resources.
"""

__version__ = "1.0.0"

from .errors import DependencyCycleError, OpenApiToDtoError, SpecLoadError
from .pipeline import (
    DtoGenerator,
    GeneratorConfig,
    GeneratorOrchestrator,
    SpecGeneration,
    TemplateRenderer,
)

__all__ = [
    "DtoGenerator",
    "GeneratorConfig",
    "GeneratorOrchestrator",
    "SpecGeneration",
    "TemplateRenderer",
    "OpenApiToDtoError",
    "SpecLoadError",
    "DependencyCycleError",
]

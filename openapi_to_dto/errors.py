"""
Exceptions raised by the OpenAPI to DTO generator.

The resolution core never raises for degenerate schemas; these are reserved
for the I/O collaborators and for the opt-in strict cycle mode.
"""

from __future__ import annotations


class OpenApiToDtoError(Exception):
    """Base class for all generator errors."""


class SpecLoadError(OpenApiToDtoError):
    """Raised when a spec document cannot be read, parsed, or bundled.

    This can happen when:
    - The file does not exist or cannot be read
    - The document is not valid JSON/YAML or is not a mapping
    - An external $ref points to a missing file
    """


class DependencyCycleError(OpenApiToDtoError):
    """Raised in strict mode when the entity dependency graph contains a cycle."""

    def __init__(self, edges: list[tuple[str, str]]):
        self.edges = edges
        rendered = ", ".join(f"{source} -> {target}" for source, target in edges)
        super().__init__(f"Cyclic entity dependencies: {rendered}")

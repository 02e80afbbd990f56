"""
Configuration for the DTO generation pipeline.

Follows the same from_dict/to_dict structure as the other generator
configs so it can be loaded from a JSON or YAML file.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class GeneratorConfig:
    """Configuration options for DTO generation."""

    # Suffix appended to every entity name ("Order" -> "OrderDto")
    entity_suffix: str = "Dto"

    # Vendor extension flagging a component schema as shared across resources
    shared_marker: str = "x-shared"

    # Media type whose schema is used for request and response payloads
    content_type: str = "application/json"

    # Raise DependencyCycleError instead of producing a best-effort order
    strict_cycles: bool = False

    # Directory with custom templates (None = bundled templates only)
    template_dir: str | None = None

    # Output location of the merged shared DTOs, relative to the output dir
    shared_folder: str = "shared"
    shared_file: str = "shared.dto"

    # Also write an abstract controller and a service stub per resource
    generate_controllers: bool = True
    generate_services: bool = True

    # Put non-2xx response types in controller return types
    include_error_types: bool = False

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary, ignoring unknown keys."""
        config = GeneratorConfig()
        for k, v in d.items():
            if hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "entity_suffix": self.entity_suffix,
            "shared_marker": self.shared_marker,
            "content_type": self.content_type,
            "strict_cycles": self.strict_cycles,
            "template_dir": self.template_dir,
            "shared_folder": self.shared_folder,
            "shared_file": self.shared_file,
            "generate_controllers": self.generate_controllers,
            "generate_services": self.generate_services,
            "include_error_types": self.include_error_types,
        }

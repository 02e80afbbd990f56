"""
Template renderer for generated DTO, controller and service files.

Renders generation results and endpoint views through Jinja2 templates.
Constraint annotations become class-validator decorators here; the IR
itself stays free of target syntax. A custom template directory takes
precedence over the bundled templates.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from .analyzer.ir_nodes import (
    OBJECT,
    Constraint,
    GenerationResult,
    ImportPartition,
    PropertyDescriptor,
    TypeKind,
)
from .endpoints import Endpoint, class_name, common_imports, swagger_imports
from .typescript import constructor_name, is_identifier, ts_literal

DEFAULT_TEMPLATE = "dto.ts.jinja2"
CONTROLLER_TEMPLATE = "controller.ts.jinja2"
SERVICE_TEMPLATE = "service.ts.jinja2"

_TEMPLATE_DIR = Path(__file__).parent.parent / "templates" / "typescript"

# Constraint kind -> decorator; "{value}" is replaced by the constraint value,
# "{literal}" by the value as a string literal
_DECORATORS = {
    "optional": "IsOptional()",
    "string": "IsString()",
    "email": "IsEmail()",
    "uuid": "IsUUID()",
    "date": "IsDate()",
    "dateTime": "IsDateString()",
    "enum": "IsEnum({value})",
    "minLength": "MinLength({value})",
    "maxLength": "MaxLength({value})",
    "pattern": "Matches(new RegExp({literal}))",
    "integer": "IsInt()",
    "number": "IsNumber()",
    "minimum": "Min({value})",
    "maximum": "Max({value})",
    "boolean": "IsBoolean()",
    "array": "IsArray()",
    "minItems": "ArrayMinSize({value})",
    "maxItems": "ArrayMaxSize({value})",
}


def _nested_decorators(constraint: Constraint) -> list[str]:
    target = constructor_name(constraint.value or OBJECT)
    if constraint.kind == "nestedEach":
        return ["ValidateNested({ each: true })", f"Type(() => {target})"]
    return ["ValidateNested()", f"Type(() => {target})"]


def validator_decorators(prop: PropertyDescriptor) -> list[str]:
    """Decorators (without "@") for a property's constraints, in constraint order."""
    decorators: list[str] = []
    for constraint in prop.constraints:
        if constraint.kind in ("nested", "nestedEach"):
            decorators.extend(_nested_decorators(constraint))
        elif constraint.kind in _DECORATORS:
            decorators.append(_DECORATORS[constraint.kind].format(value=constraint.value, literal=ts_literal(constraint.value)))
    return decorators


def api_property(prop: PropertyDescriptor) -> str:
    """The @ApiProperty(...) documentation decorator of a property."""
    options: list[str] = []
    if prop.description:
        options.append(f"description: {ts_literal(prop.description)}")
    if prop.has_example:
        options.append(f"example: {ts_literal(prop.example)}")
    if not prop.required:
        options.append("required: false")
    if prop.enum_values:
        options.append(f"enum: [{', '.join(ts_literal(v) for v in prop.enum_values)}]")
    if prop.type_ref.kind == TypeKind.ARRAY:
        options.append("isArray: true")
        options.append(f"type: () => {constructor_name(prop.type_ref.element.name)}")
    return f"@ApiProperty({{ {', '.join(options)} }})" if options else "@ApiProperty()"


def declaration(prop: PropertyDescriptor) -> str:
    """The property declaration line ("email?: string;")."""
    name = prop.name if is_identifier(prop.name) else ts_literal(prop.name)
    return f"{name}{prop.optional_marker}: {prop.type};"


def _decorator_name(decorator: str) -> str:
    return decorator.split("(", 1)[0]


class TemplateRenderer:
    """Renders generation results and endpoints with Jinja2."""

    def __init__(self, template_dir: str | Path | None = None, template_name: str = DEFAULT_TEMPLATE):
        """
        Initialize the renderer.

        Args:
            template_dir: Directory searched before the bundled templates
            template_name: Template used for DTO files
        """
        loaders = []
        if template_dir is not None:
            loaders.append(jinja2.FileSystemLoader(str(template_dir)))
        loaders.append(jinja2.FileSystemLoader(str(_TEMPLATE_DIR)))

        self.jinja_env = jinja2.Environment(
            loader=jinja2.ChoiceLoader(loaders),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )
        self.jinja_env.filters["ts_literal"] = ts_literal
        self.jinja_env.filters["decorators"] = lambda prop: [f"@{d}" for d in validator_decorators(prop)]
        self.jinja_env.filters["api_property"] = api_property
        self.jinja_env.filters["declaration"] = declaration
        self.template_name = template_name

    def render_dtos(self, result: GenerationResult, shared_import_path: str | None = None) -> str:
        """
        Render one output unit.

        Args:
            result: Entities, enums and imports of the unit
            shared_import_path: Module path of the shared unit; shared imports
                are not rendered without it

        Returns:
            The file content
        """
        used: set[str] = set()
        for entity in result.entities:
            for prop in entity.properties:
                used.update(_decorator_name(d) for d in validator_decorators(prop))
        uses_type = "Type" in used
        used.discard("Type")

        template = self.jinja_env.get_template(self.template_name)
        return template.render(
            entities=result.entities,
            enums=result.enums,
            validator_imports=sorted(used),
            uses_type=uses_type,
            shared_imports=result.imports.shared if shared_import_path else [],
            shared_import_path=shared_import_path,
        )

    def render_controller(
        self,
        resource_name: str,
        endpoints: list[Endpoint],
        tags: list[str],
        imports: ImportPartition,
        dto_import_path: str,
        shared_import_path: str,
    ) -> str:
        """
        Render the abstract controller of a resource.

        Args:
            resource_name: Name of the resource
            endpoints: Endpoints of the resource's operations
            tags: Swagger tags of the controller
            imports: Entity and enum names the endpoints use
            dto_import_path: Module path of the resource DTO file
            shared_import_path: Module path of the shared DTO file

        Returns:
            The file content
        """
        template = self.jinja_env.get_template(CONTROLLER_TEMPLATE)
        return template.render(
            class_name=class_name(resource_name, "Controller"),
            endpoints=endpoints,
            tags=tags,
            common_imports=common_imports(endpoints),
            swagger_imports=swagger_imports(endpoints, tags),
            local_imports=imports.local,
            shared_imports=imports.shared,
            dto_import_path=dto_import_path,
            shared_import_path=shared_import_path,
        )

    def render_service(
        self,
        resource_name: str,
        endpoints: list[Endpoint],
        imports: ImportPartition,
        dto_import_path: str,
        shared_import_path: str,
    ) -> str:
        """Render the service stub of a resource; arguments as for render_controller."""
        template = self.jinja_env.get_template(SERVICE_TEMPLATE)
        return template.render(
            class_name=class_name(resource_name, "Service"),
            endpoints=endpoints,
            local_imports=imports.local,
            shared_imports=imports.shared,
            dto_import_path=dto_import_path,
            shared_import_path=shared_import_path,
        )

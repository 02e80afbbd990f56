"""
Endpoint views for the controller and service templates.

Turns resolved operations into NestJS method signatures, route and
Swagger decorators and return types. Like the DTO filters, everything
target-specific is decided here rather than in the IR.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..utils import to_camel_case, to_pascal_case
from .analyzer.ir_nodes import (
    BOOLEAN,
    NUMBER,
    STRING,
    UNTYPED,
    VOID,
    ImportPartition,
    OperationDescriptor,
    ParameterDescriptor,
    ResponseDescriptor,
    TypeKind,
    TypeRef,
)
from .typescript import constructor_name, identifier, ts_literal

logger = logging.getLogger(__name__)

# HTTP method -> @nestjs/common route decorator
ROUTE_DECORATORS = {
    "get": "Get",
    "post": "Post",
    "put": "Put",
    "patch": "Patch",
    "delete": "Delete",
    "options": "Options",
    "head": "Head",
}

# Parameter location -> @nestjs/common parameter decorator
PARAMETER_DECORATORS = {"path": "Param", "query": "Query", "header": "Headers", "body": "Body"}

# Required parameters come first, then by location, then by name
_LOCATION_ORDER = {"path": 1, "body": 2, "query": 3, "header": 4}

_PATH_PARAMETER = re.compile(r"\{([^}]+)\}")


@dataclass
class EndpointParameter:
    """One argument of a controller or service method."""

    name: str = ""

    # Name of the value in the request ("X-Request-Id" for the header argument xRequestId)
    key: str = ""

    location: str = "query"
    type: str = STRING
    required: bool = False

    @property
    def declared_name(self) -> str:
        return self.name if self.required else f"{self.name}?"

    @property
    def decorator(self) -> str:
        if self.location == "body":
            return "@Body()"
        return f"@{PARAMETER_DECORATORS[self.location]}({ts_literal(self.key)})"

    @property
    def signature(self) -> str:
        """Undecorated declaration ("limit?: number")."""
        return f"{self.declared_name}: {self.type}"

    @property
    def decorated_signature(self) -> str:
        return f"{self.decorator} {self.signature}"


@dataclass
class Endpoint:
    """The controller and service methods generated for one operation."""

    method_name: str = ""
    route: str = "Get"
    path: str = "/"
    summary: str | None = None
    parameters: list[EndpointParameter] = field(default_factory=list)

    # Swagger and status decorators, in emission order after the route decorator
    decorators: list[str] = field(default_factory=list)

    return_type: str = VOID
    service_return_type: str = VOID

    # Entity and enum names the controller and the service methods use
    names: list[str] = field(default_factory=list)
    service_names: list[str] = field(default_factory=list)

    @property
    def decorated_parameters(self) -> str:
        return ", ".join(p.decorated_signature for p in self.parameters)

    @property
    def signature(self) -> str:
        return ", ".join(p.signature for p in self.parameters)

    @property
    def arguments(self) -> str:
        return ", ".join(p.name for p in self.parameters)

    @property
    def doc_summary(self) -> str | None:
        """Summary safe to place inside a block comment."""
        return self.summary.replace("*/", "*\\/") if self.summary else None


def nest_path(path: str) -> str:
    """OpenAPI path template as a NestJS route ("/orders/{id}" -> "/orders/:id")."""
    if not path.startswith("/"):
        path = f"/{path}"
    return _PATH_PARAMETER.sub(lambda match: f":{match.group(1)}", path)


def class_name(resource_name: str, suffix: str) -> str:
    """Class name of a resource ("order-items", "Controller" -> "OrderItemsController")."""
    return f"{to_pascal_case(resource_name)}{suffix}"


def swagger_type(type_ref: TypeRef) -> str | None:
    """Type option of a Swagger decorator ("[OrderDto]"), or None when it has none."""
    element = type_ref.element
    if element.kind in (TypeKind.ENTITY, TypeKind.ENUM):
        name = element.name
    elif element.kind == TypeKind.SCALAR and element.name in (STRING, NUMBER, BOOLEAN):
        name = constructor_name(element.name)
    else:
        return None
    return f"[{name}]" if type_ref.kind == TypeKind.ARRAY else name


def union_type(responses: list[ResponseDescriptor]) -> str:
    """
    Return type covering a set of responses.

    "void" and "any" bodies are left out of the union. When nothing is left
    the type is "any" if some response has a body and "void" otherwise.
    """
    types: list[str] = []
    for response in responses:
        if response.type not in (VOID, UNTYPED) and response.type not in types:
            types.append(response.type)
    if types:
        return " | ".join(types)
    return UNTYPED if any(r.type != VOID for r in responses) else VOID


def sort_parameters(parameters: list[EndpointParameter]) -> list[EndpointParameter]:
    return sorted(parameters, key=lambda p: (not p.required, _LOCATION_ORDER.get(p.location, 5), p.name))


def endpoint_parameters(operation: OperationDescriptor) -> list[EndpointParameter]:
    """Method arguments of an operation: its parameters and its request body."""
    parameters: list[EndpointParameter] = []
    for parameter in operation.parameters:
        if parameter.location not in PARAMETER_DECORATORS:
            logger.debug("Skipping %s parameter %s of %s", parameter.location, parameter.name, operation.operation_id)
            continue
        name = to_camel_case(parameter.name) if parameter.location == "header" else parameter.name
        parameters.append(
            EndpointParameter(
                name=identifier(name),
                key=parameter.name,
                location=parameter.location,
                type=parameter.type,
                required=parameter.required,
            )
        )

    if operation.request_type is not None and operation.request_type.expression != VOID:
        parameters.append(
            EndpointParameter(name="body", key="body", location="body", type=operation.request_type.expression, required=True)
        )

    return sort_parameters(parameters)


def _status(status: str) -> str:
    return status if status.isdigit() else ts_literal(status)


def _parameter_decorator(parameter: ParameterDescriptor) -> str | None:
    type_name = swagger_type(parameter.type_ref) or "String"
    if parameter.location == "path":
        return f"@ApiParam({{ name: {ts_literal(parameter.name)}, type: {type_name} }})"
    if parameter.location == "query":
        required = "true" if parameter.required else "false"
        return f"@ApiQuery({{ name: {ts_literal(parameter.name)}, type: {type_name}, required: {required} }})"
    if parameter.location == "header":
        description = parameter.description or f"{parameter.name} header parameter"
        options = [
            f"name: {ts_literal(parameter.name)}",
            f"description: {ts_literal(description)}",
            f"required: {'true' if parameter.required else 'false'}",
        ]
        schema = [
            f"{key}: {ts_literal(value)}"
            for key, value in (("type", parameter.schema_type), ("pattern", parameter.pattern), ("format", parameter.format))
            if value
        ]
        if schema:
            options.append(f"schema: {{ {', '.join(schema)} }}")
        return f"@ApiHeader({{ {', '.join(options)} }})"
    return None


def endpoint_decorators(operation: OperationDescriptor) -> list[str]:
    """
    Decorators of a controller method, after its route decorator.

    @ApiOperation, then @ApiParam, @ApiQuery and @ApiHeader per parameter,
    one @ApiResponse per status, and @HttpCode when the first success
    status differs from the NestJS default for the method.
    """
    decorators: list[str] = []
    if operation.summary:
        decorators.append(f"@ApiOperation({{ summary: {ts_literal(operation.summary)} }})")

    for location in ("path", "query", "header"):
        for parameter in operation.parameters:
            decorator = _parameter_decorator(parameter) if parameter.location == location else None
            if decorator:
                decorators.append(decorator)

    for response in operation.responses:
        options = [f"status: {_status(response.status)}"]
        if response.description:
            options.append(f"description: {ts_literal(response.description)}")
        type_name = None if response.status == "204" else swagger_type(response.type_ref)
        if type_name:
            options.append(f"type: {type_name}")
        decorators.append(f"@ApiResponse({{ {', '.join(options)} }})")

    default_status = "201" if operation.method == "post" else "200"
    success = next((r for r in operation.responses if r.is_success), None)
    if success is not None and success.status.isdigit() and success.status != default_status:
        decorators.append(f"@HttpCode({success.status})")

    return decorators


def build_endpoint(operation: OperationDescriptor, include_error_types: bool = False) -> Endpoint | None:
    """
    Build the methods of one operation.

    Args:
        operation: The resolved operation
        include_error_types: Put non-2xx response types in the controller return type

    Returns:
        The endpoint, or None when NestJS has no route decorator for the HTTP method
    """
    route = ROUTE_DECORATORS.get(operation.method)
    if route is None:
        logger.warning("Skipping %s: no route decorator for %s", operation.operation_id, operation.method.upper())
        return None

    successes = [r for r in operation.responses if r.is_success]
    first_success = successes[:1]

    service_names: list[str] = []
    service_refs = ([operation.request_type] if operation.request_type else []) + [r.type_ref for r in first_success]
    for type_ref in service_refs:
        for name in type_ref.referenced_names():
            if name not in service_names:
                service_names.append(name)

    return Endpoint(
        method_name=identifier(operation.operation_id),
        route=route,
        path=nest_path(operation.path),
        summary=operation.summary,
        parameters=endpoint_parameters(operation),
        decorators=endpoint_decorators(operation),
        return_type=union_type(operation.responses if include_error_types else successes),
        service_return_type=first_success[0].type if first_success else VOID,
        names=operation.referenced_names(),
        service_names=service_names,
    )


def build_endpoints(operations: Iterable[OperationDescriptor], include_error_types: bool = False) -> list[Endpoint]:
    """Endpoints of every operation that has a route decorator, in operation order."""
    endpoints = [build_endpoint(operation, include_error_types) for operation in operations]
    return [endpoint for endpoint in endpoints if endpoint is not None]


def controller_tags(operations: Iterable[OperationDescriptor]) -> list[str]:
    """Tags of every operation, first-seen order."""
    tags: list[str] = []
    for operation in operations:
        for tag in operation.tags:
            if tag not in tags:
                tags.append(tag)
    return tags


def select_imports(partition: ImportPartition, names: Iterable[str]) -> ImportPartition:
    """The part of a partition that names are drawn from."""
    wanted = set(names)
    return ImportPartition(
        local=[name for name in partition.local if name in wanted],
        shared=[name for name in partition.shared if name in wanted],
    )


def _decorator_name(decorator: str) -> str:
    return decorator.lstrip("@").split("(", 1)[0]


def common_imports(endpoints: list[Endpoint]) -> list[str]:
    """@nestjs/common names a controller uses."""
    names = {"Controller"}
    for endpoint in endpoints:
        names.add(endpoint.route)
        names.update(PARAMETER_DECORATORS[p.location] for p in endpoint.parameters)
        names.update(_decorator_name(d) for d in endpoint.decorators if d.startswith("@HttpCode"))
    return sorted(names)


def swagger_imports(endpoints: list[Endpoint], tags: list[str]) -> list[str]:
    """@nestjs/swagger names a controller uses."""
    names = {"ApiTags"} if tags else set()
    for endpoint in endpoints:
        names.update(_decorator_name(d) for d in endpoint.decorators if d.startswith("@Api"))
    return sorted(names)

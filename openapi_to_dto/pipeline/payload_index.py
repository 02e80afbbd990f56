"""
Operation payload index.

Maps operationId to the raw request and response schemas of a document,
for the configured content type, along with the summary, tags and
parameters of each operation. References to components.requestBodies,
components.responses and components.parameters are followed.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .spec_loader import resolve_pointer

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Selector naming the request body; responses are selected by status code
REQUEST_BODY = "requestBody"

# Component sections whose references are followed while indexing
_FOLLOWED_REFS = ("#/components/requestBodies/", "#/components/responses/", "#/components/parameters/")


@dataclass
class ResponsePayload:
    """One response of an operation. schema is None when it has no body of the content type."""

    status: str = ""
    schema: dict[str, Any] | None = None
    description: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status.startswith("2")


@dataclass
class OperationPayloads:
    """Raw payload schemas of one operation."""

    operation_id: str = ""
    method: str = ""
    path: str = ""
    summary: str | None = None
    tags: list[str] = field(default_factory=list)

    # Raw parameter objects, path-level ones merged in
    parameters: list[dict[str, Any]] = field(default_factory=list)

    has_request_body: bool = False
    request_schema: dict[str, Any] | None = None
    responses: list[ResponsePayload] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.responses if r.is_success)


class PayloadIndex:
    """Payload schemas of every operation that declares an operationId."""

    def __init__(self, operations: dict[str, OperationPayloads] | None = None):
        self.operations: dict[str, OperationPayloads] = operations or {}

    def __iter__(self) -> Iterator[OperationPayloads]:
        return iter(self.operations.values())

    def __len__(self) -> int:
        return len(self.operations)

    def get(self, operation_id: str) -> OperationPayloads | None:
        return self.operations.get(operation_id)

    def schema(self, operation_id: str, selector: str | int) -> dict[str, Any] | None:
        """
        Raw schema of an operation's request body or of one response.

        Args:
            operation_id: The operation's id
            selector: REQUEST_BODY, or a response status code

        Returns:
            The raw schema, or None when the operation or payload does not exist
        """
        operation = self.operations.get(operation_id)
        if operation is None:
            return None
        if selector == REQUEST_BODY:
            return operation.request_schema
        status = str(selector)
        return next((r.schema for r in operation.responses if r.status == status), None)

    @classmethod
    def from_spec(cls, spec: dict[str, Any], content_type: str = "application/json") -> PayloadIndex:
        """Index a spec document's operations. Operations without an operationId are skipped."""
        operations: dict[str, OperationPayloads] = {}
        for path, path_item in (spec.get("paths") or {}).items():
            if not isinstance(path_item, dict):
                continue
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if not isinstance(operation, dict) or not operation.get("operationId"):
                    continue
                operation_id = str(operation["operationId"])
                operations.setdefault(
                    operation_id, _index_operation(spec, operation_id, method, path, path_item, operation, content_type)
                )
        return cls(operations)


def _deref(spec: dict[str, Any], value: Any) -> Any:
    """Follow internal $refs of request bodies, responses and parameters (loops stop at None)."""
    seen: set[str] = set()
    while isinstance(value, dict) and isinstance(value.get("$ref"), str) and not value.get("content"):
        ref = value["$ref"]
        if not ref.startswith(_FOLLOWED_REFS):
            break
        if ref in seen:
            return None
        seen.add(ref)
        value = resolve_pointer(spec, ref)
    return value


def _content_schema(body: Any, content_type: str) -> dict[str, Any] | None:
    if not isinstance(body, dict):
        return None
    media = (body.get("content") or {}).get(content_type)
    if not isinstance(media, dict):
        return None
    schema = media.get("schema")
    return schema if isinstance(schema, dict) else None


def _parameters(spec: dict[str, Any], path_item: dict[str, Any], operation: dict[str, Any]) -> list[dict[str, Any]]:
    """Path-level parameters overridden by operation-level ones with the same name and location."""
    parameters: dict[tuple[str, str], dict[str, Any]] = {}
    for raw in list(path_item.get("parameters") or []) + list(operation.get("parameters") or []):
        parameter = _deref(spec, raw)
        if not isinstance(parameter, dict) or not parameter.get("name"):
            continue
        parameter = dict(parameter)
        schema = parameter.get("schema")
        if isinstance(schema, dict) and isinstance(schema.get("$ref"), str) and schema["$ref"].startswith("#/"):
            target = resolve_pointer(spec, schema["$ref"])
            parameter["schema"] = target if isinstance(target, dict) else {}
        parameters[(str(parameter["name"]), str(parameter.get("in", "query")))] = parameter
    return list(parameters.values())


def _index_operation(
    spec: dict[str, Any],
    operation_id: str,
    method: str,
    path: str,
    path_item: dict[str, Any],
    operation: dict[str, Any],
    content_type: str,
) -> OperationPayloads:
    request_body = _deref(spec, operation.get("requestBody"))
    tags = operation.get("tags")
    payloads = OperationPayloads(
        operation_id=operation_id,
        method=method,
        path=path,
        summary=operation.get("summary"),
        tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
        parameters=_parameters(spec, path_item, operation),
        has_request_body=isinstance(request_body, dict),
        request_schema=_content_schema(request_body, content_type),
    )
    for status, response in (operation.get("responses") or {}).items():
        response = _deref(spec, response)
        payloads.responses.append(
            ResponsePayload(
                status=str(status),
                schema=_content_schema(response, content_type),
                description=response.get("description") if isinstance(response, dict) else None,
            )
        )
    return payloads

"""Typed views over OpenAPI nodes, plus the catalog and result shapes.

Spec nodes are validated once when they are converted here; the rest of the
engine never touches raw operation dicts.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any

from .errors import SpecError

PARAMETER_LOCATIONS = ("path", "query", "header", "cookie")


@dataclass(frozen=True)
class ParameterDef:
    name: str
    location: str
    required: bool = False
    schema: dict[str, Any] = field(default_factory=dict)
    description: str = ""

    @classmethod
    def from_spec(cls, node: Any) -> ParameterDef:
        """Build a parameter from an OpenAPI parameter object."""
        if not isinstance(node, dict):
            raise SpecError(f"Parameter must be an object, got {type(node).__name__}")
        name = node.get("name")
        if not name or not isinstance(name, str):
            raise SpecError(f"Parameter without a name: {node!r}")
        location = node.get("in", "query")
        if location not in PARAMETER_LOCATIONS:
            raise SpecError(f"Parameter {name!r} has invalid location {location!r}")
        schema = node.get("schema") or {}
        if not isinstance(schema, dict):
            raise SpecError(f"Parameter {name!r} schema must be an object")
        return cls(
            name=name,
            location=location,
            required=bool(node.get("required", False)),
            schema=schema,
            description=node.get("description") or "",
        )

    @property
    def type(self) -> str:
        return self.schema.get("type") or "string"


@dataclass(frozen=True)
class RequestBody:
    schema: dict[str, Any]
    required: bool = False


@dataclass(frozen=True)
class Operation:
    operation_id: str | None = None
    summary: str = ""
    description: str = ""
    parameters: tuple[ParameterDef, ...] = ()
    request_body: RequestBody | None = None
    deprecated: bool = False

    @classmethod
    def from_spec(cls, node: Any) -> Operation:
        """Build an operation from an OpenAPI operation object.

        Only the JSON request body is kept; other media types are ignored.
        """
        if not isinstance(node, dict):
            raise SpecError(f"Operation must be an object, got {type(node).__name__}")
        raw_params = node.get("parameters") or []
        if not isinstance(raw_params, list):
            raise SpecError("Operation parameters must be a list")

        request_body = None
        body_node = node.get("requestBody")
        if isinstance(body_node, dict):
            json_content = (body_node.get("content") or {}).get("application/json") or {}
            schema = json_content.get("schema")
            if isinstance(schema, dict):
                request_body = RequestBody(
                    schema=schema, required=bool(body_node.get("required", False))
                )

        return cls(
            operation_id=node.get("operationId") or None,
            summary=node.get("summary") or "",
            description=node.get("description") or "",
            parameters=tuple(ParameterDef.from_spec(p) for p in raw_params),
            request_body=request_body,
            deprecated=bool(node.get("deprecated", False)),
        )

    def with_shared_parameters(self, shared: list[ParameterDef]) -> Operation:
        """Return a copy whose parameter list starts with the path-level ones.

        An operation-level parameter with the same name and location replaces
        the shared one in place.
        """
        if not shared:
            return self
        own = {(p.name, p.location): p for p in self.parameters}
        merged = [own.pop((p.name, p.location), p) for p in shared]
        merged.extend(p for p in self.parameters if (p.name, p.location) in own)
        return Operation(
            operation_id=self.operation_id,
            summary=self.summary,
            description=self.description,
            parameters=tuple(merged),
            request_body=self.request_body,
            deprecated=self.deprecated,
        )

    def parameters_in(self, location: str) -> list[ParameterDef]:
        return [p for p in self.parameters if p.location == location]


@dataclass(frozen=True)
class Route:
    tool_name: str
    path: str
    method: str
    operation: Operation


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass
class ToolResult:
    """What a tool invocation hands back to the protocol layer."""

    text: str
    is_error: bool = False
    structured_content: dict[str, Any] | None = None

    @classmethod
    def success(cls, text: str, payload: Any = None) -> ToolResult:
        structured = payload if isinstance(payload, dict) else None
        return cls(text=text, structured_content=structured)

    @classmethod
    def error(cls, text: str) -> ToolResult:
        return cls(text=text, is_error=True)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            result["isError"] = True
        if self.structured_content is not None:
            result["structuredContent"] = self.structured_content
        return result


def pretty(payload: Any) -> str:
    """Render a payload the way tool results show it."""
    return json.dumps(payload, indent=2, ensure_ascii=False)

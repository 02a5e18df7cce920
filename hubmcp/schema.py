"""Derive tool input schemas and descriptions from indexed routes.

Handles:
- path, query and header parameters (cookie parameters are not exposed)
- path parameters listed first
- JSON request bodies as a single ``body`` property
- the ``"body"."<field>"`` markers for body fields flagged required
"""

from __future__ import annotations

from typing import Any

from .models import Route, ToolDefinition

SCHEMA_LOCATIONS = ("path", "query", "header")
BODY_DESCRIPTION = "Request body data"


def generate_input_schema(route: Route) -> dict[str, Any]:
    """Build the input schema for one route."""
    properties: dict[str, Any] = {}
    required: list[str] = []

    # sorted() is stable, so query/header keep their declared order
    parameters = sorted(route.operation.parameters, key=lambda p: p.location != "path")
    for param in parameters:
        if param.location not in SCHEMA_LOCATIONS:
            continue
        properties[param.name] = {
            "type": param.type,
            "description": param.description or f"{param.location} parameter",
        }
        if param.required:
            required.append(param.name)

    body = route.operation.request_body
    if body is not None:
        properties["body"] = {**body.schema, "description": BODY_DESCRIPTION}
        if body.required:
            required.append("body")
        for prop_name, prop in (body.schema.get("properties") or {}).items():
            if isinstance(prop, dict) and prop.get("required") is True:
                required.append(f'"body"."{prop_name}"')

    return {
        "type": "object",
        "properties": properties,
        "required": required,
    }


def build_description(route: Route, resource_name: str) -> str:
    """Summary, else description, else ``METHOD path (resource)``."""
    operation = route.operation
    return (
        operation.summary
        or operation.description
        or f"{route.method.upper()} {route.path} ({resource_name})"
    )


def build_tool_definition(route: Route, resource_name: str) -> ToolDefinition:
    return ToolDefinition(
        name=route.tool_name,
        description=build_description(route, resource_name),
        input_schema=generate_input_schema(route),
    )

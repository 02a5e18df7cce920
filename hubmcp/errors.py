"""Exceptions raised while indexing a spec or executing a tool call.

Everything raised inside a single tool invocation is converted into an
error result by the executor, so only the load-time errors (SpecError,
DuplicateToolName) and UnsupportedAuthType reach callers directly.
"""

from __future__ import annotations


class HubMCPError(Exception):
    """Base class for all hubmcp errors."""


class SpecError(HubMCPError):
    """The OpenAPI document has a node of the wrong shape."""


class DuplicateToolName(SpecError):
    """Two operations resolve to the same tool name (strict indexing only)."""

    def __init__(self, name: str, first: str, second: str) -> None:
        super().__init__(f"Duplicate tool name {name!r}: {first} and {second}")
        self.name = name


class ToolNotFound(HubMCPError):
    def __init__(self, name: str, resource: str | None = None) -> None:
        where = f" in: {resource}" if resource else ""
        super().__init__(f"Tool {name} not found{where}")
        self.name = name


class MissingRequiredParameter(HubMCPError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Missing required path parameter: {name}")
        self.name = name


class UnsupportedAuthType(HubMCPError):
    def __init__(self, auth_type: str) -> None:
        super().__init__(f"Unsupported auth type: {auth_type}")
        self.auth_type = auth_type


class HTTPError(HubMCPError):
    """Non-2xx response from the remote API."""

    def __init__(self, status: int, payload: object) -> None:
        super().__init__(f"HTTP error! status: {status}")
        self.status = status
        self.payload = payload


class TransportError(HubMCPError):
    """Connection, login or decoding failure."""

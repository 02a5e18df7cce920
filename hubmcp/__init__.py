"""Expose OpenAPI operations as MCP tools."""

__version__ = "1.0.0"

from .config import BearerAuth, PatAuth, ResourceConfig, settings_from_env  # noqa: E402
from .models import ToolDefinition, ToolResult  # noqa: E402
from .registry import OpenAPIResource, Resource, ToolRegistry  # noqa: E402

__all__ = [
    "BearerAuth",
    "OpenAPIResource",
    "PatAuth",
    "Resource",
    "ResourceConfig",
    "ToolDefinition",
    "ToolRegistry",
    "ToolResult",
    "settings_from_env",
]

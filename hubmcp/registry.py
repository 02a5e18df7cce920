"""Tool catalogs and invocation dispatch.

A Resource is anything that can list its tools and invoke one by name.
OpenAPIResource derives both from an OpenAPI document; ToolRegistry merges
any number of resources into one catalog for the protocol server.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, runtime_checkable

import httpx

from .auth import AuthProvider, TokenCache
from .config import ResourceConfig
from .errors import ToolNotFound
from .executor import RequestExecutor
from .models import Route, ToolDefinition, ToolResult
from .routes import ParameterRegistry, index_routes
from .schema import build_tool_definition

logger = logging.getLogger(__name__)


@runtime_checkable
class Resource(Protocol):
    name: str

    def register_tools(self) -> None: ...

    def list_tools(self) -> list[ToolDefinition]: ...

    async def invoke(self, name: str, args: Mapping[str, Any]) -> ToolResult: ...


class OpenAPIResource:
    """Tools generated from the operations of one OpenAPI document."""

    def __init__(
        self,
        spec: dict[str, Any],
        config: ResourceConfig,
        client: httpx.AsyncClient | None = None,
        strict: bool = False,
        token_cache: TokenCache | None = None,
    ) -> None:
        self.spec = spec
        self.config = config
        self.strict = strict
        self.parameters = ParameterRegistry()
        self.routes: dict[str, Route] = {}
        self.tools: dict[str, ToolDefinition] = {}
        self._owns_client = client is None
        self._client = client if client is not None else httpx.AsyncClient(**self._client_options())
        self.auth = AuthProvider(config.auth, self._client, config.login_url, token_cache)
        self.executor = RequestExecutor(
            self.routes, config.host, self.auth, self._client, resource_name=config.name
        )

    @property
    def name(self) -> str:
        return self.config.name

    def _client_options(self) -> dict[str, Any]:
        if self.config.timeout is None:
            return {}
        return {"timeout": self.config.timeout}

    def register_tools(self) -> None:
        """(Re-)index the spec and rebuild the catalog."""
        self.parameters = ParameterRegistry()
        routes = index_routes(self.spec, self.parameters, strict=self.strict)
        # the executor holds a reference to this dict
        self.routes.clear()
        self.routes.update(routes)
        self.tools = {
            name: build_tool_definition(route, self.config.name) for name, route in routes.items()
        }
        logger.info("Registered %d tools for %s", len(self.tools), self.config.name)

    def list_tools(self) -> list[ToolDefinition]:
        return list(self.tools.values())

    def get_route(self, name: str) -> Route | None:
        return self.routes.get(name)

    async def invoke(self, name: str, args: Mapping[str, Any]) -> ToolResult:
        return await self.executor.execute(name, args)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> OpenAPIResource:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class ToolRegistry:
    """Tool name -> owning resource, across every registered resource."""

    def __init__(self, resources: list[Resource] | None = None) -> None:
        self._resources: list[Resource] = []
        self._owners: dict[str, Resource] = {}
        for resource in resources or []:
            self.add(resource)

    def add(self, resource: Resource) -> None:
        """Register ``resource`` and index its tools. Later resources win on name clashes."""
        resource.register_tools()
        self._resources.append(resource)
        for tool in resource.list_tools():
            owner = self._owners.get(tool.name)
            if owner is not None and owner is not resource:
                logger.warning("Tool %s from %s replaces one from %s", tool.name, resource.name, owner.name)
            self._owners[tool.name] = resource

    def list_tools(self) -> list[ToolDefinition]:
        tools: dict[str, ToolDefinition] = {}
        for resource in self._resources:
            for tool in resource.list_tools():
                if self._owners.get(tool.name) is resource:
                    tools[tool.name] = tool
        return list(tools.values())

    def __contains__(self, name: object) -> bool:
        return name in self._owners

    async def execute(self, name: str, args: Mapping[str, Any] | None = None) -> ToolResult:
        """Invoke a tool by name. Unknown names produce an error result."""
        resource = self._owners.get(name)
        if resource is None:
            error = ToolNotFound(name)
            logger.warning("%s", error)
            return ToolResult.error(f"Error executing API call: {error}")
        return await resource.invoke(name, args or {})

"""Index an OpenAPI document into a route table keyed by tool name.

Path-level (shared) parameters are merged into every operation under the
path, deprecated operations and non-HTTP keys are dropped, and each
surviving operation becomes one Route.
"""

from __future__ import annotations

import logging
from typing import Any

from .errors import DuplicateToolName, SpecError
from .loader import get_paths
from .models import Operation, ParameterDef, Route
from .naming import build_tool_name

logger = logging.getLogger(__name__)

VALID_METHODS = frozenset({"get", "post", "put", "patch", "delete", "head", "options"})


class ParameterRegistry:
    """Shared parameter definitions by name; the first registration wins."""

    def __init__(self) -> None:
        self._params: dict[str, ParameterDef] = {}

    def register(self, param: ParameterDef) -> bool:
        """Store ``param`` unless its name is already known. Returns True if stored."""
        if param.name in self._params:
            return False
        self._params[param.name] = param
        return True

    def get(self, name: str) -> ParameterDef | None:
        return self._params.get(name)

    def names(self) -> list[str]:
        return list(self._params)

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __len__(self) -> int:
        return len(self._params)


def is_valid_http_method(method: str) -> bool:
    return method.lower() in VALID_METHODS


def _shared_parameters(path: str, path_item: dict[str, Any], registry: ParameterRegistry) -> list[ParameterDef]:
    raw = path_item.get("parameters") or []
    if not isinstance(raw, list):
        raise SpecError(f"{path}: path-level parameters must be a list")
    shared = []
    for node in raw:
        param = ParameterDef.from_spec(node)
        shared.append(param)
        registry.register(param)
    return shared


def index_routes(
    spec: dict[str, Any],
    registry: ParameterRegistry | None = None,
    strict: bool = False,
) -> dict[str, Route]:
    """Build the route table for every usable operation in ``spec``.

    Operations sharing a tool name overwrite each other (last one wins) and a
    warning is logged; with ``strict`` a DuplicateToolName is raised instead.
    """
    registry = registry if registry is not None else ParameterRegistry()
    routes: dict[str, Route] = {}

    for path, path_item in get_paths(spec).items():
        if not isinstance(path_item, dict):
            raise SpecError(f"{path}: path item must be an object")
        shared = _shared_parameters(path, path_item, registry)

        for method, node in path_item.items():
            if method == "parameters":
                continue
            if not is_valid_http_method(method):
                logger.debug("Skipping %s %s: not an HTTP method", method, path)
                continue
            if not isinstance(node, dict):
                raise SpecError(f"{method.upper()} {path}: operation must be an object")
            if node.get("deprecated"):
                logger.debug("Skipping deprecated operation %s %s", method.upper(), path)
                continue

            operation = Operation.from_spec(node).with_shared_parameters(shared)
            tool_name = operation.operation_id
            if not tool_name:
                tool_name = build_tool_name(method, path)
                logger.warning(
                    "%s %s has no operationId, using %s", method.upper(), path, tool_name
                )

            route = Route(tool_name=tool_name, path=path, method=method.lower(), operation=operation)
            previous = routes.get(tool_name)
            if previous is not None:
                first = f"{previous.method.upper()} {previous.path}"
                second = f"{route.method.upper()} {path}"
                if strict:
                    raise DuplicateToolName(tool_name, first, second)
                logger.warning("Tool %s from %s replaces %s", tool_name, second, first)
            routes[tool_name] = route

    logger.info("Indexed %d routes (%d shared parameters)", len(routes), len(registry))
    return routes

"""Fallback tool names for operations that carry no operationId.

Pattern: {verb}{Resource} in camelCase, matching how operationIds are
usually written:
  GET    /namespaces/{namespace}/repositories         -> listNamespacesRepositories
  GET    /namespaces/{namespace}/repositories/{repo}  -> getNamespacesRepositories
  POST   /namespaces/{namespace}/repositories         -> createNamespacesRepositories
  DELETE /repositories/{repo}/tags/{tag}              -> deleteRepositoriesTags
"""

from __future__ import annotations

import re

_METHOD_VERBS: dict[str, str] = {
    "get": "list",
    "post": "create",
    "put": "update",
    "patch": "update",
    "delete": "delete",
    "head": "head",
    "options": "options",
}


def _sanitize_segment(segment: str) -> str:
    """Reduce a path segment to alphanumerics, capitalizing each word."""
    words = re.split(r"[^A-Za-z0-9]+", segment)
    return "".join(w[:1].upper() + w[1:] for w in words if w)


def _extract_path_parts(path: str) -> list[str]:
    """Meaningful path segments, without {params} and version prefixes."""
    parts = [p for p in path.split("/") if p and not p.startswith("{")]
    return [p for p in parts if not re.fullmatch(r"v\d+", p)]


def build_tool_name(method: str, path: str) -> str:
    """Build a tool name from HTTP method and path."""
    method_lower = method.lower()
    verb = _METHOD_VERBS.get(method_lower, method_lower)
    ends_with_id = path.rstrip("/").endswith("}")
    if verb == "list" and ends_with_id:
        verb = "get"

    resource = "".join(_sanitize_segment(p) for p in _extract_path_parts(path))
    return f"{verb}{resource or 'Root'}"

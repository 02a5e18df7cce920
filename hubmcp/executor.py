"""Turn a tool invocation into an HTTP call and its response into a result.

Steps, in order: resolve the route, substitute path parameters, assemble the
query string and headers, authenticate, attach the body, dispatch, and
normalize the response. The first failure ends the invocation with an error
result; nothing raised inside the pipeline escapes ``execute``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import quote, urlencode

import httpx

from . import __version__
from .auth import AuthProvider
from .errors import HTTPError, MissingRequiredParameter, ToolNotFound
from .models import Route, ToolResult, pretty

logger = logging.getLogger(__name__)

USER_AGENT = f"hubmcp/{__version__}"
BODY_METHODS = ("post", "put", "patch")
AUTH_FAILURE_STATUSES = (401, 403)

# encodeURIComponent leaves these unescaped
_PATH_SAFE = "!~*'()"


@dataclass(frozen=True)
class PreparedRequest:
    method: str
    path: str
    url: str
    headers: dict[str, str]
    body: bytes | None = None
    namespace: str | None = None


def is_absent(value: Any) -> bool:
    """Values that count as "not supplied" for query parameters."""
    return value is None or (isinstance(value, str) and value in ("", "null"))


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        # comma-joined, the form CSV-style list parameters expect
        return ",".join("" if v is None else stringify(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def build_request(route: Route, args: Mapping[str, Any], host: str) -> PreparedRequest:
    """Build the concrete request for ``route``; no I/O happens here."""
    operation = route.operation

    path = route.path
    namespace = None
    for param in operation.parameters_in("path"):
        value = args.get(param.name)
        if value is not None:
            if param.name == "namespace":
                namespace = stringify(value)
            path = path.replace(f"{{{param.name}}}", quote(stringify(value), safe=_PATH_SAFE))
        elif param.required:
            raise MissingRequiredParameter(param.name)

    query = [
        (param.name, stringify(args[param.name]))
        for param in operation.parameters_in("query")
        if not is_absent(args.get(param.name))
    ]
    if query:
        path += "?" + urlencode(query)

    headers = {
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    for param in operation.parameters_in("header"):
        value = args.get(param.name)
        if value is not None:
            headers[param.name] = stringify(value)

    body = None
    if route.method in BODY_METHODS and args.get("body") is not None:
        body = json.dumps(args["body"]).encode()

    return PreparedRequest(
        method=route.method.upper(),
        path=path,
        url=host + path,
        headers=headers,
        body=body,
        namespace=namespace,
    )


def parse_payload(text: str) -> Any:
    """JSON if it parses, otherwise the raw text."""
    try:
        return json.loads(text)
    except ValueError:
        return text


class RequestExecutor:
    def __init__(
        self,
        routes: Mapping[str, Route],
        host: str,
        auth: AuthProvider,
        client: httpx.AsyncClient,
        resource_name: str = "",
    ) -> None:
        self.routes = routes
        self.host = host.rstrip("/")
        self.auth = auth
        self.resource_name = resource_name
        self._client = client

    async def execute(self, tool_name: str, args: Mapping[str, Any] | None = None) -> ToolResult:
        """Run one tool invocation. Never raises."""
        args = args or {}
        try:
            route = self.routes.get(tool_name)
            if route is None:
                raise ToolNotFound(tool_name, self.resource_name or None)
            request = build_request(route, args, self.host)
            return await self._dispatch(request)
        except HTTPError as e:
            return ToolResult.error(f"API call failed with status {e.status}: {pretty(e.payload)}")
        except Exception as e:
            logger.error("Error executing %s: %s", tool_name, e)
            return ToolResult.error(f"Error executing API call: {e}")

    async def _dispatch(self, request: PreparedRequest) -> ToolResult:
        headers = dict(request.headers)
        token = await self.auth.authenticate(request.namespace)
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.info(
            "Making %s %srequest to: %s",
            request.method,
            "authenticated " if token else "",
            request.url,
        )
        response = await self._client.request(
            request.method, request.url, headers=headers, content=request.body
        )
        return self._normalize(request, response)

    def _normalize(self, request: PreparedRequest, response: httpx.Response) -> ToolResult:
        payload = parse_payload(response.text)
        if not response.is_success:
            logger.warning("%s %s returned %d", request.method, request.url, response.status_code)
            if response.status_code in AUTH_FAILURE_STATUSES and self.auth.is_pat:
                self.auth.invalidate()
            raise HTTPError(response.status_code, payload)

        text = f"{request.method} {request.path} ({response.status_code})\n\n{pretty(payload)}"
        return ToolResult.success(text, payload)

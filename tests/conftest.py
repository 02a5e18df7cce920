"""Shared fixtures: a small repository-management spec and a mock API.

All HTTP goes through httpx.MockTransport; nothing touches the network.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Callable

import httpx
import pytest

from hubmcp.config import ResourceConfig
from hubmcp.registry import OpenAPIResource

HOST = "https://hub.example.com/v2"
LOGIN_URL = "https://hub.example.com/v2/users/login"

_BODY_SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "required": True},
        "description": {"type": "string"},
        "is_private": {"type": "boolean"},
    },
}

REPO_SPEC: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Repositories", "version": "2.0"},
    "paths": {
        "/namespaces/{namespace}/repositories/{repo}": {
            "parameters": [
                {
                    "name": "namespace",
                    "in": "path",
                    "required": True,
                    "schema": {"type": "string"},
                    "description": "Namespace of the repository",
                },
                {"name": "repo", "in": "path", "required": True, "schema": {"type": "string"}},
            ],
            "get": {
                "operationId": "getRepo",
                "summary": "Get a repository",
                "parameters": [
                    {"name": "X-Request-Id", "in": "header", "schema": {"type": "string"}},
                ],
            },
            "put": {
                "operationId": "replaceRepo",
                "requestBody": {"content": {"application/json": {"schema": _BODY_SCHEMA}}},
            },
            "patch": {
                "operationId": "updateRepo",
                "description": "Update repository metadata",
                "requestBody": {"content": {"application/json": {"schema": _BODY_SCHEMA}}},
            },
            "delete": {"operationId": "deleteRepo"},
            "head": {"operationId": "headRepo"},
            "options": {"operationId": "optionsRepo"},
        },
        "/namespaces/{namespace}/repositories": {
            "get": {
                "operationId": "listRepos",
                "parameters": [
                    {"name": "page", "in": "query", "schema": {"type": "integer"}},
                    {"name": "ordering", "in": "query", "description": "Sort order"},
                    {"name": "namespace", "in": "path", "required": True, "schema": {"type": "string"}},
                    {"name": "session", "in": "cookie", "schema": {"type": "string"}},
                ],
            },
            "post": {
                "operationId": "createRepo",
                "parameters": [
                    {"name": "namespace", "in": "path", "required": True, "schema": {"type": "string"}},
                ],
                "requestBody": {
                    "required": True,
                    "content": {"application/json": {"schema": _BODY_SCHEMA}},
                },
            },
        },
        "/repositories/{repo}/tags": {
            "GET": {"operationId": "listTags"},
            "trace": {"operationId": "traceTags"},
            "x-internal": {"operationId": "internalTags"},
            "post": {"operationId": "createTag", "deprecated": True},
        },
    },
}


class MockAPI:
    """Answers requests from a replaceable handler and records them.

    Calls to the login endpoint are answered separately and kept in
    ``login_requests``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.login_requests: list[httpx.Request] = []
        self.login_token = "jwt-token"
        self.login_status = 200
        self.login_gate: asyncio.Event | None = None
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: httpx.Response(
            200, json={}
        )

    def respond(self, status: int = 200, **kwargs: Any) -> None:
        self.handler = lambda request: httpx.Response(status, **kwargs)

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if str(request.url) == LOGIN_URL:
            self.login_requests.append(request)
            # let concurrent callers interleave
            await asyncio.sleep(0)
            if self.login_gate is not None:
                await self.login_gate.wait()
            if self.login_status != 200:
                return httpx.Response(self.login_status, json={"detail": "bad credentials"})
            return httpx.Response(200, json={"token": self.login_token, "refresh_token": "refresh"})
        self.requests.append(request)
        return self.handler(request)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no API request was made"
        return self.requests[-1]


@pytest.fixture
def repo_spec() -> dict[str, Any]:
    return copy.deepcopy(REPO_SPEC)


@pytest.fixture
def mock_api() -> MockAPI:
    return MockAPI()


@pytest.fixture
async def client(mock_api):
    async with httpx.AsyncClient(transport=httpx.MockTransport(mock_api)) as client:
        yield client


@pytest.fixture
def make_resource(repo_spec, client):
    """Build a registered OpenAPIResource against the mock API."""

    def _make(auth=None, spec=None, strict=False, name="repos") -> OpenAPIResource:
        config = ResourceConfig(name=name, host=HOST, auth=auth, login_url=LOGIN_URL)
        resource = OpenAPIResource(spec or repo_spec, config, client=client, strict=strict)
        resource.register_tools()
        return resource

    return _make


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """Undo setup_logging() so handlers never outlive the streams they wrap."""
    yield
    logger = logging.getLogger("hubmcp")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)

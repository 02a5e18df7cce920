"""Configuration models for an API resource.

Values come from the caller or from environment variables; credentials are
never read from files.
"""

from __future__ import annotations

import os
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_HOST = "https://hub.docker.com/v2"
DEFAULT_LOGIN_URL = "https://hub.docker.com/v2/users/login"


class BearerAuth(BaseModel):
    """Static bearer token sent as-is."""

    model_config = ConfigDict(frozen=True)

    type: Literal["bearer"] = "bearer"
    token: str | None = Field(default=None, description="Bearer token")


class PatAuth(BaseModel):
    """Personal access token exchanged for a bearer token at login."""

    model_config = ConfigDict(frozen=True)

    type: Literal["pat"] = "pat"
    username: str | None = Field(default=None, description="Account the PAT belongs to")
    token: str | None = Field(default=None, description="Personal access token")


AuthConfig = Annotated[BearerAuth | PatAuth, Field(discriminator="type")]


class ResourceConfig(BaseModel):
    """Everything one spec-driven resource needs to reach its API."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Resource name, used in synthesized descriptions")
    host: str = Field(default=DEFAULT_HOST, description="Base URL prefixed to every path")
    auth: AuthConfig | None = Field(default=None, description="Credentials, if any")
    login_url: str = Field(default=DEFAULT_LOGIN_URL, description="PAT exchange endpoint")
    timeout: float | None = Field(
        default=None, description="HTTP timeout in seconds (httpx default when unset)"
    )


def settings_from_env(name: str, env: dict[str, str] | None = None) -> ResourceConfig:
    """Build a ResourceConfig from HUB_* environment variables.

    A username selects PAT auth; otherwise HUB_BEARER_TOKEN, if set, selects
    bearer auth.
    """
    env = os.environ if env is None else env
    username = env.get("HUB_USERNAME") or None
    auth: BearerAuth | PatAuth | None = None
    if username:
        auth = PatAuth(username=username, token=env.get("HUB_PAT_TOKEN") or None)
    elif env.get("HUB_BEARER_TOKEN"):
        auth = BearerAuth(token=env["HUB_BEARER_TOKEN"])

    return ResourceConfig(
        name=name,
        host=env.get("HUB_HOST") or DEFAULT_HOST,
        auth=auth,
        login_url=env.get("HUB_LOGIN_URL") or DEFAULT_LOGIN_URL,
    )

"""Load an OpenAPI document from disk.

The document must already be fully dereferenced; no $ref resolution happens
here or anywhere else in the engine.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import SpecError


def load_spec(path: Path | str) -> dict[str, Any]:
    """Load the OpenAPI spec from disk."""
    with open(path) as f:
        spec = json.load(f)
    if not isinstance(spec, dict):
        raise SpecError(f"{path}: top-level document must be an object")
    return spec


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    paths = spec.get("paths") or {}
    if not isinstance(paths, dict):
        raise SpecError("'paths' must be an object")
    return paths

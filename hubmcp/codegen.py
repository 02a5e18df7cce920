"""Write and check snapshots of the tool catalog.

The JSON snapshot (tools.json) is the reviewable record of what a spec
exposes; the Markdown table is rendered from templates/tools.md.j2.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import jinja2

from .models import ToolDefinition

TEMPLATE_DIR = Path(__file__).parent / "templates"


def catalog_json(tools: Iterable[ToolDefinition]) -> dict[str, Any]:
    return {"tools": [tool.to_dict() for tool in tools]}


def render_markdown(tools: Iterable[ToolDefinition], title: str = "Tools") -> str:
    """Render the catalog as a Markdown table."""
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    template = env.get_template("tools.md.j2")
    catalog = catalog_json(tools)["tools"]
    return template.render(title=title, tools=catalog, tool_count=len(catalog))


def write_catalog(tools: Iterable[ToolDefinition], path: Path) -> int:
    """Write the JSON snapshot. Returns the number of tools written."""
    catalog = catalog_json(tools)
    path.write_text(json.dumps(catalog, indent=2) + "\n")
    return len(catalog["tools"])


def check_catalog(tools: Iterable[ToolDefinition], path: Path) -> bool:
    """True when ``path`` holds exactly the catalog derived from ``tools``."""
    if not path.exists():
        return False
    try:
        current = json.loads(path.read_text())
    except ValueError:
        return False
    return isinstance(current, dict) and current.get("tools") == catalog_json(tools)["tools"]

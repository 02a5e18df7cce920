"""Entry point: python -m hubmcp SPEC

Derives the tool catalog from an OpenAPI document and writes tools.json
(optionally a Markdown table too), or checks an existing tools.json.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from .codegen import check_catalog, render_markdown, write_catalog
from .config import settings_from_env
from .loader import load_spec
from .logs import setup_logging
from .registry import OpenAPIResource

app = typer.Typer(add_completion=False, help="Derive MCP tools from an OpenAPI document.")


@app.command()
def main(
    spec_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Dereferenced OpenAPI JSON"),
    name: str = typer.Option("api", "--name", help="Resource name used in descriptions"),
    output: Path = typer.Option(Path("tools.json"), "--output", "-o", help="Catalog snapshot path"),
    markdown: Path | None = typer.Option(None, "--markdown", help="Also render a Markdown table here"),
    check: bool = typer.Option(False, "--check", help="Compare against the existing snapshot instead of writing"),
    strict: bool = typer.Option(False, "--strict", help="Fail on duplicate tool names"),
    log_level: str = typer.Option("INFO", "--log-level"),
    logs_dir: Path | None = typer.Option(None, "--logs-dir"),
) -> None:
    setup_logging(log_level, logs_dir)
    resource = OpenAPIResource(load_spec(spec_path), settings_from_env(name), strict=strict)
    try:
        resource.register_tools()
        tools = resource.list_tools()
    finally:
        asyncio.run(resource.aclose())

    if check:
        if check_catalog(tools, output):
            typer.echo("Tools list is up to date")
            return
        typer.echo("Tools list is not up to date")
        raise typer.Exit(code=1)

    count = write_catalog(tools, output)
    typer.echo(f"Wrote {output} ({count} tools)")
    if markdown is not None:
        markdown.write_text(render_markdown(tools, title=f"{name} tools"))
        typer.echo(f"Wrote {markdown}")


if __name__ == "__main__":
    app()

"""Tests for catalog snapshots and the command-line entry point."""

import json

import pytest
from typer.testing import CliRunner

from hubmcp.__main__ import app
from hubmcp.codegen import catalog_json, check_catalog, render_markdown, write_catalog
from hubmcp.models import ToolDefinition
from hubmcp.routes import index_routes
from hubmcp.schema import build_tool_definition


@pytest.fixture
def tools(repo_spec):
    return [build_tool_definition(r, "repos") for r in index_routes(repo_spec).values()]


@pytest.fixture
def spec_file(tmp_path, repo_spec):
    path = tmp_path / "openapi.json"
    path.write_text(json.dumps(repo_spec))
    return path


class TestSnapshot:
    def test_catalog_json(self, tools):
        catalog = catalog_json(tools)
        assert [t["name"] for t in catalog["tools"]][:2] == ["getRepo", "replaceRepo"]
        assert set(catalog["tools"][0]) == {"name", "description", "inputSchema"}

    def test_write_then_check(self, tools, tmp_path):
        path = tmp_path / "tools.json"
        assert write_catalog(tools, path) == len(tools)
        assert check_catalog(tools, path)

    def test_check_detects_drift(self, tools, tmp_path):
        path = tmp_path / "tools.json"
        write_catalog(tools[1:], path)
        assert not check_catalog(tools, path)

    def test_check_missing_file(self, tools, tmp_path):
        assert not check_catalog(tools, tmp_path / "missing.json")

    @pytest.mark.parametrize("content", ["not json", "[]", '{"tools": {}}'])
    def test_check_malformed_file(self, tools, tmp_path, content):
        path = tmp_path / "tools.json"
        path.write_text(content)
        assert not check_catalog(tools, path)


class TestMarkdown:
    def test_table_rows(self, tools):
        text = render_markdown(tools, title="repos tools")
        assert text.startswith("# repos tools")
        assert f"{len(tools)} tools." in text
        assert "| `getRepo` | Get a repository | `namespace`* (string), `repo`* (string), `X-Request-Id` (string) |" in text

    def test_pipes_escaped(self):
        tool = ToolDefinition("t", "a | b", {"type": "object", "properties": {}, "required": []})
        assert "a \\| b" in render_markdown([tool])


class TestCli:
    def test_write(self, spec_file, tmp_path, monkeypatch):
        monkeypatch.delenv("HUB_USERNAME", raising=False)
        output = tmp_path / "tools.json"
        markdown = tmp_path / "TOOLS.md"
        result = CliRunner().invoke(
            app, [str(spec_file), "--name", "repos", "-o", str(output), "--markdown", str(markdown)]
        )
        assert result.exit_code == 0, result.output
        assert "(9 tools)" in result.output
        assert len(json.loads(output.read_text())["tools"]) == 9
        assert "`listTags`" in markdown.read_text()

    def test_check_up_to_date(self, spec_file, tmp_path):
        output = tmp_path / "tools.json"
        runner = CliRunner()
        runner.invoke(app, [str(spec_file), "--name", "repos", "-o", str(output)])
        result = runner.invoke(app, [str(spec_file), "--name", "repos", "-o", str(output), "--check"])
        assert result.exit_code == 0
        assert "Tools list is up to date" in result.output

    def test_check_out_of_date(self, spec_file, tmp_path):
        output = tmp_path / "tools.json"
        output.write_text(json.dumps({"tools": []}))
        result = CliRunner().invoke(app, [str(spec_file), "-o", str(output), "--check"])
        assert result.exit_code == 1
        assert "Tools list is not up to date" in result.output

    def test_check_malformed_snapshot(self, spec_file, tmp_path):
        output = tmp_path / "tools.json"
        output.write_text("{not json")
        result = CliRunner().invoke(app, [str(spec_file), "-o", str(output), "--check"])
        assert result.exit_code == 1
        assert "Tools list is not up to date" in result.output

    def test_strict_duplicate_fails(self, tmp_path):
        spec = {
            "paths": {
                "/a": {"get": {"operationId": "dup"}},
                "/b": {"get": {"operationId": "dup"}},
            }
        }
        spec_path = tmp_path / "dup.json"
        spec_path.write_text(json.dumps(spec))
        result = CliRunner().invoke(app, [str(spec_path), "-o", str(tmp_path / "t.json"), "--strict"])
        assert result.exit_code != 0

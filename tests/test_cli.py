"""Tests for the Toolgate CLI."""

import json

import pytest
from click.testing import CliRunner

from toolgate import __version__
from toolgate.cli import cli


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.delenv("EXECUTOR_URL", raising=False)
    monkeypatch.delenv("CODE_EXECUTION_ENABLED", raising=False)
    monkeypatch.setenv("SANDBOX_TIMEOUT_SECONDS", "10")
    return CliRunner()


class TestCli:
    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_tools(self, runner):
        result = runner.invoke(cli, ["tools"])
        assert result.exit_code == 0
        names = {t["name"] for t in json.loads(result.output)}
        assert names == {"Weather", "Multiply", "run_python_code"}

    def test_tools_without_code_execution(self, runner, monkeypatch):
        monkeypatch.setenv("CODE_EXECUTION_ENABLED", "false")
        result = runner.invoke(cli, ["tools"])
        names = {t["name"] for t in json.loads(result.output)}
        assert names == {"Weather", "Multiply"}

    def test_run_code_from_stdin(self, runner):
        result = runner.invoke(cli, ["run-code", "-"], input="print('from stdin')\n")
        assert result.exit_code == 0
        assert "from stdin" in result.output

    def test_run_code_json(self, runner, tmp_path):
        script = tmp_path / "snippet.py"
        script.write_text("print(6 * 7)\n")
        result = runner.invoke(cli, ["run-code", str(script), "--json-output"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["stdout"].strip() == "42"
        assert data["status"] == "COMPLETED"

    def test_run_code_disabled(self, runner, monkeypatch):
        monkeypatch.setenv("CODE_EXECUTION_ENABLED", "false")
        result = runner.invoke(cli, ["run-code", "-"], input="print(1)\n")
        assert result.exit_code != 0
        assert "disabled" in result.output

    def test_status(self, runner):
        result = runner.invoke(cli, ["status"])
        assert result.exit_code == 0
        assert "Executor: local" in result.output

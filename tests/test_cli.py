"""Integration tests for the specwiki command line.

Commands are invoked through the real Typer app with CliRunner inside an
isolated config directory, so relative paths resolve under tmp_path.
"""

from __future__ import annotations

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from specwiki import __version__
from specwiki import app as app_module
from specwiki.app import app, main
from specwiki.config import load_global_config
from specwiki.exceptions import DocumentError
from specwiki.exit_codes import (
    EXIT_DOCUMENT_ERROR,
    EXIT_INVALID_USAGE,
    EXIT_IO_ERROR,
    EXIT_SHAPE_ERROR,
)


@pytest.fixture
def workdir(isolated_config: Path, petstore_path: Path, minimal_path: Path) -> Path:
    """Isolated working directory holding copies of the document fixtures."""
    shutil.copy(petstore_path, isolated_config / "test.yml")
    shutil.copy(minimal_path, isolated_config / "minimal.json")
    return isolated_config


class TestRoot:
    def test_version(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"specwiki {__version__}" in result.stdout

    def test_no_args_shows_help(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(app, [])
        assert "convert" in result.output


class TestConvert:
    def test_defaults(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "convert"])
        assert result.exit_code == 0, result.output
        assert "Converting file: test.yml" in result.output
        assert "Completed: test.txt" in result.output
        assert (workdir / "test.txt").read_text(encoding="utf-8").startswith("h3. pets\n")

    def test_explicit_paths(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["convert", "--in", "minimal.json", "--out", "api.txt"])
        assert result.exit_code == 0, result.output
        assert "|{{name}}|string||" in (workdir / "api.txt").read_text(encoding="utf-8")

    def test_stdout_destination(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["--quiet", "convert", "-i", "minimal.json", "-o", "-"])
        assert result.exit_code == 0, result.output
        assert result.stdout.startswith("h3. pets\n")
        assert not (workdir / "test.txt").exists()

    def test_stdin_source(self, cli_runner: CliRunner, workdir: Path) -> None:
        content = (workdir / "minimal.json").read_text(encoding="utf-8")
        result = cli_runner.invoke(app, ["--quiet", "convert", "-i", "-", "-o", "-"], input=content)
        assert result.exit_code == 0, result.output
        assert "h4. List pets" in result.stdout

    def test_project_config_source(self, cli_runner: CliRunner, workdir: Path) -> None:
        (workdir / "specwiki.json").write_text(
            json.dumps({"convert": {"input": "minimal.json", "output": "project.txt"}}),
            encoding="utf-8",
        )
        result = cli_runner.invoke(app, ["convert"])
        assert result.exit_code == 0, result.output
        assert (workdir / "project.txt").is_file()

    def test_missing_source(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "convert", "-i", "nope.yml"])
        assert result.exit_code == EXIT_IO_ERROR
        assert "Document not found: nope.yml" in result.output

    def test_malformed_document(self, cli_runner: CliRunner, workdir: Path) -> None:
        (workdir / "broken.yml").write_text("paths: [oops\n", encoding="utf-8")
        result = cli_runner.invoke(app, ["convert", "-i", "broken.yml"])
        assert result.exit_code == EXIT_DOCUMENT_ERROR
        assert not (workdir / "test.txt").exists()

    def test_shape_error(self, cli_runner: CliRunner, workdir: Path) -> None:
        (workdir / "bad.yml").write_text("paths:\n  /a: oops\n", encoding="utf-8")
        result = cli_runner.invoke(app, ["convert", "-i", "bad.yml"])
        assert result.exit_code == EXIT_SHAPE_ERROR

    def test_verbose_logs_parsed_paths(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["--verbose", "--no-color", "convert", "-o", "-"])
        assert result.exit_code == 0, result.output
        assert "Parsing path /pets" in result.output


class TestInspect:
    def test_operations_plain(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["--plain", "inspect", "operations"])
        assert result.exit_code == 0, result.output
        lines = result.stdout.splitlines()
        assert lines[0] == "Group\tMethod\tSummary\tQuery\tRequest\tResponse"
        assert "pets\tGET /pets\tList pets\t2\t-\tPet" in lines
        assert "API Specifics\tPOST /pets/{petId}/photo\tUpload a photo\t0\t2 form fields\t-" in lines

    def test_definitions_json(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "inspect", "definitions"])
        assert result.exit_code == 0, result.output
        records = json.loads(result.stdout)
        assert records[0] == {"Name": "Pet", "Attributes": "id, name, owner, tags", "Mandatory": "id, name"}

    def test_model_json(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["--json", "inspect", "model", "-i", "minimal.json"])
        assert result.exit_code == 0, result.output
        model = json.loads(result.stdout)
        operation = model["groups"]["pets"]["operations"][0]
        assert operation["method"] == "GET /pets"
        assert [a["name"] for a in operation["response_schema"]["attributes"]] == ["id", "name"]
        assert operation["response_schema"]["attributes"][0]["schema"]["name"] == ""

    def test_missing_source(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["inspect", "operations", "-i", "nope.yml"])
        assert result.exit_code == EXIT_IO_ERROR


class TestConfigCommands:
    def test_set_and_show(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "server.port", "8080"])
        assert result.exit_code == 0, result.output
        assert load_global_config().server.port == 8080

        result = cli_runner.invoke(app, ["--json", "config", "show"])
        assert result.exit_code == 0, result.output
        assert '"port": 8080' in result.stdout

    def test_set_string(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "convert.input", "api.yml"])
        assert result.exit_code == 0, result.output
        assert load_global_config().convert.input == "api.yml"

    def test_set_unknown_key(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "server.color", "red"])
        assert result.exit_code == EXIT_INVALID_USAGE

    def test_set_bad_integer(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["--no-color", "config", "set", "server.port", "high"])
        assert result.exit_code == EXIT_INVALID_USAGE
        assert "takes an integer" in result.output

    def test_set_below_leaf(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "server.port.number", "1"])
        assert result.exit_code == EXIT_INVALID_USAGE
        assert load_global_config().server.port == 9999

    def test_set_section(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        result = cli_runner.invoke(app, ["config", "set", "server", "x"])
        assert result.exit_code == EXIT_INVALID_USAGE

    def test_show_reports_broken_project_config(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        (isolated_config / "specwiki.json").write_text("[1]", encoding="utf-8")
        result = cli_runner.invoke(app, ["--no-color", "config", "show"])
        assert result.exit_code == 1
        assert "expected a JSON object" in result.output

    def test_reset(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "server.port", "8080"])
        result = cli_runner.invoke(app, ["config", "reset", "--yes"])
        assert result.exit_code == 0, result.output
        assert load_global_config().server.port == 9999

    def test_reset_cancelled(self, cli_runner: CliRunner, isolated_config: Path) -> None:
        cli_runner.invoke(app, ["config", "set", "server.port", "8080"])
        result = cli_runner.invoke(app, ["config", "reset"], input="n\n")
        assert result.exit_code == 0
        assert load_global_config().server.port == 8080


class TestMain:
    def test_unexpected_error_writes_crash_log(
        self, isolated_config: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def broken() -> None:
            raise RuntimeError("boom")

        monkeypatch.setattr(app_module, "app", broken)
        monkeypatch.setenv("NO_COLOR", "1")
        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        logs = list((isolated_config / "data" / "specwiki").glob("crash-*.log"))
        assert len(logs) == 1
        assert "RuntimeError: boom" in logs[0].read_text(encoding="utf-8")
        assert "Unexpected error" in capsys.readouterr().err

    def test_specwiki_error_maps_to_exit_code(
        self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
    ) -> None:
        def broken() -> None:
            raise DocumentError("Document is empty")

        monkeypatch.setattr(app_module, "app", broken)
        monkeypatch.setenv("NO_COLOR", "1")
        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == EXIT_DOCUMENT_ERROR
        assert "Error: Document is empty" in capsys.readouterr().err

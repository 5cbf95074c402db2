"""Tests for the formatrouter CLI."""

import json
import sqlite3
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from formatrouter.cli.main import app
from tests.unit.fakes import text_backend, write_nothing

runner = CliRunner()


def fake_registry(make_registry, **kwargs):
    return lambda settings: make_registry(text_backend(**kwargs))


def recorded_rows(db_path):
    with sqlite3.connect(db_path) as conn:
        return conn.execute(
            "SELECT job_id, file_name, output_file_name, status FROM file_names ORDER BY id"
        ).fetchall()


class TestMainCallback:
    """Tests for global options."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert "formatrouter version" in result.stdout

    def test_invalid_output_format(self):
        result = runner.invoke(app, ["--output", "yaml", "backends"])

        assert result.exit_code == 1
        assert "Invalid output format" in result.output

    def test_help_lists_commands(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("convert", "targets", "backends"):
            assert command in result.stdout


class TestConvertCommand:
    """Tests for the convert command."""

    def test_convert_records_results(self, cli_env, make_registry):
        uploads_dir = cli_env / "uploads"
        (uploads_dir / "a.docx").write_bytes(b"input")
        (uploads_dir / "b.xyz").write_bytes(b"input")

        with patch(
            "formatrouter.cli.convert.default_registry",
            side_effect=fake_registry(make_registry),
        ):
            result = runner.invoke(
                app,
                ["--output", "json", "convert", "a.docx", "b.xyz", "--to", "pdf", "--job-id", "job-7"],
            )

        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert [(row["file_name"], row["status"]) for row in rows] == [
            ("a.docx", "Done"),
            ("b.xyz", "File type not supported"),
        ]
        assert (cli_env / "output" / "a.pdf").exists()
        assert recorded_rows(cli_env / "results.db") == [
            ("job-7", "a.docx", "a.pdf", "Done"),
            ("job-7", "b.xyz", "b.pdf", "File type not supported"),
        ]

    def test_no_record(self, cli_env, make_registry):
        (cli_env / "uploads" / "a.docx").write_bytes(b"input")

        with patch(
            "formatrouter.cli.convert.default_registry",
            side_effect=fake_registry(make_registry),
        ):
            result = runner.invoke(
                app, ["--quiet", "convert", "a.docx", "--to", "pdf", "--no-record"]
            )

        assert result.exit_code == 0, result.output
        assert not (cli_env / "results.db").exists()
        assert (cli_env / "output" / "a.pdf").exists()

    def test_aborted_batch(self, cli_env, make_registry):
        """Test that a reconciliation error exits non-zero and reports progress."""
        for name in ("a.docx", "b.docx"):
            (cli_env / "uploads" / name).write_bytes(b"input")

        with patch(
            "formatrouter.cli.convert.default_registry",
            side_effect=fake_registry(make_registry, writers={"b.docx": write_nothing}),
        ):
            result = runner.invoke(
                app, ["convert", "a.docx", "b.docx", "--to", "pdf", "--job-id", "job-8"]
            )

        assert result.exit_code == 1
        assert "Batch aborted" in result.output
        assert "1 of 2 file(s) recorded for job job-8" in result.output
        assert recorded_rows(cli_env / "results.db") == [
            ("job-8", "a.docx", "a.pdf", "Done"),
        ]

    def test_requires_target(self):
        result = runner.invoke(app, ["convert", "a.docx"])

        assert result.exit_code != 0


class TestListingCommands:
    """Tests for targets and backends."""

    def test_targets(self):
        result = runner.invoke(app, ["--output", "json", "targets", "pptx"])

        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert rows[0]["backend"] == "libreoffice"
        assert "pdf" in rows[0]["targets"].split(", ")

    def test_targets_unknown_extension(self):
        result = runner.invoke(app, ["targets", "xyz"])

        assert result.exit_code == 0
        assert "No backend accepts .xyz files" in result.stdout

    def test_backends(self):
        result = runner.invoke(app, ["--output", "json", "backends"])

        assert result.exit_code == 0
        rows = json.loads(result.stdout)
        assert [row["backend"] for row in rows] == ["inkscape", "libreoffice", "imagemagick"]
        assert [row["priority"] for row in rows] == [1, 2, 3]

    def test_backends_respects_disabled(self, monkeypatch):
        monkeypatch.setenv("DISABLED_BACKENDS", '["inkscape"]')

        result = runner.invoke(app, ["--output", "csv", "backends"])

        assert result.exit_code == 0
        assert "inkscape" not in result.stdout
        assert "libreoffice" in result.stdout


class TestHandleError:
    """Tests for handle_error."""

    def test_json_error(self, capsys):
        from formatrouter.cli.main import handle_error, state
        from formatrouter.exceptions import UnsupportedConversionError

        state.output_format = "json"
        try:
            with pytest.raises(SystemExit) as exc_info:
                handle_error(UnsupportedConversionError("docx", "png"))
        finally:
            state.output_format = "table"

        assert exc_info.value.code == 1
        error = json.loads(capsys.readouterr().err)
        assert error["error_type"] == "UnsupportedConversionError"
        assert error["context"]["target_extension"] == "png"

    def test_text_error(self, capsys):
        from formatrouter.cli.main import handle_error
        from formatrouter.exceptions import NoOutputGeneratedError

        with pytest.raises(SystemExit):
            handle_error(NoOutputGeneratedError("deck.png"))

        assert "No output files generated for deck.png" in capsys.readouterr().err

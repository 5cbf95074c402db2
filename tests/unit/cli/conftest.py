"""Pytest fixtures for CLI tests."""

import pytest

from formatrouter.config import reset_settings


@pytest.fixture(autouse=True)
def cli_env(tmp_path, monkeypatch):
    """Point uploads, output and the results database at a temporary directory."""
    uploads_dir = tmp_path / "uploads"
    uploads_dir.mkdir()
    monkeypatch.setenv("UPLOADS_DIR", str(uploads_dir))
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "output"))
    monkeypatch.setenv("RESULTS_DB_URL", f"sqlite:///{tmp_path / 'results.db'}")
    monkeypatch.setenv("MAX_CONVERT_PROCESS", "0")
    reset_settings()
    yield tmp_path
    reset_settings()

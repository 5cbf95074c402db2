"""Shared fixtures for unit tests."""

import pytest

from formatrouter.adapters.base import ConverterAdapter
from formatrouter.conversion.registry import BackendRegistry


@pytest.fixture
def uploads_dir(tmp_path):
    """Directory holding input files."""
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path):
    """Directory receiving converted files."""
    path = tmp_path / "output"
    path.mkdir()
    return path


@pytest.fixture
def make_registry():
    """Build a frozen registry from adapters in priority order."""

    def _make(*adapters: ConverterAdapter) -> BackendRegistry:
        registry = BackendRegistry()
        for adapter in adapters:
            registry.register(adapter, reason=f"test backend {adapter.name}")
        registry.freeze()
        return registry

    return _make

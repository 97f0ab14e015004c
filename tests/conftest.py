"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from hostctl.adapters.mock import MockAdapter
from hostctl.adapters.registry import AdapterRegistry
from hostctl.core.models.config import HostConfig
from hostctl.core.services.runner import CommandRunner


@pytest.fixture
def mock_shell() -> MockAdapter:
    """Scripted stand-in for the shell adapter (everything installed)."""
    return MockAdapter(adapter_name="shell")


@pytest.fixture
def registry(mock_shell: MockAdapter) -> AdapterRegistry:
    reg = AdapterRegistry()
    reg.register(mock_shell)
    return reg


@pytest.fixture
def runner(registry: AdapterRegistry) -> CommandRunner:
    return CommandRunner(registry)


@pytest.fixture
def config() -> HostConfig:
    return HostConfig()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """An empty hostctl.yml so the CLI resolves paths against tmp_path."""
    path = tmp_path / "hostctl.yml"
    path.write_text("version: 1\n")
    return path

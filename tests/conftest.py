"""
Pytest configuration and shared fixtures for crosskit tests.
"""

from pathlib import Path
from unittest.mock import Mock

import pytest

from crosskit.core.platform import HostArch, HostOS, HostPlatform, clear_host_cache
from crosskit.core.project import SDK_DIR_ENV, Project
from crosskit.tools import ToolProbe, ToolRegistry


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_caches():
    """Reset module-level caches between tests."""
    clear_host_cache()
    yield
    clear_host_cache()


@pytest.fixture(autouse=True)
def no_sdk_dir_override(monkeypatch):
    """Keep a developer's CROSSKIT_SDK_DIR out of the tests."""
    monkeypatch.delenv(SDK_DIR_ENV, raising=False)


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Empty project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def project(project_root: Path) -> Project:
    """Project with the default SDK root (<root>/.crosskit/sdks)."""
    return Project(project_root)


@pytest.fixture
def linux_host() -> HostPlatform:
    return HostPlatform(HostOS.LINUX, HostArch.X86_64)


@pytest.fixture
def windows_host() -> HostPlatform:
    return HostPlatform(HostOS.WINDOWS, HostArch.X86_64)


@pytest.fixture
def available_tools() -> ToolRegistry:
    """Tool registry in which tar, git and wasmtime are present."""
    registry = ToolRegistry()
    for name in ("tar", "git", "wasmtime"):
        registry.register(ToolProbe(name, exists=lambda: True))
    return registry


@pytest.fixture
def missing_tools() -> ToolRegistry:
    """Tool registry in which tar, git and wasmtime are absent."""
    registry = ToolRegistry()
    for name in ("tar", "git", "wasmtime"):
        registry.register(
            ToolProbe(name, exists=lambda: False, not_found_message=f"{name} is needed")
        )
    return registry


@pytest.fixture
def confirm_yes() -> Mock:
    """Confirmation prompt answering yes."""
    return Mock(return_value=True)


@pytest.fixture
def confirm_no() -> Mock:
    """Confirmation prompt answering no."""
    return Mock(return_value=False)


@pytest.fixture
def snapshot():
    """Function listing all paths below a directory (empty set if absent)."""

    def take(path: Path) -> set:
        if not path.exists():
            return set()
        return {p.relative_to(path) for p in path.rglob("*")}

    return take

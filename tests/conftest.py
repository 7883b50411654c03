"""
Shared test fixtures and configuration.
"""

import io
from pathlib import Path

import pytest

from dotnet_buildpack.adapters.mock import MockShell
from dotnet_buildpack.core.config.settings import BuildpackSettings
from dotnet_buildpack.core.models.manifest import Manifest


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    """Return a temporary staging directory."""
    path = tmp_path / "build"
    path.mkdir()
    return path


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Return a temporary buildpack cache directory."""
    path = tmp_path / "cache"
    path.mkdir()
    return path


@pytest.fixture
def manifest() -> Manifest:
    """A manifest whose default SDK is 4.4.4-002222."""
    return Manifest.model_validate({
        "language": "dotnet-core",
        "default_versions": [{"name": "dotnet", "version": "4.4.4-002222"}],
        "dependencies": [
            {
                "name": "dotnet",
                "version": "1.0.0-preview2-003121",
                "uri": "https://example.com/dotnet.1.0.0-preview2-003121.linux-amd64.tar.gz",
            },
            {
                "name": "dotnet",
                "version": "1.0.0-preview2-003131",
                "uri": "https://example.com/dotnet.1.0.0-preview2-003131.linux-amd64.tar.gz",
            },
            {
                "name": "dotnet",
                "version": "4.4.4-002222",
                "uri": "https://example.com/dotnet.4.4.4-002222.linux-amd64.tar.gz",
            },
        ],
    })


@pytest.fixture
def settings(tmp_path: Path) -> BuildpackSettings:
    """Settings rooted at a temporary buildpack directory."""
    buildpack_dir = tmp_path / "buildpack"
    return BuildpackSettings(
        buildpack_dir=buildpack_dir,
        manifest_path=buildpack_dir / "manifest.yml",
    )


@pytest.fixture
def shell() -> MockShell:
    return MockShell()


@pytest.fixture
def out() -> io.StringIO:
    """Progress sink capturing user-facing output."""
    return io.StringIO()

"""
Buildpack settings — environment-driven configuration.

Every knob has a default that matches the platform's standard layout,
so a plain ``load_settings()`` works inside a staging container:

    BP_DIR                    buildpack root (manifest, compile-extensions)
    BP_MANIFEST               manifest path (default: <BP_DIR>/manifest.yml)
    BP_STAGING_PACKAGES_DIR   NuGet package cache while staging
    BP_RUNTIME_PACKAGES_DIR   NuGet package cache when the app runs
    BP_LOG_LEVEL              console log level (default: WARNING)
    BP_LOG_FILE               optional log file
    BP_LOG_FILE_LEVEL         optional separate level for the log file
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel

from dotnet_buildpack.core.config.manifest_loader import MANIFEST_FILE

# Staging happens in /tmp/app with HOME=/tmp/app; the droplet runs from /app
STAGING_PACKAGES_DIR = "/tmp/app/.nuget/packages/"
RUNTIME_PACKAGES_DIR = "/app/.nuget/packages/"

_DEFAULT_BUILDPACK_DIR = Path(__file__).resolve().parents[3]


class BuildpackSettings(BaseModel):
    """Resolved configuration for one staging run."""

    buildpack_dir: Path = _DEFAULT_BUILDPACK_DIR
    manifest_path: Path = _DEFAULT_BUILDPACK_DIR / MANIFEST_FILE
    staging_packages_dir: str = STAGING_PACKAGES_DIR
    runtime_packages_dir: str = RUNTIME_PACKAGES_DIR
    log_level: str = "WARNING"
    log_file: str | None = None
    log_file_level: str | None = None

    @property
    def download_script(self) -> Path:
        """The compile-extensions helper that fetches manifest dependencies."""
        return self.buildpack_dir / "compile-extensions" / "bin" / "download_dependency"


def load_settings(environ: Mapping[str, str] | None = None) -> BuildpackSettings:
    """Build settings from environment variables (default: ``os.environ``)."""
    env = os.environ if environ is None else environ

    buildpack_dir = Path(env["BP_DIR"]) if env.get("BP_DIR") else _DEFAULT_BUILDPACK_DIR
    manifest_path = (
        Path(env["BP_MANIFEST"]) if env.get("BP_MANIFEST") else buildpack_dir / MANIFEST_FILE
    )

    return BuildpackSettings(
        buildpack_dir=buildpack_dir,
        manifest_path=manifest_path,
        staging_packages_dir=env.get("BP_STAGING_PACKAGES_DIR") or STAGING_PACKAGES_DIR,
        runtime_packages_dir=env.get("BP_RUNTIME_PACKAGES_DIR") or RUNTIME_PACKAGES_DIR,
        log_level=env.get("BP_LOG_LEVEL") or "WARNING",
        log_file=env.get("BP_LOG_FILE") or None,
        log_file_level=env.get("BP_LOG_FILE_LEVEL") or None,
    )

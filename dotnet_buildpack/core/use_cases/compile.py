"""
Compile use case — stage one app: SDK install, restore, cache save.

This is the top-level orchestrator for a build: it loads the manifest,
detects the app, installs the SDK unless the app is self-contained,
restores packages, and hands the installed SDK back to the cache.
Fatal errors never escape; they come back as ``CompileResult.error``.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from dotnet_buildpack.adapters.base import Filesystem, Shell
from dotnet_buildpack.adapters.shell.command import SubprocessShell
from dotnet_buildpack.adapters.shell.filesystem import LocalFilesystem
from dotnet_buildpack.core.config.manifest_loader import ManifestError, load_manifest
from dotnet_buildpack.core.config.settings import BuildpackSettings, load_settings
from dotnet_buildpack.core.models.app_dir import AppDir
from dotnet_buildpack.core.models.manifest import Manifest
from dotnet_buildpack.core.services.app_detection import detect_app_dir
from dotnet_buildpack.core.services.dependency_restore import (
    DependencyRestorer,
    RestoreError,
)
from dotnet_buildpack.core.services.sdk_installer import DotnetSdkInstaller, InstallError

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    """Result of staging one app."""

    app: AppDir | None = None
    sdk_version: str | None = None
    installed: bool = False
    cache_hit: bool = False
    restored: bool = False
    cache_saved: bool = False
    rewritten: list[Path] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        result: dict = {"ok": self.ok}
        if self.error:
            result["error"] = self.error
        if self.app is not None:
            result["app"] = {
                "build_dir": str(self.app.build_dir),
                "published_project": self.app.published_project,
                "project_paths": list(self.app.project_paths),
            }
        result["sdk_version"] = self.sdk_version
        result["installed"] = self.installed
        result["cache_hit"] = self.cache_hit
        result["restored"] = self.restored
        result["cache_saved"] = self.cache_saved
        result["rewritten"] = [str(p) for p in self.rewritten]
        return result


def compile_app(
    build_dir: Path,
    cache_dir: Path,
    *,
    out: TextIO | None = None,
    settings: BuildpackSettings | None = None,
    manifest: Manifest | None = None,
    app: AppDir | None = None,
    shell: Shell | None = None,
    fs: Filesystem | None = None,
) -> CompileResult:
    """Install the SDK and restore packages for the app in ``build_dir``.

    Args:
        build_dir: The app's staging directory.
        cache_dir: The buildpack cache, persisted between builds.
        out: Progress sink for user-facing output (default: stdout).
        settings: Override environment-derived settings.
        manifest: Pre-loaded manifest (default: load ``settings.manifest_path``).
        app: Pre-built app descriptor (default: detect from ``build_dir``).
        shell: Command runner (default: bash subprocesses).
        fs: Filesystem access (default: local disk).

    Returns:
        CompileResult; ``ok`` is False when any step failed fatally.
    """
    out = out or sys.stdout
    settings = settings or load_settings()
    shell = shell or SubprocessShell()
    fs = fs or LocalFilesystem()
    build_dir = Path(build_dir)
    cache_dir = Path(cache_dir)
    result = CompileResult()

    try:
        if manifest is None:
            manifest = load_manifest(settings.manifest_path)

        result.app = app or detect_app_dir(build_dir, fs)

        installer = DotnetSdkInstaller(
            build_dir, cache_dir, manifest, shell, settings=settings, fs=fs, out=out,
        )
        restorer = DependencyRestorer(build_dir, shell, settings=settings, fs=fs)

        # ── Install ──────────────────────────────────────────────
        if installer.should_install(result.app):
            result.sdk_version = installer.version
            result.cache_hit = installer.cached
            installer.install(out)
            result.installed = True
        else:
            out.write("-----> Self-contained app detected; skipping .NET SDK install\n")

        # ── Restore ──────────────────────────────────────────────
        if restorer.should_restore(result.app):
            result.rewritten = restorer.restore(out)
            result.restored = True

        # ── Cache ────────────────────────────────────────────────
        if result.installed and not result.cache_hit:
            result.cache_saved = installer.cache.save_from(build_dir)

    except (ManifestError, InstallError, RestoreError) as e:
        logger.error("Staging failed: %s", e)
        out.write(f"-----> ERROR: {e}\n")
        result.error = str(e)

    return result

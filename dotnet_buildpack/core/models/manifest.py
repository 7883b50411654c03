"""
Manifest model — the buildpack's catalogue of installable dependencies.

Loaded from manifest.yml. Maps a dependency name (``dotnet``) to the
versions the buildpack can install, their download URIs, and the
default version used when the app pins nothing.
"""

from __future__ import annotations

import fnmatch
import re

from pydantic import BaseModel, ConfigDict, Field


class DefaultVersion(BaseModel):
    """The version to use for a dependency when none is requested."""

    name: str
    version: str


class ManifestDependency(BaseModel):
    """One installable artifact."""

    model_config = ConfigDict(extra="ignore")

    name: str
    version: str
    uri: str = ""
    md5: str = ""
    cf_stacks: list[str] = Field(default_factory=list)


class Manifest(BaseModel):
    """Root manifest — loaded from manifest.yml."""

    model_config = ConfigDict(extra="ignore")

    language: str = ""
    default_versions: list[DefaultVersion] = Field(default_factory=list)
    dependencies: list[ManifestDependency] = Field(default_factory=list)

    def versions(self, name: str) -> list[str]:
        """All versions of ``name``, lowest first."""
        found = {d.version for d in self.dependencies if d.name == name and d.version}
        return sorted(found, key=version_sort_key)

    def default_version(self, name: str) -> str | None:
        """The declared default version of ``name``, if any."""
        for entry in self.default_versions:
            if entry.name == name and entry.version:
                return entry.version
        return None

    def find_dependency(self, name: str, version: str) -> ManifestDependency | None:
        """Look up the artifact for an exact name/version pair."""
        for dep in self.dependencies:
            if dep.name == name and dep.version == version:
                return dep
        return None

    def match_version(self, name: str, requested: str) -> str | None:
        """Resolve a requested version token against the catalogue.

        An exact version is returned as-is when listed. A token with
        wildcard segments (``1.0.x``, ``1.0.0-preview2-*``) resolves to
        the highest listed version it matches. Returns None otherwise.
        """
        available = self.versions(name)
        if requested in available:
            return requested

        pattern = _wildcard_pattern(requested)
        if pattern is None:
            return None

        matches = [v for v in available if fnmatch.fnmatchcase(v, pattern)]
        return matches[-1] if matches else None


def _wildcard_pattern(requested: str) -> str | None:
    """Turn ``1.0.x`` style tokens into glob patterns; None if not a wildcard."""
    segments = requested.split(".")
    converted = ["*" if seg in ("x", "X") else seg for seg in segments]
    pattern = ".".join(converted)
    return pattern if "*" in pattern else None


def version_sort_key(version: str) -> tuple:
    """Ordering key for SDK version strings.

    ``1.0.0-preview2-003121`` sorts before ``1.0.0`` (pre-releases
    first) and numeric pre-release parts compare numerically.
    """
    release, _, prerelease = version.partition("-")
    numbers = tuple(int(p) if p.isdigit() else 0 for p in release.split("."))
    if not prerelease:
        return (numbers, 1, ())
    parts = tuple(
        (0, int(p), "") if p.isdigit() else (1, 0, p)
        for p in re.split(r"[.-]", prerelease)
    )
    return (numbers, 0, parts)

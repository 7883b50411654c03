"""
Domain models — Pydantic types for the staging pipeline.

All models are re-exported here for convenient access:

    from dotnet_buildpack.core.models import AppDir, Manifest
"""

from dotnet_buildpack.core.models.app_dir import AppDir, is_self_contained
from dotnet_buildpack.core.models.manifest import (
    DefaultVersion,
    Manifest,
    ManifestDependency,
    version_sort_key,
)

__all__ = [
    # app_dir.py
    "AppDir",
    "is_self_contained",
    # manifest.py
    "DefaultVersion",
    "Manifest",
    "ManifestDependency",
    "version_sort_key",
]

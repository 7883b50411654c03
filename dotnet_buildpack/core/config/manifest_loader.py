"""
Manifest loader — reads manifest.yml into the ``Manifest`` model.

It reads YAML, validates against the Pydantic schema, and returns a
typed manifest. Every failure is a ``ManifestError``: a broken manifest
is a configuration problem of the buildpack, never of the app.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from dotnet_buildpack.core.models.manifest import Manifest

logger = logging.getLogger(__name__)

# Default manifest filename, at the buildpack root
MANIFEST_FILE = "manifest.yml"


class ManifestError(Exception):
    """Raised when the manifest is missing, invalid, or cannot supply a version."""


def load_manifest(path: Path) -> Manifest:
    """Load and validate a buildpack manifest.

    Args:
        path: Path to manifest.yml.

    Returns:
        Validated Manifest model.

    Raises:
        ManifestError: If the file is missing or invalid.
    """
    if not path.is_file():
        raise ManifestError(f"Manifest not found: {path}")

    logger.debug("Loading manifest from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ManifestError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(f"Invalid manifest {path}: {e}") from e

    logger.info(
        "Loaded manifest '%s' with %d dependencies",
        manifest.language or path.name,
        len(manifest.dependencies),
    )
    return manifest

"""Adapters — shell and filesystem bindings for the staging services.

Public re-exports for convenient access.
"""

from dotnet_buildpack.adapters.base import Filesystem, Shell
from dotnet_buildpack.adapters.mock import MockCall, MockShell
from dotnet_buildpack.adapters.shell.command import SubprocessShell
from dotnet_buildpack.adapters.shell.filesystem import LocalFilesystem

__all__ = [
    "Filesystem",
    "LocalFilesystem",
    "MockCall",
    "MockShell",
    "Shell",
    "SubprocessShell",
]

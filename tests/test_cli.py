"""
Tests for CLI commands — the compile hook and global options.
"""

import json
import logging
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from dotnet_buildpack.main import cli


@pytest.fixture(autouse=True)
def _restore_logging():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def _write_manifest(tmp_path: Path) -> Path:
    content = textwrap.dedent("""\
        ---
        language: dotnet-core
        default_versions:
          - name: dotnet
            version: 2.0.0
        dependencies:
          - name: dotnet
            version: 2.0.0
            uri: https://example.com/dotnet.2.0.0.linux-amd64.tar.gz
    """)
    path = tmp_path / "manifest.yml"
    path.write_text(content)
    return path


def _published_app(tmp_path: Path) -> Path:
    build = tmp_path / "build"
    build.mkdir()
    (build / "App.runtimeconfig.json").write_text("{}")
    (build / "App").write_text("")
    return build


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert ".NET SDK buildpack" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_compile_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["compile", "--help"])
        assert result.exit_code == 0
        assert "BUILD_DIR" in result.output


class TestCompileCommand:
    """Tests for the compile command."""

    def test_self_contained_app(self, tmp_path: Path):
        manifest = _write_manifest(tmp_path)
        build = _published_app(tmp_path)
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["compile", str(build), str(tmp_path / "cache")],
            env={"BP_MANIFEST": str(manifest)},
        )
        assert result.exit_code == 0, result.output
        assert "Self-contained" in result.output
        assert (tmp_path / "cache").is_dir()

    def test_json_summary(self, tmp_path: Path):
        manifest = _write_manifest(tmp_path)
        build = _published_app(tmp_path)
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["compile", str(build), str(tmp_path / "cache"), "--json"],
            env={"BP_MANIFEST": str(manifest)},
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output[result.output.index("{"):])
        assert data["ok"] is True
        assert data["installed"] is False
        assert data["app"]["published_project"] == "App"

    def test_missing_manifest_fails(self, tmp_path: Path):
        build = _published_app(tmp_path)
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["compile", str(build), str(tmp_path / "cache")],
            env={"BP_MANIFEST": str(tmp_path / "absent.yml")},
        )
        assert result.exit_code == 1
        assert "Manifest not found" in result.output

    def test_failed_download_fails(self, tmp_path: Path):
        manifest = _write_manifest(tmp_path)
        build = tmp_path / "build"
        (build / "src").mkdir(parents=True)
        (build / "src" / "App.csproj").write_text("<Project />")
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["-q", "compile", str(build), str(tmp_path / "cache")],
            env={"BP_MANIFEST": str(manifest), "BP_DIR": str(tmp_path / "buildpack")},
        )
        assert result.exit_code == 1
        assert ".NET SDK version: 2.0.0" in result.output
        assert "ERROR" in result.output
        assert not (build / ".dotnet" / "VERSION").exists()

    def test_build_dir_must_exist(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["compile", str(tmp_path / "nope"), str(tmp_path / "cache")])
        assert result.exit_code != 0

    def test_log_file(self, tmp_path: Path):
        manifest = _write_manifest(tmp_path)
        build = _published_app(tmp_path)
        log_file = tmp_path / "buildpack.log"
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["compile", str(build), str(tmp_path / "cache")],
            env={
                "BP_MANIFEST": str(manifest),
                "BP_LOG_FILE": str(log_file),
                "BP_LOG_FILE_LEVEL": "INFO",
            },
        )
        assert result.exit_code == 0, result.output
        assert "self-contained" in log_file.read_text()

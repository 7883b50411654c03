"""
Tests for the compile use case — install, restore and cache hand-off together.
"""

from pathlib import Path

import pytest

from dotnet_buildpack.adapters.mock import MockShell
from dotnet_buildpack.core.models.app_dir import AppDir
from dotnet_buildpack.core.models.manifest import Manifest
from dotnet_buildpack.core.use_cases.compile import CompileResult, compile_app

ASSETS_JSON = '{"packageFolders": {"/tmp/app/.nuget/packages/": {}}}'


def _msbuild_app(build_dir: Path) -> None:
    for project in ("src1/project1.csproj", "src2/project2.csproj"):
        path = build_dir / project
        path.parent.mkdir(parents=True)
        path.write_text("<Project />")
        assets = path.parent / "obj" / "project.assets.json"
        assets.parent.mkdir()
        assets.write_text(ASSETS_JSON)
    # What the SDK archive would have extracted
    marker = build_dir / ".dotnet" / "sdk" / "2.0.0" / "MSBuild.dll"
    marker.parent.mkdir(parents=True)
    marker.write_text("")


@pytest.fixture
def run(build_dir: Path, cache_dir: Path, manifest: Manifest, settings, shell: MockShell, out):
    def _run(**kwargs):
        params = {
            "out": out,
            "settings": settings,
            "manifest": manifest,
            "shell": shell,
        }
        params.update(kwargs)
        return compile_app(build_dir, cache_dir, **params)

    return _run


class TestCompileApp:
    def test_msbuild_app(self, run, shell: MockShell, build_dir: Path, cache_dir: Path, out):
        _msbuild_app(build_dir)

        result = run()

        assert result.ok, result.error
        assert result.installed
        assert result.restored
        assert not result.cache_hit
        assert result.sdk_version == "4.4.4-002222"
        assert "download_dependency" in shell.commands[0]
        assert shell.commands[1:] == [
            "dotnet restore src1/project1.csproj",
            "dotnet restore src2/project2.csproj",
        ]
        assert len(result.rewritten) == 2
        assert "/app/.nuget/packages/" in result.rewritten[0].read_text()
        assert ".NET SDK version: 4.4.4-002222" in out.getvalue()

    def test_fresh_install_is_cached(self, run, build_dir: Path, cache_dir: Path):
        _msbuild_app(build_dir)
        result = run()
        assert result.cache_saved
        assert (cache_dir / ".dotnet" / "VERSION").read_text() == "4.4.4-002222"

    def test_restore_runs_with_sdk_env(self, run, shell: MockShell, build_dir: Path):
        _msbuild_app(build_dir)
        run()
        restore_call = shell.call_log[1]
        assert restore_call.env["PATH"].startswith(str(build_dir / ".dotnet"))
        assert restore_call.env["HOME"] == str(build_dir)

    def test_legacy_app(self, run, shell: MockShell, build_dir: Path):
        for name in ("project1", "project2"):
            (build_dir / name).mkdir()
            (build_dir / name / "project.json").write_text("{}")

        result = run()

        assert result.ok, result.error
        assert shell.commands[1:] == ["dotnet restore project1 project2"]
        assert result.rewritten == []

    def test_cache_hit(self, run, shell: MockShell, build_dir: Path, cache_dir: Path):
        (build_dir / "src").mkdir()
        (build_dir / "src" / "App.csproj").write_text("<Project />")
        sdk = cache_dir / ".dotnet"
        (sdk / "sdk" / "2.0.0").mkdir(parents=True)
        (sdk / "sdk" / "2.0.0" / "MSBuild.dll").write_text("")
        (sdk / "VERSION").write_text("4.4.4-002222")

        result = run()

        assert result.ok, result.error
        assert result.cache_hit
        assert not result.cache_saved
        assert shell.commands == ["dotnet restore src/App.csproj"]

    def test_self_contained_app(self, run, shell: MockShell, build_dir: Path, out):
        (build_dir / "App.runtimeconfig.json").write_text("{}")
        (build_dir / "App").write_text("")

        result = run()

        assert result.ok
        assert not result.installed
        assert not result.restored
        assert shell.call_count == 0
        assert "Self-contained" in out.getvalue()
        assert not (build_dir / ".dotnet").exists()

    def test_unavailable_pin_warning_reaches_progress(self, run, build_dir: Path, out):
        (build_dir / "global.json").write_text('{"sdk": {"version": "9.9.9"}}')

        result = run()

        assert result.ok, result.error
        assert result.sdk_version == "4.4.4-002222"
        progress = out.getvalue()
        assert "WARNING" in progress
        assert "9.9.9" in progress
        assert progress.index("9.9.9") < progress.index(".NET SDK version: 4.4.4-002222")

    def test_explicit_app_descriptor(self, run, shell: MockShell, build_dir: Path):
        app = AppDir(build_dir=build_dir, project_paths=["project1"])
        result = run(app=app)
        assert result.app is app
        assert shell.commands[1:] == ["dotnet restore project1"]

    def test_missing_manifest(self, build_dir: Path, cache_dir: Path, settings, shell, out):
        result = compile_app(build_dir, cache_dir, out=out, settings=settings, shell=shell)

        assert not result.ok
        assert "Manifest not found" in result.error
        assert "ERROR" in out.getvalue()
        assert shell.call_count == 0

    def test_manifest_without_default(self, run, shell: MockShell):
        result = run(manifest=Manifest())
        assert not result.ok
        assert "no default version" in result.error
        assert shell.call_count == 0

    def test_install_failure(self, run, shell: MockShell, build_dir: Path, cache_dir: Path):
        _msbuild_app(build_dir)
        shell.set_failure("download_dependency")

        result = run()

        assert not result.ok
        assert not result.installed
        assert not result.restored
        assert shell.call_count == 1
        assert not (cache_dir / ".dotnet").exists()

    def test_restore_failure(self, run, shell: MockShell, build_dir: Path, cache_dir: Path):
        _msbuild_app(build_dir)
        shell.set_failure(r"restore src1")

        result = run()

        assert not result.ok
        assert result.installed
        assert not result.restored
        assert "src1/project1.csproj" in result.error
        assert not result.cache_saved
        assert not (cache_dir / ".dotnet").exists()

    def test_to_dict(self, run, build_dir: Path):
        _msbuild_app(build_dir)
        data = run().to_dict()
        assert data["ok"] is True
        assert data["sdk_version"] == "4.4.4-002222"
        assert data["app"]["project_paths"] == ["src1/project1.csproj", "src2/project2.csproj"]
        assert "error" not in data

    def test_defaults_to_stdout(self, build_dir: Path, cache_dir: Path, manifest, settings, capsys):
        (build_dir / "project1").mkdir()
        (build_dir / "project1" / "project.json").write_text("{}")
        compile_app(build_dir, cache_dir, settings=settings, manifest=manifest, shell=MockShell())
        assert ".NET SDK version" in capsys.readouterr().out


class TestCompileResult:
    def test_error_in_dict(self):
        data = CompileResult(error="boom").to_dict()
        assert data == {
            "ok": False,
            "error": "boom",
            "sdk_version": None,
            "installed": False,
            "cache_hit": False,
            "restored": False,
            "cache_saved": False,
            "rewritten": [],
        }


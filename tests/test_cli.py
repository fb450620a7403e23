"""Smoke tests for the CLI.

These tests verify CLI behaviour without a real toolchain; the
orchestrator and cleaner are wired to fake runners.
"""

import json
from pathlib import Path
from unittest.mock import patch

from typer.testing import CliRunner

from svcbuild import __version__
from svcbuild.builds.classifier import ServiceClassifier
from svcbuild.builds.cleaner import WorkspaceCleaner
from svcbuild.builds.compiler import CompilationInvoker
from svcbuild.builds.orchestrator import BuildOrchestrator
from svcbuild.cli import app

from .conftest import FakeInspector, FakeRunner, make_package

runner = CliRunner()


def fake_orchestrator(packages, toolchain=None):
    return BuildOrchestrator(
        inspector=FakeInspector(packages),
        classifier=ServiceClassifier(),
        compiler=CompilationInvoker(runner=toolchain or FakeRunner()),
    )


class TestCLIHelp:
    """Test CLI help and version commands."""

    def test_help_returns_zero(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Workspace service builder" in result.stdout

    def test_version_flag(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_short_version_flag(self) -> None:
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert __version__ in result.stdout


class TestCLIConfig:
    def test_config_command(self) -> None:
        result = runner.invoke(app, ["config"])
        assert result.exit_code == 0
        assert "Toolchain:" in result.stdout
        assert "Service detection:" in result.stdout
        assert "Native marker" in result.stdout

    def test_config_json(self) -> None:
        result = runner.invoke(app, ["config", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["cargo_bin"]


class TestCLIBuild:
    """Test the build command."""

    def test_missing_manifest(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["build", str(tmp_path)])
        assert result.exit_code == 1
        assert "manifest_not_found" in result.stdout

    def test_missing_manifest_json(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["build", str(tmp_path), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["error"]["code"] == "manifest_not_found"

    def test_build_json(self, workspace: Path) -> None:
        packages = [
            make_package("hello", deps=["shuttle-runtime"], root=workspace),
            make_package("next", deps=["shuttle-next"], kinds=["cdylib"], root=workspace),
        ]
        toolchain = FakeRunner()
        with patch.object(
            BuildOrchestrator,
            "from_settings",
            return_value=fake_orchestrator(packages, toolchain),
        ):
            result = runner.invoke(app, ["build", str(workspace), "--release", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [d["package_name"] for d in data] == ["hello", "next"]
        assert [d["kind"] for d in data] == ["native", "wasm"]
        assert data[0]["service_name"] == "hello"
        assert data[1]["executable_path"].endswith("next.wasm")
        assert all("--profile" in cmd for cmd in toolchain.commands)
        assert toolchain.commands[0][toolchain.commands[0].index("--profile") + 1] == (
            "release"
        )

    def test_build_human_output(self, workspace: Path) -> None:
        packages = [make_package("hello", deps=["shuttle-runtime"], root=workspace)]
        with patch.object(
            BuildOrchestrator, "from_settings", return_value=fake_orchestrator(packages)
        ):
            result = runner.invoke(app, ["build", str(workspace)])

        assert result.exit_code == 0
        assert "Built 1 service(s)" in result.stdout
        assert "Package: hello" in result.stdout

    def test_build_no_services(self, workspace: Path) -> None:
        with patch.object(
            BuildOrchestrator, "from_settings", return_value=fake_orchestrator([])
        ):
            result = runner.invoke(app, ["build", str(workspace)])

        assert result.exit_code == 0
        assert "No services found" in result.stdout

    def test_build_failure(self, workspace: Path) -> None:
        packages = [make_package("hello", deps=["shuttle-runtime"])]
        toolchain = FakeRunner(exit_code=101, stderr="error: aborting")
        with patch.object(
            BuildOrchestrator,
            "from_settings",
            return_value=fake_orchestrator(packages, toolchain),
        ):
            result = runner.invoke(app, ["build", str(workspace)])

        assert result.exit_code == 1
        assert "compilation_failed" in result.stdout
        assert "error: aborting" in result.stdout

    def test_invalid_service_name_reported(self, workspace: Path) -> None:
        packages = [make_package("bad_name", deps=["shuttle-runtime"])]
        with patch.object(
            BuildOrchestrator, "from_settings", return_value=fake_orchestrator(packages)
        ):
            result = runner.invoke(app, ["build", str(workspace), "--json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data[0]["service_name"] is None
        assert "bad_name" in data[0]["name_error"]


class TestCLIClean:
    def test_clean(self, tmp_path: Path) -> None:
        toolchain = FakeRunner(stderr="     Removed 3 files")
        with patch.object(
            WorkspaceCleaner,
            "from_settings",
            return_value=WorkspaceCleaner(runner=toolchain),
        ):
            result = runner.invoke(app, ["clean", str(tmp_path), "--release"])

        assert result.exit_code == 0
        assert "Removed 3 files" in result.stdout
        assert toolchain.commands[0][-1] == "release"

    def test_clean_failure(self, tmp_path: Path) -> None:
        toolchain = FakeRunner(exit_code=1)
        with patch.object(
            WorkspaceCleaner,
            "from_settings",
            return_value=WorkspaceCleaner(runner=toolchain),
        ):
            result = runner.invoke(app, ["clean", str(tmp_path)])

        assert result.exit_code == 1
        assert "clean_failed" in result.stdout


class TestCLIName:
    def test_override(self, tmp_path: Path) -> None:
        (tmp_path / "Shuttle.toml").write_text('name = "custom"\n')
        result = runner.invoke(app, ["name", "pkg", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert result.stdout.strip() == "custom"

    def test_fallback(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["name", "pkg", "--dir", str(tmp_path)])
        assert result.exit_code == 0
        assert result.stdout.strip() == "pkg"

    def test_invalid(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["name", "Bad_Pkg", "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "Invalid project name" in result.stdout

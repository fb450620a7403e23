"""Tests for builds/cleaner.py module."""

import asyncio
from pathlib import Path

import pytest

from svcbuild.builds.cleaner import WorkspaceCleaner, compose_clean_command
from svcbuild.config import Settings
from svcbuild.errors import CleanFailedError
from svcbuild.types import BuildProfile

from .conftest import FakeRunner

ROOT = Path("/work/ws")


class TestComposeCleanCommand:
    def test_debug(self):
        cmd = compose_clean_command(ROOT / "Cargo.toml", BuildProfile.DEBUG)
        assert cmd == [
            "cargo",
            "clean",
            "--manifest-path",
            str(ROOT / "Cargo.toml"),
            "--profile",
            "dev",
        ]

    def test_release(self):
        cmd = compose_clean_command(ROOT / "Cargo.toml", BuildProfile.RELEASE)
        assert cmd[-2:] == ["--profile", "release"]

    def test_target_dir(self):
        cmd = compose_clean_command(
            ROOT / "Cargo.toml", BuildProfile.DEBUG, target_dir=Path("/out")
        )
        assert cmd[-2:] == ["--target-dir", "/out"]


class TestWorkspaceCleaner:
    """Tests for WorkspaceCleaner.clean."""

    def test_returns_stderr_then_stdout(self):
        runner = FakeRunner(stdout="cleaned", stderr="     Removed 12 files")
        cleaner = WorkspaceCleaner(runner=runner)

        stderr, stdout = cleaner.clean(ROOT, BuildProfile.DEBUG)

        assert stderr == "     Removed 12 files"
        assert stdout == "cleaned"
        assert len(runner.calls) == 1
        cmd, cwd = runner.calls[0]
        assert cmd[:2] == ["cargo", "clean"]
        assert cwd == ROOT

    def test_failure(self):
        runner = FakeRunner(exit_code=1, stderr="error: could not find Cargo.toml")
        cleaner = WorkspaceCleaner(runner=runner)

        with pytest.raises(CleanFailedError) as exc_info:
            cleaner.clean(ROOT, BuildProfile.RELEASE)

        assert exc_info.value.code == "clean_failed"
        assert exc_info.value.exit_code == 1
        assert "Cargo.toml" in exc_info.value.stderr

    def test_relative_target_dir(self):
        runner = FakeRunner()
        cleaner = WorkspaceCleaner(runner=runner, target_dir=Path("out"))
        cleaner.clean(ROOT, BuildProfile.DEBUG)
        assert runner.commands[0][-2:] == ["--target-dir", str(ROOT / "out")]

    def test_from_settings(self):
        settings = Settings(cargo_bin="/opt/cargo", manifest_name="W.toml")
        runner = FakeRunner()
        cleaner = WorkspaceCleaner.from_settings(settings, runner=runner)
        cleaner.clean(ROOT, BuildProfile.DEBUG)

        cmd = runner.commands[0]
        assert cmd[0] == "/opt/cargo"
        assert str(ROOT / "W.toml") in cmd

    def test_clean_async(self):
        runner = FakeRunner(stdout="ok")
        cleaner = WorkspaceCleaner(runner=runner)

        stderr, stdout = asyncio.run(cleaner.clean_async(ROOT, BuildProfile.DEBUG))

        assert (stderr, stdout) == ("", "ok")

"""Shared test doubles for the build pipeline."""

from collections.abc import Sequence
from pathlib import Path

import pytest

from svcbuild.builds.runner import ToolchainOutput
from svcbuild.workspace.models import Dependency, Package, Target, WorkspaceMetadata


class FakeRunner:
    """ToolchainRunner that records commands and replays canned results."""

    def __init__(
        self,
        exit_code: int = 0,
        stdout: str = "",
        stderr: str = "",
    ) -> None:
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        self.calls: list[tuple[list[str], Path | None]] = []

    def run(self, args: Sequence[str], cwd: Path | None = None) -> ToolchainOutput:
        cmd = list(args)
        self.calls.append((cmd, cwd))
        return ToolchainOutput(
            command=" ".join(cmd),
            exit_code=self.exit_code,
            stdout=self.stdout,
            stderr=self.stderr,
        )

    @property
    def commands(self) -> list[list[str]]:
        return [cmd for cmd, _ in self.calls]


class FakeInspector:
    """WorkspaceInspector returning a fixed member list."""

    def __init__(self, packages: list[Package]) -> None:
        self.packages = packages
        self.loaded: list[Path] = []

    def load(self, manifest_path: Path) -> WorkspaceMetadata:
        self.loaded.append(manifest_path)
        return WorkspaceMetadata(
            workspace_root=manifest_path.parent,
            packages=self.packages,
        )


def make_package(
    name: str,
    deps: Sequence[str] = (),
    kinds: Sequence[str] = ("bin",),
    root: Path = Path("/ws"),
    metadata: dict | None = None,
) -> Package:
    """Build a Package with one target of the given kinds."""
    return Package(
        id=f"{name} 0.1.0 (path+file://{root / name})",
        name=name,
        dependencies=[Dependency(name=d) for d in deps],
        targets=[Target(name=name, kind=list(kinds))],
        manifest_path=root / name / "Cargo.toml",
        metadata=metadata,
    )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Create a workspace root with a manifest file."""
    (tmp_path / "Cargo.toml").write_text('[workspace]\nmembers = ["*"]\n')
    return tmp_path

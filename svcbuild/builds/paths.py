"""Artifact path resolution.

Reconstructs where the toolchain writes each service artifact:

    <target_dir>/[<wasm triple>/]<profile dir>/<artifact name><extension>

``target_dir`` defaults to ``<workspace root>/target`` and can be
overridden via ``Settings.target_dir``. Paths are computed, never checked
for existence.
"""

from __future__ import annotations

import os
from pathlib import Path

from svcbuild.types import BuildProfile, DeploymentClass

DEFAULT_TARGET_DIR = "target"
DEFAULT_WASM_TARGET = "wasm32-wasi"
WASM_EXTENSION = ".wasm"
EXE_SUFFIX = ".exe" if os.name == "nt" else ""


def artifact_file_name(package_name: str, deployment_class: DeploymentClass) -> str:
    """Return the file name the toolchain gives a package's artifact.

    Library artifacts have hyphens replaced by underscores; binaries keep
    the package name as-is.
    """
    if deployment_class.is_wasm:
        return package_name.replace("-", "_") + WASM_EXTENSION
    return package_name + EXE_SUFFIX


class ArtifactPathResolver:
    """Compute expected artifact paths for a workspace."""

    def __init__(
        self,
        target_dir: Path | None = None,
        wasm_target: str = DEFAULT_WASM_TARGET,
    ) -> None:
        self.target_dir = target_dir
        self.wasm_target = wasm_target

    def target_root(self, workspace_root: Path) -> Path:
        """Return the toolchain output directory for a workspace."""
        if self.target_dir is None:
            return workspace_root / DEFAULT_TARGET_DIR
        if self.target_dir.is_absolute():
            return self.target_dir
        return workspace_root / self.target_dir

    def resolve(
        self,
        workspace_root: Path,
        package_name: str,
        profile: BuildProfile,
        deployment_class: DeploymentClass,
    ) -> Path:
        """Resolve the artifact path for one package.

        Args:
            workspace_root: Directory holding the workspace manifest.
            package_name: Package to resolve.
            profile: Build profile.
            deployment_class: Native binary or WASM library.

        Returns:
            Expected artifact path.
        """
        path = self.target_root(workspace_root)
        if deployment_class.is_wasm:
            path = path / self.wasm_target
        return path / profile.dir_name / artifact_file_name(
            package_name, deployment_class
        )


__all__ = [
    "EXE_SUFFIX",
    "ArtifactPathResolver",
    "artifact_file_name",
]

"""Compilation of one class batch.

All packages of a deployment class are built by a single toolchain
invocation, one ``--package`` selector each, so the toolchain can share
compiled dependencies across them. The batch succeeds or fails as a
whole.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from svcbuild.builds.paths import ArtifactPathResolver
from svcbuild.builds.runner import SubprocessRunner
from svcbuild.errors import CompilationFailedError
from svcbuild.types import BuildProfile, BuiltService, DeploymentClass

if TYPE_CHECKING:
    from svcbuild.builds.runner import ToolchainRunner
    from svcbuild.workspace.models import Package

logger = logging.getLogger(__name__)


def default_jobs() -> int:
    """Return a parallelism hint from the host CPU count."""
    return os.cpu_count() or 1


def compose_build_command(
    package_names: Sequence[str],
    profile: BuildProfile,
    deployment_class: DeploymentClass,
    manifest_path: Path,
    *,
    cargo_bin: str = "cargo",
    jobs: int | None = None,
    wasm_target: str = "wasm32-wasi",
    target_dir: Path | None = None,
) -> list[str]:
    """Compose the ``cargo build`` command for a batch.

    Args:
        package_names: Packages to build, one selector each.
        profile: Build profile.
        deployment_class: Adds the cross-compilation target for WASM.
        manifest_path: Workspace manifest.
        cargo_bin: Toolchain executable.
        jobs: Parallel job hint (defaults to host CPU count).
        wasm_target: Target triple used for WASM builds.
        target_dir: Optional output directory override.

    Returns:
        Command as list of strings suitable for subprocess.
    """
    cmd = [
        cargo_bin,
        "build",
        "-j",
        str(jobs or default_jobs()),
        "--manifest-path",
        str(manifest_path),
    ]

    for name in package_names:
        cmd.extend(["--package", name])

    cmd.extend(["--profile", profile.toolchain_name])

    if deployment_class.is_wasm:
        cmd.extend(["--target", wasm_target])

    if target_dir is not None:
        cmd.extend(["--target-dir", str(target_dir)])

    return cmd


class CompilationInvoker:
    """Build a batch of same-class packages and describe the artifacts."""

    def __init__(
        self,
        runner: ToolchainRunner | None = None,
        path_resolver: ArtifactPathResolver | None = None,
        *,
        cargo_bin: str = "cargo",
        manifest_name: str = "Cargo.toml",
        jobs: int | None = None,
        allow_failed_build: bool = False,
    ) -> None:
        self.runner = runner or SubprocessRunner()
        self.path_resolver = path_resolver or ArtifactPathResolver()
        self.cargo_bin = cargo_bin
        self.manifest_name = manifest_name
        self.jobs = jobs
        self.allow_failed_build = allow_failed_build

    def compile(
        self,
        packages: Sequence[Package],
        profile: BuildProfile,
        deployment_class: DeploymentClass,
        workspace_root: Path,
        invocation_dir: Path,
    ) -> list[BuiltService]:
        """Compile a batch and return one BuiltService per package.

        Args:
            packages: Packages of the same deployment class.
            profile: Build profile.
            deployment_class: Class shared by every package in the batch.
            workspace_root: Directory holding the workspace manifest.
            invocation_dir: Directory the build was started from.

        Returns:
            Artifact descriptors in input order.

        Raises:
            CompilationFailedError: If the toolchain exits non-zero and
                ``allow_failed_build`` is off.
            ToolchainExecutionError: If the toolchain cannot be started.
        """
        if not packages:
            return []

        target_dir = None
        if self.path_resolver.target_dir is not None:
            target_dir = self.path_resolver.target_root(workspace_root)

        cmd = compose_build_command(
            [p.name for p in packages],
            profile,
            deployment_class,
            workspace_root / self.manifest_name,
            cargo_bin=self.cargo_bin,
            jobs=self.jobs,
            wasm_target=self.path_resolver.wasm_target,
            target_dir=target_dir,
        )

        logger.info(
            "Compiling %d %s package(s) (%s)",
            len(packages),
            deployment_class.value,
            profile.value,
        )
        output = self.runner.run(cmd, cwd=workspace_root)
        logger.info("Executed: %s", output.command)

        if not output.success:
            if not self.allow_failed_build:
                logger.error(
                    "Compilation failed with exit code %d", output.exit_code
                )
                raise CompilationFailedError(
                    exit_code=output.exit_code,
                    stderr=output.stderr,
                    command=output.command,
                )
            logger.warning(
                "Compilation exited with code %d; continuing because failed "
                "builds are allowed",
                output.exit_code,
            )

        return [
            BuiltService(
                executable_path=self.path_resolver.resolve(
                    workspace_root, package.name, profile, deployment_class
                ),
                is_wasm=deployment_class.is_wasm,
                package_name=package.name,
                working_directory=invocation_dir,
                manifest_path=package.manifest_path,
            )
            for package in packages
        ]


__all__ = [
    "CompilationInvoker",
    "compose_build_command",
    "default_jobs",
]

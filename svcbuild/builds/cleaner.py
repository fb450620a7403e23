"""Workspace cleaning via ``cargo clean``."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from svcbuild.builds.runner import SubprocessRunner
from svcbuild.errors import CleanFailedError

if TYPE_CHECKING:
    from svcbuild.builds.runner import ToolchainRunner
    from svcbuild.config import Settings
    from svcbuild.types import BuildProfile

logger = logging.getLogger(__name__)


def compose_clean_command(
    manifest_path: Path,
    profile: BuildProfile,
    cargo_bin: str = "cargo",
    target_dir: Path | None = None,
) -> list[str]:
    cmd = [
        cargo_bin,
        "clean",
        "--manifest-path",
        str(manifest_path),
        "--profile",
        profile.toolchain_name,
    ]
    if target_dir is not None:
        cmd.extend(["--target-dir", str(target_dir)])
    return cmd


class WorkspaceCleaner:
    """Remove one profile's build outputs from a workspace."""

    def __init__(
        self,
        runner: ToolchainRunner | None = None,
        cargo_bin: str = "cargo",
        manifest_name: str = "Cargo.toml",
        target_dir: Path | None = None,
    ) -> None:
        self.runner = runner or SubprocessRunner()
        self.cargo_bin = cargo_bin
        self.manifest_name = manifest_name
        self.target_dir = target_dir

    @classmethod
    def from_settings(
        cls, settings: Settings, runner: ToolchainRunner | None = None
    ) -> WorkspaceCleaner:
        return cls(
            runner=runner,
            cargo_bin=settings.cargo_bin,
            manifest_name=settings.manifest_name,
            target_dir=settings.target_dir,
        )

    def clean(self, workspace_root: Path, profile: BuildProfile) -> tuple[str, str]:
        """Clean a workspace for one profile.

        Args:
            workspace_root: Directory holding the workspace manifest.
            profile: Profile whose outputs are removed.

        Returns:
            Tuple of captured (stderr, stdout).

        Raises:
            CleanFailedError: If the toolchain exits non-zero.
            ToolchainExecutionError: If the toolchain cannot be started.
        """
        target_dir = self.target_dir
        if target_dir is not None and not target_dir.is_absolute():
            target_dir = workspace_root / target_dir

        cmd = compose_clean_command(
            workspace_root / self.manifest_name,
            profile,
            cargo_bin=self.cargo_bin,
            target_dir=target_dir,
        )
        output = self.runner.run(cmd, cwd=workspace_root)
        logger.info("Executed: %s", output.command)

        if not output.success:
            logger.error("Clean failed with exit code %d", output.exit_code)
            raise CleanFailedError(
                exit_code=output.exit_code,
                stderr=output.stderr,
                command=output.command,
            )

        return output.stderr, output.stdout

    async def clean_async(
        self, workspace_root: Path, profile: BuildProfile
    ) -> tuple[str, str]:
        """Run :meth:`clean` on a worker thread."""
        return await asyncio.to_thread(self.clean, workspace_root, profile)


__all__ = ["WorkspaceCleaner", "compose_clean_command"]

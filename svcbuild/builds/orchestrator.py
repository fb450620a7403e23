"""Build orchestration.

This module provides the top-level build API:
- build(): validate the manifest, load metadata, classify, compile
- build_async(): the same, offloaded to a worker thread
- build_workspace(): convenience wrapper driven by Settings
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from svcbuild.builds.classifier import ServiceClassifier
from svcbuild.builds.compiler import CompilationInvoker
from svcbuild.builds.paths import ArtifactPathResolver
from svcbuild.builds.runner import SubprocessRunner
from svcbuild.config import get_settings
from svcbuild.errors import ManifestNotFoundError
from svcbuild.workspace.inspector import CargoMetadataInspector

if TYPE_CHECKING:
    from svcbuild.builds.runner import ToolchainRunner
    from svcbuild.config import Settings
    from svcbuild.types import BuildProfile, BuiltService
    from svcbuild.workspace.inspector import WorkspaceInspector

logger = logging.getLogger(__name__)


class BuildOrchestrator:
    """Build every service in a workspace.

    Batches run in a fixed order, native binaries before WASM libraries.
    Any failure aborts the call and no partial artifact list is returned.
    """

    def __init__(
        self,
        inspector: WorkspaceInspector,
        classifier: ServiceClassifier,
        compiler: CompilationInvoker,
        manifest_name: str = "Cargo.toml",
    ) -> None:
        self.inspector = inspector
        self.classifier = classifier
        self.compiler = compiler
        self.manifest_name = manifest_name

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        runner: ToolchainRunner | None = None,
    ) -> BuildOrchestrator:
        """Wire up the default collaborators from settings."""
        if settings is None:
            settings = get_settings()
        if runner is None:
            runner = SubprocessRunner()

        resolver = ArtifactPathResolver(
            target_dir=settings.target_dir,
            wasm_target=settings.wasm_target,
        )
        compiler = CompilationInvoker(
            runner=runner,
            path_resolver=resolver,
            cargo_bin=settings.cargo_bin,
            manifest_name=settings.manifest_name,
            jobs=settings.jobs,
            allow_failed_build=settings.allow_failed_build,
        )
        return cls(
            inspector=CargoMetadataInspector(
                runner=runner, cargo_bin=settings.cargo_bin
            ),
            classifier=ServiceClassifier.from_settings(settings),
            compiler=compiler,
            manifest_name=settings.manifest_name,
        )

    def build(
        self,
        workspace_root: Path,
        profile: BuildProfile,
        invocation_dir: Path | None = None,
    ) -> list[BuiltService]:
        """Build all services in a workspace.

        Args:
            workspace_root: Directory holding the workspace manifest.
            profile: Build profile.
            invocation_dir: Working directory recorded on each artifact
                (defaults to the current directory).

        Returns:
            Artifact descriptors, native binaries first. Empty when the
            workspace has no service packages.

        Raises:
            ManifestNotFoundError: No manifest at the workspace root.
            MetadataError: Metadata could not be loaded.
            ConfigurationError: A service package lacks its required target.
            CompilationFailedError: A batch failed to compile.
        """
        workspace_root = workspace_root.resolve()
        manifest_path = workspace_root / self.manifest_name
        if not manifest_path.is_file():
            raise ManifestNotFoundError(manifest_path)

        metadata = self.inspector.load(manifest_path)
        classification = self.classifier.classify(metadata.members())

        if classification.is_empty():
            logger.info("No service packages found in %s", workspace_root)
            return []

        if invocation_dir is None:
            invocation_dir = Path.cwd()

        services: list[BuiltService] = []
        for deployment_class, packages in classification.batches():
            compiled = self.compiler.compile(
                packages,
                profile,
                deployment_class,
                workspace_root,
                invocation_dir,
            )
            logger.info("%s packages compiled", deployment_class.value)
            services.extend(compiled)

        return services

    async def build_async(
        self,
        workspace_root: Path,
        profile: BuildProfile,
        invocation_dir: Path | None = None,
    ) -> list[BuiltService]:
        """Run :meth:`build` on a worker thread."""
        if invocation_dir is None:
            invocation_dir = Path.cwd()
        return await asyncio.to_thread(
            self.build, workspace_root, profile, invocation_dir
        )


def build_workspace(
    workspace_root: Path,
    profile: BuildProfile,
    settings: Settings | None = None,
) -> list[BuiltService]:
    """Build a workspace with collaborators configured from settings."""
    return BuildOrchestrator.from_settings(settings).build(workspace_root, profile)


__all__ = ["BuildOrchestrator", "build_workspace"]

"""Workspace metadata introspection.

Loads member packages, their dependencies and target kinds by running
``cargo metadata`` and validating its JSON output.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from pydantic import ValidationError

from svcbuild.builds.runner import SubprocessRunner
from svcbuild.errors import MetadataError, ToolchainExecutionError
from svcbuild.workspace.models import WorkspaceMetadata

if TYPE_CHECKING:
    from svcbuild.builds.runner import ToolchainRunner

logger = logging.getLogger(__name__)


class WorkspaceInspector(Protocol):
    def load(self, manifest_path: Path) -> WorkspaceMetadata:
        """Load metadata for the workspace rooted at ``manifest_path``."""


def compose_metadata_command(cargo_bin: str, manifest_path: Path) -> list[str]:
    """Compose the ``cargo metadata`` command.

    Dependencies are not resolved (``--no-deps``); only workspace members
    are needed.
    """
    return [
        cargo_bin,
        "metadata",
        "--format-version",
        "1",
        "--no-deps",
        "--manifest-path",
        str(manifest_path),
    ]


def parse_metadata(raw: str) -> WorkspaceMetadata:
    """Parse ``cargo metadata`` JSON output.

    Args:
        raw: JSON document printed by the toolchain.

    Returns:
        Validated WorkspaceMetadata.

    Raises:
        MetadataError: If the output is not valid JSON or does not match
            the expected shape.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MetadataError(f"Workspace metadata is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MetadataError(
            f"Expected a JSON object for workspace metadata, got {type(data).__name__}"
        )
    try:
        return WorkspaceMetadata.model_validate(data)
    except ValidationError as e:
        raise MetadataError(f"Unexpected workspace metadata format: {e}") from e


class CargoMetadataInspector:
    """WorkspaceInspector that shells out to ``cargo metadata``."""

    def __init__(
        self,
        runner: ToolchainRunner | None = None,
        cargo_bin: str = "cargo",
    ) -> None:
        self.runner = runner or SubprocessRunner()
        self.cargo_bin = cargo_bin

    def load(self, manifest_path: Path) -> WorkspaceMetadata:
        """Query and parse metadata for the workspace at ``manifest_path``.

        Raises:
            MetadataError: If the toolchain cannot be started, exits
                non-zero, or prints output that does not parse.
        """
        cmd = compose_metadata_command(self.cargo_bin, manifest_path)
        try:
            output = self.runner.run(cmd, cwd=manifest_path.parent)
        except ToolchainExecutionError as e:
            raise MetadataError(f"Failed to query workspace metadata: {e}") from e
        if not output.success:
            logger.error(
                "Metadata query failed with exit code %d: %s",
                output.exit_code,
                output.stderr.strip(),
            )
            raise MetadataError(
                f"`{output.command}` failed with exit code {output.exit_code}: "
                f"{output.stderr.strip()}"
            )

        metadata = parse_metadata(output.stdout)
        logger.debug(
            "Workspace metadata parsed: %d member(s)", len(metadata.members())
        )
        return metadata


__all__ = [
    "CargoMetadataInspector",
    "WorkspaceInspector",
    "compose_metadata_command",
    "parse_metadata",
]

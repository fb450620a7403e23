"""Pydantic models for workspace metadata.

These mirror the subset of ``cargo metadata --format-version 1`` output
that the build pipeline needs. Unknown keys are ignored so newer
toolchains keep parsing.
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Dependency(BaseModel):
    """A declared dependency of a package.

    Attributes:
        name: Name of the dependency package.
        rename: Local alias, when the manifest renames the dependency.
        kind: Dependency kind (None for normal, "dev", "build").
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    rename: str | None = None
    kind: str | None = None


class Target(BaseModel):
    """A build target declared by a package."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name: str
    kind: list[str] = Field(default_factory=list)

    def has_kind(self, kind: str) -> bool:
        return kind in self.kind


class Package(BaseModel):
    """A workspace member package.

    Attributes:
        id: Toolchain package id.
        name: Package name, unique within the workspace.
        dependencies: Declared dependencies.
        targets: Declared targets.
        manifest_path: Path to the package's Cargo.toml.
        metadata: Free-form ``[package.metadata]`` table.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = ""
    name: str
    dependencies: list[Dependency] = Field(default_factory=list)
    targets: list[Target] = Field(default_factory=list)
    manifest_path: Path
    metadata: dict[str, Any] | None = None

    def depends_on(self, name: str) -> bool:
        """Check whether any dependency (or its alias) has the given name."""
        return any(dep.name == name or dep.rename == name for dep in self.dependencies)

    def has_target_kind(self, kind: str) -> bool:
        return any(target.has_kind(kind) for target in self.targets)

    def capability(self, key: str) -> str | None:
        """Return the explicit deployment tag from ``[package.metadata.<key>]``.

        Args:
            key: Name of the metadata table to look in.

        Returns:
            The ``deployment`` value, or None when not declared.
        """
        if not self.metadata:
            return None
        section = self.metadata.get(key)
        if not isinstance(section, dict):
            return None
        value = section.get("deployment")
        return value if isinstance(value, str) else None


class WorkspaceMetadata(BaseModel):
    """Metadata for a whole workspace."""

    model_config = ConfigDict(extra="ignore")

    workspace_root: Path
    target_directory: Path | None = None
    packages: list[Package] = Field(default_factory=list)
    workspace_members: list[str] = Field(default_factory=list)

    def members(self) -> list[Package]:
        """Return the packages that are workspace members, in declared order."""
        if not self.workspace_members:
            return list(self.packages)
        member_ids = set(self.workspace_members)
        return [p for p in self.packages if p.id in member_ids]


__all__ = ["Dependency", "Package", "Target", "WorkspaceMetadata"]

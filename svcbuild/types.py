"""Shared type definitions for svcbuild.

This module contains the enums and value types shared across subpackages
to avoid circular imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from svcbuild.naming import ServiceNameResolver


class DeploymentClass(str, Enum):
    """How a workspace member is built and deployed."""

    NATIVE_BINARY = "native"
    WASM_LIBRARY = "wasm"

    @property
    def is_wasm(self) -> bool:
        return self is DeploymentClass.WASM_LIBRARY


class BuildProfile(str, Enum):
    """Named build configuration.

    The value is the on-disk output directory name; ``toolchain_name`` is
    what gets passed to ``--profile``.
    """

    DEBUG = "debug"
    RELEASE = "release"

    @property
    def dir_name(self) -> str:
        return self.value

    @property
    def toolchain_name(self) -> str:
        if self is BuildProfile.DEBUG:
            return "dev"
        return "release"

    @classmethod
    def from_release_flag(cls, release: bool) -> BuildProfile:
        """Map a ``--release`` style boolean onto a profile."""
        return cls.RELEASE if release else cls.DEBUG


@dataclass(frozen=True)
class BuiltService:
    """A compiled native or WASM service.

    Attributes:
        executable_path: Where the toolchain is expected to have written the
            artifact. Existence is not checked here.
        is_wasm: True for WASM library artifacts.
        package_name: Package name from the workspace manifest.
        working_directory: Directory the build was invoked from.
        manifest_path: Path to the package's own manifest.
    """

    executable_path: Path
    is_wasm: bool
    package_name: str
    working_directory: Path
    manifest_path: Path

    @property
    def deployment_class(self) -> DeploymentClass:
        if self.is_wasm:
            return DeploymentClass.WASM_LIBRARY
        return DeploymentClass.NATIVE_BINARY

    def service_name(self, resolver: ServiceNameResolver | None = None) -> str:
        """Resolve the externally visible service name.

        Resolution is repeated on every call; nothing is cached on the
        instance.
        """
        if resolver is None:
            from svcbuild.naming import ServiceNameResolver

            resolver = ServiceNameResolver()
        return resolver.resolve_name(self)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "executable_path": str(self.executable_path),
            "is_wasm": self.is_wasm,
            "kind": self.deployment_class.value,
            "package_name": self.package_name,
            "working_directory": str(self.working_directory),
            "manifest_path": str(self.manifest_path),
        }


__all__ = [
    "BuildProfile",
    "BuiltService",
    "DeploymentClass",
]

"""Service classification.

Partitions workspace members into native binary and WASM library
services, then checks that each one declares the target kind its class
needs. Pure over its input: no files are read and nothing is spawned.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from svcbuild.errors import MissingBinaryTargetError, MissingCdylibTargetError
from svcbuild.types import DeploymentClass

if TYPE_CHECKING:
    from svcbuild.config import Settings
    from svcbuild.workspace.models import Package

logger = logging.getLogger(__name__)

BIN_KIND = "bin"
CDYLIB_KIND = "cdylib"


@dataclass
class Classification:
    """Workspace members grouped by deployment class."""

    native_binaries: list[Package] = field(default_factory=list)
    wasm_libraries: list[Package] = field(default_factory=list)

    def batches(self) -> list[tuple[DeploymentClass, list[Package]]]:
        """Return non-empty batches, native binaries first."""
        batches: list[tuple[DeploymentClass, list[Package]]] = []
        if self.native_binaries:
            batches.append((DeploymentClass.NATIVE_BINARY, self.native_binaries))
        if self.wasm_libraries:
            batches.append((DeploymentClass.WASM_LIBRARY, self.wasm_libraries))
        return batches

    def is_empty(self) -> bool:
        return not (self.native_binaries or self.wasm_libraries)


class ServiceClassifier:
    """Decide which workspace members are buildable services.

    An explicit ``deployment`` tag under ``[package.metadata.<metadata_key>]``
    wins. Otherwise the package is classified by whether it depends on one
    of the marker crates. The WASM marker is checked first.
    """

    def __init__(
        self,
        native_marker: str = "shuttle-runtime",
        wasm_marker: str = "shuttle-next",
        metadata_key: str | None = "shuttle",
    ) -> None:
        self.native_marker = native_marker
        self.wasm_marker = wasm_marker
        self.metadata_key = metadata_key

    @classmethod
    def from_settings(cls, settings: Settings) -> ServiceClassifier:
        return cls(
            native_marker=settings.native_marker,
            wasm_marker=settings.wasm_marker,
            metadata_key=settings.metadata_key,
        )

    def deployment_class(self, package: Package) -> DeploymentClass | None:
        """Return the deployment class of a package, or None if it is not a service."""
        if self.metadata_key:
            tag = package.capability(self.metadata_key)
            if tag is not None:
                try:
                    return DeploymentClass(tag)
                except ValueError:
                    logger.debug(
                        "Ignoring unknown deployment tag %r on %s", tag, package.name
                    )

        if package.depends_on(self.wasm_marker):
            return DeploymentClass.WASM_LIBRARY
        if package.depends_on(self.native_marker):
            return DeploymentClass.NATIVE_BINARY
        return None

    def classify(self, members: Iterable[Package]) -> Classification:
        """Bucket members by class and validate their targets.

        Args:
            members: Workspace member packages.

        Returns:
            Classification with one list per deployment class. Members that
            match neither class are left out.

        Raises:
            MissingBinaryTargetError: A native service has no ``bin`` target.
            MissingCdylibTargetError: A WASM service has no ``cdylib`` target.
        """
        result = Classification()
        for member in members:
            kind = self.deployment_class(member)
            if kind is DeploymentClass.NATIVE_BINARY:
                result.native_binaries.append(member)
            elif kind is DeploymentClass.WASM_LIBRARY:
                result.wasm_libraries.append(member)
            else:
                logger.debug("Skipping %s: not a service package", member.name)
                continue
            logger.debug("Classified %s as %s", member.name, kind.value)

        for package in result.native_binaries:
            ensure_binary(package)
        for package in result.wasm_libraries:
            ensure_cdylib(package)

        return result


def ensure_binary(package: Package) -> None:
    """Make sure a native service declares a binary target."""
    if not package.has_target_kind(BIN_KIND):
        raise MissingBinaryTargetError(package.name)


def ensure_cdylib(package: Package) -> None:
    """Make sure a WASM service declares a ``cdylib`` target."""
    if not package.has_target_kind(CDYLIB_KIND):
        raise MissingCdylibTargetError(package.name)


__all__ = [
    "Classification",
    "ServiceClassifier",
    "ensure_binary",
    "ensure_cdylib",
]

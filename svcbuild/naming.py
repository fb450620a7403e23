"""Service name resolution.

A service is named by the ``name`` key of an optional override file
(``Shuttle.toml`` by default) in its working directory. When that file
is missing or unusable the package name is used instead. Either way the
result must be a valid project name.
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError

from svcbuild.errors import InvalidNameError

if TYPE_CHECKING:
    from svcbuild.config import Settings
    from svcbuild.types import BuiltService

logger = logging.getLogger(__name__)

# Hostname label rules: lowercase alphanumerics and inner hyphens
PROJECT_NAME_PATTERN = re.compile(r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$")
PROJECT_NAME_MAX_LENGTH = 63

DEFAULT_SERVICE_MANIFEST = "Shuttle.toml"


class ServiceManifestSchema(BaseModel):
    """Schema for the per-service override file."""

    model_config = ConfigDict(extra="allow")

    name: StrictStr


class OverrideUnavailableError(Exception):
    """The override file could not supply a name."""


def parse_project_name(value: str) -> str:
    """Validate a project name.

    Args:
        value: Candidate name.

    Returns:
        The name, unchanged.

    Raises:
        InvalidNameError: If the name is empty, too long, or contains
            characters other than lowercase letters, digits and inner hyphens.
    """
    if not value:
        raise InvalidNameError(value, "name must not be empty")
    if len(value) > PROJECT_NAME_MAX_LENGTH:
        raise InvalidNameError(
            value, f"name must be at most {PROJECT_NAME_MAX_LENGTH} characters"
        )
    if not PROJECT_NAME_PATTERN.match(value):
        raise InvalidNameError(
            value,
            "only lowercase letters, digits and hyphens are allowed, "
            "and the name must not start or end with a hyphen",
        )
    return value


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dict.

    Raises:
        FileNotFoundError: If the file does not exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    with open(path, "rb") as f:
        return tomllib.load(f)


def extract_override_name(path: Path) -> str:
    """Read the ``name`` key from an override file.

    Raises:
        OverrideUnavailableError: If the file is missing, unparseable, not
            UTF-8, or has no string ``name`` key.
    """
    try:
        data = load_toml(path)
    except FileNotFoundError as e:
        raise OverrideUnavailableError(f"{path.name} not found") from e
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise OverrideUnavailableError(f"failed to parse {path.name}: {e}") from e

    try:
        return ServiceManifestSchema.model_validate(data).name
    except ValidationError as e:
        raise OverrideUnavailableError(
            f"`name` key in {path.name} is missing or not a string"
        ) from e


class ServiceNameResolver:
    """Resolve the externally visible name of a built service."""

    def __init__(self, manifest_name: str = DEFAULT_SERVICE_MANIFEST) -> None:
        self.manifest_name = manifest_name

    @classmethod
    def from_settings(cls, settings: Settings) -> ServiceNameResolver:
        return cls(manifest_name=settings.service_manifest_name)

    def resolve_name(self, service: BuiltService) -> str:
        """Return the service name for ``service``.

        Falls back to the package name when the override file cannot be
        used, including when it holds a name that fails validation.

        Raises:
            InvalidNameError: If the package name is not a valid project
                name either.
        """
        return self.resolve_for(service.working_directory, service.package_name)

    def resolve_for(self, directory: Path, package_name: str) -> str:
        """Resolve a name from an override directory and a fallback package name."""
        override_path = directory / self.manifest_name
        try:
            return parse_project_name(extract_override_name(override_path))
        except (OverrideUnavailableError, InvalidNameError) as error:
            logger.debug(
                "failed to get service name from %s: %s", override_path, error
            )

        return parse_project_name(package_name)


__all__ = [
    "OverrideUnavailableError",
    "ServiceManifestSchema",
    "ServiceNameResolver",
    "extract_override_name",
    "parse_project_name",
]

"""Error definitions for svcbuild.

Every error carries a stable ``code`` for programmatic handling, in the
same way across the build, clean and naming paths.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

MANIFEST_NOT_FOUND = "manifest_not_found"
METADATA_ERROR = "metadata_error"
CONFIGURATION_ERROR = "configuration_error"
MISSING_BINARY_TARGET = "missing_binary_target"
MISSING_CDYLIB_TARGET = "missing_cdylib_target"
COMPILATION_FAILED = "compilation_failed"
CLEAN_FAILED = "clean_failed"
EXECUTION_ERROR = "execution_error"
INVALID_NAME = "invalid_name"


class BuildError(Exception):
    """Base error for workspace build operations."""

    def __init__(self, message: str, code: str = "build_error") -> None:
        super().__init__(message)
        self.code = code

    def details(self) -> dict[str, Any]:
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": str(self),
        }
        details = self.details()
        if details:
            result["details"] = details
        return result


class ManifestNotFoundError(BuildError):
    """Raised when the workspace manifest does not exist."""

    def __init__(self, manifest_path: Path) -> None:
        super().__init__(
            f"Workspace manifest not found: {manifest_path}", code=MANIFEST_NOT_FOUND
        )
        self.manifest_path = manifest_path

    def details(self) -> dict[str, Any]:
        return {"manifest_path": str(self.manifest_path)}


class MetadataError(BuildError):
    """Raised when workspace metadata cannot be queried or parsed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code=METADATA_ERROR)


class ConfigurationError(BuildError):
    """A workspace member is misconfigured for its deployment class."""

    def __init__(
        self, message: str, package_name: str, code: str = CONFIGURATION_ERROR
    ) -> None:
        super().__init__(message, code=code)
        self.package_name = package_name

    def details(self) -> dict[str, Any]:
        return {"package": self.package_name}


class MissingBinaryTargetError(ConfigurationError):
    """A native service package declares no ``bin`` target."""

    def __init__(self, package_name: str) -> None:
        super().__init__(
            f"Package '{package_name}' must be a binary: "
            "native services need a [[bin]] target.",
            package_name=package_name,
            code=MISSING_BINARY_TARGET,
        )


class MissingCdylibTargetError(ConfigurationError):
    """A WASM service package declares no ``cdylib`` target."""

    def __init__(self, package_name: str) -> None:
        super().__init__(
            f"Package '{package_name}' must be a library: add `[lib]` with "
            'crate-type = ["cdylib"] to its Cargo.toml.',
            package_name=package_name,
            code=MISSING_CDYLIB_TARGET,
        )


class ToolchainExecutionError(BuildError):
    """Raised when the toolchain process cannot be started at all."""

    def __init__(self, message: str, command: str | None = None) -> None:
        super().__init__(message, code=EXECUTION_ERROR)
        self.command = command


class _ToolchainFailure(BuildError):
    def __init__(
        self,
        message: str,
        *,
        code: str,
        exit_code: int,
        stderr: str,
        command: str,
    ) -> None:
        super().__init__(message, code=code)
        self.exit_code = exit_code
        self.stderr = stderr
        self.command = command

    def details(self) -> dict[str, Any]:
        return {
            "exit_code": self.exit_code,
            "command": self.command,
            "stderr": self.stderr,
        }


class CompilationFailedError(_ToolchainFailure):
    """Raised when a build invocation exits non-zero."""

    def __init__(self, exit_code: int, stderr: str, command: str) -> None:
        super().__init__(
            f"Compilation failed with exit code {exit_code}",
            code=COMPILATION_FAILED,
            exit_code=exit_code,
            stderr=stderr,
            command=command,
        )


class CleanFailedError(_ToolchainFailure):
    """Raised when a clean invocation exits non-zero."""

    def __init__(self, exit_code: int, stderr: str, command: str) -> None:
        super().__init__(
            f"Clean failed with exit code {exit_code}",
            code=CLEAN_FAILED,
            exit_code=exit_code,
            stderr=stderr,
            command=command,
        )


class InvalidNameError(BuildError):
    """Raised when neither the override nor the package name is a valid project name."""

    def __init__(self, value: str, reason: str) -> None:
        super().__init__(f"Invalid project name '{value}': {reason}", code=INVALID_NAME)
        self.value = value
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"value": self.value}


__all__ = [
    "BuildError",
    "CleanFailedError",
    "CompilationFailedError",
    "ConfigurationError",
    "InvalidNameError",
    "ManifestNotFoundError",
    "MetadataError",
    "MissingBinaryTargetError",
    "MissingCdylibTargetError",
    "ToolchainExecutionError",
]

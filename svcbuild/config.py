"""Configuration settings for svcbuild.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the SVCBUILD_ prefix.
    CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="SVCBUILD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Toolchain
    cargo_bin: str = Field(
        default="cargo",
        description="Toolchain executable used for metadata, build and clean",
    )
    manifest_name: str = Field(
        default="Cargo.toml",
        description="Workspace manifest file name at the workspace root",
    )
    wasm_target: str = Field(
        default="wasm32-wasi",
        description="Cross-compilation target triple for WASM services",
    )
    target_dir: Path | None = Field(
        default=None,
        description="Toolchain output directory (defaults to <workspace>/target)",
    )
    jobs: int | None = Field(
        default=None,
        ge=1,
        description="Parallel job hint (defaults to host CPU count)",
    )

    # Service detection
    native_marker: str = Field(
        default="shuttle-runtime",
        description="Dependency that marks a package as a native binary service",
    )
    wasm_marker: str = Field(
        default="shuttle-next",
        description="Dependency that marks a package as a WASM library service",
    )
    metadata_key: str = Field(
        default="shuttle",
        description="[package.metadata] table carrying an explicit deployment tag",
    )
    service_manifest_name: str = Field(
        default="Shuttle.toml",
        description="Per-service override file holding the service name",
    )

    # Operational modes
    allow_failed_build: bool = Field(
        default=False,
        description="Treat a non-zero build exit status as success (legacy behaviour)",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]

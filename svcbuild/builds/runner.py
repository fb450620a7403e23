"""Toolchain runner for executing cargo commands.

This module handles:
- Executing toolchain commands with subprocess
- Capturing stdout, stderr and exit status as one result
- Translating start-up failures into ToolchainExecutionError

The runner blocks until the process exits. Async callers offload it to a
worker thread (see BuildOrchestrator.build_async).
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from svcbuild.errors import ToolchainExecutionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolchainOutput:
    """Result of a toolchain execution.

    Attributes:
        command: The command that was executed, shell-quoted.
        exit_code: Process exit code.
        stdout: Captured standard output.
        stderr: Captured standard error.
    """

    command: str
    exit_code: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.exit_code == 0


class ToolchainRunner(Protocol):
    def run(self, args: Sequence[str], cwd: Path | None = None) -> ToolchainOutput:
        """Run a command to completion and capture its output."""


class SubprocessRunner:
    """ToolchainRunner backed by :func:`subprocess.run`."""

    def __init__(self, env: dict[str, str] | None = None) -> None:
        self.env = env

    def run(self, args: Sequence[str], cwd: Path | None = None) -> ToolchainOutput:
        """Execute a command and capture its output.

        Args:
            args: Command as a list of strings.
            cwd: Optional working directory.

        Returns:
            ToolchainOutput with the captured streams and exit code.

        Raises:
            ToolchainExecutionError: If the process cannot be started.
        """
        cmd = [str(a) for a in args]
        cmd_str = shlex.join(cmd)
        logger.debug("Running: %s", cmd_str)

        try:
            result = subprocess.run(
                cmd,
                cwd=cwd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self.env,
                check=False,
            )
        except OSError as e:
            message = f"Failed to execute {cmd[0]}: {e}"
            logger.error(message)
            raise ToolchainExecutionError(message, command=cmd_str) from e

        return ToolchainOutput(
            command=cmd_str,
            exit_code=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )


__all__ = [
    "SubprocessRunner",
    "ToolchainOutput",
    "ToolchainRunner",
]

"""Build pipeline module.

This module handles:
- Classifying workspace members into deployment classes
- Resolving artifact paths per profile and target
- Running the toolchain for each class batch
- Cleaning build outputs

Import submodules directly (svcbuild.builds.orchestrator, etc.) to avoid
circular imports with svcbuild.workspace.
"""

from svcbuild.builds.runner import SubprocessRunner, ToolchainOutput, ToolchainRunner

__all__ = ["SubprocessRunner", "ToolchainOutput", "ToolchainRunner"]

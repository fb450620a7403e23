"""svcbuild - Build Cargo workspaces into deployable service artifacts.

This package classifies workspace members into native binary and WASM
library services, drives the toolchain for each class, and describes
every resulting artifact.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]

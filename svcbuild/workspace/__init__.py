"""Workspace metadata module.

Models and loaders for the member packages of a Cargo workspace.
"""

from svcbuild.workspace.inspector import CargoMetadataInspector, WorkspaceInspector
from svcbuild.workspace.models import Dependency, Package, Target, WorkspaceMetadata

__all__ = [
    "CargoMetadataInspector",
    "Dependency",
    "Package",
    "Target",
    "WorkspaceInspector",
    "WorkspaceMetadata",
]

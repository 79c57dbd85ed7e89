"""
Domain models — frozen Pydantic types describing the running project.

All models are re-exported here for convenient access:

    from prjenv.core.models import Environment, Workspace, Package, Paths
"""

from prjenv.core.models.configuration import Configuration
from prjenv.core.models.environment import Environment
from prjenv.core.models.kind import Kind
from prjenv.core.models.metadata import Metadata
from prjenv.core.models.package import Package
from prjenv.core.models.paths import Paths
from prjenv.core.models.workspace import Workspace

__all__ = [
    # configuration.py
    "Configuration",
    # environment.py
    "Environment",
    # kind.py
    "Kind",
    # metadata.py
    "Metadata",
    # package.py
    "Package",
    # paths.py
    "Paths",
    # workspace.py
    "Workspace",
]

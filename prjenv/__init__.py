"""
prjenv — workspace discovery and a process-wide project environment.

    import prjenv

    env = prjenv.get()                 # discovered once, then cached
    print(env.summary())
    prjenv.getenv("db_path")           # → <root>/assets/db
"""

__version__ = "0.1.0"

from prjenv.core.accessors import FIELDS, getenv, setenv
from prjenv.core.config.locator import find_cargo_root
from prjenv.core.config.manifest import (
    is_workspace_toml,
    read_cargo_metadata,
    read_manifest,
    read_metadata,
    write_table,
)
from prjenv.core.context import get, set, try_get
from prjenv.core.errors import EnvError, ErrorKind
from prjenv.core.models import (
    Configuration,
    Environment,
    Kind,
    Metadata,
    Package,
    Paths,
    Workspace,
)
from prjenv.core.services.scaffold import Scaffold
from prjenv.core.services.workspace_manager import WorkspaceManager

__all__ = [
    "__version__",
    # accessors
    "FIELDS",
    "getenv",
    "setenv",
    # context
    "get",
    "set",
    "try_get",
    # discovery / manifests
    "find_cargo_root",
    "is_workspace_toml",
    "read_cargo_metadata",
    "read_manifest",
    "read_metadata",
    "write_table",
    # errors
    "EnvError",
    "ErrorKind",
    # models
    "Configuration",
    "Environment",
    "Kind",
    "Metadata",
    "Package",
    "Paths",
    "Workspace",
    # services
    "Scaffold",
    "WorkspaceManager",
]

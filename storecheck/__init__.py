from typing import TYPE_CHECKING

# Heavy modules (db, store, e2e) are imported on use
if TYPE_CHECKING:
    from . import db, e2e, store, testing

from .config import HarnessConfig, load_config
from .exceptions import (
    ConfigError,
    DatabaseError,
    DeploymentNotReady,
    HarnessError,
    ScenarioError,
)
from .version import package_version

__version__ = package_version()

__all__ = [
    "__version__",
    # Modules
    "db",
    "e2e",
    "store",
    "testing",
    # Configuration
    "HarnessConfig",
    "load_config",
    # Exceptions
    "ConfigError",
    "DatabaseError",
    "DeploymentNotReady",
    "HarnessError",
    "ScenarioError",
]


def __getattr__(name: str) -> object:
    """Lazy import for heavy modules (db, store, e2e, testing)."""
    import importlib

    if name in ("db", "e2e", "store", "testing"):
        module = importlib.import_module(f".{name}", __name__)
        globals()[name] = module
        return module
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

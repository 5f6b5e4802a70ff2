"""gitplumb: serialized access to git's object-store plumbing."""

from gitplumb.config import Config, load_config
from gitplumb.exceptions import (
    ConfigError,
    ConfigLoadError,
    ForbiddenOperationError,
    GitplumbError,
    InvariantViolationError,
    OperationError,
    PathResolutionError,
    RepositoryHandleError,
    StaleTransactionError,
    ToolNotFoundError,
)
from gitplumb.repository import (
    EMPTY_BLOB_ID,
    FileMode,
    ObjectKind,
    Operation,
    RepositoryHandle,
    Transaction,
)

__version__ = "0.1.0"

__all__ = [
    "EMPTY_BLOB_ID",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "FileMode",
    "ForbiddenOperationError",
    "GitplumbError",
    "InvariantViolationError",
    "ObjectKind",
    "Operation",
    "OperationError",
    "PathResolutionError",
    "RepositoryHandle",
    "RepositoryHandleError",
    "StaleTransactionError",
    "ToolNotFoundError",
    "Transaction",
    "__version__",
]

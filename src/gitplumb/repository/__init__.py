"""Serialized plumbing access to git repositories.

Classes:
    RepositoryHandle: Binds a directory, executable and environment; guards
        every operation sequence with an exclusive lock.
    Transaction: The plumbing operation catalog, valid inside one guarded call.

Models:
    FileMode: Index entry modes (regular, executable, symlink).
    ObjectKind: Object type tags (blob, tree, commit, tag).

Example:
    >>> from gitplumb.repository import RepositoryHandle
    >>> handle = RepositoryHandle("/srv/store")
    >>> with handle.session() as tx:
    ...     if not handle.is_initialized():
    ...         tx.init()
    ...     blob = tx.write_object(b"content")
"""

from gitplumb.repository._handle import Operation, RepositoryHandle
from gitplumb.repository._models import (
    EMPTY_BLOB_ID,
    HEADS_PREFIX,
    TAGS_PREFIX,
    FileMode,
    ObjectKind,
)
from gitplumb.repository._transaction import Transaction

__all__ = [
    "EMPTY_BLOB_ID",
    "HEADS_PREFIX",
    "TAGS_PREFIX",
    "FileMode",
    "ObjectKind",
    "Operation",
    "RepositoryHandle",
    "Transaction",
]

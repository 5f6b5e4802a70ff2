"""Repository models.

This module defines the value types shared by the repository handle and
its transactions.
"""

from enum import StrEnum
from typing import Final

# Identifier git assigns to zero-length content
EMPTY_BLOB_ID: Final = "e69de29bb2d1d6434b8b29ae775ad8c2e48c5391"

HEADS_PREFIX: Final = "refs/heads/"
TAGS_PREFIX: Final = "refs/tags/"


class FileMode(StrEnum):
    """Index entry modes accepted by `update-index --cacheinfo`."""

    REGULAR = "100644"
    EXECUTABLE = "100755"
    SYMLINK = "120000"


class ObjectKind(StrEnum):
    """Type tags reported by `cat-file -t`."""

    BLOB = "blob"
    TREE = "tree"
    COMMIT = "commit"
    TAG = "tag"

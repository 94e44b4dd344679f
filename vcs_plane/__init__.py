from .base import ObjectStore, RefStore, StagingIndex
from .errors import (
    VcsError,
    UserInputError,
    PreconditionError,
    SafetyError,
)
from .model import Blob, Commit
from .merge import MergeResult
from .repo import Repository, Status, create_memory_repository, create_sql_repository

__all__ = [
    "ObjectStore",
    "RefStore",
    "StagingIndex",
    "VcsError",
    "UserInputError",
    "PreconditionError",
    "SafetyError",
    "Blob",
    "Commit",
    "MergeResult",
    "Repository",
    "Status",
    "create_memory_repository",
    "create_sql_repository",
]

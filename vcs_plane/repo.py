import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from vcs_plane.base import ObjectStore, RefStore, StagingIndex
from vcs_plane.checkout import CheckoutEngine
from vcs_plane.config import DEFAULT_BRANCH, database_url, metadata_path
from vcs_plane.errors import AlreadyInitializedError, NotInitializedError
from vcs_plane.graph import CommitGraph
from vcs_plane.impl.memory import (
    MemoryObjectStore,
    MemoryRefStore,
    MemoryRepoData,
    MemoryStagingIndex,
)
from vcs_plane.impl.sql import (
    SqlObjectStore,
    SqlRefStore,
    SqlStagingIndex,
    create_sql_session_maker,
)
from vcs_plane.merge import MergeEngine, MergeResult
from vcs_plane.model import Commit, make_root_commit
from vcs_plane.staging import Stager
from vcs_plane.worktree import WorkingTree

logger = logging.getLogger(__name__)


@dataclass
class Status:
    current_branch: str
    branches: list[str]
    staged: list[str]
    removed: list[str]
    # Reserved sections, not computed
    modified: list[str] = field(default_factory=list)
    untracked: list[str] = field(default_factory=list)


class Repository:
    """
    A single-user repository: object store, branch pointers, staging index and
    the working tree they describe.
    """

    def __init__(
        self,
        objects: ObjectStore,
        refs: RefStore,
        index: StagingIndex,
        work_tree: WorkingTree,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.objects = objects
        self.refs = refs
        self.index = index
        self.tree = work_tree

        self.graph = CommitGraph(objects, refs)
        self.stager = Stager(self.graph, index, work_tree, clock=clock)
        self.checkout = CheckoutEngine(self.graph, index, work_tree)
        self.merger = MergeEngine(
            self.graph, index, work_tree, self.stager, self.checkout
        )

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("Repository(...)")
        else:
            with p.group(4, "Repository(", ")"):
                p.breakable()
                p.text(f"path={self.tree.root},")
                p.breakable()
                p.text(f"branch={self.refs.get_current()!r},")
                p.breakable()
                p.text("index=")
                p.pretty(self.index)
                p.breakable()

    def close(self) -> None:
        self.objects.close()

    def is_initialized(self) -> bool:
        return self.refs.get_current() is not None

    def _require_initialized(self) -> None:
        if not self.is_initialized():
            raise NotInitializedError()

    def init(self) -> str:
        """Create the root commit and the default branch. Returns the root id."""
        if self.is_initialized():
            raise AlreadyInitializedError()
        root_id = self.graph.put_commit(make_root_commit())
        self.refs.set_branch(DEFAULT_BRANCH, root_id)
        self.refs.set_current(DEFAULT_BRANCH)
        logger.info("Initialized repository in %s", self.tree.root)
        return root_id

    def add(self, path: str) -> bool:
        self._require_initialized()
        return self.stager.stage_add(path)

    def rm(self, path: str) -> None:
        self._require_initialized()
        self.stager.stage_remove(path)

    def commit(self, message: str) -> str:
        self._require_initialized()
        return self.stager.commit_index(message)

    def log(self) -> list[tuple[str, Commit]]:
        self._require_initialized()
        return self.graph.log()

    def global_log(self) -> list[tuple[str, Commit]]:
        self._require_initialized()
        return self.graph.global_log()

    def find(self, message: str) -> list[str]:
        self._require_initialized()
        return self.graph.find(message)

    def status(self) -> Status:
        self._require_initialized()
        return Status(
            current_branch=self.graph.current_branch(),
            branches=self.graph.list_branches(),
            staged=sorted(self.index.get_added()),
            removed=sorted(self.index.get_removed()),
        )

    def checkout_file(self, path: str, commit_id: str | None = None) -> None:
        self._require_initialized()
        self.checkout.restore_file(path, commit_id)

    def switch_branch(self, name: str) -> None:
        self._require_initialized()
        self.checkout.switch_branch(name)

    def create_branch(self, name: str) -> None:
        self._require_initialized()
        self.graph.create_branch(name)

    def delete_branch(self, name: str) -> None:
        self._require_initialized()
        self.graph.delete_branch(name)

    def reset(self, commit_id: str) -> str:
        self._require_initialized()
        return self.checkout.reset(commit_id)

    def merge(self, branch: str) -> MergeResult:
        self._require_initialized()
        return self.merger.merge(branch)

    def current_branch(self) -> str:
        return self.graph.current_branch()

    def head_id(self) -> str:
        return self.graph.head_id()

    def resolve_object(self, prefix: str) -> bytes:
        """Content of the object named by a full or abbreviated id."""
        return self.objects.get(self.graph.resolve_object_id(prefix))


def create_memory_repository(
    data: MemoryRepoData,
    work_path: str | Path,
    clock: Callable[[], float] = time.time,
) -> Repository:
    return Repository(
        MemoryObjectStore(data),
        MemoryRefStore(data),
        MemoryStagingIndex(data),
        WorkingTree(work_path),
        clock=clock,
    )


def create_sql_repository(
    work_path: str | Path,
    create: bool = False,
    clock: Callable[[], float] = time.time,
) -> Repository:
    """
    Open the repository stored under work_path's metadata directory.

    With create=True the metadata directory and tables are created when
    missing; otherwise a missing directory means the location was never
    initialized.
    """
    meta_path = metadata_path(work_path)
    if not meta_path.is_dir():
        if not create:
            raise NotInitializedError()
        meta_path.mkdir(parents=True)

    session_maker = create_sql_session_maker(database_url(work_path))
    return Repository(
        SqlObjectStore(session_maker),
        SqlRefStore(session_maker),
        SqlStagingIndex(session_maker),
        WorkingTree(work_path),
        clock=clock,
    )

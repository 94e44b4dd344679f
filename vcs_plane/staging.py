import logging
import time
from typing import Callable

from vcs_plane.base import StagingIndex
from vcs_plane.errors import (
    EmptyMessageError,
    FileNotFoundInTreeError,
    NothingToCommitError,
    NothingToRemoveError,
)
from vcs_plane.graph import CommitGraph
from vcs_plane.model import BLOB, Commit, format_timestamp
from vcs_plane.worktree import WorkingTree

logger = logging.getLogger(__name__)


class Stager:
    """Builds the next commit from the working tree through the staging index."""

    def __init__(
        self,
        graph: CommitGraph,
        index: StagingIndex,
        tree: WorkingTree,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.graph = graph
        self.index = index
        self.tree = tree
        self.clock = clock

    def head_content(self, path: str) -> bytes | None:
        blob_id = self.graph.head_commit().snapshot.get(path)
        if blob_id is None:
            return None
        return self.graph.objects.get(blob_id, kind=BLOB)

    def stage_add(self, path: str) -> bool:
        """
        Stage the working copy of path. Returns False when it matches the head
        version, in which case any earlier staged addition is withdrawn.
        """
        path = self.tree.normalize(path)
        content = self.tree.read(path)
        if content is None:
            raise FileNotFoundInTreeError(path)

        self.index.unmark_removed(path)
        if content == self.head_content(path):
            if self.index.unstage(path):
                logger.debug("Unstaged %s, it matches the head version", path)
            return False

        self.index.stage(path, content)
        logger.debug("Staged %s for addition", path)
        return True

    def stage_remove(self, path: str) -> None:
        path = self.tree.normalize(path)
        unstaged = self.index.unstage(path)
        tracked = path in self.graph.head_commit().snapshot
        if tracked:
            self.index.mark_removed(path)
            self.tree.delete(path)
            logger.debug("Staged %s for removal", path)
        if not unstaged and not tracked:
            raise NothingToRemoveError(path)

    def commit_index(
        self,
        message: str,
        merge_parent: str | None = None,
    ) -> str:
        added = self.index.get_added()
        removed = self.index.get_removed()
        if not added and not removed:
            raise NothingToCommitError()
        if not message or not message.strip():
            raise EmptyMessageError()

        head_id = self.graph.head_id()
        snapshot = dict(self.graph.get_commit(head_id).snapshot)
        for path, content in added.items():
            snapshot[path] = self.graph.objects.put(content, kind=BLOB)
        for path in removed:
            snapshot.pop(path, None)

        commit = Commit(
            message=message,
            timestamp=format_timestamp(self.clock()),
            parent=head_id,
            merge_parent=merge_parent,
            snapshot=snapshot,
        )
        commit_id = self.graph.put_commit(commit)
        self.graph.advance_head(commit_id)
        self.index.clear()
        logger.info(
            "Committed %s (%d added, %d removed): %s",
            commit_id,
            len(added),
            len(removed),
            message,
        )
        return commit_id

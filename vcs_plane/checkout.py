import logging

from vcs_plane.base import StagingIndex
from vcs_plane.errors import (
    BranchNotFoundError,
    CurrentBranchError,
    NotTrackedError,
    UntrackedFileError,
)
from vcs_plane.graph import CommitGraph
from vcs_plane.model import BLOB, Snapshot
from vcs_plane.worktree import WorkingTree

logger = logging.getLogger(__name__)


class CheckoutEngine:
    """Writes recorded snapshots back into the working tree."""

    def __init__(
        self, graph: CommitGraph, index: StagingIndex, tree: WorkingTree
    ) -> None:
        self.graph = graph
        self.index = index
        self.tree = tree

    def restore_file(self, path: str, commit_id: str | None = None) -> None:
        """Overwrite path with its version in commit_id (default: head). Not staged."""
        path = self.tree.normalize(path)
        if commit_id is None:
            commit = self.graph.head_commit()
        else:
            commit = self.graph.get_commit(self.graph.resolve_commit_id(commit_id))
        blob_id = commit.snapshot.get(path)
        if blob_id is None:
            raise NotTrackedError(path)
        self.tree.write(path, self.graph.objects.get(blob_id, kind=BLOB))

    def check_untracked(self, incoming: Snapshot, outgoing: Snapshot) -> None:
        """Refuse to overwrite files the outgoing snapshot does not track."""
        for path in sorted(incoming):
            if path not in outgoing and self.tree.exists(path):
                raise UntrackedFileError(path)

    def materialize(self, outgoing: Snapshot, incoming: Snapshot) -> None:
        """
        Replace the outgoing snapshot's files with the incoming one's.

        Only paths tracked by the outgoing snapshot are deleted, so unrelated
        files in the working tree survive. Callers run check_untracked first.
        """
        for path in outgoing:
            if path not in incoming:
                self.tree.delete(path)
        for path, blob_id in incoming.items():
            self.tree.write(path, self.graph.objects.get(blob_id, kind=BLOB))

    def switch_branch(self, name: str) -> None:
        if not self.graph.has_branch(name):
            raise BranchNotFoundError(name, "No such branch exists.")
        if name == self.graph.current_branch():
            raise CurrentBranchError(name, "No need to checkout the current branch.")

        outgoing = self.graph.head_commit().snapshot
        incoming = self.graph.get_commit(self.graph.resolve(name)).snapshot
        self.check_untracked(incoming, outgoing)

        self.materialize(outgoing, incoming)
        self.graph.refs.set_current(name)
        self.index.clear()
        logger.info("Switched to branch %s", name)

    def reset(self, commit_id: str) -> str:
        """Check out an arbitrary commit and move the current branch to it."""
        target_id = self.graph.resolve_commit_id(commit_id)
        outgoing = self.graph.head_commit().snapshot
        incoming = self.graph.get_commit(target_id).snapshot
        self.check_untracked(incoming, outgoing)

        self.materialize(outgoing, incoming)
        self.graph.advance_head(target_id)
        self.index.clear()
        logger.info("Reset %s to %s", self.graph.current_branch(), target_id)
        return target_id

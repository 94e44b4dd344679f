"""
Three-way merge of another branch into the current one.

The delta between the split point and the other branch head is staged into the
index and committed through the ordinary commit path, recording the other head
as the second parent.
"""

import logging
from dataclasses import dataclass, field

from vcs_plane.base import StagingIndex
from vcs_plane.checkout import CheckoutEngine
from vcs_plane.errors import (
    BranchNotFoundError,
    CurrentBranchError,
    UncommittedChangesError,
)
from vcs_plane.graph import CommitGraph
from vcs_plane.model import BLOB, Snapshot
from vcs_plane.staging import Stager
from vcs_plane.worktree import WorkingTree

logger = logging.getLogger(__name__)

ANCESTOR = "ancestor"
FAST_FORWARD = "fast-forward"
MERGED = "merged"

TAKE = "take"
REMOVE = "remove"
CONFLICT = "conflict"


@dataclass
class MergeResult:
    outcome: str
    commit_id: str | None = None
    conflicts: list[str] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return len(self.conflicts) > 0


def plan_merge(split: Snapshot, current: Snapshot, other: Snapshot) -> dict[str, str]:
    """
    Decide what to do with every path that differs between the two sides.

    Returns path -> TAKE (use other's version), REMOVE, or CONFLICT. Paths
    where the current side already holds the right content are left out.
    """
    plan = {}
    for path in sorted(set(split) | set(current) | set(other)):
        base_id = split.get(path)
        current_id = current.get(path)
        other_id = other.get(path)
        if other_id == current_id or other_id == base_id:
            # Both sides agree, or only the current side changed
            continue
        if current_id == base_id:
            plan[path] = REMOVE if other_id is None else TAKE
        else:
            plan[path] = CONFLICT
    return plan


def conflict_content(current: bytes | None, other: bytes | None) -> bytes:
    return b"".join(
        [
            b"<<<<<<< HEAD\n",
            current or b"",
            b"=======\n",
            other or b"",
            b">>>>>>>\n",
        ]
    )


class MergeEngine:
    def __init__(
        self,
        graph: CommitGraph,
        index: StagingIndex,
        tree: WorkingTree,
        stager: Stager,
        checkout: CheckoutEngine,
    ) -> None:
        self.graph = graph
        self.index = index
        self.tree = tree
        self.stager = stager
        self.checkout = checkout

    def _blob(self, blob_id: str | None) -> bytes | None:
        if blob_id is None:
            return None
        return self.graph.objects.get(blob_id, kind=BLOB)

    def merge(self, branch: str) -> MergeResult:
        if self.index.is_dirty():
            raise UncommittedChangesError()
        if not self.graph.has_branch(branch):
            raise BranchNotFoundError(branch)
        current_branch = self.graph.current_branch()
        if branch == current_branch:
            raise CurrentBranchError(branch, "Cannot merge a branch with itself.")

        current_id = self.graph.head_id()
        other_id = self.graph.resolve(branch)
        split_id = self.graph.split_point(current_id, other_id)
        current = self.graph.get_commit(current_id)
        other = self.graph.get_commit(other_id)
        self.checkout.check_untracked(other.snapshot, current.snapshot)

        if other_id == split_id:
            logger.info("Branch %s is an ancestor of %s", branch, current_branch)
            return MergeResult(ANCESTOR)

        if current_id == split_id:
            self.checkout.switch_branch(branch)
            logger.info("Fast-forwarded %s to %s", current_branch, branch)
            return MergeResult(FAST_FORWARD, commit_id=other_id)

        split = self.graph.get_commit(split_id)
        plan = plan_merge(split.snapshot, current.snapshot, other.snapshot)
        conflicts = []
        for path, action in plan.items():
            if action == TAKE:
                content = self._blob(other.snapshot[path])
                assert content is not None
                self.tree.write(path, content)
                self.index.stage(path, content)
            elif action == REMOVE:
                self.index.mark_removed(path)
                self.tree.delete(path)
            else:
                content = conflict_content(
                    self._blob(current.snapshot.get(path)),
                    self._blob(other.snapshot.get(path)),
                )
                self.tree.write(path, content)
                self.index.stage(path, content)
                conflicts.append(path)

        if conflicts:
            logger.warning("Merge conflict in %s", ", ".join(conflicts))

        commit_id = self.stager.commit_index(
            f"Merged {branch} into {current_branch}.",
            merge_parent=other_id,
        )
        return MergeResult(MERGED, commit_id=commit_id, conflicts=conflicts)

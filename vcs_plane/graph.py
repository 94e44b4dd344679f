"""
Commit graph and branch pointers.

Commits are immutable nodes linked to their parents by id. A branch is a pure
pointer to a head commit; history is recovered by walking parent links.
"""

import logging
import string
from collections import deque
from typing import Iterator

from vcs_plane.base import ObjectStore, RefStore
from vcs_plane.errors import (
    BranchExistsError,
    BranchNotFoundError,
    CommitNotFoundError,
    CurrentBranchError,
    NoMatchingCommitError,
    NotInitializedError,
    ObjectNotFoundError,
)
from vcs_plane.model import COMMIT, Commit

logger = logging.getLogger(__name__)


def _is_hex(value: str) -> bool:
    return bool(value) and all(c in string.hexdigits for c in value)


class CommitGraph:
    def __init__(self, objects: ObjectStore, refs: RefStore) -> None:
        self.objects = objects
        self.refs = refs

    # Objects

    def put_commit(self, commit: Commit) -> str:
        return self.objects.put(commit.serialize(), kind=COMMIT)

    def get_commit(self, commit_id: str) -> Commit:
        try:
            content = self.objects.get(commit_id, kind=COMMIT)
        except ObjectNotFoundError:
            raise CommitNotFoundError(commit_id) from None
        return Commit.deserialize(content)

    def resolve_object_id(self, prefix: str, kind: str | None = None) -> str:
        """Expand an abbreviated id to the single object it names."""
        prefix = prefix.strip().lower()
        if not _is_hex(prefix):
            raise ObjectNotFoundError(prefix)
        matches = self.objects.ids_with_prefix(prefix, kind=kind)
        if len(matches) != 1:
            # Absent and ambiguous prefixes are reported the same way
            logger.debug("Prefix %s matched %d objects", prefix, len(matches))
            raise ObjectNotFoundError(prefix)
        return matches[0]

    def resolve_commit_id(self, prefix: str) -> str:
        try:
            return self.resolve_object_id(prefix, kind=COMMIT)
        except ObjectNotFoundError:
            raise CommitNotFoundError(prefix) from None

    # Refs

    def current_branch(self) -> str:
        current = self.refs.get_current()
        if current is None:
            raise NotInitializedError()
        return current

    def resolve(self, branch: str) -> str:
        head_id = self.refs.get_branch(branch)
        if head_id is None:
            raise BranchNotFoundError(branch)
        return head_id

    def head_id(self) -> str:
        return self.resolve(self.current_branch())

    def head_commit(self) -> Commit:
        return self.get_commit(self.head_id())

    def has_branch(self, name: str) -> bool:
        return self.refs.get_branch(name) is not None

    def list_branches(self) -> list[str]:
        return sorted(self.refs.list_branches(), key=str.lower)

    def create_branch(self, name: str, at_commit: str | None = None) -> None:
        if self.has_branch(name):
            raise BranchExistsError(name)
        head_id = at_commit if at_commit is not None else self.head_id()
        self.refs.set_branch(name, head_id)
        logger.info("Created branch %s at %s", name, head_id)

    def delete_branch(self, name: str) -> None:
        if not self.has_branch(name):
            raise BranchNotFoundError(name)
        if name == self.current_branch():
            raise CurrentBranchError(name, "Cannot remove the current branch.")
        self.refs.delete_branch(name)
        logger.info("Deleted branch %s", name)

    def advance_head(self, commit_id: str) -> None:
        """Move the current branch to commit_id."""
        branch = self.current_branch()
        self.refs.set_branch(branch, commit_id)
        logger.info("Branch %s now at %s", branch, commit_id)

    # History

    def iter_first_parents(self, commit_id: str) -> Iterator[tuple[str, Commit]]:
        next_id: str | None = commit_id
        while next_id is not None:
            commit = self.get_commit(next_id)
            yield next_id, commit
            next_id = commit.parent

    def log(self) -> list[tuple[str, Commit]]:
        """History of the current head, first parents only, newest first."""
        return list(self.iter_first_parents(self.head_id()))

    def global_log(self) -> list[tuple[str, Commit]]:
        return [
            (commit_id, self.get_commit(commit_id))
            for commit_id in self.objects.list_ids(kind=COMMIT)
        ]

    def find(self, message: str) -> list[str]:
        found = [
            commit_id
            for commit_id, commit in self.global_log()
            if commit.message == message
        ]
        if not found:
            raise NoMatchingCommitError(message)
        return found

    def ancestor_distances(self, commit_id: str) -> dict[str, int]:
        """Breadth-first distance from commit_id to each ancestor, itself included."""
        distances: dict[str, int] = {}
        queue = deque([(commit_id, 0)])
        while queue:
            current_id, distance = queue.popleft()
            if current_id in distances:
                continue
            distances[current_id] = distance
            for parent_id in self.get_commit(current_id).parents:
                if parent_id not in distances:
                    queue.append((parent_id, distance + 1))
        return distances

    def split_point(self, current_id: str, other_id: str) -> str:
        """
        Nearest common ancestor of two commits.

        Follows every parent of merge commits, so histories of different depth
        resolve correctly. Among common ancestors the one closest to current_id
        wins.
        """
        current_distances = self.ancestor_distances(current_id)
        common = [
            commit_id
            for commit_id in self.ancestor_distances(other_id)
            if commit_id in current_distances
        ]
        if not common:
            # Every repository shares the root commit, so this means corruption
            raise CommitNotFoundError(other_id)
        return min(common, key=lambda commit_id: current_distances[commit_id])

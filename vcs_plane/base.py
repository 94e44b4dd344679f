from vcs_plane.model import Blob


class ObjectStore:
    """
    Append-only content-addressed storage for blobs and commits.

    Objects are keyed by the digest of their kind and content. Nothing is ever
    updated or deleted.
    """

    def put(self, content: bytes, kind: str = "blob") -> str:
        """Store content if absent and return its id. Storing twice is a no-op."""
        raise NotImplementedError()

    def get(self, object_id: str, kind: str | None = None) -> bytes:
        """Return the content of an object, raising ObjectNotFoundError if absent."""
        raise NotImplementedError()

    def ids_with_prefix(self, prefix: str, kind: str | None = None) -> list[str]:
        """List ids starting with prefix, optionally restricted to one kind."""
        raise NotImplementedError()

    def list_ids(self, kind: str | None = None) -> list[str]:
        """List every stored id, optionally restricted to one kind."""
        raise NotImplementedError()

    def close(self) -> None:
        """Release any resources held by the store."""
        pass


class RefStore:
    """
    Branch table (name -> head commit id) plus the current-branch indicator.
    """

    def get_branch(self, name: str) -> str | None:
        """Return the head commit id of a branch, or None if it does not exist."""
        raise NotImplementedError()

    def set_branch(self, name: str, head_id: str) -> None:
        """Create or move a branch pointer."""
        raise NotImplementedError()

    def delete_branch(self, name: str) -> None:
        """Remove a branch pointer. Commits are left untouched."""
        raise NotImplementedError()

    def list_branches(self) -> list[str]:
        """List all branch names."""
        raise NotImplementedError()

    def get_current(self) -> str | None:
        """Return the current branch name, or None before the repository is initialized."""
        raise NotImplementedError()

    def set_current(self, name: str) -> None:
        """Point the current-branch indicator at another branch."""
        raise NotImplementedError()


class StagingIndex:
    """
    Pending delta for the next commit.

    Holds captured content for paths staged for addition and a set of paths
    staged for removal. A path is never in both sets.
    """

    def get_added(self) -> dict[str, Blob]:
        """Return a copy of the staged additions, path -> captured content."""
        raise NotImplementedError()

    def get_removed(self) -> set[str]:
        """Return a copy of the paths staged for removal."""
        raise NotImplementedError()

    def stage(self, path: str, content: Blob) -> None:
        """Stage content for addition, clearing any removal mark for path."""
        raise NotImplementedError()

    def unstage(self, path: str) -> bool:
        """Withdraw a staged addition. Returns True if one existed."""
        raise NotImplementedError()

    def mark_removed(self, path: str) -> None:
        """Stage path for removal, withdrawing any staged addition for it."""
        raise NotImplementedError()

    def unmark_removed(self, path: str) -> bool:
        """Clear a removal mark. Returns True if one existed."""
        raise NotImplementedError()

    def clear(self) -> None:
        """Empty both sets."""
        raise NotImplementedError()

    def is_dirty(self) -> bool:
        """Check if anything is staged."""
        raise NotImplementedError()

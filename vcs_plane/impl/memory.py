import logging
from typing import Any

from vcs_plane.base import ObjectStore, RefStore, StagingIndex
from vcs_plane.errors import ObjectNotFoundError
from vcs_plane.model import Blob, compute_object_id

logger = logging.getLogger(__name__)

# Shared state of one in-memory repository. Several stores (and several
# Repository instances) can be built over the same dict.
MemoryRepoData = dict[str, Any]


def _section(data: MemoryRepoData, key: str, factory: type) -> Any:
    return data.setdefault(key, factory())


class MemoryObjectStore(ObjectStore):
    def __init__(self, data: MemoryRepoData) -> None:
        # id -> (kind, content)
        self.objects: dict[str, tuple[str, bytes]] = _section(data, "objects", dict)

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("MemoryObjectStore(...)")
        else:
            p.text(f"MemoryObjectStore(objects={len(self.objects)})")

    def put(self, content: bytes, kind: str = "blob") -> str:
        object_id = compute_object_id(kind, content)
        if object_id not in self.objects:
            self.objects[object_id] = (kind, bytes(content))
            logger.debug("Stored %s %s", kind, object_id)
        return object_id

    def get(self, object_id: str, kind: str | None = None) -> bytes:
        entry = self.objects.get(object_id)
        if entry is None or (kind is not None and entry[0] != kind):
            raise ObjectNotFoundError(object_id)
        return entry[1]

    def ids_with_prefix(self, prefix: str, kind: str | None = None) -> list[str]:
        return [
            object_id
            for object_id in self.list_ids(kind)
            if object_id.startswith(prefix)
        ]

    def list_ids(self, kind: str | None = None) -> list[str]:
        return [
            object_id
            for object_id, (object_kind, _) in self.objects.items()
            if kind is None or object_kind == kind
        ]


class MemoryRefStore(RefStore):
    def __init__(self, data: MemoryRepoData) -> None:
        self.data = data
        self.branches: dict[str, str] = _section(data, "branches", dict)

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("MemoryRefStore(...)")
        else:
            with p.group(4, "MemoryRefStore(", ")"):
                p.breakable()
                p.text(f"current={self.get_current()!r},")
                p.breakable()
                p.text("branches=")
                p.pretty(self.branches)
                p.breakable()

    def get_branch(self, name: str) -> str | None:
        return self.branches.get(name)

    def set_branch(self, name: str, head_id: str) -> None:
        self.branches[name] = head_id

    def delete_branch(self, name: str) -> None:
        self.branches.pop(name, None)

    def list_branches(self) -> list[str]:
        return list(self.branches.keys())

    def get_current(self) -> str | None:
        return self.data.get("current")

    def set_current(self, name: str) -> None:
        self.data["current"] = name


class MemoryStagingIndex(StagingIndex):
    def __init__(self, data: MemoryRepoData) -> None:
        self.added: dict[str, Blob] = _section(data, "staged", dict)
        self.removed: set[str] = _section(data, "removed", set)

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("MemoryStagingIndex(...)")
        else:
            with p.group(4, "MemoryStagingIndex(", ")"):
                p.breakable()
                p.text(f"added={sorted(self.added)},")
                p.breakable()
                p.text(f"removed={sorted(self.removed)}")
                p.breakable()

    def get_added(self) -> dict[str, Blob]:
        return dict(self.added)

    def get_removed(self) -> set[str]:
        return set(self.removed)

    def stage(self, path: str, content: Blob) -> None:
        self.removed.discard(path)
        self.added[path] = bytes(content)

    def unstage(self, path: str) -> bool:
        return self.added.pop(path, None) is not None

    def mark_removed(self, path: str) -> None:
        self.added.pop(path, None)
        self.removed.add(path)

    def unmark_removed(self, path: str) -> bool:
        if path in self.removed:
            self.removed.remove(path)
            return True
        return False

    def clear(self) -> None:
        self.added.clear()
        self.removed.clear()

    def is_dirty(self) -> bool:
        return len(self.added) > 0 or len(self.removed) > 0

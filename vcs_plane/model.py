"""
Immutable objects kept in the object store and their encoding.

Blobs are raw bytes. Commits are serialized to canonical JSON; the id of any
object is the SHA-1 of its kind tag and its serialized content, so blobs and
commits share one keyspace without colliding.
"""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from vcs_plane.config import (
    EPOCH_TIMESTAMP,
    INITIAL_COMMIT_MESSAGE,
    SHORT_ID_LENGTH,
    TIMESTAMP_FORMAT,
)

Blob = bytes
# tracked path -> blob id
Snapshot = dict[str, str]

BLOB = "blob"
COMMIT = "commit"
OBJECT_KINDS = (BLOB, COMMIT)


def compute_object_id(kind: str, content: bytes) -> str:
    if kind not in OBJECT_KINDS:
        raise ValueError(f"Unknown object kind: {kind}")
    return hashlib.sha1(kind.encode() + b"\x00" + content).hexdigest()


def format_timestamp(seconds: float) -> str:
    return datetime.fromtimestamp(seconds, tz=timezone.utc).strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class Commit:
    message: str
    timestamp: str
    parent: str | None = None
    merge_parent: str | None = None
    snapshot: Snapshot = field(default_factory=dict)

    @property
    def id(self) -> str:
        # Identity covers the whole record, snapshot and second parent included
        return compute_object_id(COMMIT, self.serialize())

    @property
    def parents(self) -> list[str]:
        return [p for p in (self.parent, self.merge_parent) if p is not None]

    @property
    def is_merge(self) -> bool:
        return self.merge_parent is not None

    def short_parents(self) -> list[str]:
        return [p[:SHORT_ID_LENGTH] for p in self.parents]

    def serialize(self) -> bytes:
        payload = {
            "message": self.message,
            "timestamp": self.timestamp,
            "parent": self.parent,
            "merge_parent": self.merge_parent,
            "snapshot": self.snapshot,
        }
        return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode(
            "utf-8"
        )

    @classmethod
    def deserialize(cls, content: bytes) -> "Commit":
        payload: dict[str, Any] = json.loads(content.decode("utf-8"))
        return cls(
            message=payload["message"],
            timestamp=payload["timestamp"],
            parent=payload.get("parent"),
            merge_parent=payload.get("merge_parent"),
            snapshot=dict(payload.get("snapshot") or {}),
        )

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("Commit(...)")
        else:
            with p.group(4, "Commit(", ")"):
                p.breakable()
                p.text(f"id={self.id[:SHORT_ID_LENGTH]},")
                p.breakable()
                p.text(f"message={self.message!r},")
                p.breakable()
                p.text(f"files={len(self.snapshot)}")
                p.breakable()


def make_root_commit() -> Commit:
    """The deterministic first commit every repository starts from."""
    return Commit(
        message=INITIAL_COMMIT_MESSAGE,
        timestamp=format_timestamp(EPOCH_TIMESTAMP),
        parent=None,
        snapshot={},
    )

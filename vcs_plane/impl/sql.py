import logging
from typing import Any, Callable

from sqlalchemy import (
    LargeBinary,
    ForeignKey,
    String,
    create_engine,
    delete,
    select,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    Session,
    mapped_column,
    sessionmaker,
)

from vcs_plane.base import ObjectStore, RefStore, StagingIndex
from vcs_plane.errors import ObjectNotFoundError
from vcs_plane.model import Blob, compute_object_id

logger = logging.getLogger(__name__)

CURRENT_BRANCH_ROW = 1


class Base(DeclarativeBase):
    pass


class ObjectModel(Base):
    __tablename__ = "objects"
    id: Mapped[str] = mapped_column(String(40), primary_key=True)
    kind: Mapped[str] = mapped_column(String(16), index=True)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)


class BranchModel(Base):
    __tablename__ = "branches"
    name: Mapped[str] = mapped_column(primary_key=True)
    head_id: Mapped[str] = mapped_column(ForeignKey("objects.id"))


class CurrentBranchModel(Base):
    __tablename__ = "current_branch"
    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(nullable=False)


class StagedFileModel(Base):
    __tablename__ = "staged_files"
    path: Mapped[str] = mapped_column(primary_key=True)
    content: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)


class RemovedFileModel(Base):
    __tablename__ = "removed_files"
    path: Mapped[str] = mapped_column(primary_key=True)


class SqlObjectStore(ObjectStore):
    def __init__(self, session_maker: Callable[[], Session]) -> None:
        self.session_maker = session_maker

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        p.text("SqlObjectStore(...)")

    def put(self, content: bytes, kind: str = "blob") -> str:
        object_id = compute_object_id(kind, content)
        with self.session_maker() as session:
            if session.get(ObjectModel, object_id) is None:
                session.add(ObjectModel(id=object_id, kind=kind, content=content))
                session.commit()
                logger.debug("Stored %s %s", kind, object_id)
        return object_id

    def get(self, object_id: str, kind: str | None = None) -> bytes:
        with self.session_maker() as session:
            obj = session.get(ObjectModel, object_id)
            if obj is None or (kind is not None and obj.kind != kind):
                raise ObjectNotFoundError(object_id)
            return obj.content

    def ids_with_prefix(self, prefix: str, kind: str | None = None) -> list[str]:
        stmt = select(ObjectModel.id).where(
            ObjectModel.id.startswith(prefix, autoescape=True)
        )
        if kind is not None:
            stmt = stmt.where(ObjectModel.kind == kind)
        with self.session_maker() as session:
            return list(session.execute(stmt).scalars().all())

    def list_ids(self, kind: str | None = None) -> list[str]:
        stmt = select(ObjectModel.id)
        if kind is not None:
            stmt = stmt.where(ObjectModel.kind == kind)
        with self.session_maker() as session:
            return list(session.execute(stmt).scalars().all())

    def close(self) -> None:
        engine = self.session_maker.kw.get("bind")  # type: ignore[attr-defined]
        if engine is not None:
            engine.dispose()


class SqlRefStore(RefStore):
    def __init__(self, session_maker: Callable[[], Session]) -> None:
        self.session_maker = session_maker

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("SqlRefStore(...)")
        else:
            with p.group(4, "SqlRefStore(", ")"):
                p.breakable()
                p.text(f"current={self.get_current()!r},")
                p.breakable()
                p.text(f"branches={sorted(self.list_branches())}")
                p.breakable()

    def get_branch(self, name: str) -> str | None:
        with self.session_maker() as session:
            branch = session.get(BranchModel, name)
            return branch.head_id if branch else None

    def set_branch(self, name: str, head_id: str) -> None:
        with self.session_maker() as session:
            branch = session.get(BranchModel, name)
            if branch:
                branch.head_id = head_id
            else:
                branch = BranchModel(name=name, head_id=head_id)
            session.add(branch)
            session.commit()

    def delete_branch(self, name: str) -> None:
        with self.session_maker() as session:
            session.execute(delete(BranchModel).where(BranchModel.name == name))
            session.commit()

    def list_branches(self) -> list[str]:
        stmt = select(BranchModel.name)
        with self.session_maker() as session:
            return list(session.execute(stmt).scalars().all())

    def get_current(self) -> str | None:
        with self.session_maker() as session:
            current = session.get(CurrentBranchModel, CURRENT_BRANCH_ROW)
            return current.name if current else None

    def set_current(self, name: str) -> None:
        with self.session_maker() as session:
            current = session.get(CurrentBranchModel, CURRENT_BRANCH_ROW)
            if current:
                current.name = name
            else:
                current = CurrentBranchModel(id=CURRENT_BRANCH_ROW, name=name)
            session.add(current)
            session.commit()


class SqlStagingIndex(StagingIndex):
    def __init__(self, session_maker: Callable[[], Session]) -> None:
        self.session_maker = session_maker

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        if cycle:
            p.text("SqlStagingIndex(...)")
        else:
            with p.group(4, "SqlStagingIndex(", ")"):
                p.breakable()
                p.text(f"added={sorted(self.get_added())},")
                p.breakable()
                p.text(f"removed={sorted(self.get_removed())}")
                p.breakable()

    def get_added(self) -> dict[str, Blob]:
        with self.session_maker() as session:
            rows = session.execute(select(StagedFileModel)).scalars().all()
            return {row.path: row.content for row in rows}

    def get_removed(self) -> set[str]:
        with self.session_maker() as session:
            return set(session.execute(select(RemovedFileModel.path)).scalars().all())

    def stage(self, path: str, content: Blob) -> None:
        with self.session_maker() as session:
            session.execute(
                delete(RemovedFileModel).where(RemovedFileModel.path == path)
            )
            staged = session.get(StagedFileModel, path)
            if staged:
                # Restaging overwrites the previously captured content
                staged.content = content
            else:
                staged = StagedFileModel(path=path, content=content)
            session.add(staged)
            session.commit()

    def unstage(self, path: str) -> bool:
        with self.session_maker() as session:
            result = session.execute(
                delete(StagedFileModel).where(StagedFileModel.path == path)
            )
            session.commit()
            return result.rowcount > 0

    def mark_removed(self, path: str) -> None:
        with self.session_maker() as session:
            session.execute(delete(StagedFileModel).where(StagedFileModel.path == path))
            if session.get(RemovedFileModel, path) is None:
                session.add(RemovedFileModel(path=path))
            session.commit()

    def unmark_removed(self, path: str) -> bool:
        with self.session_maker() as session:
            result = session.execute(
                delete(RemovedFileModel).where(RemovedFileModel.path == path)
            )
            session.commit()
            return result.rowcount > 0

    def clear(self) -> None:
        with self.session_maker() as session:
            session.execute(delete(StagedFileModel))
            session.execute(delete(RemovedFileModel))
            session.commit()

    def is_dirty(self) -> bool:
        with self.session_maker() as session:
            if session.execute(select(StagedFileModel.path)).first() is not None:
                return True
            return session.execute(select(RemovedFileModel.path)).first() is not None


def create_sql_session_maker(db_url: str) -> sessionmaker[Session]:
    engine = create_engine(db_url)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)

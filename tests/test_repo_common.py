from pathlib import Path

import pytest

from vcs_plane.errors import AlreadyInitializedError, NotInitializedError
from vcs_plane.impl.memory import MemoryRepoData
from vcs_plane.repo import Repository, create_memory_repository, create_sql_repository


class FakeClock:
    """Deterministic clock, one minute apart per commit."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        self.now += 60
        return self.now


class RepoProvider:
    def create(self, path: Path) -> Repository:
        raise NotImplementedError()

    def cleanup(self, repo: Repository) -> None:
        pass


class MemoryRepoProvider(RepoProvider):
    def __init__(self):
        self.data: MemoryRepoData = {}
        self.clock = FakeClock()

    def create(self, path: Path) -> Repository:
        # Metadata lives in the shared dict, files in a real directory
        work_path = path / "work"
        work_path.mkdir(parents=True, exist_ok=True)
        return create_memory_repository(self.data, work_path, clock=self.clock)


class SqlRepoProvider(RepoProvider):
    def __init__(self):
        self.clock = FakeClock()

    def create(self, path: Path) -> Repository:
        work_path = path / "work"
        work_path.mkdir(parents=True, exist_ok=True)
        return create_sql_repository(work_path, create=True, clock=self.clock)

    def cleanup(self, repo: Repository) -> None:
        repo.close()


PROVIDERS = [
    MemoryRepoProvider,
    SqlRepoProvider,
]
PROVIDER_IDS = ["memory", "sql"]


def write(repo: Repository, path: str, text: str) -> None:
    file_path = repo.tree.root / path
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(text)


def read(repo: Repository, path: str) -> str | None:
    file_path = repo.tree.root / path
    if not file_path.exists():
        return None
    return file_path.read_text()


def commit_file(repo: Repository, path: str, text: str, message: str) -> str:
    write(repo, path, text)
    repo.add(path)
    return repo.commit(message)


@pytest.mark.parametrize("provider_cls", PROVIDERS, ids=PROVIDER_IDS)
def test_repo_lifecycle(tmp_path: Path, provider_cls: type[RepoProvider]):
    repo_provider = provider_cls()
    repo = repo_provider.create(tmp_path)
    try:
        root_id = repo.init()
        assert repo.current_branch() == "master"
        assert repo.head_id() == root_id

        # Stage a new file
        write(repo, "app.txt", "version 1")
        assert repo.add("app.txt") is True
        assert repo.index.is_dirty() is True, "Index should be dirty after add"

        # Commit
        first = repo.commit("add app")
        assert repo.index.is_dirty() is False, "Index should be clean after commit"
        assert repo.head_id() == first
        assert repo.graph.head_commit().parent == root_id

        # Modify and commit again
        write(repo, "app.txt", "version 2")
        repo.add("app.txt")
        second = repo.commit("update app")
        assert repo.graph.head_commit().parent == first
        assert second != first
    finally:
        repo_provider.cleanup(repo)


@pytest.mark.parametrize("provider_cls", PROVIDERS, ids=PROVIDER_IDS)
def test_repo_persistence(tmp_path: Path, provider_cls: type[RepoProvider]):
    repo_provider = provider_cls()
    repo1 = repo_provider.create(tmp_path)
    try:
        repo1.init()
        write(repo1, "db.txt", "localhost")
        repo1.add("db.txt")
        head = repo1.commit("db config")
        repo1.create_branch("dev")
        write(repo1, "pending.txt", "not yet")
        repo1.add("pending.txt")
    finally:
        repo_provider.cleanup(repo1)

    repo2 = repo_provider.create(tmp_path)
    try:
        assert repo2.head_id() == head, "History should persist across instances"
        assert repo2.graph.list_branches() == ["dev", "master"]
        assert repo2.status().staged == ["pending.txt"], "Index should persist"
    finally:
        repo_provider.cleanup(repo2)


@pytest.mark.parametrize("provider_cls", PROVIDERS, ids=PROVIDER_IDS)
def test_init_twice_is_refused(tmp_path: Path, provider_cls: type[RepoProvider]):
    repo_provider = provider_cls()
    repo = repo_provider.create(tmp_path)
    try:
        repo.init()
        with pytest.raises(AlreadyInitializedError):
            repo.init()
    finally:
        repo_provider.cleanup(repo)


@pytest.mark.parametrize("provider_cls", PROVIDERS, ids=PROVIDER_IDS)
def test_operations_require_init(tmp_path: Path, provider_cls: type[RepoProvider]):
    repo_provider = provider_cls()
    repo = repo_provider.create(tmp_path)
    try:
        write(repo, "a.txt", "a")
        with pytest.raises(NotInitializedError):
            repo.add("a.txt")
        with pytest.raises(NotInitializedError):
            repo.status()
        with pytest.raises(NotInitializedError):
            repo.log()
    finally:
        repo_provider.cleanup(repo)


def test_sql_repository_refuses_missing_location(tmp_path: Path):
    with pytest.raises(NotInitializedError):
        create_sql_repository(tmp_path)
    assert not (tmp_path / ".vcs").exists()


def test_root_commit_is_identical_across_repositories(tmp_path: Path):
    memory_repo = MemoryRepoProvider().create(tmp_path / "a")
    sql_provider = SqlRepoProvider()
    sql_repo = sql_provider.create(tmp_path / "b")
    try:
        assert memory_repo.init() == sql_repo.init()
    finally:
        sql_provider.cleanup(sql_repo)

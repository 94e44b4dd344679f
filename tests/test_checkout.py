import pytest

from vcs_plane.errors import (
    BranchExistsError,
    BranchNotFoundError,
    CommitNotFoundError,
    CurrentBranchError,
    NotTrackedError,
    UntrackedFileError,
)
from vcs_plane.repo import Repository

from tests.test_repo_common import commit_file, read, write


def test_restore_file_from_head(repo: Repository):
    commit_file(repo, "f.txt", "committed", "track f")
    write(repo, "f.txt", "scribble")
    repo.checkout_file("f.txt")
    assert read(repo, "f.txt") == "committed"
    assert repo.status().staged == []


def test_restore_untracked_file(repo: Repository):
    write(repo, "loose.txt", "x")
    with pytest.raises(NotTrackedError):
        repo.checkout_file("loose.txt")


def test_restore_file_from_abbreviated_commit(repo: Repository):
    first = commit_file(repo, "f.txt", "v1", "v1")
    commit_file(repo, "f.txt", "v2", "v2")
    repo.checkout_file("f.txt", commit_id=first[:6])
    assert read(repo, "f.txt") == "v1"
    # Head is unchanged
    assert repo.graph.head_commit().message == "v2"


def test_restore_file_from_unknown_commit(repo: Repository):
    with pytest.raises(CommitNotFoundError):
        repo.checkout_file("f.txt", commit_id="abcdef")


def test_branch_management(repo: Repository):
    repo.create_branch("dev")
    assert repo.graph.resolve("dev") == repo.head_id()
    with pytest.raises(BranchExistsError):
        repo.create_branch("dev")

    with pytest.raises(CurrentBranchError):
        repo.delete_branch("master")
    with pytest.raises(BranchNotFoundError):
        repo.delete_branch("nope")

    repo.delete_branch("dev")
    assert repo.graph.list_branches() == ["master"]


def test_branches_sorted_case_insensitively(repo: Repository):
    for name in ["beta", "Alpha", "gamma"]:
        repo.create_branch(name)
    assert repo.status().branches == ["Alpha", "beta", "gamma", "master"]


def test_switch_branch_swaps_snapshot(repo: Repository):
    commit_file(repo, "shared.txt", "base", "base")
    repo.create_branch("dev")
    commit_file(repo, "main_only.txt", "m", "main work")

    repo.switch_branch("dev")
    assert repo.current_branch() == "dev"
    assert read(repo, "main_only.txt") is None
    assert read(repo, "shared.txt") == "base"

    commit_file(repo, "dev_only.txt", "d", "dev work")
    repo.switch_branch("master")
    assert read(repo, "dev_only.txt") is None
    assert read(repo, "main_only.txt") == "m"


def test_switch_branch_clears_index(repo: Repository):
    repo.create_branch("dev")
    write(repo, "draft.txt", "d")
    repo.add("draft.txt")
    repo.switch_branch("dev")
    assert repo.index.is_dirty() is False


def test_switch_branch_errors(repo: Repository):
    with pytest.raises(BranchNotFoundError) as excinfo:
        repo.switch_branch("nope")
    assert str(excinfo.value) == "No such branch exists."
    with pytest.raises(CurrentBranchError):
        repo.switch_branch("master")


def test_switch_branch_keeps_unrelated_files(repo: Repository):
    repo.create_branch("dev")
    commit_file(repo, "tracked.txt", "t", "tracked")
    write(repo, "notes.txt", "mine")

    repo.switch_branch("dev")
    assert read(repo, "tracked.txt") is None
    assert read(repo, "notes.txt") == "mine"


def test_untracked_file_blocks_switch(repo: Repository):
    repo.create_branch("dev")
    repo.switch_branch("dev")
    commit_file(repo, "f.txt", "from dev", "dev adds f")
    repo.switch_branch("master")

    write(repo, "f.txt", "precious")
    with pytest.raises(UntrackedFileError):
        repo.switch_branch("dev")
    assert read(repo, "f.txt") == "precious"
    assert repo.current_branch() == "master"


def test_reset_moves_current_branch(repo: Repository):
    first = commit_file(repo, "f.txt", "v1", "v1")
    commit_file(repo, "g.txt", "g", "add g")
    write(repo, "h.txt", "h")
    repo.add("h.txt")

    assert repo.reset(first[:8]) == first
    assert repo.head_id() == first
    assert repo.current_branch() == "master"
    assert read(repo, "f.txt") == "v1"
    assert read(repo, "g.txt") is None
    assert repo.index.is_dirty() is False


def test_reset_blocked_by_untracked_file(repo: Repository):
    first = commit_file(repo, "f.txt", "v1", "v1")
    repo.rm("f.txt")
    repo.commit("drop f")
    write(repo, "f.txt", "precious")

    head = repo.head_id()
    with pytest.raises(UntrackedFileError):
        repo.reset(first)
    assert read(repo, "f.txt") == "precious"
    assert repo.head_id() == head


def test_reset_unknown_commit(repo: Repository):
    with pytest.raises(CommitNotFoundError):
        repo.reset("0123456789")

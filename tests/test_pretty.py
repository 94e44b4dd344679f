from IPython.lib.pretty import pretty

from vcs_plane.repo import Repository

from tests.test_repo_common import commit_file, write


def test_repository_pretty_repr(repo: Repository):
    write(repo, "f.txt", "x")
    repo.add("f.txt")
    text = pretty(repo)
    assert text.startswith("Repository(")
    assert "branch='master'" in text
    assert "f.txt" in text


def test_commit_pretty_repr(repo: Repository):
    commit_id = commit_file(repo, "f.txt", "x", "pretty")
    text = pretty(repo.graph.get_commit(commit_id))
    assert commit_id[:7] in text
    assert "message='pretty'" in text
    assert "files=1" in text

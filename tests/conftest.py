from pathlib import Path

import pytest

from tests.test_repo_common import PROVIDERS, PROVIDER_IDS


@pytest.fixture(params=PROVIDERS, ids=PROVIDER_IDS)
def repo(request, tmp_path: Path):
    """An initialized repository on each backend."""
    repo_provider = request.param()
    repository = repo_provider.create(tmp_path)
    repository.init()
    yield repository
    repo_provider.cleanup(repository)

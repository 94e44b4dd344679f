"""Repository-wide constants and small path helpers."""

import os
from pathlib import Path

# Metadata directory created inside the working tree by `init`
METADATA_DIR = ".vcs"

# SQLite database file inside the metadata directory
DATABASE_NAME = "repo.db"

DEFAULT_BRANCH = "master"

# The root commit is identical in every repository
INITIAL_COMMIT_MESSAGE = "initial commit"
EPOCH_TIMESTAMP = 0.0

# Rendered like "Thu Jan 01 00:00:00 1970 +0000"
TIMESTAMP_FORMAT = "%a %b %d %H:%M:%S %Y %z"

# Abbreviated ids shown in merge log lines
SHORT_ID_LENGTH = 7

LOG_LEVEL_ENV = "VCS_PLANE_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def metadata_path(work_path: str | Path) -> Path:
    return Path(work_path) / METADATA_DIR


def database_url(work_path: str | Path) -> str:
    db_path = metadata_path(work_path).absolute() / DATABASE_NAME
    return f"sqlite:///{db_path}"


def log_level_from_env() -> str:
    return os.environ.get(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()

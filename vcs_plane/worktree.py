import logging
from pathlib import Path, PurePosixPath
from typing import Any

from vcs_plane.config import METADATA_DIR
from vcs_plane.errors import UserInputError
from vcs_plane.model import Blob

logger = logging.getLogger(__name__)


class WorkingTree:
    """
    The ordinary files of a repository, outside its metadata directory.

    Paths are handled as relative POSIX strings, the same form they take as
    snapshot keys.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root).absolute()

    def _repr_pretty_(self, p: Any, cycle: bool) -> None:
        p.text(f"WorkingTree(root={self.root})")

    def normalize(self, path: str) -> str:
        if not path or not path.strip():
            raise UserInputError("Incorrect operands.")
        candidate = Path(path)
        if candidate.is_absolute():
            try:
                candidate = candidate.relative_to(self.root)
            except ValueError:
                raise UserInputError(f"Path is outside the repository: {path}")
        parts = PurePosixPath(candidate.as_posix()).parts
        parts = tuple(part for part in parts if part != ".")
        if not parts or ".." in parts:
            raise UserInputError(f"Path is outside the repository: {path}")
        if parts[0] == METADATA_DIR:
            raise UserInputError(f"Path is inside the repository metadata: {path}")
        return "/".join(parts)

    def _abs(self, path: str) -> Path:
        return self.root.joinpath(*path.split("/"))

    def exists(self, path: str) -> bool:
        return self._abs(path).is_file()

    def read(self, path: str) -> Blob | None:
        file_path = self._abs(path)
        if not file_path.is_file():
            return None
        return file_path.read_bytes()

    def write(self, path: str, content: Blob) -> None:
        file_path = self._abs(path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)
        logger.debug("Wrote %s (%d bytes)", path, len(content))

    def delete(self, path: str) -> bool:
        file_path = self._abs(path)
        if not file_path.is_file():
            return False
        file_path.unlink()
        logger.debug("Deleted %s", path)
        self._prune_empty_dirs(file_path.parent)
        return True

    def _prune_empty_dirs(self, directory: Path) -> None:
        # Drop directories left empty by a delete, never the root itself
        while directory != self.root and self.root in directory.parents:
            try:
                directory.rmdir()
            except OSError:
                return
            directory = directory.parent

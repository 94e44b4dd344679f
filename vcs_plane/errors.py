"""
Error types raised by repository operations.

Every error carries the one-line diagnostic shown to the user as ``str(err)``.
Guards raise before any destructive write happens.
"""


class VcsError(Exception):
    """Base exception for all repository errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserInputError(VcsError):
    """Bad or missing operand, unknown command, invalid path."""


class PreconditionError(VcsError):
    """The repository is not in a state that allows the operation."""


class SafetyError(VcsError):
    """The operation would destroy data that is not under version control."""


class NotInitializedError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("Not in an initialized repository directory.")


class AlreadyInitializedError(PreconditionError):
    def __init__(self) -> None:
        super().__init__(
            "A version-control system already exists in the current directory."
        )


class NothingToCommitError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("No changes added to the commit.")


class EmptyMessageError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("Please enter a commit message.")


class NothingToRemoveError(PreconditionError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__("No reason to remove the file.")


class FileNotFoundInTreeError(PreconditionError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__("File does not exist.")


class NotTrackedError(PreconditionError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__("File does not exist in that commit.")


class BranchNotFoundError(PreconditionError):
    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or "A branch with that name does not exist.")


class BranchExistsError(PreconditionError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__("A branch with that name already exists.")


class CurrentBranchError(PreconditionError):
    def __init__(self, name: str, message: str) -> None:
        self.name = name
        super().__init__(message)


class UncommittedChangesError(PreconditionError):
    def __init__(self) -> None:
        super().__init__("You have uncommitted changes.")


class ObjectNotFoundError(PreconditionError):
    """Raised for absent ids and for ambiguous id prefixes."""

    def __init__(self, object_id: str, message: str | None = None) -> None:
        self.object_id = object_id
        super().__init__(message or f"No object with that id exists: {object_id}")


class CommitNotFoundError(ObjectNotFoundError):
    def __init__(self, object_id: str) -> None:
        super().__init__(object_id, "No commit with that id exists.")


class UntrackedFileError(SafetyError):
    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            "There is an untracked file in the way; "
            "delete it, or add and commit it first."
        )


class NoMatchingCommitError(PreconditionError):
    def __init__(self, message: str) -> None:
        self.commit_message = message
        super().__init__("Found no commit with that message.")

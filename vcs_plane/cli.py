import argparse
import logging
import sys
from pathlib import Path
from typing import Callable

from vcs_plane.config import log_level_from_env
from vcs_plane.errors import (
    PreconditionError,
    SafetyError,
    UserInputError,
    VcsError,
)
from vcs_plane.merge import ANCESTOR, FAST_FORWARD
from vcs_plane.model import Commit
from vcs_plane.repo import Repository, create_sql_repository

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USER_INPUT = 2
EXIT_PRECONDITION = 3
EXIT_SAFETY = 4


def print_commit(commit_id: str, commit: Commit) -> None:
    print("===")
    print(f"commit {commit_id}")
    if commit.is_merge:
        print(f"Merge: {' '.join(commit.short_parents())}")
    print(f"Date: {commit.timestamp}")
    print(commit.message)
    print()


def print_section(title: str, items: list[str]) -> None:
    print(f"=== {title} ===")
    for item in items:
        print(item)
    print()


def cmd_init(repo: Repository, operands: list[str]) -> None:
    repo.init()


def cmd_add(repo: Repository, operands: list[str]) -> None:
    repo.add(operands[0])


def cmd_commit(repo: Repository, operands: list[str]) -> None:
    repo.commit(operands[0])


def cmd_rm(repo: Repository, operands: list[str]) -> None:
    repo.rm(operands[0])


def cmd_log(repo: Repository, operands: list[str]) -> None:
    for commit_id, commit in repo.log():
        print_commit(commit_id, commit)


def cmd_global_log(repo: Repository, operands: list[str]) -> None:
    for commit_id, commit in repo.global_log():
        print_commit(commit_id, commit)


def cmd_find(repo: Repository, operands: list[str]) -> None:
    for commit_id in repo.find(operands[0]):
        print(commit_id)


def cmd_status(repo: Repository, operands: list[str]) -> None:
    status = repo.status()
    print_section(
        "Branches",
        [
            f"*{name}" if name == status.current_branch else name
            for name in status.branches
        ],
    )
    print_section("Staged Files", status.staged)
    print_section("Removed Files", status.removed)
    print_section("Modifications Not Staged For Commit", status.modified)
    print_section("Untracked Files", status.untracked)


def cmd_checkout(repo: Repository, operands: list[str]) -> None:
    if len(operands) == 1:
        repo.switch_branch(operands[0])
    elif len(operands) == 2 and operands[0] == "--":
        repo.checkout_file(operands[1])
    elif len(operands) == 3 and operands[1] == "--":
        repo.checkout_file(operands[2], commit_id=operands[0])
    else:
        raise UserInputError("Incorrect operands.")


def cmd_branch(repo: Repository, operands: list[str]) -> None:
    repo.create_branch(operands[0])


def cmd_rm_branch(repo: Repository, operands: list[str]) -> None:
    repo.delete_branch(operands[0])


def cmd_reset(repo: Repository, operands: list[str]) -> None:
    repo.reset(operands[0])


def cmd_merge(repo: Repository, operands: list[str]) -> None:
    result = repo.merge(operands[0])
    if result.outcome == ANCESTOR:
        print("Given branch is an ancestor of the current branch.")
    elif result.outcome == FAST_FORWARD:
        print("Current branch fast-forwarded.")
    elif result.has_conflicts:
        print("Encountered a merge conflict.")


# name -> (handler, accepted operand counts)
COMMANDS: dict[str, tuple[Callable[[Repository, list[str]], None], tuple[int, ...]]] = {
    "init": (cmd_init, (0,)),
    "add": (cmd_add, (1,)),
    "commit": (cmd_commit, (1,)),
    "rm": (cmd_rm, (1,)),
    "log": (cmd_log, (0,)),
    "global-log": (cmd_global_log, (0,)),
    "find": (cmd_find, (1,)),
    "status": (cmd_status, (0,)),
    "checkout": (cmd_checkout, (1, 2, 3)),
    "branch": (cmd_branch, (1,)),
    "rm-branch": (cmd_rm_branch, (1,)),
    "reset": (cmd_reset, (1,)),
    "merge": (cmd_merge, (1,)),
}


def parse_global_options(argv: list[str]) -> tuple[argparse.Namespace, list[str]]:
    """Split leading options from the command and its operands."""
    split = 0
    while split < len(argv) and argv[split].startswith("-"):
        split += 1
        if argv[split - 1] in ("-C", "--directory") and split < len(argv):
            split += 1

    parser = argparse.ArgumentParser(
        prog="vcs-plane", description="Local snapshot version control"
    )
    parser.add_argument(
        "-C",
        "--directory",
        default=".",
        help="Run as if started in this directory (default: current directory)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log progress to stderr"
    )
    args = parser.parse_args(argv[:split])
    return args, argv[split:]


def run(argv: list[str]) -> int:
    args, rest = parse_global_options(argv)
    logging.basicConfig(
        level="DEBUG" if args.verbose else log_level_from_env(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    repo = None
    try:
        if not rest:
            raise UserInputError("Please enter a command.")
        name, operands = rest[0], rest[1:]
        if name not in COMMANDS:
            raise UserInputError("No command with that name exists.")
        handler, arities = COMMANDS[name]
        if len(operands) not in arities:
            raise UserInputError("Incorrect operands.")

        repo = create_sql_repository(Path(args.directory), create=name == "init")
        handler(repo, operands)
    except UserInputError as e:
        print(e.message)
        return EXIT_USER_INPUT
    except PreconditionError as e:
        print(e.message)
        return EXIT_PRECONDITION
    except SafetyError as e:
        print(e.message)
        return EXIT_SAFETY
    except VcsError as e:
        print(e.message)
        return EXIT_PRECONDITION
    finally:
        if repo is not None:
            repo.close()
    return EXIT_OK


def main() -> None:
    sys.exit(run(sys.argv[1:]))


if __name__ == "__main__":
    main()

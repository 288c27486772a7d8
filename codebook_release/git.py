"""Git operations used by the release workflow."""

from __future__ import annotations

import typing as typ

from codebook_release.runner import CommandResult, CommandRunner, run_command

if typ.TYPE_CHECKING:
    from pathlib import Path

_GIT = "git"


def git(
    repo_path: Path,
    *args: str,
    runner: CommandRunner = run_command,
) -> CommandResult:
    """Run ``git`` with ``args`` inside ``repo_path`` on the terminal."""
    return runner(_GIT, args, cwd=repo_path)


def git_query(
    repo_path: Path,
    *args: str,
    runner: CommandRunner = run_command,
) -> CommandResult:
    """Run a read-only ``git`` query and capture its output quietly."""
    return runner(_GIT, args, cwd=repo_path, capture_output=True, quiet=True)


def git_probe(
    repo_path: Path,
    *args: str,
    runner: CommandRunner = run_command,
) -> int:
    """Return the exit code of ``git`` with ``args`` without failing on it."""
    result = runner(_GIT, args, cwd=repo_path, allow_non_zero_exit=True, quiet=True)
    return result.exit_code


def has_staged_changes(repo_path: Path, *, runner: CommandRunner = run_command) -> bool:
    """Return ``True`` when the index differs from ``HEAD``."""
    return git_probe(repo_path, "diff", "--cached", "--quiet", runner=runner) != 0


def branch_exists(
    repo_path: Path, branch: str, *, runner: CommandRunner = run_command
) -> bool:
    """Return ``True`` when ``branch`` resolves to a commit in ``repo_path``."""
    return git_probe(repo_path, "rev-parse", "--verify", branch, runner=runner) == 0


def list_remotes(
    repo_path: Path, *, runner: CommandRunner = run_command
) -> tuple[str, ...]:
    """Return the names of the remotes configured for ``repo_path``."""
    result = git_query(repo_path, "remote", runner=runner)
    return tuple(
        trimmed for line in result.stdout.splitlines() if (trimmed := line.strip())
    )


def porcelain_status(repo_path: Path, *, runner: CommandRunner = run_command) -> str:
    """Return ``git status --porcelain`` output for ``repo_path``."""
    return git_query(repo_path, "status", "--porcelain", runner=runner).stdout


__all__ = [
    "branch_exists",
    "git",
    "git_probe",
    "git_query",
    "has_staged_changes",
    "list_remotes",
    "porcelain_status",
]

"""Precondition checks evaluated before the workflow mutates a repository."""

from __future__ import annotations

import os
import typing as typ

from codebook_release import git as git_ops
from codebook_release.errors import (
    BranchExistsError,
    DirtyTreeError,
    MissingPathError,
    MissingRemoteError,
)
from codebook_release.runner import CommandRunner, run_command

if typ.TYPE_CHECKING:
    from pathlib import Path


def ensure_path_exists(target: Path, label: str) -> None:
    """Raise :class:`MissingPathError` unless ``target`` is accessible."""
    if not os.access(target, os.F_OK):
        raise MissingPathError(label, target)


def ensure_clean_working_tree(
    repo_path: Path,
    label: str,
    *,
    runner: CommandRunner = run_command,
) -> None:
    """Raise :class:`DirtyTreeError` if ``repo_path`` has pending changes."""
    if git_ops.porcelain_status(repo_path, runner=runner).strip():
        raise DirtyTreeError(label)


def ensure_remote_exists(
    repo_path: Path,
    remote: str,
    *,
    runner: CommandRunner = run_command,
) -> None:
    """Raise :class:`MissingRemoteError` unless ``remote`` is configured."""
    if remote not in git_ops.list_remotes(repo_path, runner=runner):
        raise MissingRemoteError(remote, repo_path)


def ensure_branch_absent(
    repo_path: Path,
    branch: str,
    label: str,
    *,
    runner: CommandRunner = run_command,
) -> None:
    """Raise :class:`BranchExistsError` if ``branch`` already exists."""
    if git_ops.branch_exists(repo_path, branch, runner=runner):
        raise BranchExistsError(branch, label)


__all__ = [
    "ensure_branch_absent",
    "ensure_clean_working_tree",
    "ensure_path_exists",
    "ensure_remote_exists",
]

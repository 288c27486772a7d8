"""Error taxonomy for the release workflow.

Every failure is fatal: errors are raised where they are detected and
converted into an exit status by :func:`codebook_release.cli.main`.
"""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class ReleaseError(RuntimeError):
    """Base class for failures that abort a release."""


class UsageError(ReleaseError):
    """Raised when the command line is missing required input."""

    def __init__(self, usage: str) -> None:
        """Store the usage line shown to the operator."""
        super().__init__(f"Usage: {usage}")
        self.usage = usage


class InvalidVersionError(ReleaseError):
    """Raised when the version argument is not ``major.minor.patch``."""

    def __init__(self, raw: str) -> None:
        """Cite the rejected input in the message."""
        super().__init__(
            f"Invalid version {raw!r}. Expected a SemVer string like 0.2.4."
        )
        self.raw = raw


class MissingPathError(ReleaseError):
    """Raised when a required file or directory does not exist."""

    def __init__(self, label: str, path: Path) -> None:
        """Name the missing resource and where it was expected."""
        super().__init__(f"Cannot find {label} at {path}")
        self.label = label
        self.path = path


class DirtyTreeError(ReleaseError):
    """Raised when a repository has uncommitted changes."""

    def __init__(self, label: str) -> None:
        """Describe which repository is dirty."""
        super().__init__(
            f"{label} has uncommitted changes. Please stash or commit them "
            "before running the release."
        )
        self.label = label


class MissingRemoteError(ReleaseError):
    """Raised when a repository lacks a required remote."""

    def __init__(self, remote: str, repo_path: Path) -> None:
        """Name the remote and the repository it was looked up in."""
        super().__init__(
            f"Remote {remote!r} was not found in {repo_path}. "
            "Please add it before running the release."
        )
        self.remote = remote
        self.repo_path = repo_path


class BranchExistsError(ReleaseError):
    """Raised when the release branch already exists downstream."""

    def __init__(self, branch: str, label: str) -> None:
        """Name the clashing branch."""
        super().__init__(
            f"Branch {branch} already exists in {label}. "
            "Please remove or rename it before continuing."
        )
        self.branch = branch


class FieldNotFoundError(ReleaseError):
    """Raised when a version entry cannot be located in a manifest."""

    @classmethod
    def missing_field(cls, file_name: str) -> FieldNotFoundError:
        """Return an error for a flat manifest without a ``version`` line."""
        return cls(f"Could not find a version entry inside {file_name}")

    @classmethod
    def missing_section(cls, section: str, file_name: str) -> FieldNotFoundError:
        """Return an error for a sectioned manifest lacking the entry."""
        return cls(f"Unable to find [{section}] entry in {file_name}")


class NoChangesError(ReleaseError):
    """Raised when a commit step finds nothing staged."""


class SpawnError(ReleaseError):
    """Raised when an external programme cannot be started."""

    def __init__(self, program: str, detail: str) -> None:
        """Summarise the launch failure; the cause is chained by the caller."""
        super().__init__(f"Failed to execute {program!r}: {detail}")
        self.program = program


class CommandFailedError(ReleaseError):
    """Raised when an external programme exits with a failure code."""

    def __init__(
        self,
        program: str,
        args: typ.Sequence[str],
        exit_code: int,
        stderr: str = "",
    ) -> None:
        """Embed the command line, exit code, and captured stderr."""
        rendered = " ".join((program, *args))
        message = f"{rendered} failed with code {exit_code}"
        if stderr:
            message = f"{message}\n{stderr}"
        super().__init__(message)
        self.program = program
        self.args_ = tuple(args)
        self.exit_code = exit_code
        self.stderr = stderr


__all__ = [
    "BranchExistsError",
    "CommandFailedError",
    "DirtyTreeError",
    "FieldNotFoundError",
    "InvalidVersionError",
    "MissingPathError",
    "MissingRemoteError",
    "NoChangesError",
    "ReleaseError",
    "SpawnError",
    "UsageError",
]

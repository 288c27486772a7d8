"""Synchronous execution of external programmes for the release workflow."""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import subprocess
import typing as typ

from codebook_release.errors import CommandFailedError, SpawnError
from codebook_release.utils import normalise_repo_root
from codebook_release.utils.process import log_command_invocation

if typ.TYPE_CHECKING:
    from pathlib import Path

LOGGER = logging.getLogger(__name__)


@dc.dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of a finished external command.

    ``stdout`` and ``stderr`` are only populated when output capture was
    requested; they are stripped of surrounding whitespace.
    """

    exit_code: int
    stdout: str = ""
    stderr: str = ""


class CommandRunner(typ.Protocol):
    """Protocol describing the callable used to execute external commands."""

    def __call__(
        self,
        program: str,
        args: typ.Sequence[str],
        *,
        cwd: Path | None = None,
        capture_output: bool = False,
        allow_non_zero_exit: bool = False,
        quiet: bool = False,
    ) -> CommandResult:
        """Run ``program`` with ``args`` and return its result."""


def _coerce_text(value: str | bytes | None) -> str:
    """Normalise process output to text."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def _spawn(
    command: tuple[str, ...],
    *,
    cwd: Path,
    capture_output: bool,
) -> tuple[int, str, str]:
    """Start ``command`` and wait for it, returning the exit code and output."""
    stream = subprocess.PIPE if capture_output else None
    try:
        process = subprocess.Popen(  # noqa: S603 - command list is fully controlled
            command,
            cwd=str(cwd),
            env=dict(os.environ),
            stdin=subprocess.DEVNULL if capture_output else None,
            stdout=stream,
            stderr=stream,
        )
    except (FileNotFoundError, PermissionError, OSError) as exc:
        raise SpawnError(command[0], str(exc)) from exc
    stdout, stderr = process.communicate()
    return process.returncode, _coerce_text(stdout), _coerce_text(stderr)


def run_command(  # noqa: PLR0913 - mirrors the CommandRunner protocol
    program: str,
    args: typ.Sequence[str],
    *,
    cwd: Path | None = None,
    capture_output: bool = False,
    allow_non_zero_exit: bool = False,
    quiet: bool = False,
) -> CommandResult:
    """Run ``program`` with ``args`` and wait for it to finish.

    Without ``capture_output`` the child shares the terminal so git can
    stream progress and prompt for credentials. The child always inherits
    the caller's environment.

    Raises:
        SpawnError: If the programme cannot be started.
        CommandFailedError: If the programme exits non-zero and
            ``allow_non_zero_exit`` is not set.

    """
    location = normalise_repo_root(cwd)
    command = (program, *args)
    log_command_invocation(LOGGER, command, location, quiet=quiet)
    exit_code, stdout, stderr = _spawn(
        command, cwd=location, capture_output=capture_output
    )
    stdout_text = stdout.strip()
    stderr_text = stderr.strip()
    if exit_code != 0 and not allow_non_zero_exit:
        raise CommandFailedError(program, args, exit_code, stderr_text)
    return CommandResult(exit_code=exit_code, stdout=stdout_text, stderr=stderr_text)


__all__ = ["CommandResult", "CommandRunner", "run_command"]

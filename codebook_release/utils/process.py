"""Process logging helpers for :mod:`codebook_release`."""

from __future__ import annotations

import logging
import shlex
import typing as typ

if typ.TYPE_CHECKING:
    from logging import Logger as LoggerType
    from pathlib import Path as PathType
else:  # pragma: no cover - type-only imports
    LoggerType = typ.Any
    PathType = typ.Any


_LOGGER = logging.getLogger(__name__)


def format_command(command: typ.Sequence[str]) -> str:
    """Return a shell-style representation of ``command`` for logging."""
    if not command:
        _LOGGER.warning(
            "format_command received an empty command sequence; this is likely a bug."
        )
        return ""
    return shlex.join(command)


def log_command_invocation(
    logger: LoggerType,
    command: typ.Sequence[str],
    cwd: PathType,
    *,
    quiet: bool = False,
) -> None:
    """Log ``command`` and the directory it runs in.

    Quiet invocations (status probes and similar) are demoted to ``DEBUG`` so
    they only appear when verbose logging is requested.
    """
    rendered = format_command(command) or "<empty command>"
    level = logging.DEBUG if quiet else logging.INFO
    logger.log(level, "[%s] $ %s", cwd, rendered)


__all__ = ["format_command", "log_command_invocation"]

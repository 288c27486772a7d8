"""Command-line interface for :mod:`codebook_release`."""

from __future__ import annotations

import logging
import os
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from . import config, workflow
from . import version as version_module
from .errors import ReleaseError, UsageError
from .utils import normalise_repo_root

REPO_ROOT_ENV_VAR = "CODEBOOK_RELEASE_REPO_ROOT"
_REPO_ROOT_PARAMETER = Parameter(
    name="repo-root",
    env_var=REPO_ROOT_ENV_VAR,
    help="Path to the Codebook extension repository (defaults to the cwd).",
)
RepoRootOption = typ.Annotated[Path, _REPO_ROOT_PARAMETER]

_REGISTRY_ROOT_PARAMETER = Parameter(
    name="registry-root",
    help="Path to the zed-extensions checkout; overrides the configured path.",
)
RegistryRootOption = typ.Annotated[Path, _REGISTRY_ROOT_PARAMETER]

_VERSION_PARAMETER = Parameter(
    help="Version to release, e.g. 0.2.4 or v0.2.4.",
)
VersionArgument = typ.Annotated[str, _VERSION_PARAMETER]

LOG_LEVEL_ENV_VAR = "CODEBOOK_RELEASE_LOG_LEVEL"
_DEFAULT_LOG_LEVEL = logging.INFO
_LOG_FORMAT = "%(levelname)s: %(message)s"
_CLI_HANDLER_NAME = "codebook-release-cli-handler"
_INTERRUPTED_EXIT_CODE = 130
_CANCELLED_MESSAGE = "\nOperation cancelled by user."
_LOG_LEVEL_ALIASES: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "FATAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

app = App(
    name="codebook-release",
    help="Release the Codebook extension and open a zed-extensions branch.",
    result_action="return_value",
)


def _resolve_log_level(value: str | None) -> int:
    """Return the configured log level or :data:`_DEFAULT_LOG_LEVEL`."""
    if value is None:
        return _DEFAULT_LOG_LEVEL
    candidate = value.strip()
    if not candidate:
        return _DEFAULT_LOG_LEVEL
    level = _LOG_LEVEL_ALIASES.get(candidate.upper())
    if level is None:
        choices = ", ".join(sorted(_LOG_LEVEL_ALIASES))
        message = (
            f"Invalid {LOG_LEVEL_ENV_VAR} value {value!r}; expected one of: {choices}"
        )
        raise SystemExit(message)
    return level


def _configure_logging(stream: typ.TextIO | None = None) -> None:
    """Configure root logging so each release step is visible."""
    level = _resolve_log_level(os.environ.get(LOG_LEVEL_ENV_VAR))
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    handler = next(
        (
            existing
            for existing in root_logger.handlers
            if getattr(existing, "name", "") == _CLI_HANDLER_NAME
        ),
        None,
    )
    if handler is None:
        handler = logging.StreamHandler(stream)
        handler.name = _CLI_HANDLER_NAME
        root_logger.addHandler(handler)
    elif stream is not None:
        handler.stream = stream
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))


@app.default
def release(
    target_version: VersionArgument | None = None,
    *,
    repo_root: RepoRootOption | None = None,
    registry_root: RegistryRootOption | None = None,
) -> str:
    """Bump, tag and push the extension, then prepare the registry branch."""
    if not target_version:
        raise UsageError(workflow.USAGE)
    version_module.normalize_version(target_version)
    resolved = normalise_repo_root(repo_root)
    configuration = config.load_configuration(resolved)
    summary = workflow.run(
        resolved,
        target_version,
        options=workflow.ReleaseOptions(
            configuration=configuration,
            registry_root=registry_root,
        ),
    )
    return summary.render()


def _dispatch_and_print(tokens: typ.Sequence[str]) -> int:
    """Execute the Cyclopts app and print the command result."""
    try:
        result = app(tokens)
    except SystemExit as err:
        code = err.code
        if code is None:
            return 0
        if code == _INTERRUPTED_EXIT_CODE:
            # Cyclopts turns Ctrl-C inside the command into this exit code.
            print(_CANCELLED_MESSAGE, file=sys.stderr)
            return code
        if isinstance(code, int):
            return code
        print(code, file=sys.stderr)
        return 1
    if isinstance(result, int):
        return result
    if result is not None:
        print(result)
    return 0


def main(argv: typ.Sequence[str] | None = None) -> int:
    """Entry point for ``codebook-release`` and ``python -m codebook_release.cli``."""
    try:
        if argv is None:
            argv = sys.argv[1:]
        _configure_logging()
        try:
            return _dispatch_and_print(list(argv))
        except config.ConfigurationError as exc:
            print(f"Configuration error: {exc}", file=sys.stderr)
            return 1
        except UsageError as exc:
            print(exc, file=sys.stderr)
            return 1
        except ReleaseError as exc:
            print(f"\nRelease failed: {exc}", file=sys.stderr)
            return 1
    except KeyboardInterrupt:
        print(_CANCELLED_MESSAGE, file=sys.stderr)
        return _INTERRUPTED_EXIT_CODE
    except Exception as exc:  # noqa: BLE001 - fallback guard for CLI entry point
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover - convenience entry point
    raise SystemExit(main())

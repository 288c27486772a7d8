"""Version normalisation and the names derived from it."""

from __future__ import annotations

import re
import typing as typ

from codebook_release.errors import InvalidVersionError

VERSION_MARKER: typ.Final[str] = "v"
_VERSION_PATTERN: typ.Final[re.Pattern[str]] = re.compile(r"^\d+\.\d+\.\d+$")


def normalize_version(raw: str) -> str:
    """Return ``raw`` without its leading ``v`` after validating the remainder.

    Only plain ``major.minor.patch`` releases are accepted; pre-release and
    build metadata suffixes are rejected.
    """
    version = raw[len(VERSION_MARKER) :] if raw.startswith(VERSION_MARKER) else raw
    if not _VERSION_PATTERN.fullmatch(version):
        raise InvalidVersionError(raw)
    return version


def tag_name(version: str, prefix: str = VERSION_MARKER) -> str:
    """Return the git tag used for ``version``."""
    return f"{prefix}{version}"


def commit_message(version: str, product: str = "Codebook") -> str:
    """Return the commit message recorded in both repositories."""
    return f"{product} {VERSION_MARKER}{version}"


def branch_name(version: str, prefix: str = "codebook-") -> str:
    """Return the registry branch name for ``version``."""
    return f"{prefix}{version}"


__all__ = [
    "VERSION_MARKER",
    "branch_name",
    "commit_message",
    "normalize_version",
    "tag_name",
]

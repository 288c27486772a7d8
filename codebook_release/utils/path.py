"""Path helpers for :mod:`codebook_release`."""

from __future__ import annotations

from pathlib import Path


def normalise_repo_root(value: Path | str | None) -> Path:
    """Return ``value`` as an absolute path, defaulting to the working directory."""
    if value is None:
        return Path.cwd().resolve()
    return Path(value).expanduser().resolve()


__all__ = ["normalise_repo_root"]

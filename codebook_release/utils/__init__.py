"""Utility helpers for the :mod:`codebook_release` package."""

from __future__ import annotations

from .path import normalise_repo_root

__all__ = ["normalise_repo_root"]

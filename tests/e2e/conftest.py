"""Pytest fixtures for end-to-end codebook-release CLI tests."""

from __future__ import annotations

import logging
import shutil
import typing as typ

import pytest

from tests.e2e.helpers.git_helpers import ISOLATED_GIT_ENV
from tests.e2e.helpers.release_topology import (
    ReleaseTopology,
    build_release_topology,
)

if typ.TYPE_CHECKING:  # pragma: no cover
    from pathlib import Path


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Skip end-to-end tests when no ``git`` executable is available."""
    if shutil.which("git") is not None:
        return
    skip = pytest.mark.skip(reason="git executable not available")
    for item in items:
        if "/e2e/" in str(item.path).replace("\\", "/"):
            item.add_marker(skip)


@pytest.fixture
def isolated_git(monkeypatch: pytest.MonkeyPatch) -> None:
    """Hide user and system git configuration from the test repositories."""
    for key, value in ISOLATED_GIT_ENV.items():
        monkeypatch.setenv(key, value)


@pytest.fixture
def release_topology(tmp_path: Path, isolated_git: None) -> ReleaseTopology:
    """Return real extension and registry repositories ready for a release."""
    return build_release_topology(tmp_path.resolve())


@pytest.fixture
def preserved_root_logger() -> typ.Iterator[None]:
    """Undo the handler the CLI installs on the root logger."""
    root_logger = logging.getLogger()
    prior_handlers = list(root_logger.handlers)
    prior_level = root_logger.level
    try:
        yield
    finally:
        for handler in list(root_logger.handlers):
            if handler not in prior_handlers:
                root_logger.removeHandler(handler)
        root_logger.setLevel(prior_level)

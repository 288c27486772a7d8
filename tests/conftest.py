"""Pytest configuration for the codebook-release test-suite."""

from __future__ import annotations

import os
import typing as typ

import pytest

from tests.helpers.fake_runner import FakeRunner
from tests.helpers.release_layout import (
    ReleaseRepos,
    make_release_repos,
    script_happy_path,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture(autouse=True)
def _restore_repo_root_env() -> typ.Iterator[None]:
    """Ensure tests do not leak ``CODEBOOK_RELEASE_REPO_ROOT`` between runs."""
    from codebook_release.cli import REPO_ROOT_ENV_VAR

    original = os.environ.get(REPO_ROOT_ENV_VAR)
    try:
        yield
    finally:
        if original is None:
            os.environ.pop(REPO_ROOT_ENV_VAR, None)
        else:
            os.environ[REPO_ROOT_ENV_VAR] = original


@pytest.fixture
def release_repos(tmp_path: Path) -> ReleaseRepos:
    """Return an extension checkout with a sibling registry checkout."""
    return make_release_repos(tmp_path.resolve())


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Return a fresh recording runner."""
    return FakeRunner()


@pytest.fixture
def happy_runner(fake_runner: FakeRunner, release_repos: ReleaseRepos) -> FakeRunner:
    """Return a runner scripted for a successful ``0.2.4`` release."""
    return script_happy_path(fake_runner, release_repos)

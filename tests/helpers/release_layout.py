"""Builders for the two-repository layout used across the test-suite."""

from __future__ import annotations

import dataclasses as dc
import textwrap
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tests.helpers.fake_runner import FakeRunner

EXTENSION_MANIFEST = textwrap.dedent(
    """\
    id = "codebook"
    name = "Codebook Spell Checker"
    description = "A code-aware spell checker for Zed."
    version = "0.2.3"
    schema_version = 1
    authors = ["Codebook Maintainers"]
    repository = "https://github.com/blopker/codebook"

    [language_servers.codebook]
    name = "Codebook LSP"
    version = "1.0.0"
    languages = ["Rust", "Python", "TypeScript"]
    """
)

REGISTRY_MANIFEST = textwrap.dedent(
    """\
    [catppuccin]
    submodule = "extensions/catppuccin"
    version = "0.3.0"

    [codebook]
    submodule = "extensions/codebook"
    version = "0.2.3"

    [csharp]
    submodule = "extensions/csharp"
    version = "0.1.0"
    """
)


@dc.dataclass(frozen=True, slots=True)
class ReleaseRepos:
    """Extension checkout and its sibling registry checkout."""

    extension: Path
    registry: Path

    @property
    def extension_manifest(self) -> Path:
        return self.extension / "extension.toml"

    @property
    def registry_manifest(self) -> Path:
        return self.registry / "extensions.toml"


def make_release_repos(root: Path) -> ReleaseRepos:
    """Lay out ``codebook`` and ``zed-extensions`` side by side under ``root``."""
    extension = root / "codebook"
    registry = root / "zed-extensions"
    extension.mkdir()
    registry.mkdir()
    (extension / "extension.toml").write_text(EXTENSION_MANIFEST, encoding="utf-8")
    (registry / "extensions.toml").write_text(REGISTRY_MANIFEST, encoding="utf-8")
    return ReleaseRepos(extension=extension, registry=registry)


def script_happy_path(
    runner: FakeRunner, repos: ReleaseRepos, version: str = "0.2.4"
) -> FakeRunner:
    """Script ``runner`` so a release of ``version`` completes."""
    runner.respond(repos.extension, "diff", "--cached", "--quiet", exit_code=1)
    runner.respond(repos.registry, "status", "--porcelain", stdout="")
    runner.respond(repos.registry, "remote", stdout="origin\nupstream")
    runner.respond(
        repos.registry, "rev-parse", "--verify", f"codebook-{version}", exit_code=1
    )
    runner.respond(repos.registry, "diff", "--cached", "--quiet", exit_code=1)
    return runner


def expected_invocations(
    repos: ReleaseRepos, version: str = "0.2.4"
) -> list[tuple[Path, tuple[str, ...]]]:
    """Return every ``(cwd, git args)`` pair of a complete release."""
    message = f"Codebook v{version}"
    tag = f"v{version}"
    branch = f"codebook-{version}"
    extension = repos.extension
    registry = repos.registry
    return [
        (extension, ("add", "-A")),
        (extension, ("diff", "--cached", "--quiet")),
        (extension, ("commit", "-m", message)),
        (extension, ("tag", tag)),
        (extension, ("push", "origin", "HEAD")),
        (extension, ("push", "origin", tag)),
        (registry, ("status", "--porcelain")),
        (registry, ("remote",)),
        (registry, ("checkout", "main")),
        (registry, ("fetch", "upstream")),
        (registry, ("pull", "upstream", "main")),
        (registry, ("rev-parse", "--verify", branch)),
        (registry, ("checkout", "-b", branch)),
        (
            registry,
            ("submodule", "update", "--remote", "--merge", "extensions/codebook"),
        ),
        (registry, ("add", "extensions/codebook", "extensions.toml")),
        (registry, ("diff", "--cached", "--quiet")),
        (registry, ("commit", "-m", message)),
        (registry, ("push", "-u", "origin", branch)),
    ]

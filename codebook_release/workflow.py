"""Release orchestration across the extension and registry repositories.

The workflow is strictly sequential. The first failing step raises and
nothing already done is rolled back: a tag pushed from the extension
repository stays pushed if the registry half fails afterwards.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import typing as typ

from codebook_release import checks, manifests
from codebook_release import git as git_ops
from codebook_release import version as version_module
from codebook_release.config import ReleaseConfig
from codebook_release.errors import NoChangesError, UsageError
from codebook_release.runner import CommandRunner, run_command
from codebook_release.utils import normalise_repo_root

if typ.TYPE_CHECKING:
    from pathlib import Path

LOGGER = logging.getLogger(__name__)

USAGE = "codebook-release <version>"
REGISTRY_LABEL = "zed-extensions"


@dc.dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """Runtime configuration for a release run.

    Parameters
    ----------
    configuration:
        Names and paths used by the flow. Defaults are used when ``None``.
    registry_root:
        Explicit registry checkout, overriding ``configuration.registry_path``.
    command_runner:
        Callable used to execute external commands. Primarily intended for
        tests and dependency injection.

    """

    configuration: ReleaseConfig | None = None
    registry_root: Path | None = None
    command_runner: CommandRunner | None = None


@dc.dataclass(frozen=True, slots=True)
class ReleaseSummary:
    """What a completed release produced."""

    version: str
    tag: str
    branch: str
    previous_version: str
    registry_updated: bool
    extension_manifest: str = "extension.toml"

    def render(self) -> str:
        """Return the closing message shown to the operator."""
        lines = [
            "Release automation complete!",
            (
                f"Tagged {self.tag} "
                f"({self.extension_manifest} was {self.previous_version})."
            ),
        ]
        if not self.registry_updated:
            lines.append("The registry manifest already listed this version.")
        lines.append(
            f"Pushed branch {self.branch} in {REGISTRY_LABEL}. "
            "Create a PR for it when ready."
        )
        return "\n".join(lines)


@dc.dataclass(frozen=True, slots=True)
class _ReleaseContext:
    """Resolved inputs shared by every workflow step."""

    repo_root: Path
    registry_root: Path
    version: str
    configuration: ReleaseConfig
    runner: CommandRunner

    @property
    def tag(self) -> str:
        return version_module.tag_name(self.version, self.configuration.tag_prefix)

    @property
    def branch(self) -> str:
        return version_module.branch_name(
            self.version, self.configuration.branch_prefix
        )

    @property
    def commit_message(self) -> str:
        return version_module.commit_message(
            self.version, self.configuration.commit_prefix
        )


def _commit_staged(
    context: _ReleaseContext, repo_path: Path, empty_message: str
) -> None:
    """Commit the index of ``repo_path`` or abort when nothing is staged."""
    if not git_ops.has_staged_changes(repo_path, runner=context.runner):
        raise NoChangesError(empty_message)
    git_ops.git(
        repo_path, "commit", "-m", context.commit_message, runner=context.runner
    )


def _release_extension(context: _ReleaseContext, manifest_path: Path) -> str:
    """Bump, commit, tag and push the extension repository."""
    previous = manifests.update_single_field(manifest_path, context.version)
    repo = context.repo_root
    remote = context.configuration.push_remote
    git_ops.git(repo, "add", "-A", runner=context.runner)
    _commit_staged(
        context, repo, "No changes staged in extension repo; aborting release."
    )
    git_ops.git(repo, "tag", context.tag, runner=context.runner)
    git_ops.git(repo, "push", remote, "HEAD", runner=context.runner)
    git_ops.git(repo, "push", remote, context.tag, runner=context.runner)
    return previous


def _sync_registry(context: _ReleaseContext) -> None:
    """Bring the registry checkout up to date with its upstream."""
    registry = context.registry_root
    configuration = context.configuration
    checks.ensure_clean_working_tree(
        registry, f"The {REGISTRY_LABEL} repository", runner=context.runner
    )
    checks.ensure_remote_exists(
        registry, configuration.upstream_remote, runner=context.runner
    )
    git_ops.git(registry, "checkout", configuration.base_branch, runner=context.runner)
    git_ops.git(registry, "fetch", configuration.upstream_remote, runner=context.runner)
    git_ops.git(
        registry,
        "pull",
        configuration.upstream_remote,
        configuration.base_branch,
        runner=context.runner,
    )


def _publish_registry_branch(context: _ReleaseContext) -> bool:
    """Create the release branch in the registry and push it."""
    registry = context.registry_root
    configuration = context.configuration
    checks.ensure_branch_absent(
        registry, context.branch, REGISTRY_LABEL, runner=context.runner
    )
    git_ops.git(registry, "checkout", "-b", context.branch, runner=context.runner)
    git_ops.git(
        registry,
        "submodule",
        "update",
        "--remote",
        "--merge",
        configuration.submodule_path,
        runner=context.runner,
    )
    updated = manifests.update_section_field(
        registry / configuration.registry_manifest,
        configuration.registry_section,
        context.version,
    )
    git_ops.git(
        registry,
        "add",
        configuration.submodule_path,
        configuration.registry_manifest,
        runner=context.runner,
    )
    _commit_staged(
        context,
        registry,
        f"No staged changes in {REGISTRY_LABEL} "
        f"(expected submodule + {configuration.registry_manifest} updates).",
    )
    git_ops.git(
        registry,
        "push",
        "-u",
        configuration.push_remote,
        context.branch,
        runner=context.runner,
    )
    return updated


def run(
    repo_root: Path | str | None,
    raw_version: str | None,
    *,
    options: ReleaseOptions | None = None,
) -> ReleaseSummary:
    """Release ``raw_version`` of the extension found at ``repo_root``."""
    if not raw_version:
        raise UsageError(USAGE)
    active = ReleaseOptions() if options is None else options
    configuration = (
        ReleaseConfig() if active.configuration is None else active.configuration
    )
    root = normalise_repo_root(repo_root)
    version = version_module.normalize_version(raw_version)
    context = _ReleaseContext(
        repo_root=root,
        registry_root=(
            configuration.registry_root(root)
            if active.registry_root is None
            else normalise_repo_root(active.registry_root)
        ),
        version=version,
        configuration=configuration,
        runner=run_command if active.command_runner is None else active.command_runner,
    )
    LOGGER.info("Starting release for %s", context.commit_message)

    manifest_path = root / configuration.extension_manifest
    checks.ensure_path_exists(manifest_path, configuration.extension_manifest)
    checks.ensure_path_exists(
        context.registry_root,
        f"the {REGISTRY_LABEL} repository ({configuration.registry_path})",
    )

    previous = _release_extension(context, manifest_path)

    LOGGER.info("Switching to %s workflow", REGISTRY_LABEL)
    _sync_registry(context)
    updated = _publish_registry_branch(context)

    return ReleaseSummary(
        version=version,
        tag=context.tag,
        branch=context.branch,
        previous_version=previous,
        registry_updated=updated,
        extension_manifest=configuration.extension_manifest,
    )


__all__ = ["USAGE", "ReleaseOptions", "ReleaseSummary", "run"]

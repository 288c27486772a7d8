"""Configuration loading for :mod:`codebook_release`."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from collections import abc as cabc

from cyclopts import CycloptsError
from cyclopts.config import Toml

from codebook_release.utils import normalise_repo_root

if typ.TYPE_CHECKING:  # pragma: no cover - type checking only
    from pathlib import Path

CONFIG_FILENAME = "codebook-release.toml"

CONFIG_ROOT_TOML_KEYS: typ.Final[frozenset[str]] = frozenset({"release"})
RELEASE_TOML_KEYS: typ.Final[frozenset[str]] = frozenset(
    {
        "extension_manifest",
        "registry_path",
        "registry_manifest",
        "registry_section",
        "submodule_path",
        "push_remote",
        "upstream_remote",
        "base_branch",
        "branch_prefix",
        "tag_prefix",
        "commit_prefix",
    }
)


class ConfigurationError(RuntimeError):
    """Raised when ``codebook-release.toml`` is invalid."""


@dc.dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Names and locations used by the two-repository release flow."""

    extension_manifest: str = "extension.toml"
    registry_path: str = "../zed-extensions"
    registry_manifest: str = "extensions.toml"
    registry_section: str = "codebook"
    submodule_path: str = "extensions/codebook"
    push_remote: str = "origin"
    upstream_remote: str = "upstream"
    base_branch: str = "main"
    branch_prefix: str = "codebook-"
    tag_prefix: str = "v"
    commit_prefix: str = "Codebook"

    @classmethod
    def from_mapping(cls, mapping: cabc.Mapping[str, typ.Any] | None) -> ReleaseConfig:
        """Create a :class:`ReleaseConfig` from the ``[release]`` table."""
        if mapping is None:
            return cls()
        _validate_mapping_keys(mapping, set(RELEASE_TOML_KEYS), "release")
        overrides = {
            key: _non_empty_string(value, f"release.{key}")
            for key, value in mapping.items()
        }
        return cls(**overrides)

    def registry_root(self, repo_root: Path) -> Path:
        """Return the registry checkout location relative to ``repo_root``."""
        return (repo_root / self.registry_path).resolve()


def _validate_mapping_keys(
    mapping: cabc.Mapping[str, typ.Any],
    allowed_keys: set[str],
    context: str,
) -> None:
    """Raise :class:`ConfigurationError` if ``mapping`` has unknown keys."""
    unknown = set(mapping) - allowed_keys
    if unknown:
        joined = ", ".join(sorted(unknown))
        if context.endswith(" section"):
            message = f"Unknown {context}(s): {joined}."
        else:
            message = f"Unknown {context} option(s): {joined}."
        raise ConfigurationError(message)


def _non_empty_string(value: object, field_name: str) -> str:
    if not isinstance(value, str):
        message = f"{field_name} must be a string; received {type(value).__name__}."
        raise ConfigurationError(message)
    if not value.strip():
        message = f"{field_name} must not be empty."
        raise ConfigurationError(message)
    return value


def _optional_mapping(
    value: object, field_name: str
) -> cabc.Mapping[str, typ.Any] | None:
    """Ensure ``value`` is a mapping if provided."""
    if value is None:
        return None
    if isinstance(value, cabc.Mapping):
        return typ.cast("cabc.Mapping[str, typ.Any]", value)
    message = f"{field_name} must be a TOML table; received {type(value).__name__}."
    raise ConfigurationError(message)


def build_loader(repo_root: Path) -> Toml:
    """Return a Cyclopts loader for ``codebook-release.toml`` in ``repo_root``."""
    resolved = normalise_repo_root(repo_root)
    return Toml(
        path=resolved / CONFIG_FILENAME,
        must_exist=False,
        search_parents=False,
        allow_unknown=True,
    )


def load_from_loader(loader: Toml) -> ReleaseConfig:
    """Load and validate configuration using ``loader``."""
    try:
        raw = loader.config
    except (CycloptsError, ValueError) as exc:
        raise ConfigurationError(str(exc)) from exc
    if not isinstance(raw, cabc.Mapping):
        message = "Configuration root must be a TOML table."
        raise ConfigurationError(message)
    _validate_mapping_keys(raw, set(CONFIG_ROOT_TOML_KEYS), "configuration section")
    return ReleaseConfig.from_mapping(_optional_mapping(raw.get("release"), "release"))


def load_configuration(repo_root: Path) -> ReleaseConfig:
    """Load configuration for ``repo_root``, falling back to defaults."""
    return load_from_loader(build_loader(repo_root))


__all__ = [
    "CONFIG_FILENAME",
    "ConfigurationError",
    "ReleaseConfig",
    "build_loader",
    "load_configuration",
    "load_from_loader",
]

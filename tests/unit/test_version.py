"""Tests for :mod:`codebook_release.version`."""

from __future__ import annotations

import pytest

from codebook_release import version
from codebook_release.errors import InvalidVersionError


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("0.2.4", "0.2.4"),
        ("v0.2.4", "0.2.4"),
        ("10.20.30", "10.20.30"),
        ("v1.0.0", "1.0.0"),
    ],
)
def test_normalize_version_strips_marker(raw: str, expected: str) -> None:
    """A leading ``v`` is dropped and the numeric form kept verbatim."""
    assert version.normalize_version(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "v",
        "0.2",
        "0.2.4.1",
        "vv0.2.4",
        "V0.2.4",
        "0.2.4-beta.1",
        "0.2.4+build",
        "0..4",
        "a.b.c",
        " 0.2.4",
        "0.2.4\n",
    ],
)
def test_normalize_version_rejects_malformed_input(raw: str) -> None:
    """Anything other than three dot-separated digit groups is refused."""
    with pytest.raises(InvalidVersionError) as excinfo:
        version.normalize_version(raw)

    assert excinfo.value.raw == raw
    assert repr(raw) in str(excinfo.value)


def test_derived_names_follow_release_conventions() -> None:
    """Tag, commit message and branch re-add their prefixes."""
    normalised = version.normalize_version("v0.2.4")

    assert version.tag_name(normalised) == "v0.2.4"
    assert version.commit_message(normalised) == "Codebook v0.2.4"
    assert version.branch_name(normalised) == "codebook-0.2.4"


def test_derived_names_accept_custom_prefixes() -> None:
    """Configured prefixes replace the defaults."""
    assert version.tag_name("1.2.3", "release-") == "release-1.2.3"
    assert version.commit_message("1.2.3", "Spellcheck") == "Spellcheck v1.2.3"
    assert version.branch_name("1.2.3", "spell/") == "spell/1.2.3"

"""Plain-text version patchers for the extension and registry manifests.

Both manifests are edited with line-level pattern matching rather than a
TOML round-trip so that every untouched byte of the file survives the
release commit.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
import typing as typ
from contextlib import suppress
from pathlib import Path

from codebook_release.errors import FieldNotFoundError

LOGGER = logging.getLogger(__name__)

_FLAT_VERSION_PATTERN: typ.Final[re.Pattern[str]] = re.compile(
    r'^version\s*=\s*"([^"]+)"', re.MULTILINE
)
_LINE_BREAK: typ.Final[re.Pattern[str]] = re.compile(r"\r?\n")


def _display_name(file_path: Path) -> str:
    return f"{file_path.parent.name}/{file_path.name}"


def update_single_field(file_path: Path, version: str) -> str:
    """Set the top-level ``version = "..."`` line of ``file_path``.

    Returns the version recorded before the update. The file is left
    untouched when it already carries ``version``.
    """
    # Decoded from bytes so CRLF line endings survive the rewrite.
    raw = file_path.read_bytes().decode("utf-8")
    match = _FLAT_VERSION_PATTERN.search(raw)
    if match is None:
        raise FieldNotFoundError.missing_field(file_path.name)

    current = match.group(1)
    if current == version:
        LOGGER.info(
            "%s is already set to version %s, keeping existing value.",
            file_path.name,
            version,
        )
        return current

    updated = f'{raw[: match.start()]}version = "{version}"{raw[match.end() :]}'
    write_atomic_text(file_path, updated)
    LOGGER.info(
        "Updated %s version from %s to %s.", file_path.name, current, version
    )
    return current


def _is_section_header(line: str) -> bool:
    return line.startswith("[") and line.endswith("]")


def _quoted_value(line: str) -> str | None:
    """Return the value to the right of the first ``=`` without quotes."""
    _key, separator, value = line.partition("=")
    if not separator:
        return None
    return value.strip().replace('"', "")


def update_section_field(
    file_path: Path,
    section: str,
    version: str,
    *,
    field: str = "version",
) -> bool:
    """Set ``field`` inside the ``[section]`` table of ``file_path``.

    Only the first line starting with ``field`` after the ``[section]``
    header is considered; keys with the same name in other tables are never
    touched. Returns ``True`` when the file was rewritten.

    Raises:
        FieldNotFoundError: If the whole file is scanned without finding the
            field inside ``[section]``.

    """
    raw = file_path.read_text(encoding="utf-8")
    lines = _LINE_BREAK.split(raw)
    header = f"[{section}]"
    inside_section = False

    for index, line in enumerate(lines):
        if _is_section_header(line):
            inside_section = line.strip() == header
            continue
        if not inside_section or not line.strip().startswith(field):
            continue

        if _quoted_value(line) == version:
            LOGGER.info(
                "%s already lists version %s for %s.",
                _display_name(file_path),
                version,
                section,
            )
            return False

        lines[index] = f'{field} = "{version}"'
        write_atomic_text(file_path, "\n".join(lines))
        LOGGER.info(
            "Updated %s entry for %s to %s.",
            _display_name(file_path),
            section,
            version,
        )
        return True

    raise FieldNotFoundError.missing_section(section, file_path.name)


def write_atomic_text(file_path: Path, content: str) -> None:
    """Replace ``file_path`` with ``content`` in one step, keeping its mode."""
    existing_mode: int | None = None
    with suppress(FileNotFoundError):
        existing_mode = file_path.stat().st_mode
    fd, tmp_path = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f"{file_path.name}.",
        text=True,
    )
    try:
        if existing_mode is not None:
            with suppress(AttributeError):
                os.fchmod(fd, existing_mode)  # not available on Windows
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
        Path(tmp_path).replace(file_path)
    finally:
        with suppress(FileNotFoundError):
            Path(tmp_path).unlink()


__all__ = ["update_section_field", "update_single_field", "write_atomic_text"]

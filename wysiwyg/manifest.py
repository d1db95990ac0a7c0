"""Manifest store.

Reads and parses the project manifest, detects when it went stale on disk and
splices dependency lines into its raw text. Edits never re-serialize the
parsed document: everything outside the inserted lines is written back
byte-for-byte.
"""

import logging
import os
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Sequence

from pydantic import BaseModel, ConfigDict

from wysiwyg.errors import IoError, NotFoundError, ParseError

logger = logging.getLogger(__name__)

MANIFEST_FILE_NAME = "Cargo.toml"
DEPENDENCY_SECTION = "dependencies"
DEPENDENCY_MARKER = "[dependencies]"


class Manifest(BaseModel):
    """Snapshot of the manifest as of its last read.

    `modified` is the file's `st_mtime_ns` when `content` was read.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    modified: int
    content: Dict[str, Any]

    @property
    def package_name(self) -> str | None:
        package = self.content.get("package", {})
        if isinstance(package, dict):
            return package.get("name")
        return None


def manifest_path(root_path: Path, file_name: str = MANIFEST_FILE_NAME) -> Path:
    return Path(root_path) / file_name


def _stat_mtime(path: Path) -> int:
    try:
        return path.stat().st_mtime_ns
    except OSError as e:
        raise IoError(f"Failed to read metadata of {str(path)!r}: {e}", path) from e


def _read_text(path: Path) -> str:
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise ParseError(f"{str(path)!r} is not valid UTF-8: {e}", path) from e
    except OSError as e:
        raise IoError(f"Failed to read {str(path)!r}: {e}", path) from e


def _write_text(path: Path, text: str) -> None:
    try:
        # newline="" keeps the original line terminators untouched
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(text)
    except OSError as e:
        logger.exception(f"Failed to write manifest {path}")
        raise IoError(f"Failed to write {str(path)!r}: {e}", path) from e


def load_file(path: Path) -> Manifest:
    """Read and parse the manifest file at `path`.

    Raises:
        IoError: If the file or its metadata cannot be read
        ParseError: If the content is not a valid document
    """
    path = Path(path)
    modified = _stat_mtime(path)
    text = _read_text(path)
    try:
        content = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ParseError(f"Failed to parse {str(path)!r}: {e}", path) from e

    logger.debug(f"Loaded manifest {path} (modified={modified})")
    return Manifest(path=path, modified=modified, content=content)


def load(root_path: Path, file_name: str = MANIFEST_FILE_NAME) -> Manifest:
    """Load the manifest found at its conventional path under `root_path`."""
    return load_file(manifest_path(root_path, file_name))


def reload_if_stale(manifest: Manifest) -> Manifest:
    """Return a fresh manifest if the file changed since it was last read.

    Only the file metadata is read when the stored timestamp still matches,
    and `manifest` itself is returned. Writes landing within the same
    timestamp granularity as the last read go unnoticed.
    """
    modified = _stat_mtime(manifest.path)
    if modified == manifest.modified:
        return manifest

    logger.info(f"Manifest {manifest.path} changed on disk, reloading")
    return load_file(manifest.path)


def synthesize(source_file: Path, root_path: Path, file_name: str = MANIFEST_FILE_NAME) -> Manifest:
    """Build the in-memory manifest of a single file project.

    Nothing is read besides the source file metadata; the package name is the
    file's base name.
    """
    source_file = Path(source_file)
    modified = _stat_mtime(source_file)
    name = source_file.stem or "Undefined"
    return Manifest(
        path=manifest_path(root_path, file_name),
        modified=modified,
        content={"package": {"name": name}},
    )


def has_dependency(manifest: Manifest, name: str) -> bool:
    """Check whether `name` is declared in the dependency section.

    A manifest without a dependency section simply has no dependencies.
    """
    dependencies = manifest.content.get(DEPENDENCY_SECTION)
    if not isinstance(dependencies, dict):
        return False
    return name in dependencies


def format_dependency(name: str, version: str) -> str:
    return f'{name} = "{version}"\n'


def _marker_pattern(marker: str) -> re.Pattern:
    # Header on its own line; trailing whitespace and comment allowed
    return re.compile(
        r"^[ \t]*" + re.escape(marker) + r"[ \t]*(?:#[^\r\n]*)?(?:\r\n|\n|\r|\Z)",
        re.MULTILINE,
    )


def find_marker_end(text: str, marker: str = DEPENDENCY_MARKER) -> int | None:
    """Offset right after the header line holding `marker`, terminator included.

    Returns None when no line consists of the header.
    """
    match = _marker_pattern(marker).search(text)
    if match is None:
        return None
    return match.end()


def splice_dependencies(
    text: str, dependency_lines: Sequence[str], marker: str = DEPENDENCY_MARKER
) -> str:
    """Insert `dependency_lines` right after the header line holding `marker`.

    Raises:
        NotFoundError: If the header is absent
    """
    offset = find_marker_end(text, marker)
    if offset is None:
        raise NotFoundError(f"Cannot find {marker!r} in manifest")

    head, tail = text[:offset], text[offset:]
    if not head.endswith(("\n", "\r")):
        # Header is the last line and has no terminator
        head += "\n"
    return head + "".join(dependency_lines) + tail


def insert_dependencies_after_marker(
    path: Path, dependency_lines: Sequence[str], marker: str = DEPENDENCY_MARKER
) -> None:
    """Splice dependency lines into the manifest file right after `marker`.

    The in-memory Manifest is not refreshed; callers must load it again.

    Raises:
        NotFoundError: If the header is absent
        IoError: If the file cannot be read or written
    """
    path = Path(path)
    text = _read_text(path)
    try:
        new_text = splice_dependencies(text, dependency_lines, marker)
    except NotFoundError:
        raise NotFoundError(f"Cannot find {marker!r} in {path.name}", path) from None

    logger.info(f"Inserting {len(dependency_lines)} dependencies into {path}")
    _write_text(path, new_text)


def append_dependencies(path: Path, dependency_lines: List[str]) -> None:
    """Append dependency lines at the end of an existing manifest file."""
    path = Path(path)
    try:
        # r+ rather than a: a missing manifest is an error, not a new file
        with open(path, "r+", encoding="utf-8", newline="") as f:
            f.seek(0, os.SEEK_END)
            f.write("".join(dependency_lines))
    except OSError as e:
        logger.exception(f"Failed to append dependencies to {path}")
        raise IoError(f"Failed to write dependencies to {str(path)!r}: {e}", path) from e
    logger.debug(f"Appended {len(dependency_lines)} dependencies to {path}")


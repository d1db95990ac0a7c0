"""Shallow source scanner.

Answers whether a source file defines a UI struct, i.e. a struct carrying a
`#[derive(...)]` attribute that lists the `NwgUi` derive. This is a text scan,
not a parse: extracting the struct fields into a UI model is left to the full
parser. Matches inside line and block comments are skipped, but nested block
comments and comment markers inside string literals are not understood.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

logger = logging.getLogger(__name__)

DERIVE_MARKER = "NwgUi"
SOURCE_EXTENSION = ".rs"

# `#[derive(...)]`, then optional extra attributes and visibility, then `struct Name`
_STRUCT_PATTERN = re.compile(
    r"#\[\s*derive\s*\((?P<derives>[^)]*)\)\s*\]"
    r"(?:\s*#\[[^\]]*\])*"
    r"\s*(?:pub(?:\s*\([^)]*\))?\s+)?"
    r"struct\s+(?P<name>[A-Za-z_][A-Za-z0-9_]*)"
)


@dataclass
class UiStruct:
    """A UI struct found in a source file."""

    path: Path
    name: str
    line: int


def _derives_marker(derives: str, marker: str) -> bool:
    for derive in derives.split(","):
        # Path qualified derives such as `nwd::NwgUi`
        if derive.strip().split("::")[-1].strip() == marker:
            return True
    return False


_BLOCK_COMMENT = re.compile(r"/\*.*?(?:\*/|\Z)", re.DOTALL)


def _block_comment_spans(text: str) -> List[Tuple[int, int]]:
    # Nested block comments are not tracked
    return [m.span() for m in _BLOCK_COMMENT.finditer(text)]


def _is_commented(text: str, offset: int, blocks: List[Tuple[int, int]]) -> bool:
    line_start = text.rfind("\n", 0, offset) + 1
    if "//" in text[line_start:offset]:
        return True
    return any(start <= offset < end for start, end in blocks)


def find_ui_structs_in_text(
    text: str, path: Path, marker: str = DERIVE_MARKER
) -> List[UiStruct]:
    structs = []
    blocks = _block_comment_spans(text)
    for match in _STRUCT_PATTERN.finditer(text):
        if not _derives_marker(match.group("derives"), marker):
            continue
        if _is_commented(text, match.start(), blocks):
            continue
        line = text.count("\n", 0, match.start("name")) + 1
        structs.append(UiStruct(path=path, name=match.group("name"), line=line))
    return structs


def find_ui_structs(file_path: Path, marker: str = DERIVE_MARKER) -> List[UiStruct]:
    """List the UI structs defined in `file_path`.

    Read failures are not errors here: an unreadable file has no UI struct.
    """
    file_path = Path(file_path)
    try:
        text = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"Skipping {file_path}: {e}")
        return []
    return find_ui_structs_in_text(text, file_path, marker)


def has_ui_structure(file_path: Path, marker: str = DERIVE_MARKER) -> bool:
    """Check whether `file_path` defines at least one UI struct."""
    return len(find_ui_structs(file_path, marker)) > 0


def scan_project_sources(
    root_path: Path,
    source_dir: str = "src",
    extension: str = SOURCE_EXTENSION,
    marker: str = DERIVE_MARKER,
) -> List[UiStruct]:
    """Find the UI structs of every source file under the project's source dir."""
    source_root = Path(root_path) / source_dir
    if not source_root.is_dir():
        logger.debug(f"No source directory at {source_root}")
        return []

    structs: List[UiStruct] = []
    for source_file in sorted(source_root.rglob(f"*{extension}")):
        if source_file.is_file():
            structs.extend(find_ui_structs(source_file, marker))

    logger.info(f"Found {len(structs)} UI structs under {source_root}")
    return structs

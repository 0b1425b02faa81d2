# VSSYNC Path Utilities
# Glob expansion, search roots and extension filtering

import glob
import os
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePath

SUPPORTED_EXTENSIONS: tuple[str, ...] = (
    ".c",
    ".cs",
    ".cpp",
    ".doc",
    ".docx",
    ".html",
    ".java",
    ".json",
    ".md",
    ".pdf",
    ".php",
    ".pptx",
    ".py",
    ".rb",
    ".tex",
    ".txt",
    ".css",
    ".js",
    ".sh",
    ".ts",
)

_MAGIC_CHARS = ("*", "?", "[")


def _has_magic(part: str) -> bool:
    return any(c in part for c in _MAGIC_CHARS)


def search_root(pattern: str) -> Path:
    """
    Get the directory a glob pattern searches from.

    The root is the longest leading run of path segments without glob
    characters. For a literal file path the root is its parent directory.

    Args:
        pattern: Glob pattern (may contain ~ and environment variables).

    Returns:
        Absolute search root.
    """
    expanded = os.path.expandvars(os.path.expanduser(pattern))
    parts = PurePath(expanded).parts

    literal: list[str] = []
    for part in parts:
        if _has_magic(part):
            break
        literal.append(part)

    if len(literal) == len(parts):
        # No magic at all - pattern names a single path
        root = Path(*literal).parent if literal else Path(".")
    else:
        root = Path(*literal) if literal else Path(".")

    return root.resolve()


def expand_pattern(pattern: str) -> Iterator[Path]:
    """
    Lazily yield absolute paths of regular files matching a glob pattern.

    `**` matches any number of directories. Each call starts a new scan.

    Args:
        pattern: Glob pattern (may contain ~ and environment variables).

    Yields:
        Absolute file paths in glob order.
    """
    expanded = os.path.expandvars(os.path.expanduser(pattern))
    for match in glob.iglob(expanded, recursive=True):
        path = Path(match)
        if path.is_file():
            yield path.resolve()


def get_relative_path(path: Path, base: Path) -> Path | None:
    """
    Get relative path from base.

    Args:
        path: Full path.
        base: Base path.

    Returns:
        Relative path, or None if path is not under base.
    """
    try:
        return path.relative_to(base)
    except ValueError:
        return None


def is_supported_file(path: str | Path, extensions: Iterable[str] = SUPPORTED_EXTENSIONS) -> bool:
    """
    Check a file against the extension allow-list.

    Only the extension is checked; files without an extension are unsupported.

    Args:
        path: File path.
        extensions: Allowed extensions including the leading dot.

    Returns:
        True if the extension is allowed.
    """
    suffix = PurePath(str(path)).suffix
    if not suffix:
        return False
    return suffix in set(extensions)

# VSSYNC Utilities Module
# Helper functions for path handling and content hashing

from vssync.utils.hashing import content_hash, file_hash
from vssync.utils.paths import (
    SUPPORTED_EXTENSIONS,
    expand_pattern,
    get_relative_path,
    is_supported_file,
    search_root,
)

__all__ = [
    # Paths
    "SUPPORTED_EXTENSIONS",
    "expand_pattern",
    "get_relative_path",
    "is_supported_file",
    "search_root",
    # Hashing
    "content_hash",
    "file_hash",
]

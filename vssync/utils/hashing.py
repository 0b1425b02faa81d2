# VSSYNC Hashing Utilities
# Content fingerprints for file identities

import hashlib
from pathlib import Path

DEFAULT_ALGORITHM = "md5"


def content_hash(content: str | bytes, *, algorithm: str = DEFAULT_ALGORITHM) -> str:
    """
    Calculate hash of content.

    Args:
        content: String or bytes content.
        algorithm: Hash algorithm (default md5).

    Returns:
        Hex digest of hash.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    hasher = hashlib.new(algorithm)
    hasher.update(content)
    return hasher.hexdigest()


def file_hash(path: Path, *, algorithm: str = DEFAULT_ALGORITHM, chunk_size: int = 65536) -> str:
    """
    Calculate hash of the full byte stream of a file.

    Only content is hashed, never metadata such as mtime or size.

    Args:
        path: Path to file.
        algorithm: Hash algorithm (default md5).
        chunk_size: Chunk size for reading large files.

    Returns:
        Hex digest of hash.

    Raises:
        OSError: If the file cannot be read.
    """
    hasher = hashlib.new(algorithm)

    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)

    return hasher.hexdigest()

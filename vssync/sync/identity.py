# VSSYNC Identity Deriver
# Content-derived identities for local files

import re
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePath
from typing import Optional

from vssync.logger import SyncLogger, null_logger
from vssync.utils.hashing import DEFAULT_ALGORITHM, file_hash
from vssync.utils.paths import SUPPORTED_EXTENSIONS, expand_pattern, get_relative_path, is_supported_file, search_root


@dataclass(frozen=True)
class Identity:
    """
    Immutable identity of a local file's content at a path.

    Serialized as "{namespace}-{fingerprint}/{relative_path}". Changing the
    content changes the fingerprint and therefore the whole identity.
    """

    namespace: str
    fingerprint: str
    relative_path: str

    @property
    def key(self) -> str:
        """Serialized identity, used as the remote object name."""
        return f"{self.namespace}-{self.fingerprint}/{self.relative_path}"

    def __str__(self) -> str:
        return self.key

    @classmethod
    def parse(cls, key: str, namespace: str) -> Optional["Identity"]:
        """
        Parse a serialized identity of a known namespace.

        Namespaces may contain "-", so the namespace is needed to split the key.

        Returns:
            Identity, or None if `key` is not a well-formed key of `namespace`.
        """
        prefix = f"{namespace}-"
        if not key.startswith(prefix):
            return None
        fingerprint, sep, relative_path = key[len(prefix) :].partition("/")
        if not sep or not fingerprint or not relative_path:
            return None
        return cls(namespace=namespace, fingerprint=fingerprint, relative_path=relative_path)


@dataclass(frozen=True)
class LocalFile:
    """A local file admitted to the working set."""

    identity: Identity
    absolute_path: Path
    size_bytes: int

    @property
    def key(self) -> str:
        """Serialized identity of the file."""
        return self.identity.key


@dataclass
class LocalScan:
    """Result of scanning local files."""

    files: dict[str, LocalFile] = field(default_factory=dict)
    skipped: list[tuple[Path, str]] = field(default_factory=list)
    errors: list[tuple[Path, str]] = field(default_factory=list)
    protected_paths: set[str] = field(default_factory=set)

    @property
    def total(self) -> int:
        """Number of files admitted to the working set."""
        return len(self.files)


def normalize_relative_path(relative_path: str | PurePath) -> str:
    """Serialize a relative path with forward slashes."""
    return PurePath(relative_path).as_posix()


def is_namespaced(name: str, namespace: str) -> bool:
    """
    Check if a remote object name belongs to a namespace.

    Keyed names need a hex fingerprint right after the "{namespace}-" prefix,
    so a sibling namespace such as "docs-api" never matches "docs". Legacy
    names with a bare "{namespace}/" prefix also belong to the namespace.
    """
    if name.startswith(f"{namespace}/"):
        return True
    return re.match(rf"{re.escape(namespace)}-[0-9a-f]+/", name) is not None


def derive_identity(
    namespace: str,
    relative_path: str | PurePath,
    path: Path,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
) -> Identity:
    """
    Derive the identity of a file from its full content.

    Args:
        namespace: Namespace key of the run.
        relative_path: Path relative to the search root.
        path: Absolute path to read.
        algorithm: Hash algorithm for the fingerprint.

    Returns:
        Identity of the file.

    Raises:
        OSError: If the file cannot be read.
    """
    return Identity(
        namespace=namespace,
        fingerprint=file_hash(path, algorithm=algorithm),
        relative_path=normalize_relative_path(relative_path),
    )


def scan_local_files(
    pattern: str,
    namespace: str,
    *,
    extensions: Iterable[str] = SUPPORTED_EXTENSIONS,
    algorithm: str = DEFAULT_ALGORITHM,
    logger: Optional[SyncLogger] = None,
) -> LocalScan:
    """
    Build the local working set for a glob pattern.

    Empty files and unsupported extensions are filtered out before any
    identity is derived. Files that cannot be read are recorded as errors and
    their relative paths protected from orphan deletion.

    Args:
        pattern: Glob pattern selecting files.
        namespace: Namespace key of the run.
        extensions: Extension allow-list.
        algorithm: Hash algorithm for fingerprints.
        logger: Event logger.

    Returns:
        LocalScan with files keyed by serialized identity.
    """
    logger = logger or null_logger()
    allowed = set(extensions)
    root = search_root(pattern)
    scan = LocalScan()

    for path in expand_pattern(pattern):
        logger.debug(f"Found file: {path}")
        rel_path = get_relative_path(path, root)
        if rel_path is None:
            scan.skipped.append((path, "outside search root"))
            continue
        relative = normalize_relative_path(rel_path)

        try:
            size = path.stat().st_size
            if size == 0:
                scan.skipped.append((path, "empty"))
                logger.info(f"Ignoring empty file: {path}")
                continue
            if not is_supported_file(path, allowed):
                scan.skipped.append((path, "unsupported type"))
                logger.info(f"Ignoring unsupported file: {path}")
                continue

            identity = derive_identity(namespace, relative, path, algorithm=algorithm)
        except OSError as e:
            scan.errors.append((path, str(e)))
            scan.protected_paths.add(relative)
            logger.error(f"Error processing file: {path}: {e}")
            continue

        # Identical namespace, content and path collapse to one entry
        scan.files.setdefault(identity.key, LocalFile(identity=identity, absolute_path=path, size_bytes=size))

    return scan

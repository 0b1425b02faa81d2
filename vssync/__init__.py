"""VSSYNC - Vector Store Sync.

Keeps a remote file collection and its vector store index synchronized
with a set of local files, comparing content-derived identities only.
"""

__version__ = "1.0.0"
__author__ = "Equitania Software GmbH"
__email__ = "info@equitania.de"

__all__ = [
    "__version__",
    "Identity",
    "LocalFile",
    "Plan",
    "reconcile",
    "SyncEngine",
    "SyncResult",
    "PlanExecutor",
    "IndexResolver",
    "SnapshotReader",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("Identity", "LocalFile"):
        from vssync.sync import identity

        return getattr(identity, name)
    if name in ("Plan", "reconcile"):
        from vssync.sync import plan

        return getattr(plan, name)
    if name in ("SyncEngine", "SyncResult"):
        from vssync.sync import engine

        return getattr(engine, name)
    if name == "PlanExecutor":
        from vssync.sync.executor import PlanExecutor

        return PlanExecutor
    if name == "IndexResolver":
        from vssync.sync.index import IndexResolver

        return IndexResolver
    if name == "SnapshotReader":
        from vssync.sync.snapshot import SnapshotReader

        return SnapshotReader
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

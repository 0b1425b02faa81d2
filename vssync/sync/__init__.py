# VSSYNC Sync Module
# Core reconciliation engine and components

from vssync.sync.engine import SyncEngine, SyncResult
from vssync.sync.executor import ActionType, ExecutionResult, ItemResult, Phase, PhaseResult, PlanExecutor
from vssync.sync.identity import Identity, LocalFile, LocalScan, derive_identity, is_namespaced, scan_local_files
from vssync.sync.index import IndexResolver
from vssync.sync.plan import DeleteEntry, LinkOnlyEntry, Plan, reconcile
from vssync.sync.snapshot import RemoteSnapshot, SnapshotReader

__all__ = [
    # Identity
    "Identity",
    "LocalFile",
    "LocalScan",
    "derive_identity",
    "is_namespaced",
    "scan_local_files",
    # Remote state
    "IndexResolver",
    "RemoteSnapshot",
    "SnapshotReader",
    # Reconciler
    "Plan",
    "LinkOnlyEntry",
    "DeleteEntry",
    "reconcile",
    # Executor
    "ActionType",
    "Phase",
    "ItemResult",
    "PhaseResult",
    "ExecutionResult",
    "PlanExecutor",
    # Engine
    "SyncEngine",
    "SyncResult",
]

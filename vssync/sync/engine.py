# VSSYNC Sync Engine
# Main synchronization engine coordinating all components

from dataclasses import dataclass, field
from typing import Optional

from vssync.config.schema import VssyncConfig
from vssync.errors import IndexResolutionError, SnapshotError
from vssync.logger import SyncLogger, null_logger
from vssync.remote.base import RemoteClient, RemoteIndex
from vssync.sync.executor import ExecutionResult, PlanExecutor
from vssync.sync.identity import LocalScan, scan_local_files
from vssync.sync.index import IndexResolver
from vssync.sync.plan import Plan, reconcile
from vssync.sync.snapshot import RemoteSnapshot, SnapshotReader


@dataclass
class SyncResult:
    """Result of a complete sync run."""

    success: bool
    namespace: str
    dry_run: bool = False
    aborted: bool = False
    error: Optional[str] = None
    index: Optional[RemoteIndex] = None
    scan: LocalScan = field(default_factory=LocalScan)
    snapshot: RemoteSnapshot = field(default_factory=RemoteSnapshot)
    plan: Plan = field(default_factory=Plan)
    execution: Optional[ExecutionResult] = None

    @property
    def has_item_failures(self) -> bool:
        """Check if any local file or remote item failed individually."""
        if self.scan.errors:
            return True
        return self.execution is not None and self.execution.has_failures


class SyncEngine:
    """
    Main synchronization engine.

    Resolves the namespace index, reads the remote snapshot, scans local
    files, reconciles and executes the resulting plan.
    """

    def __init__(
        self,
        config: VssyncConfig,
        client: RemoteClient,
        namespace: str,
        *,
        pattern: Optional[str] = None,
        logger: Optional[SyncLogger] = None,
    ):
        """
        Initialize sync engine.

        Args:
            config: VSSYNC configuration.
            client: Remote API client shared by all components.
            namespace: Namespace key of the run.
            pattern: Glob pattern override (defaults to config.sync.pattern).
            logger: Event logger.
        """
        self.config = config
        self.client = client
        self.namespace = namespace
        self.pattern = pattern or config.sync.pattern
        self.logger = logger or null_logger()

    def scan_local(self) -> LocalScan:
        """Build the local working set."""
        self.logger.info(f"Reading files from {self.pattern}")
        return scan_local_files(
            self.pattern,
            self.namespace,
            extensions=self.config.sync.supported_extensions,
            algorithm=self.config.sync.hash_algorithm,
            logger=self.logger,
        )

    def sync(self, *, dry_run: bool = False) -> SyncResult:
        """
        Run one reconciliation.

        Fatal errors (index resolution, snapshot reads) abort before any
        mutation and are reported on the result instead of raised.

        Args:
            dry_run: Compute the plan without changing anything remotely.

        Returns:
            SyncResult with plan and execution outcome.
        """
        result = SyncResult(success=True, namespace=self.namespace, dry_run=dry_run)

        try:
            result.index = IndexResolver(self.client, self.namespace, self.logger).resolve(create=not dry_run)
            reader = SnapshotReader(self.client, self.namespace, self.logger)
            result.snapshot = reader.read(result.index.id if result.index else None)
        except (IndexResolutionError, SnapshotError) as e:
            self.logger.error(e.message)
            result.success = False
            result.aborted = True
            result.error = e.message
            return result

        result.scan = self.scan_local()
        result.plan = reconcile(
            result.scan.files,
            result.snapshot.objects,
            result.snapshot.links,
            protected_paths=result.scan.protected_paths,
            namespace=self.namespace,
        )
        self.logger.info(
            f"Plan: {len(result.plan.to_create_and_link)} to upload, "
            f"{len(result.plan.to_link_only)} to link, {len(result.plan.to_delete)} to remove"
        )

        if dry_run or result.index is None:
            return result

        executor = PlanExecutor(
            self.client,
            result.index.id,
            max_workers=self.config.execution.max_workers,
            batch_timeout=self.config.execution.batch_timeout,
            poll_interval=self.config.execution.poll_interval,
            logger=self.logger,
        )
        result.execution = executor.execute(result.plan)

        if self.config.execution.fail_on_item_errors and result.has_item_failures:
            result.success = False
            result.error = "Some items failed"

        return result

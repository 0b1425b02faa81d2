# VSSYNC Plan Executor
# Applies a plan in ordered phases with bounded concurrency

import time
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TypeVar

from vssync.errors import RemoteError
from vssync.logger import SyncLogger, null_logger
from vssync.remote.base import BatchState, BatchStatus, RemoteClient
from vssync.sync.identity import LocalFile
from vssync.sync.plan import DeleteEntry, LinkOnlyEntry, Plan

T = TypeVar("T")


class ActionType(str, Enum):
    """Remote operations performed for a single item."""

    UNLINK = "unlink"
    DELETE = "delete"
    UPLOAD = "upload"
    LINK = "link"


class Phase(str, Enum):
    """Executor phases, in execution order."""

    DELETE = "delete"
    CREATE = "create"
    LINK = "link"


@dataclass
class ItemResult:
    """Outcome of the last operation attempted for one item."""

    key: str
    action: ActionType
    success: bool
    object_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class PhaseResult:
    """Outcome of one phase."""

    phase: Phase
    results: list[ItemResult] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded

    @property
    def failures(self) -> list[ItemResult]:
        """Failed items of this phase."""
        return [r for r in self.results if not r.success]


@dataclass
class ExecutionResult:
    """Outcome of all phases of a plan."""

    phases: dict[Phase, PhaseResult] = field(default_factory=dict)

    @property
    def attempted(self) -> int:
        return sum(p.attempted for p in self.phases.values())

    @property
    def succeeded(self) -> int:
        return sum(p.succeeded for p in self.phases.values())

    @property
    def failed(self) -> int:
        return sum(p.failed for p in self.phases.values())

    @property
    def has_failures(self) -> bool:
        """Check if any item failed in any phase."""
        return self.failed > 0


class PlanExecutor:
    """
    Applies a plan against the remote API.

    Phases run strictly in order: unlink+delete, create+link, link-only.
    Items within a phase are independent; a failing item is recorded and
    excluded from later steps that depend on it, but never aborts the run.
    """

    def __init__(
        self,
        client: RemoteClient,
        index_id: str,
        *,
        max_workers: int = 8,
        batch_timeout: float = 600.0,
        poll_interval: float = 2.0,
        logger: Optional[SyncLogger] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize executor.

        Args:
            client: Remote API client.
            index_id: Resolved index id; read-only for the whole run.
            max_workers: Upper bound on concurrent remote calls.
            batch_timeout: Seconds to wait for a link batch before giving up.
            poll_interval: Seconds between batch status polls.
            logger: Event logger.
            sleep: Sleep function (injectable for tests).
            clock: Monotonic clock (injectable for tests).
        """
        self.client = client
        self.index_id = index_id
        self.max_workers = max_workers
        self.batch_timeout = batch_timeout
        self.poll_interval = poll_interval
        self.logger = logger or null_logger()
        self._sleep = sleep
        self._clock = clock

    def execute(self, plan: Plan) -> ExecutionResult:
        """
        Run all phases of a plan.

        Args:
            plan: Plan to apply.

        Returns:
            ExecutionResult with per-phase item outcomes.
        """
        result = ExecutionResult()
        result.phases[Phase.DELETE] = self.delete_phase(plan.to_delete)
        result.phases[Phase.CREATE] = self.create_phase(plan.to_create_and_link)
        result.phases[Phase.LINK] = self.link_phase(plan.to_link_only)
        return result

    # Phases

    def delete_phase(self, entries: Sequence[DeleteEntry]) -> PhaseResult:
        """Unlink (when linked) and delete every stale object."""
        phase = PhaseResult(phase=Phase.DELETE)
        if not entries:
            return phase

        self.logger.info(f"Removing {len(entries)} files from remote collection")
        phase.results = self._fan_out(self._delete_one, entries, self._delete_crashed)
        self._log_phase(phase, "removed")
        return phase

    def create_phase(self, files: Sequence[LocalFile]) -> PhaseResult:
        """Upload new files, then link all successful uploads in one batch."""
        phase = PhaseResult(phase=Phase.CREATE)
        if not files:
            return phase

        self.logger.info(f"Uploading {len(files)} files to remote collection")
        uploads = self._fan_out(self._upload_one, files, self._upload_crashed)

        created = [r for r in uploads if r.success and r.object_id]
        link_errors = self._link_batch([r.object_id for r in created if r.object_id])

        phase.results = [r for r in uploads if not r.success] + [
            ItemResult(
                key=r.key,
                action=ActionType.LINK,
                success=link_errors.get(r.object_id) is None,
                object_id=r.object_id,
                error=link_errors.get(r.object_id),
            )
            for r in created
        ]
        self._log_phase(phase, "uploaded and linked")
        return phase

    def link_phase(self, entries: Sequence[LinkOnlyEntry]) -> PhaseResult:
        """Link already uploaded objects in one batch, without re-upload."""
        phase = PhaseResult(phase=Phase.LINK)
        if not entries:
            return phase

        self.logger.info(f"Adding {len(entries)} existing files to vector store")
        for entry in entries:
            self.logger.debug(f"Adding file: {entry.key}")

        link_errors = self._link_batch([e.object_id for e in entries])
        phase.results = [
            ItemResult(
                key=e.key,
                action=ActionType.LINK,
                success=link_errors.get(e.object_id) is None,
                object_id=e.object_id,
                error=link_errors.get(e.object_id),
            )
            for e in entries
        ]
        self._log_phase(phase, "linked")
        return phase

    # Single items

    def _delete_one(self, entry: DeleteEntry) -> ItemResult:
        obj = entry.object
        self.logger.debug(f"Removing missing or changed file: {obj.name}")

        if entry.linked:
            try:
                self.client.remove_member(self.index_id, obj.id)
            except RemoteError as e:
                self.logger.error(f"Cannot unlink {obj.name}: {e.message}")
                return ItemResult(
                    key=obj.name, action=ActionType.UNLINK, success=False, object_id=obj.id, error=e.message
                )

        try:
            self.client.delete_object(obj.id)
        except RemoteError as e:
            self.logger.error(f"Cannot delete {obj.name}: {e.message}")
            return ItemResult(
                key=obj.name, action=ActionType.DELETE, success=False, object_id=obj.id, error=e.message
            )

        return ItemResult(key=obj.name, action=ActionType.DELETE, success=True, object_id=obj.id)

    def _upload_one(self, local: LocalFile) -> ItemResult:
        self.logger.debug(f"Adding file: {local.absolute_path}")
        try:
            created = self.client.create_object(local.key, local.absolute_path)
        except RemoteError as e:
            self.logger.error(f"Cannot upload {local.key}: {e.message}")
            return ItemResult(key=local.key, action=ActionType.UPLOAD, success=False, error=e.message)
        except OSError as e:
            self.logger.error(f"Cannot read {local.absolute_path}: {e}")
            return ItemResult(key=local.key, action=ActionType.UPLOAD, success=False, error=str(e))

        return ItemResult(key=local.key, action=ActionType.UPLOAD, success=True, object_id=created.id)

    # Helpers

    def _fan_out(
        self,
        func: Callable[[T], ItemResult],
        items: Sequence[T],
        on_error: Callable[[T, Exception], ItemResult],
    ) -> list[ItemResult]:
        """
        Run `func` over items on a bounded pool; results in input order.

        An unexpected exception from `func` becomes that item's failure via
        `on_error`, so the remaining items and phases still run.
        """
        results: list[Optional[ItemResult]] = [None] * len(items)
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(items))) as executor:
            future_map = {executor.submit(func, item): i for i, item in enumerate(items)}
            for future in as_completed(future_map):
                i = future_map[future]
                try:
                    results[i] = future.result()
                except Exception as e:
                    results[i] = on_error(items[i], e)
        return [r for r in results if r is not None]

    def _delete_crashed(self, entry: DeleteEntry, error: Exception) -> ItemResult:
        obj = entry.object
        self.logger.error(f"Unexpected error removing {obj.name}: {error}")
        return ItemResult(key=obj.name, action=ActionType.DELETE, success=False, object_id=obj.id, error=str(error))

    def _upload_crashed(self, local: LocalFile, error: Exception) -> ItemResult:
        self.logger.error(f"Unexpected error uploading {local.key}: {error}")
        return ItemResult(key=local.key, action=ActionType.UPLOAD, success=False, error=str(error))

    def _link_batch(self, object_ids: list[str]) -> dict[str, Optional[str]]:
        """
        Submit one add-to-index batch and wait for it with a bounded poll.

        Returns:
            Mapping of object id to error message (None = linked).
        """
        if not object_ids:
            return {}

        def fail_all(message: str) -> dict[str, Optional[str]]:
            self.logger.error(message)
            return {object_id: message for object_id in object_ids}

        try:
            status = self.client.add_members_batch(self.index_id, object_ids)
        except RemoteError as e:
            return fail_all(f"Cannot submit link batch: {e.message}")

        deadline = self._clock() + self.batch_timeout
        while not status.is_terminal:
            if self._clock() >= deadline:
                self._cancel(status)
                return fail_all(f"Link batch {status.id} not finished after {self.batch_timeout:g}s")
            self._sleep(self.poll_interval)
            try:
                status = self.client.get_batch(self.index_id, status.id)
            except RemoteError as e:
                return fail_all(f"Cannot poll link batch {status.id}: {e.message}")

        if status.state != BatchState.COMPLETED:
            return fail_all(f"Link batch {status.id} ended as {status.state.value}")

        errors: dict[str, Optional[str]] = dict.fromkeys(object_ids)
        if status.failed:
            try:
                failed = set(self.client.list_batch_failures(self.index_id, status.id))
            except RemoteError as e:
                return fail_all(f"Cannot list failures of link batch {status.id}: {e.message}")
            for object_id in object_ids:
                if object_id in failed:
                    errors[object_id] = "indexing failed"
            self.logger.warning(f"{len(failed)} of {status.total} files failed to index")

        return errors

    def _cancel(self, status: BatchStatus) -> None:
        try:
            self.client.cancel_batch(self.index_id, status.id)
        except RemoteError as e:
            self.logger.warning(f"Cannot cancel link batch {status.id}: {e.message}")

    def _log_phase(self, phase: PhaseResult, verb: str) -> None:
        if phase.failed:
            self.logger.warning(f"{phase.succeeded}/{phase.attempted} files {verb}, {phase.failed} failed")
        else:
            self.logger.success(f"Files successfully {verb}")

# VSSYNC Test Fixtures
# Pytest fixtures and an in-memory paginating remote

import itertools
import tempfile
import threading
from collections.abc import Generator
from pathlib import Path
from typing import Optional

import pytest

from vssync.errors import RemoteError
from vssync.remote.base import BatchState, BatchStatus, Page, RemoteClient, RemoteIndex, RemoteObject


class FakeRemoteClient(RemoteClient):
    """
    In-memory remote with small pages and failure injection.

    Every call is appended to `calls` as a tuple (operation, argument).
    """

    def __init__(self, page_size: int = 2):
        self.page_size = page_size
        self.objects: list[RemoteObject] = []
        self.indexes: list[RemoteIndex] = []
        self.members: dict[str, list[str]] = {}
        self.uploads: dict[str, bytes] = {}
        self.calls: list[tuple[str, object]] = []
        self.batches: dict[str, dict] = {}

        # Failure injection
        self.fail_object_page: Optional[int] = None
        self.fail_member_page: Optional[int] = None
        self.fail_index_listing = False
        self.fail_index_create = False
        self.fail_upload_names: set[str] = set()
        self.fail_delete_ids: set[str] = set()
        self.fail_unlink_ids: set[str] = set()
        self.fail_link_ids: set[str] = set()
        self.fail_batch_submit = False
        self.batch_polls = 0
        self.batch_final_state = BatchState.COMPLETED

        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    # Helpers

    def add_object(self, name: str, object_id: Optional[str] = None) -> RemoteObject:
        obj = RemoteObject(id=object_id or self._next_id("file"), name=name)
        self.objects.append(obj)
        return obj

    def add_index(self, name: str, metadata: dict[str, str], index_id: Optional[str] = None) -> RemoteIndex:
        index = RemoteIndex(id=index_id or self._next_id("vs"), name=name, metadata=metadata)
        self.indexes.append(index)
        self.members.setdefault(index.id, [])
        return index

    def link(self, index_id: str, object_id: str) -> None:
        self.members.setdefault(index_id, []).append(object_id)

    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]

    def mutations(self) -> list[tuple[str, object]]:
        return [call for call in self.calls if not call[0].startswith(("list", "get"))]

    def _next_id(self, prefix: str) -> str:
        with self._lock:
            return f"{prefix}-{next(self._ids)}"

    def _record(self, operation: str, argument: object = None) -> None:
        with self._lock:
            self.calls.append((operation, argument))

    def _page(self, items: list, cursor: Optional[str]) -> Page:
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        next_cursor = str(end) if end < len(items) else None
        return Page(items=list(items[start:end]), next_cursor=next_cursor)

    @staticmethod
    def _page_number(cursor: Optional[str], page_size: int) -> int:
        return (int(cursor) if cursor else 0) // page_size

    # RemoteClient

    def list_objects_page(self, cursor: Optional[str] = None) -> Page[RemoteObject]:
        self._record("list_objects", cursor)
        if self.fail_object_page is not None and self._page_number(cursor, self.page_size) == self.fail_object_page:
            raise RemoteError("page unavailable", operation="list files", status_code=500)
        return self._page(self.objects, cursor)

    def create_object(self, name: str, path: Path) -> RemoteObject:
        self._record("create_object", name)
        if name in self.fail_upload_names:
            raise RemoteError(f"upload {name} rejected", operation="upload", status_code=400)
        data = Path(path).read_bytes()
        obj = RemoteObject(id=self._next_id("file"), name=name)
        with self._lock:
            self.objects.append(obj)
            self.uploads[obj.id] = data
        return obj

    def delete_object(self, object_id: str) -> None:
        self._record("delete_object", object_id)
        if object_id in self.fail_delete_ids:
            raise RemoteError(f"delete {object_id} failed", operation="delete", status_code=500)
        with self._lock:
            self.objects = [o for o in self.objects if o.id != object_id]

    def list_indexes_page(self, cursor: Optional[str] = None) -> Page[RemoteIndex]:
        self._record("list_indexes", cursor)
        if self.fail_index_listing:
            raise RemoteError("cannot list", operation="list vector stores", status_code=503)
        return self._page(self.indexes, cursor)

    def create_index(self, name: str, metadata: dict[str, str]) -> RemoteIndex:
        self._record("create_index", name)
        if self.fail_index_create:
            raise RemoteError("quota exceeded", operation="create vector store", status_code=429)
        return self.add_index(name, dict(metadata))

    def list_members_page(self, index_id: str, cursor: Optional[str] = None) -> Page[str]:
        self._record("list_members", cursor)
        if self.fail_member_page is not None and self._page_number(cursor, self.page_size) == self.fail_member_page:
            raise RemoteError("page unavailable", operation="list vector store files", status_code=500)
        return self._page(self.members.get(index_id, []), cursor)

    def add_members_batch(self, index_id: str, object_ids: list[str]) -> BatchStatus:
        self._record("add_members_batch", list(object_ids))
        if self.fail_batch_submit:
            raise RemoteError("batch rejected", operation="create file batch", status_code=400)
        batch_id = self._next_id("batch")
        self.batches[batch_id] = {"index_id": index_id, "ids": list(object_ids), "polls_left": self.batch_polls}
        if self.batch_polls == 0:
            return self._finish(batch_id)
        return BatchStatus(id=batch_id, state=BatchState.IN_PROGRESS, total=len(object_ids))

    def get_batch(self, index_id: str, batch_id: str) -> BatchStatus:
        self._record("get_batch", batch_id)
        batch = self.batches[batch_id]
        if batch.get("status"):
            return batch["status"]
        batch["polls_left"] -= 1
        if batch["polls_left"] <= 0:
            return self._finish(batch_id)
        return BatchStatus(id=batch_id, state=BatchState.IN_PROGRESS, total=len(batch["ids"]))

    def list_batch_failures(self, index_id: str, batch_id: str) -> list[str]:
        self._record("list_batch_failures", batch_id)
        return [i for i in self.batches[batch_id]["ids"] if i in self.fail_link_ids]

    def cancel_batch(self, index_id: str, batch_id: str) -> None:
        self._record("cancel_batch", batch_id)
        self.batches[batch_id]["status"] = BatchStatus(
            id=batch_id, state=BatchState.CANCELLED, total=len(self.batches[batch_id]["ids"])
        )

    def remove_member(self, index_id: str, object_id: str) -> None:
        self._record("remove_member", object_id)
        if object_id in self.fail_unlink_ids:
            raise RemoteError(f"unlink {object_id} failed", operation="unlink", status_code=500)
        with self._lock:
            self.members[index_id] = [m for m in self.members.get(index_id, []) if m != object_id]

    def _finish(self, batch_id: str) -> BatchStatus:
        batch = self.batches[batch_id]
        ids = batch["ids"]
        failed = [i for i in ids if i in self.fail_link_ids]
        if self.batch_final_state == BatchState.COMPLETED:
            for object_id in ids:
                if object_id not in failed:
                    self.link(batch["index_id"], object_id)
        status = BatchStatus(
            id=batch_id,
            state=self.batch_final_state,
            total=len(ids),
            completed=len(ids) - len(failed),
            failed=len(failed),
        )
        batch["status"] = status
        return status


class FakeClock:
    """Monotonic clock advanced by the fake sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def remote() -> FakeRemoteClient:
    """Create an empty fake remote with two items per page."""
    return FakeRemoteClient(page_size=2)


@pytest.fixture
def fake_clock() -> FakeClock:
    """Create a fake clock."""
    return FakeClock()


@pytest.fixture
def docs_dir(temp_dir: Path) -> Path:
    """Create a local docs tree with supported, empty and unsupported files."""
    docs = temp_dir / "docs"
    (docs / "guide").mkdir(parents=True)

    (docs / "a.md").write_text("# A\n\nFirst document.\n", encoding="utf-8")
    (docs / "guide" / "b.md").write_text("# B\n\nSecond document.\n", encoding="utf-8")
    (docs / "empty.md").write_text("", encoding="utf-8")
    (docs / "notes.txt").write_text("plain notes\n", encoding="utf-8")
    (docs / "tool.exe").write_bytes(b"MZ\x90\x00")

    return docs

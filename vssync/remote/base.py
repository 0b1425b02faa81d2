# VSSYNC Remote Interface
# Backend-neutral contract for the object collection and its index

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class RemoteObject:
    """An object in the remote collection. Identity is `id`, not `name`."""

    id: str
    name: str


@dataclass(frozen=True)
class RemoteIndex:
    """A remote searchable index (vector store)."""

    id: str
    name: str
    metadata: dict[str, str] = field(default_factory=dict, hash=False)


class BatchState(str, Enum):
    """Processing state of a membership batch."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass
class BatchStatus:
    """Server-side status of an add-members batch."""

    id: str
    state: BatchState
    total: int = 0
    completed: int = 0
    failed: int = 0

    @property
    def is_terminal(self) -> bool:
        """Check if the batch finished processing."""
        return self.state != BatchState.IN_PROGRESS


@dataclass
class Page(Generic[T]):
    """One page of a listing. More pages exist while `next_cursor` is set."""

    items: list[T]
    next_cursor: Optional[str] = None

    @property
    def has_more(self) -> bool:
        """Check if another page can be fetched."""
        return self.next_cursor is not None


def iter_pages(fetch: Callable[[Optional[str]], Page[T]]) -> Iterator[Page[T]]:
    """
    Lazily fetch pages until the listing is exhausted.

    Each call restarts from the first page. Exceptions raised by `fetch`
    propagate unchanged.

    Args:
        fetch: Callable returning the page after the given cursor (None = first).

    Yields:
        Pages in listing order.
    """
    cursor: Optional[str] = None
    while True:
        page = fetch(cursor)
        yield page
        if not page.has_more:
            return
        cursor = page.next_cursor


def iter_items(fetch: Callable[[Optional[str]], Page[T]]) -> Iterator[T]:
    """Flatten `iter_pages` into a lazy item sequence."""
    for page in iter_pages(fetch):
        yield from page.items


class RemoteClient(ABC):
    """
    Remote object collection plus index API.

    A single client instance is passed explicitly to the index resolver,
    snapshot reader and plan executor. Implementations raise
    `vssync.errors.RemoteError` for failed calls and must be safe to call
    from multiple threads.
    """

    @abstractmethod
    def list_objects_page(self, cursor: Optional[str] = None) -> Page[RemoteObject]:
        """List one page of the object collection."""

    @abstractmethod
    def create_object(self, name: str, path: Path) -> RemoteObject:
        """Upload the file at `path` as a new object called `name`."""

    @abstractmethod
    def delete_object(self, object_id: str) -> None:
        """Delete an object."""

    @abstractmethod
    def list_indexes_page(self, cursor: Optional[str] = None) -> Page[RemoteIndex]:
        """List one page of indexes."""

    @abstractmethod
    def create_index(self, name: str, metadata: dict[str, str]) -> RemoteIndex:
        """Create an index carrying `metadata`."""

    @abstractmethod
    def list_members_page(self, index_id: str, cursor: Optional[str] = None) -> Page[str]:
        """List one page of object ids linked into an index."""

    @abstractmethod
    def add_members_batch(self, index_id: str, object_ids: list[str]) -> BatchStatus:
        """Submit a batch linking objects into an index."""

    @abstractmethod
    def get_batch(self, index_id: str, batch_id: str) -> BatchStatus:
        """Fetch the current status of a batch."""

    @abstractmethod
    def list_batch_failures(self, index_id: str, batch_id: str) -> list[str]:
        """Object ids whose linking failed within a batch."""

    @abstractmethod
    def cancel_batch(self, index_id: str, batch_id: str) -> None:
        """Cancel a batch still in progress."""

    @abstractmethod
    def remove_member(self, index_id: str, object_id: str) -> None:
        """Unlink an object from an index without deleting it."""

# VSSYNC OpenAI Backend
# Files API as object collection, vector stores as index

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any, Optional, TypeVar

from openai import APIStatusError, OpenAI, OpenAIError

from vssync.errors import RemoteError
from vssync.remote.base import (
    BatchState,
    BatchStatus,
    Page,
    RemoteClient,
    RemoteIndex,
    RemoteObject,
    iter_items,
)

PAGE_LIMIT = 100

R = TypeVar("R")


def _call(operation: str, func: Callable[..., R], *args: Any, **kwargs: Any) -> R:
    """Invoke an SDK call, wrapping SDK errors into RemoteError."""
    try:
        return func(*args, **kwargs)
    except APIStatusError as e:
        raise RemoteError(f"{operation} failed: {e.message}", operation=operation, status_code=e.status_code) from e
    except OpenAIError as e:
        raise RemoteError(f"{operation} failed: {e}", operation=operation) from e


def _next_cursor(sdk_page: Any) -> Optional[str]:
    """Cursor for the page after `sdk_page`, or None on the last page."""
    if not sdk_page.data or not sdk_page.has_next_page():
        return None
    return sdk_page.data[-1].id


def _batch_status(batch: Any) -> BatchStatus:
    counts = batch.file_counts
    return BatchStatus(
        id=batch.id,
        state=BatchState(batch.status),
        total=counts.total,
        completed=counts.completed,
        failed=counts.failed,
    )


class OpenAIRemoteClient(RemoteClient):
    """
    Remote backend on the OpenAI API.

    Objects are files uploaded with the configured purpose; the index is a
    vector store, located through its metadata.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        file_purpose: str = "assistants",
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize the backend.

        Args:
            api_key: OpenAI API key.
            base_url: Optional API base URL override.
            file_purpose: Purpose attached to uploaded files.
            client: Pre-built SDK client (used by tests).
        """
        if client is None:
            client_kwargs: dict[str, Any] = {"api_key": api_key}
            if base_url:
                client_kwargs["base_url"] = base_url
            client = OpenAI(**client_kwargs)
        self._client = client
        self.file_purpose = file_purpose

    # Objects

    def list_objects_page(self, cursor: Optional[str] = None) -> Page[RemoteObject]:
        kwargs: dict[str, Any] = {"limit": PAGE_LIMIT}
        if cursor:
            kwargs["after"] = cursor
        sdk_page = _call("list files", self._client.files.list, **kwargs)
        return Page(
            items=[RemoteObject(id=f.id, name=f.filename) for f in sdk_page.data],
            next_cursor=_next_cursor(sdk_page),
        )

    def create_object(self, name: str, path: Path) -> RemoteObject:
        with open(path, "rb") as fh:
            created = _call(
                f"upload {name}",
                self._client.files.create,
                file=(name, fh),
                purpose=self.file_purpose,
            )
        return RemoteObject(id=created.id, name=name)

    def delete_object(self, object_id: str) -> None:
        _call(f"delete file {object_id}", self._client.files.delete, object_id)

    # Indexes

    def list_indexes_page(self, cursor: Optional[str] = None) -> Page[RemoteIndex]:
        kwargs: dict[str, Any] = {"limit": PAGE_LIMIT}
        if cursor:
            kwargs["after"] = cursor
        sdk_page = _call("list vector stores", self._client.vector_stores.list, **kwargs)
        return Page(
            items=[RemoteIndex(id=s.id, name=s.name or "", metadata=dict(s.metadata or {})) for s in sdk_page.data],
            next_cursor=_next_cursor(sdk_page),
        )

    def create_index(self, name: str, metadata: dict[str, str]) -> RemoteIndex:
        store = _call(f"create vector store {name}", self._client.vector_stores.create, name=name, metadata=metadata)
        return RemoteIndex(id=store.id, name=store.name or name, metadata=dict(store.metadata or metadata))

    # Membership

    def list_members_page(self, index_id: str, cursor: Optional[str] = None) -> Page[str]:
        kwargs: dict[str, Any] = {"vector_store_id": index_id, "limit": PAGE_LIMIT}
        if cursor:
            kwargs["after"] = cursor
        sdk_page = _call("list vector store files", self._client.vector_stores.files.list, **kwargs)
        return Page(items=[f.id for f in sdk_page.data], next_cursor=_next_cursor(sdk_page))

    def add_members_batch(self, index_id: str, object_ids: list[str]) -> BatchStatus:
        batch = _call(
            "create file batch",
            self._client.vector_stores.file_batches.create,
            vector_store_id=index_id,
            file_ids=object_ids,
        )
        return _batch_status(batch)

    def get_batch(self, index_id: str, batch_id: str) -> BatchStatus:
        batch = _call(
            f"retrieve file batch {batch_id}",
            self._client.vector_stores.file_batches.retrieve,
            batch_id,
            vector_store_id=index_id,
        )
        return _batch_status(batch)

    def list_batch_failures(self, index_id: str, batch_id: str) -> list[str]:
        def fetch(cursor: Optional[str]) -> Page[str]:
            kwargs: dict[str, Any] = {"vector_store_id": index_id, "filter": "failed", "limit": PAGE_LIMIT}
            if cursor:
                kwargs["after"] = cursor
            sdk_page = _call(
                f"list failed files of batch {batch_id}",
                self._client.vector_stores.file_batches.list_files,
                batch_id,
                **kwargs,
            )
            return Page(items=[f.id for f in sdk_page.data], next_cursor=_next_cursor(sdk_page))

        return list(iter_items(fetch))

    def cancel_batch(self, index_id: str, batch_id: str) -> None:
        _call(
            f"cancel file batch {batch_id}",
            self._client.vector_stores.file_batches.cancel,
            batch_id,
            vector_store_id=index_id,
        )

    def remove_member(self, index_id: str, object_id: str) -> None:
        _call(
            f"remove {object_id} from vector store",
            self._client.vector_stores.files.delete,
            object_id,
            vector_store_id=index_id,
        )

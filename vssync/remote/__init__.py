# VSSYNC Remote Module
# Remote backend contract and the OpenAI implementation

from vssync.remote.base import (
    BatchState,
    BatchStatus,
    Page,
    RemoteClient,
    RemoteIndex,
    RemoteObject,
    iter_items,
    iter_pages,
)

__all__ = [
    "BatchState",
    "BatchStatus",
    "Page",
    "RemoteClient",
    "RemoteIndex",
    "RemoteObject",
    "iter_items",
    "iter_pages",
]

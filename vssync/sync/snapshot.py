# VSSYNC Remote Snapshot Reader
# Complete, paginated reads of remote objects and index membership

from dataclasses import dataclass, field
from typing import Optional

from vssync.errors import RemoteError, SnapshotError
from vssync.logger import SyncLogger, null_logger
from vssync.remote.base import RemoteClient, RemoteObject, iter_items
from vssync.sync.identity import is_namespaced


@dataclass
class RemoteSnapshot:
    """Remote state of one namespace at the start of a run."""

    objects: list[RemoteObject] = field(default_factory=list)
    links: set[str] = field(default_factory=set)
    index_id: Optional[str] = None


class SnapshotReader:
    """
    Reads the remote state a plan is computed from.

    Every listing is paged to exhaustion. A failure on any page is fatal:
    an incomplete object list would turn live objects into false orphans.
    """

    def __init__(self, client: RemoteClient, namespace: str, logger: Optional[SyncLogger] = None):
        """
        Initialize reader.

        Args:
            client: Remote API client.
            namespace: Namespace key; objects outside it are never returned.
            logger: Event logger.
        """
        self.client = client
        self.namespace = namespace
        self.logger = logger or null_logger()

    def read_objects(self) -> list[RemoteObject]:
        """
        List every object of the namespace in scan order.

        Raises:
            SnapshotError: If any page cannot be fetched.
        """
        try:
            objects = [
                obj for obj in iter_items(self.client.list_objects_page) if is_namespaced(obj.name, self.namespace)
            ]
        except RemoteError as e:
            raise SnapshotError(f"Cannot list remote objects: {e.message}") from e

        self.logger.info(f"Found {len(objects)} matching files in remote collection")
        return objects

    def read_links(self, index_id: str) -> set[str]:
        """
        List the ids of every object linked into an index.

        Raises:
            SnapshotError: If any page cannot be fetched.
        """
        try:
            links = set(iter_items(lambda cursor: self.client.list_members_page(index_id, cursor)))
        except RemoteError as e:
            raise SnapshotError(f"Cannot list members of index {index_id}: {e.message}") from e

        self.logger.info(f"Found {len(links)} files in vector store")
        return links

    def read(self, index_id: Optional[str]) -> RemoteSnapshot:
        """
        Read objects and, when an index exists, its membership.

        Args:
            index_id: Resolved index id, or None if no index exists yet.

        Returns:
            RemoteSnapshot of the namespace.
        """
        objects = self.read_objects()
        links = self.read_links(index_id) if index_id is not None else set()
        return RemoteSnapshot(objects=objects, links=links, index_id=index_id)

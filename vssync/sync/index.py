# VSSYNC Index Resolver
# Find-or-create the index tagged with the namespace key

from typing import Optional

from vssync.errors import IndexResolutionError, RemoteError
from vssync.logger import SyncLogger, null_logger
from vssync.remote.base import RemoteClient, RemoteIndex, iter_items

METADATA_KEY = "key"


class IndexResolver:
    """
    Locates the single index of a namespace.

    Indexes are matched by the metadata tag, never by name. The tag is set
    once at creation and never modified afterwards.
    """

    def __init__(self, client: RemoteClient, namespace: str, logger: Optional[SyncLogger] = None):
        """
        Initialize resolver.

        Args:
            client: Remote API client.
            namespace: Namespace key to match.
            logger: Event logger.
        """
        self.client = client
        self.namespace = namespace
        self.logger = logger or null_logger()

    def find(self) -> Optional[RemoteIndex]:
        """
        Scan all index pages for the namespace tag.

        Returns:
            First matching index in page order, or None.

        Raises:
            IndexResolutionError: If a page cannot be listed.
        """
        try:
            for index in iter_items(self.client.list_indexes_page):
                if index.metadata.get(METADATA_KEY) == self.namespace:
                    return index
        except RemoteError as e:
            raise IndexResolutionError(f"Cannot list indexes: {e.message}") from e
        return None

    def resolve(self, *, create: bool = True) -> Optional[RemoteIndex]:
        """
        Find the namespace index, creating and tagging it if missing.

        Args:
            create: Create the index when none is tagged. With False, a
                missing index yields None (used for dry runs).

        Returns:
            The authoritative index for this run.

        Raises:
            IndexResolutionError: If listing or creation fails.
        """
        index = self.find()
        if index is not None:
            self.logger.info(f"Found vector store: {index.name} with id: {index.id}")
            return index

        if not create:
            self.logger.info(f"No vector store tagged {self.namespace}")
            return None

        self.logger.info(f"Creating vector store: {self.namespace}")
        try:
            return self.client.create_index(self.namespace, {METADATA_KEY: self.namespace})
        except RemoteError as e:
            raise IndexResolutionError(f"Cannot create index {self.namespace}: {e.message}") from e

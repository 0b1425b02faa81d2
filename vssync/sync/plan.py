# VSSYNC Reconciler
# Pure three-way diff between local identities and remote state

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from vssync.remote.base import RemoteObject
from vssync.sync.identity import Identity, LocalFile


@dataclass(frozen=True)
class LinkOnlyEntry:
    """A local file whose object is uploaded but not linked into the index."""

    local: LocalFile
    object_id: str

    @property
    def key(self) -> str:
        return self.local.key


@dataclass(frozen=True)
class DeleteEntry:
    """A remote object scheduled for deletion."""

    object: RemoteObject
    linked: bool

    @property
    def key(self) -> str:
        return self.object.name


@dataclass
class Plan:
    """
    Operations that make the remote state match the local state.

    Lists are unordered with respect to execution; the executor runs the
    phases delete -> create+link -> link-only.
    """

    to_create_and_link: list[LocalFile] = field(default_factory=list)
    to_link_only: list[LinkOnlyEntry] = field(default_factory=list)
    to_delete: list[DeleteEntry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """Check if nothing needs to be done."""
        return not (self.to_create_and_link or self.to_link_only or self.to_delete)

    @property
    def total(self) -> int:
        """Number of planned operations."""
        return len(self.to_create_and_link) + len(self.to_link_only) + len(self.to_delete)


def _live_objects(remote_objects: Sequence[RemoteObject], remote_links: frozenset[str]) -> dict[str, RemoteObject]:
    """
    Pick the object that represents each name.

    A linked object is preferred; otherwise the first in scan order wins.
    """
    by_name: dict[str, list[RemoteObject]] = {}
    for obj in remote_objects:
        by_name.setdefault(obj.name, []).append(obj)

    return {
        name: next((obj for obj in candidates if obj.id in remote_links), candidates[0])
        for name, candidates in by_name.items()
    }


def _is_protected(name: str, namespace: str | None, protected_paths: frozenset[str]) -> bool:
    if not protected_paths or namespace is None:
        return False
    identity = Identity.parse(name, namespace)
    return identity is not None and identity.relative_path in protected_paths


def reconcile(
    local_files: Mapping[str, LocalFile],
    remote_objects: Sequence[RemoteObject],
    remote_links: Iterable[str],
    *,
    protected_paths: Iterable[str] = (),
    namespace: str | None = None,
) -> Plan:
    """
    Compute the plan for one namespace. Performs no I/O.

    Args:
        local_files: Local working set keyed by serialized identity.
        remote_objects: Remote objects of the namespace, in scan order.
        remote_links: Ids of objects linked into the namespace index.
        protected_paths: Relative paths whose remote objects must not be
            deleted (local files that could not be read this run).
        namespace: Namespace key, required to honor `protected_paths`.

    Returns:
        Plan with create+link, link-only and delete lists.
    """
    links = frozenset(remote_links)
    protected = frozenset(protected_paths)
    live = _live_objects(remote_objects, links)

    to_create_and_link = [local_files[key] for key in sorted(local_files) if key not in live]

    to_link_only = [
        LinkOnlyEntry(local=local_files[key], object_id=live[key].id)
        for key in sorted(local_files)
        if key in live and live[key].id not in links
    ]

    # Unmatched names and shadowed duplicates of live names
    stale = [
        DeleteEntry(object=obj, linked=obj.id in links)
        for obj in remote_objects
        if (obj.name not in local_files and not _is_protected(obj.name, namespace, protected))
        or (obj.name in local_files and live[obj.name].id != obj.id)
    ]
    to_delete = list({entry.object.id: entry for entry in stale}.values())

    return Plan(to_create_and_link=to_create_and_link, to_link_only=to_link_only, to_delete=to_delete)

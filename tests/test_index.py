# Tests for vssync.sync.index
# Finding or creating the namespace vector store

import pytest

from vssync.errors import IndexResolutionError
from vssync.sync.index import METADATA_KEY, IndexResolver


class TestIndexResolver:
    """Tests for IndexResolver."""

    def test_finds_tagged_index_on_later_page(self, remote):
        for i in range(4):
            remote.add_index(f"store-{i}", {})
        tagged = remote.add_index("journal", {METADATA_KEY: "journal"})

        index = IndexResolver(remote, "journal").resolve()

        assert index == tagged
        assert "create_index" not in remote.operations()
        assert remote.operations().count("list_indexes") == 3

    def test_matches_metadata_not_name(self, remote):
        remote.add_index("journal", {})
        tagged = remote.add_index("renamed by someone", {METADATA_KEY: "journal"})

        assert IndexResolver(remote, "journal").resolve() == tagged

    def test_first_match_wins(self, remote):
        first = remote.add_index("a", {METADATA_KEY: "journal"})
        remote.add_index("b", {METADATA_KEY: "journal"})

        assert IndexResolver(remote, "journal").resolve() == first

    def test_stops_scanning_after_match(self, remote):
        remote.add_index("a", {METADATA_KEY: "journal"})
        for i in range(4):
            remote.add_index(f"store-{i}", {})

        IndexResolver(remote, "journal").resolve()

        assert remote.operations().count("list_indexes") == 1

    def test_creates_tagged_index_when_missing(self, remote):
        remote.add_index("other", {METADATA_KEY: "other"})

        index = IndexResolver(remote, "journal").resolve()

        assert index.name == "journal"
        assert index.metadata == {METADATA_KEY: "journal"}
        assert remote.operations()[-1] == "create_index"

    def test_second_resolve_finds_created_index(self, remote):
        created = IndexResolver(remote, "journal").resolve()
        assert IndexResolver(remote, "journal").resolve() == created
        assert remote.operations().count("create_index") == 1

    def test_no_create(self, remote):
        assert IndexResolver(remote, "journal").resolve(create=False) is None
        assert "create_index" not in remote.operations()

    def test_listing_failure_is_fatal(self, remote):
        remote.fail_index_listing = True
        with pytest.raises(IndexResolutionError, match="Cannot list indexes"):
            IndexResolver(remote, "journal").resolve()

    def test_create_failure_is_fatal(self, remote):
        remote.fail_index_create = True
        with pytest.raises(IndexResolutionError, match="Cannot create index journal"):
            IndexResolver(remote, "journal").resolve()

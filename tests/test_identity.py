# Tests for vssync.sync.identity
# Identity derivation and local scanning

import hashlib
import os
from pathlib import Path
from unittest.mock import patch

from vssync.sync.identity import (
    Identity,
    LocalFile,
    derive_identity,
    is_namespaced,
    normalize_relative_path,
    scan_local_files,
)


def _md5(data: bytes) -> str:
    return hashlib.md5(data).hexdigest()


class TestIdentity:
    """Tests for Identity serialization."""

    def test_key_format(self):
        identity = Identity(namespace="journal", fingerprint="abc123", relative_path="notes/a.md")
        assert identity.key == "journal-abc123/notes/a.md"
        assert str(identity) == identity.key

    def test_parse_roundtrip(self):
        identity = Identity(namespace="my-repo", fingerprint="ff00", relative_path="x/y.md")
        assert Identity.parse(identity.key, "my-repo") == identity

    def test_parse_namespace_with_dash(self):
        parsed = Identity.parse("my-repo-ff00/a.md", "my-repo")
        assert parsed is not None
        assert parsed.fingerprint == "ff00"
        assert parsed.relative_path == "a.md"

    def test_parse_rejects_other_namespace(self):
        assert Identity.parse("other-ff00/a.md", "journal") is None

    def test_parse_rejects_malformed(self):
        assert Identity.parse("journal-ff00", "journal") is None
        assert Identity.parse("journal-/a.md", "journal") is None
        assert Identity.parse("journal-ff00/", "journal") is None

    def test_identity_is_hashable_and_immutable(self):
        a = Identity("ns", "h", "a.md")
        b = Identity("ns", "h", "a.md")
        assert a == b
        assert len({a, b}) == 1


class TestNamespace:
    """Tests for namespace prefix matching."""

    def test_dash_and_slash_prefixes(self):
        assert is_namespaced("journal-abc/a.md", "journal")
        assert is_namespaced("journal/a.md", "journal")

    def test_other_names(self):
        assert not is_namespaced("journalx-abc/a.md", "journal")
        assert not is_namespaced("other-abc/a.md", "journal")
        assert not is_namespaced("journal", "journal")

    def test_sibling_namespace_with_dash(self):
        assert is_namespaced("docs-0123456789abcdef/readme.md", "docs")
        assert not is_namespaced("docs-api-0123456789abcdef/readme.md", "docs")
        assert is_namespaced("docs-api-0123456789abcdef/readme.md", "docs-api")

    def test_fingerprint_must_be_hex(self):
        assert not is_namespaced("docs-xyz/a.md", "docs")
        assert not is_namespaced("docs-abc", "docs")

    def test_namespace_is_literal(self):
        assert not is_namespaced("dxcs-abc/a.md", "d.cs")
        assert is_namespaced("d.cs-abc/a.md", "d.cs")


class TestDeriveIdentity:
    """Tests for derive_identity."""

    def test_fingerprint_is_content_hash(self, temp_dir: Path):
        f = temp_dir / "a.md"
        f.write_bytes(b"hello")
        identity = derive_identity("ns", "a.md", f)
        assert identity.fingerprint == _md5(b"hello")
        assert identity.key == f"ns-{_md5(b'hello')}/a.md"

    def test_content_change_changes_identity(self, temp_dir: Path):
        f = temp_dir / "a.md"
        f.write_bytes(b"v1")
        first = derive_identity("ns", "a.md", f)
        f.write_bytes(b"v2")
        second = derive_identity("ns", "a.md", f)
        assert first.key != second.key
        assert first.relative_path == second.relative_path

    def test_mtime_does_not_matter(self, temp_dir: Path):
        f = temp_dir / "a.md"
        f.write_bytes(b"same")
        first = derive_identity("ns", "a.md", f)
        os.utime(f, (1, 1))
        assert derive_identity("ns", "a.md", f) == first

    def test_relative_path_uses_forward_slashes(self):
        assert normalize_relative_path(Path("guide") / "b.md") == "guide/b.md"


class TestScanLocalFiles:
    """Tests for scan_local_files."""

    def test_filters_empty_and_unsupported(self, docs_dir: Path):
        scan = scan_local_files(str(docs_dir / "**" / "*"), "ns")

        relative = sorted(f.identity.relative_path for f in scan.files.values())
        assert relative == ["a.md", "guide/b.md", "notes.txt"]
        reasons = {path.name: reason for path, reason in scan.skipped}
        assert reasons["empty.md"] == "empty"
        assert reasons["tool.exe"] == "unsupported type"
        assert scan.errors == []

    def test_relative_to_search_root(self, docs_dir: Path):
        scan = scan_local_files(str(docs_dir / "**" / "*.md"), "ns")
        keys = set(scan.files)
        b_hash = _md5((docs_dir / "guide" / "b.md").read_bytes())
        assert f"ns-{b_hash}/guide/b.md" in keys
        assert all(isinstance(f, LocalFile) for f in scan.files.values())

    def test_local_file_details(self, docs_dir: Path):
        scan = scan_local_files(str(docs_dir / "*.md"), "ns")
        assert scan.total == 1
        local = next(iter(scan.files.values()))
        assert local.absolute_path == (docs_dir / "a.md").resolve()
        assert local.size_bytes == (docs_dir / "a.md").stat().st_size
        assert local.key == local.identity.key

    def test_custom_extensions(self, docs_dir: Path):
        scan = scan_local_files(str(docs_dir / "**" / "*"), "ns", extensions=[".txt"])
        assert [f.identity.relative_path for f in scan.files.values()] == ["notes.txt"]

    def test_no_matches(self, temp_dir: Path):
        scan = scan_local_files(str(temp_dir / "**" / "*.md"), "ns")
        assert scan.files == {}
        assert scan.total == 0

    def test_read_error_protects_path(self, docs_dir: Path):
        def failing_hash(path, **kwargs):
            if path.name == "a.md":
                raise PermissionError("denied")
            return "h"

        with patch("vssync.sync.identity.file_hash", side_effect=failing_hash):
            scan = scan_local_files(str(docs_dir / "**" / "*.md"), "ns")

        assert [f.identity.relative_path for f in scan.files.values()] == ["guide/b.md"]
        assert len(scan.errors) == 1
        assert scan.errors[0][0].name == "a.md"
        assert scan.protected_paths == {"a.md"}

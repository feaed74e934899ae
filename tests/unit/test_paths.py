"""Tests for identifier to path and URL resolution."""

import pytest

from scp_storage.paths import PathResolver, join_path


class TestJoinPath:
    """Tests for join_path function."""

    def test_join_skips_none(self):
        """Test that unset parts are left out."""
        assert join_path(None, "uploads", "a.txt") == "uploads/a.txt"
        assert join_path(None, None, "a.txt") == "a.txt"

    def test_join_collapses_separators_at_seams(self):
        """Test that doubled separators between parts collapse."""
        assert join_path("/tmp/store/", "/uploads/", "/a.txt") == "/tmp/store/uploads/a.txt"

    def test_join_keeps_protocol_relative_host(self):
        """Test that a leading // on the first part survives."""
        assert join_path("//cdn.example.com", "a.txt") == "//cdn.example.com/a.txt"

    def test_join_empty_root(self):
        """Test joining under the filesystem root."""
        assert join_path("", "uploads", "a.txt") == "/uploads/a.txt"


class TestPathResolver:
    """Tests for PathResolver."""

    @pytest.fixture
    def resolver(self) -> PathResolver:
        return PathResolver("/tmp/store", prefix="uploads")

    def test_path_with_prefix(self, resolver: PathResolver):
        """Test path includes directory, prefix and identifier."""
        assert resolver.path("a.txt") == "/tmp/store/uploads/a.txt"

    def test_path_without_prefix(self):
        """Test path without a prefix."""
        assert PathResolver("/tmp/store").path("a.txt") == "/tmp/store/a.txt"

    def test_path_nested_identifier(self, resolver: PathResolver):
        """Test identifiers with separators map to subdirectories."""
        assert resolver.path("2024/ab12.pdf") == "/tmp/store/uploads/2024/ab12.pdf"

    def test_path_does_not_sanitize_traversal(self, resolver: PathResolver):
        """Test that '..' passes through unchanged."""
        assert resolver.path("../escape.txt") == "/tmp/store/uploads/../escape.txt"

    def test_base_path(self, resolver: PathResolver):
        """Test base path is directory plus prefix."""
        assert resolver.base_path() == "/tmp/store/uploads"
        assert PathResolver("/tmp/store").base_path() == "/tmp/store"

    def test_url_relative_with_prefix(self, resolver: PathResolver):
        """Test URL without a host is root-relative."""
        assert resolver.url("a.txt") == "uploads/a.txt"

    def test_url_with_host(self):
        """Test URL with a CDN host."""
        resolver = PathResolver("/tmp/store", prefix="uploads", host="//cdn.example.com")
        assert resolver.url("a.txt") == "//cdn.example.com/uploads/a.txt"

    def test_url_with_host_no_prefix(self):
        """Test URL with a host and no prefix."""
        resolver = PathResolver("/tmp/store", host="https://files.example.com")
        assert resolver.url("a.txt") == "https://files.example.com/a.txt"

    def test_url_bare_identifier(self):
        """Test URL with neither host nor prefix is the identifier."""
        assert PathResolver("/tmp/store").url("a.txt") == "a.txt"

    @pytest.mark.parametrize("identifier", ["a.txt", "2024/b.pdf", "x"])
    def test_url_never_contains_directory(self, identifier: str):
        """Test that the root directory never leaks into URLs."""
        for host in (None, "//cdn.example.com"):
            for prefix in (None, "uploads"):
                resolver = PathResolver("/srv/secret-root", prefix=prefix, host=host)
                assert "secret-root" not in resolver.url(identifier)

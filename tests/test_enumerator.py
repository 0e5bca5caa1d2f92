"""Tests for paginated prefix enumeration."""

from unittest.mock import Mock, call

import pytest

from bucketfs.core import settings
from bucketfs.core.exceptions import ProviderError, ValidationError
from bucketfs.objectstorage.listing import ObjectEnumerator
from bucketfs.objectstorage.provider import ObjectInfo, ObjectListPage


def _collect(enumerator, prefix, recursive):
    keys, prefixes = [], []

    def visitor(objects, sub_prefixes, page_prefix):
        keys.extend(obj.key for obj in objects)
        prefixes.extend(sub_prefixes)

    enumerator.walk(prefix, recursive, visitor)
    return keys, prefixes


class TestMarkerProtocol:
    """Test continuation marker handling with a mocked provider."""

    def test_follows_markers_until_empty(self):
        """Test marker sequence '', m1, m2 makes exactly three calls."""
        provider = Mock()
        provider.list_objects.side_effect = [
            ObjectListPage(objects=[ObjectInfo("dir/1")], next_marker="m1"),
            ObjectListPage(objects=[ObjectInfo("dir/2")], next_marker="m2"),
            ObjectListPage(objects=[ObjectInfo("dir/3")], next_marker=""),
        ]
        visitor = Mock()

        ObjectEnumerator(provider, "bucket").walk("dir/", False, visitor)

        assert provider.list_objects.call_args_list == [
            call("bucket", "dir/", "/", 1000, ""),
            call("bucket", "dir/", "/", 1000, "m1"),
            call("bucket", "dir/", "/", 1000, "m2"),
        ]
        assert visitor.call_count == 3

    def test_visitor_receives_page_prefix(self):
        """Test visitor is called with objects, sub-prefixes and the prefix."""
        page = ObjectListPage(objects=[ObjectInfo("dir/a")], prefixes=["dir/sub/"])
        provider = Mock()
        provider.list_objects.return_value = page
        visitor = Mock()

        ObjectEnumerator(provider, "bucket").walk("dir/", False, visitor)

        visitor.assert_called_once_with(page.objects, ["dir/sub/"], "dir/")

    def test_custom_page_size(self):
        """Test page size is sent as max-keys."""
        provider = Mock()
        provider.list_objects.return_value = ObjectListPage()

        ObjectEnumerator(provider, "bucket", page_size=5).walk("", False, Mock())

        provider.list_objects.assert_called_once_with("bucket", "", "/", 5, "")

    @pytest.mark.parametrize("page_size", [0, -1, 1001])
    def test_rejects_page_size_out_of_range(self, page_size):
        """Test page sizes outside the provider limits are refused."""
        with pytest.raises(ValidationError, match="Page size"):
            ObjectEnumerator(Mock(), "bucket", page_size=page_size)

    def test_default_page_size_from_settings(self, monkeypatch):
        """Test the page size falls back to settings."""
        monkeypatch.setattr(settings, "list_page_size", 7)

        assert ObjectEnumerator(Mock(), "bucket").page_size == 7

    def test_repeated_prefixes_walked_once(self):
        """Test sub-prefixes repeated on later pages are visited once."""
        provider = Mock()
        provider.list_objects.side_effect = [
            ObjectListPage(objects=[ObjectInfo("a/")], prefixes=["a/b/"], next_marker="a/"),
            ObjectListPage(objects=[ObjectInfo("a/b/1")]),
            ObjectListPage(objects=[ObjectInfo("a/2")], prefixes=["a/b/"]),
        ]
        visited = []

        ObjectEnumerator(provider, "bucket").walk(
            "a/", True, lambda objects, prefixes, prefix: visited.append((prefix, prefixes))
        )

        assert visited == [("a/b/", []), ("a/", ["a/b/"]), ("a/", [])]
        assert provider.list_objects.call_count == 3

    def test_rejects_prefix_without_separator(self):
        """Test listing prefixes must end with the delimiter."""
        enumerator = ObjectEnumerator(Mock(), "bucket")

        with pytest.raises(ValidationError, match="must end with"):
            enumerator.walk("images", False, Mock())

    def test_failure_stops_enumeration(self):
        """Test a failing page aborts the walk after earlier pages were visited."""
        provider = Mock()
        provider.list_objects.side_effect = [
            ObjectListPage(objects=[ObjectInfo("dir/1")], next_marker="m1"),
            ProviderError("boom"),
            ObjectListPage(objects=[ObjectInfo("dir/3")]),
        ]
        visitor = Mock()

        with pytest.raises(ProviderError):
            ObjectEnumerator(provider, "bucket").walk("dir/", False, visitor)

        assert provider.list_objects.call_count == 2
        assert visitor.call_count == 1

    def test_recursive_visits_children_before_parent(self):
        """Test sub-prefixes are fully walked before their parent page."""
        provider = Mock()
        provider.list_objects.side_effect = [
            ObjectListPage(objects=[ObjectInfo("a/1")], prefixes=["a/b/"]),
            ObjectListPage(objects=[ObjectInfo("a/b/2")]),
        ]
        visited = []

        ObjectEnumerator(provider, "bucket").walk(
            "a/", True, lambda objects, prefixes, prefix: visited.append(prefix)
        )

        assert visited == ["a/b/", "a/"]


class TestTreeEnumeration:
    """Test enumeration over an in-memory tree at several page sizes."""

    @pytest.mark.parametrize("page_size", [1, 2, 3, 1000])
    def test_non_recursive_returns_direct_children(self, memory_provider, page_size):
        """Test only direct children of the prefix are reported."""
        enumerator = ObjectEnumerator(memory_provider, "bucket", page_size=page_size)

        keys, prefixes = _collect(enumerator, "images/", recursive=False)

        assert sorted(keys) == ["images/", "images/a.jpg", "images/b.jpg"]
        assert sorted(prefixes) == ["images/2019/", "images/2020/"]

    @pytest.mark.parametrize("page_size", [1, 2, 3, 1000])
    def test_recursive_returns_all_descendants_once(self, memory_provider, page_size):
        """Test recursion yields every key below the prefix exactly once."""
        enumerator = ObjectEnumerator(memory_provider, "bucket", page_size=page_size)

        keys, prefixes = _collect(enumerator, "images/", recursive=True)

        expected = sorted(k for k in memory_provider.objects if k.startswith("images/"))
        assert sorted(keys) == expected
        assert len(keys) == len(set(keys))
        assert sorted(prefixes) == ["images/2019/", "images/2019/raw/", "images/2020/"]

    def test_sibling_prefix_not_matched(self, memory_provider):
        """Test images/ does not pick up images-backup/."""
        enumerator = ObjectEnumerator(memory_provider, "bucket")

        keys, _ = _collect(enumerator, "images/", recursive=True)

        assert not any(key.startswith("images-backup") for key in keys)

    def test_page_count_follows_page_size(self, memory_provider):
        """Test a three-entry listing with page size 1 makes three calls."""
        enumerator = ObjectEnumerator(memory_provider, "bucket", page_size=1)

        _collect(enumerator, "images/2019/", recursive=False)

        assert memory_provider.list_calls == [
            ("images/2019/", ""),
            ("images/2019/", "images/2019/"),
            ("images/2019/", "images/2019/c.jpg"),
        ]

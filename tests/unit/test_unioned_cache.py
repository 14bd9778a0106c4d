"""Tests for UnionedCache — overlay-over-fixtures resolution, holes and listings."""

from __future__ import annotations

from pathlib import Path

import pytest

from epigon.exceptions import (
    LocationNotObjectError,
    LocationNotPrefixError,
    ObjectNotFoundError,
    PrefixNotFoundError,
    StorageFailure,
)
from epigon.storage import FixtureStore, IReadWriteCache, Layer, MemoryStore, UnionedCache
from epigon.storage.records import CollectionRecord, HoleRecord, LinkRecord
from tests.fakes.fake_store import CountingStore


@pytest.fixture
def counted(fixture_dir: Path) -> tuple[UnionedCache, CountingStore, CountingStore]:
    base = CountingStore(FixtureStore(fixture_dir))
    overlay = CountingStore(MemoryStore())
    return UnionedCache(base, overlay), base, overlay


class TestProtocol:
    def test_implements_read_write_contract(self, store: UnionedCache) -> None:
        assert isinstance(store, IReadWriteCache)
        assert isinstance(store.overlay, IReadWriteCache)


class TestRead:
    def test_reads_fixtures(self, store: UnionedCache, root_bytes: bytes, child1_bytes: bytes) -> None:
        assert store.read("root") == root_bytes
        assert store.read("root/child1") == child1_bytes

    def test_collection_location_is_not_an_object(self, store: UnionedCache) -> None:
        with pytest.raises(LocationNotObjectError):
            store.read("root/")

    def test_missing_reports_base_failure(self, store: UnionedCache) -> None:
        with pytest.raises(ObjectNotFoundError) as excinfo:
            store.read("missing")
        assert isinstance(excinfo.value.underlying, FileNotFoundError)

    def test_resolution_is_memoized(self, counted: tuple[UnionedCache, CountingStore, CountingStore]) -> None:
        cache, base, overlay = counted
        cache.read("root/child1")
        cache.read("root/child1")
        cache.read("root/child1")
        assert overlay.calls["read"] == 1
        assert base.calls["read"] == 3

    def test_memoized_link_names_the_layer(self, store: UnionedCache) -> None:
        store.read("root")
        store.write("other", b"1")
        assert store._records["root"] == LinkRecord(Layer.BASE, "root")
        assert store._records["other"] == LinkRecord(Layer.OVERLAY, "other")

    def test_unexpected_record_is_an_internal_failure(self, store: UnionedCache) -> None:
        store._records["root"] = CollectionRecord(())
        with pytest.raises(StorageFailure):
            store.read("root")


class TestWrite:
    def test_write_then_read(self, store: UnionedCache) -> None:
        store.write("other", b'"guy"')
        assert store.read("other") == b'"guy"'

    def test_write_shadows_fixture(self, store: UnionedCache) -> None:
        assert store.read("root/child1") == b'{"name":"baby"}'
        store.write("root/child1", b'{"name":"grown"}')
        assert store.read("root/child1") == b'{"name":"grown"}'
        assert store.base.read("root/child1") == b'{"name":"baby"}'

    def test_collection_location_rejected(self, store: UnionedCache) -> None:
        with pytest.raises(LocationNotObjectError):
            store.write("root/", b'"a"')
        with pytest.raises(LocationNotObjectError):
            store.write("other/", b'"a"')

    def test_write_revives_deleted_fixture(self, store: UnionedCache) -> None:
        assert store.delete("root/child2") is True
        store.write("root/child2", b'{"name":"again"}')
        assert store.read("root/child2") == b'{"name":"again"}'


class TestExists:
    def test_unloaded_fixture_exists(self, store: UnionedCache) -> None:
        assert store.exists("root/child2") is True

    def test_missing(self, store: UnionedCache) -> None:
        assert store.exists("missing") is False

    def test_written(self, store: UnionedCache) -> None:
        store.write("other", b"1")
        assert store.exists("other") is True


class TestList:
    def test_immediate_children(self, store: UnionedCache) -> None:
        assert store.list("root/") == ["root/child1", "root/child2"]

    def test_object_location_rejected(self, store: UnionedCache) -> None:
        with pytest.raises(LocationNotPrefixError):
            store.list("root/child1")
        with pytest.raises(LocationNotPrefixError):
            store.list("root")

    def test_combines_both_layers(self, store: UnionedCache) -> None:
        store.write("root/stepchild", b'{"name":"headed"}')
        assert store.list("root/") == ["root/child1", "root/child2", "root/stepchild"]

    def test_empty_fixture_directory(self, store: UnionedCache) -> None:
        assert store.list("root/child2/nest/") == []

    def test_missing_prefix(self, store: UnionedCache) -> None:
        with pytest.raises(PrefixNotFoundError):
            store.list("root/child3/nest/")

    def test_overlay_only_prefix(self, store: UnionedCache) -> None:
        store.write("fresh/one", b"1")
        assert store.list("fresh/") == ["fresh/one"]

    def test_listing_is_memoized(self, counted: tuple[UnionedCache, CountingStore, CountingStore]) -> None:
        cache, base, overlay = counted
        cache.list("root/")
        cache.list("root/")
        assert base.calls["list"] == 1
        assert overlay.calls["list"] == 1


class TestReadList:
    def test_renders_fixture_children(self, store: UnionedCache) -> None:
        assert store.read_list("root/") == b'[{"name":"baby"},{"name":"kid"}]'

    def test_object_location_rejected(self, store: UnionedCache) -> None:
        with pytest.raises(LocationNotPrefixError):
            store.read_list("root/child1")
        with pytest.raises(LocationNotPrefixError):
            store.read_list("root")

    def test_empty_collection(self, store: UnionedCache) -> None:
        assert store.read_list("root/child2/nest/") == b"[]"

    def test_write_invalidates_rendering(self, store: UnionedCache) -> None:
        assert store.read_list("root/") == b'[{"name":"baby"},{"name":"kid"}]'
        store.write("root/other", b'"guy"')
        assert store.read_list("root/") == b'[{"name":"baby"},{"name":"kid"},"guy"]'

    def test_nested_listing_untouched_by_sibling_write(self, store: UnionedCache) -> None:
        nested = store.read_list("root/child1/nest/")
        store.write("root/other", b'"guy"')
        assert store.read_list("root/child1/nest/") is nested


class TestDelete:
    def test_delete_written(self, store: UnionedCache) -> None:
        store.write("other", b'"guy"')
        assert store.delete("other") is True
        assert store.exists("other") is False
        with pytest.raises(ObjectNotFoundError):
            store.read("other")
        assert "other" not in store._records

    def test_delete_fixture_leaves_hole(self, store: UnionedCache) -> None:
        assert store.delete("root/child2") is True
        assert store.exists("root/child2") is False
        with pytest.raises(ObjectNotFoundError) as excinfo:
            store.read("root/child2")
        assert str(excinfo.value) == "root/child2: no such object record"
        assert store.base.read("root/child2") == b'{"name":"kid"}'

    def test_delete_shadowing_write_keeps_fixture_hidden(self, store: UnionedCache) -> None:
        store.write("root/child1", b'"mine"')
        assert store.delete("root/child1") is True
        assert store.exists("root/child1") is False
        with pytest.raises(ObjectNotFoundError):
            store.read("root/child1")

    def test_delete_missing(self, store: UnionedCache) -> None:
        assert store.delete("missing") is False

    def test_delete_collection_location(self, store: UnionedCache) -> None:
        assert store.delete("root/") is False

    def test_delete_twice(self, store: UnionedCache) -> None:
        assert store.delete("root/child1") is True
        assert store.delete("root/child1") is False


class TestClearAndReset:
    def test_reset_refills_holes(self, store: UnionedCache) -> None:
        store.delete("root/child2")
        store.reset()
        assert store.exists("root/child2") is True
        assert store.read("root/child2") == b'{"name":"kid"}'

    def test_reset_discards_writes(self, store: UnionedCache) -> None:
        store.write("root/child3", b'{"name":"new"}')
        store.reset()
        assert store.exists("root/child3") is False
        assert store.list("root/") == ["root/child1", "root/child2"]

    def test_reset_keeps_base_warm(self, store: UnionedCache) -> None:
        store.read("root")
        store.reset()
        assert store.base.exists("root") is True

    def test_clear_empties_base(self, store: UnionedCache) -> None:
        store.read("root")
        store.write("other", b"1")
        store.clear()
        assert store.base.exists("root") is False
        assert store.overlay.exists("other") is False
        assert store.exists("other") is False


class TestScenario:
    def test_write_and_delete_under_fixture_collection(self, store: UnionedCache) -> None:
        assert store.read_list("root/") == b'[{"name":"baby"},{"name":"kid"}]'

        store.write("root/child3", b'{"name":"new"}')
        assert store.read_list("root/") == b'[{"name":"baby"},{"name":"kid"},{"name":"new"}]'

        assert store.delete("root/child2") is True
        assert store.read_list("root/") == b'[{"name":"baby"},{"name":"new"}]'
        assert store.exists("root/child2") is False

    def test_every_written_child_is_listed(self, store: UnionedCache) -> None:
        written = ["root/a", "root/child1/nest/hand", "brand/new", "root/z"]
        for location in written:
            store.write(location, b"{}")
        assert {"root/a", "root/z"} <= set(store.list("root/"))
        assert "root/child1/nest/hand" in store.list("root/child1/nest/")
        assert store.list("brand/") == ["brand/new"]


class TestReadListFailures:
    def test_unreadable_child_fails_rendering(self, tmp_path: Path) -> None:
        (tmp_path / "items").mkdir()
        (tmp_path / "items" / "a.json").write_bytes(b"1")
        (tmp_path / "items" / "b.json").write_bytes(b"2")
        cache = UnionedCache.from_fixture_dir(tmp_path)
        assert cache.list("items/") == ["items/a", "items/b"]

        (tmp_path / "items" / "b.json").unlink()
        with pytest.raises(ObjectNotFoundError) as excinfo:
            cache.read_list("items/")
        assert excinfo.value.location == "items/b"
        assert cache._records["items/"] == CollectionRecord(("items/a", "items/b"))

        (tmp_path / "items" / "b.json").write_bytes(b"3")
        assert cache.read_list("items/") == b"[1,3]"

    def test_stale_hole_in_memoized_listing_fails_rendering(self, store: UnionedCache) -> None:
        assert store.list("root/") == ["root/child1", "root/child2"]
        store._records["root/child2"] = HoleRecord()
        with pytest.raises(ObjectNotFoundError):
            store.read_list("root/")
        assert store._records["root/"] == CollectionRecord(("root/child1", "root/child2"))


class TestFixtureTreeBoundary:
    def test_root_collection(self, store: UnionedCache, root_bytes: bytes) -> None:
        assert store.list("/") == ["/root"]
        assert store.read_list("/") == b"[" + root_bytes + b"]"

    def test_absolute_location_cannot_leave_tree(self, tmp_path: Path, fixture_dir: Path) -> None:
        (tmp_path / "secret.json").write_bytes(b'"leaked"')
        cache = UnionedCache.from_fixture_dir(fixture_dir)
        with pytest.raises(ObjectNotFoundError):
            cache.read(str(tmp_path / "secret"))
        assert cache.exists(str(tmp_path / "secret")) is False

"""
Tests for records and the record store.
"""

import pytest

from restmock.store import Record, RecordKey, ResourceStore


class TestRecord:
    """Test attribute access on records."""

    def test_attribute_and_item_access(self):
        record = Record("book", {"name": "Dune"})
        assert record.name == "Dune"
        assert record["name"] == "Dune"
        assert record.get("missing", "fallback") == "fallback"

    def test_assignment_adds_attributes(self):
        record = Record("book")
        record.pages = 412
        record["isbn"] = "123"
        assert record.attributes == {"pages": 412, "isbn": "123"}

    def test_missing_attribute_raises_attribute_error(self):
        record = Record("book")
        with pytest.raises(AttributeError):
            record.name

    def test_id_is_not_assignable(self):
        record = Record("book")
        with pytest.raises(AttributeError):
            record.id = 5

    def test_key_requires_id(self):
        with pytest.raises(ValueError):
            Record("book").key

    def test_stored_attributes_shadow_helpers(self):
        record = Record("order", {"items": ["pen"], "key": "A-1", "attributes": "none"}, record_id=1)
        assert record.items == ["pen"]
        assert record.key == "A-1"
        assert record.attributes == "none"
        assert record._key == RecordKey("order", 1)

    def test_repr_does_not_follow_references(self):
        author = Record("author", {"name": "Frank"}, record_id=1)
        book = Record("book", {"author": author}, record_id=2)
        author.books = [book]
        assert repr(book) == "<book id=2 author=<author:1>>"
        assert repr(author) == "<author id=1 name='Frank' books=[1 records]>"


class TestResourceStore:
    """Test id sequencing and storage."""

    def test_ids_start_at_one_and_increase_per_type(self):
        store = ResourceStore()
        first = store.add(Record("book"))
        second = store.add(Record("book"))
        author = store.add(Record("author"))

        assert (first.id, second.id) == (1, 2)
        assert author.id == 1
        assert second.key == RecordKey("book", 2)

    def test_all_returns_creation_order(self):
        store = ResourceStore()
        records = [store.add(Record("book", {"n": n})) for n in range(3)]
        assert store.all("book") == records
        assert store.all("books") == records

    def test_get_by_key(self):
        store = ResourceStore()
        record = store.add(Record("book"))
        assert store.get("book", 1) is record
        assert store.get("book", 2) is None

    def test_explicit_id_must_move_forward(self):
        store = ResourceStore()
        store.add(Record("book"), 10)
        assert store.next_id("book") == 11

        with pytest.raises(ValueError):
            store.add(Record("book"), 5)

    def test_removed_ids_are_not_reused(self):
        store = ResourceStore()
        store.add(Record("book"))
        second = store.add(Record("book"))

        assert store.remove(second) is True
        assert store.add(Record("book")).id == 3

    def test_remove_does_not_cascade(self):
        store = ResourceStore()
        author = store.add(Record("author"))
        book = store.add(Record("book", {"author": author}))

        store.remove(author)

        assert store.all("book") == [book]
        assert book.author is author

    def test_cannot_store_a_record_twice(self):
        store = ResourceStore()
        record = store.add(Record("book"))
        with pytest.raises(ValueError):
            store.add(record)

    def test_values_of(self):
        store = ResourceStore()
        store.add(Record("book", {"name": "A"}))
        store.add(Record("book", {"name": "B"}))
        store.add(Record("book"))
        assert store.values_of("book", "name") == ["A", "B"]

    def test_clear_restarts_sequences(self):
        store = ResourceStore()
        store.add(Record("book"))
        store.clear()

        assert len(store) == 0
        assert store.types() == []
        assert store.add(Record("book")).id == 1

    def test_values_of_reads_helper_named_attributes(self):
        store = ResourceStore()
        store.add(Record("order", {"key": "A-1"}))
        store.add(Record("order", {"get": "B-2"}))
        assert store.values_of("order", "key") == ["A-1"]
        assert store.values_of("order", "get") == ["B-2"]

    def test_singular_names_ending_in_s(self):
        store = ResourceStore()
        bus = store.add(Record("bus"))
        assert store.all("bus") == [bus]
        assert store.all("buses") == [bus]
        assert store.get("buses", 1) is bus

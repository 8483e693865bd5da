"""Tests for the ledger's in-memory indexes."""

import random
import re

import pytest
from decimal import Decimal

from personal_ledger.models.records import DateValue, ScheduledObligation
from personal_ledger.structures import RecordIndex, ScheduleQueue, Trie


def _obligation(day: int, month: int, year: int, description: str = "") -> ScheduledObligation:
    return ScheduledObligation(
        due_date=DateValue(day=day, month=month, year=year),
        description=description,
        amount=Decimal("10"),
    )


class TestTrie:
    """Tests for the description prefix index."""

    WORDS = ["rent", "rental car", "restaurant", "groceries", "gym", "r"]

    def _trie(self) -> Trie:
        trie = Trie()
        for word in self.WORDS:
            trie.insert(word)
        return trie

    def test_empty_trie_has_no_suggestions(self):
        """Test lookups on an empty trie."""
        assert Trie().suggestions("") == []
        assert Trie().suggestions("a") == []

    def test_empty_prefix_returns_everything(self):
        """Test that "" matches every word."""
        assert set(self._trie().suggestions("")) == set(self.WORDS)

    def test_prefix_returns_exact_subset(self):
        """Test that every prefix returns exactly the matching words."""
        trie = self._trie()
        prefixes = {word[:i] for word in self.WORDS for i in range(len(word) + 1)}
        prefixes |= {"x", "rents", "gymnasium"}
        for prefix in prefixes:
            expected = {word for word in self.WORDS if word.startswith(prefix)}
            assert set(trie.suggestions(prefix)) == expected

    def test_suggestions_are_lexicographic(self):
        """Test the traversal order."""
        assert self._trie().suggestions("re") == ["rent", "rental car", "restaurant"]
        assert self._trie().suggestions("") == sorted(self.WORDS)

    def test_insert_is_idempotent(self):
        """Test that duplicates are stored once."""
        trie = Trie()
        trie.insert("tea")
        trie.insert("tea")
        assert trie.suggestions("t") == ["tea"]
        assert len(trie) == 1

    def test_lookup_does_not_mutate(self):
        """Test that a missed lookup leaves no trace."""
        trie = Trie()
        trie.insert("tea")
        assert trie.suggestions("coffee") == []
        assert "c" not in trie
        assert trie.suggestions("") == ["tea"]

    def test_contains(self):
        """Test membership is whole-word."""
        trie = self._trie()
        assert "rent" in trie
        assert "ren" not in trie
        assert 42 not in trie

    def test_empty_string_is_a_word(self):
        """Test inserting an empty description."""
        trie = Trie()
        trie.insert("")
        assert trie.suggestions("") == [""]
        assert "" in trie

    def test_very_long_word(self):
        """Test that traversal is not limited by recursion depth."""
        trie = Trie()
        word = "a" * 5000
        trie.insert(word)
        assert trie.suggestions("aaa") == [word]


class TestScheduleQueue:
    """Tests for the due-date priority queue."""

    def test_empty_queue(self):
        """Test an empty queue."""
        queue = ScheduleQueue()
        assert queue.peek() is None
        assert queue.snapshot_in_order() == []
        assert not queue

    def test_snapshot_is_ascending_by_date(self):
        """Test soonest-first ordering across year, month and day."""
        queue = ScheduleQueue()
        dates = [(15, 6, 2024), (1, 1, 2025), (31, 12, 2023), (2, 6, 2024), (1, 7, 2024)]
        for day, month, year in dates:
            queue.schedule(_obligation(day, month, year))
        keys = [ob.due_date.sort_key for ob in queue.snapshot_in_order()]
        assert keys == sorted(keys)
        assert keys[0] == (2023, 12, 31)

    def test_random_insertion_order(self):
        """Test ordering for arbitrary insertion orders."""
        rng = random.Random(7)
        queue = ScheduleQueue()
        for _ in range(200):
            queue.schedule(_obligation(rng.randint(1, 28), rng.randint(1, 12), rng.randint(2020, 2030)))
        snapshot = queue.snapshot_in_order()
        assert len(snapshot) == 200
        assert all(a.due_date <= b.due_date for a, b in zip(snapshot, snapshot[1:]))

    def test_ties_keep_insertion_order(self):
        """Test that same-day obligations keep their scheduling order."""
        queue = ScheduleQueue()
        queue.schedule(_obligation(1, 5, 2024, "first"))
        queue.schedule(_obligation(1, 1, 2024, "earlier"))
        queue.schedule(_obligation(1, 5, 2024, "second"))
        queue.schedule(_obligation(1, 5, 2024, "third"))
        assert [ob.description for ob in queue.snapshot_in_order()] == [
            "earlier", "first", "second", "third",
        ]

    def test_snapshot_is_non_destructive(self):
        """Test that reading the queue leaves it intact."""
        queue = ScheduleQueue()
        queue.schedule(_obligation(3, 3, 2024))
        queue.schedule(_obligation(1, 3, 2024))
        first = queue.snapshot_in_order()
        second = queue.snapshot_in_order()
        assert first == second
        assert len(queue) == 2

    def test_peek_returns_soonest(self):
        """Test peek()."""
        queue = ScheduleQueue()
        queue.schedule(_obligation(3, 3, 2024, "later"))
        queue.schedule(_obligation(1, 3, 2024, "sooner"))
        assert queue.peek().description == "sooner"
        assert len(queue) == 2


class TestRecordIndex:
    """Tests for identifier issue and lookup."""

    def test_identifier_format(self):
        """Test the TXN<n> format."""
        record_id = RecordIndex().register(0)
        assert re.fullmatch(r"TXN[1-9]\d*", record_id)

    def test_identifiers_are_unique_across_indexes(self):
        """Test that no identifier is issued twice in one process."""
        first, second = RecordIndex(), RecordIndex()
        issued = [first.register(i) for i in range(50)] + [second.register(i) for i in range(50)]
        assert len(set(issued)) == len(issued)

    def test_resolve(self):
        """Test resolving to handles."""
        index = RecordIndex()
        a = index.register(0)
        b = index.register(1)
        assert index.resolve(a) == 0
        assert index.resolve(b) == 1
        assert a in index
        assert len(index) == 2

    def test_unknown_identifier_is_none(self):
        """Test never-issued identifiers."""
        index = RecordIndex()
        index.register(0)
        assert index.resolve("TXN0") is None
        assert index.resolve("nonsense") is None

    def test_invalidate_makes_ids_stale(self):
        """Test that invalidated identifiers stop resolving and are not reissued."""
        index = RecordIndex()
        old = index.register(0)
        index.invalidate()
        assert index.resolve(old) is None
        assert len(index) == 0
        assert index.register(0) != old

    def test_items_ordered_by_handle(self):
        """Test items()."""
        index = RecordIndex()
        ids = [index.register(i) for i in range(3)]
        assert index.items() == [(ids[0], 0), (ids[1], 1), (ids[2], 2)]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

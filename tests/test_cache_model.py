"""Tests for the cache cost model."""

import pytest

from feedpair_search.core.cache_model import (
    CacheModel, entry_size_for_l1_entries, L1_CAPACITY, L2_CAPACITY, L3_CAPACITY
)


class TestCacheModelConstruction:
    """Test tier capacity derivation."""

    def test_tier_capacities(self):
        """Capacities are the fixed tier sizes divided by the entry size."""
        model = CacheModel(1024)

        assert model.l1_entries == 32
        assert model.l2_entries == 512
        assert model.l3_entries == 32 * 1024

    def test_capacities_are_ordered(self):
        """L1 holds no more entries than L2, which holds no more than L3."""
        for entry_size in [1, 7, 1000, 10922, L1_CAPACITY, L3_CAPACITY]:
            model = CacheModel(entry_size)
            assert model.l1_entries <= model.l2_entries <= model.l3_entries

    def test_entry_size_for_l1_entries(self):
        """The helper entry size gives the requested L1 capacity."""
        for l1_entries in [3, 4, 6, 8]:
            model = CacheModel(entry_size_for_l1_entries(l1_entries))
            assert model.l1_entries == l1_entries

    def test_three_entry_l1(self):
        """Reference configuration used throughout the tests."""
        model = CacheModel(entry_size_for_l1_entries(3))

        assert model.entry_size == 10922
        assert model.l1_entries == 3
        assert model.l2_entries == L2_CAPACITY // 10922
        assert model.l3_entries == L3_CAPACITY // 10922

    def test_zero_entry_size_rejected(self):
        """A zero entry size is a caller bug."""
        with pytest.raises(AssertionError):
            CacheModel(0)


class TestCostModel:
    """Test the age to cost mapping."""

    @pytest.fixture
    def model(self):
        return CacheModel(entry_size_for_l1_entries(3))

    def test_tier_costs(self, model):
        """Each tier charges its cost relative to an L1 miss."""
        assert model.cost_model(0) == 0.0
        assert model.cost_model(model.l1_entries - 1) == 0.0
        assert model.cost_model(model.l1_entries) == 1.0
        assert model.cost_model(model.l2_entries - 1) == 1.0
        assert model.cost_model(model.l2_entries) == 5.0
        assert model.cost_model(model.l3_entries - 1) == 5.0
        assert model.cost_model(model.l3_entries) == 30.0
        assert model.cost_model(10 * model.l3_entries) == 30.0


class TestSimulateAccess:
    """Test access simulation against a recency list."""

    @pytest.fixture
    def model(self):
        return CacheModel(entry_size_for_l1_entries(3))

    def test_first_access_is_free(self, model):
        """The first access to any entry costs nothing."""
        entries = model.start_simulation()
        for feed in range(10):
            assert model.simulate_access(entries, feed) == 0.0
        assert entries == list(range(10))

    def test_repeated_access_is_free(self, model):
        """An access repeated with nothing in between has age 0."""
        entries = model.start_simulation()
        model.simulate_access(entries, 5)
        assert model.simulate_access(entries, 5) == 0.0
        assert entries == [5]

    def test_entry_moves_to_tail(self, model):
        """A hit moves the entry to the most-recently-used position."""
        entries = [0, 1, 2, 3]
        assert model.simulate_access(entries, 1) == 0.0
        assert entries == [0, 2, 3, 1]

    def test_l1_miss(self, model):
        """Accessing an entry after 3 others were touched misses L1."""
        entries = model.start_simulation()
        for feed in [0, 1, 2, 3]:
            model.simulate_access(entries, feed)

        assert model.simulate_access(entries, 0) == 1.0
        assert entries == [1, 2, 3, 0]
        assert model.simulate_access(entries, 3) == 0.0

    def test_l2_miss(self):
        """Entries older than the L2 capacity cost the L2 miss ratio."""
        model = CacheModel(L2_CAPACITY // 4)
        entries = model.start_simulation()
        for feed in range(model.l2_entries + 1):
            model.simulate_access(entries, feed)

        assert model.simulate_access(entries, 0) == 5.0

    def test_simulate_pair(self, model):
        """Both feeds of a pair are accessed in order."""
        entries = [0, 1, 2, 3]
        assert model.simulate_pair(entries, (0, 1)) == 2.0
        assert entries == [2, 3, 0, 1]

        entries = [0, 1, 2, 3]
        assert model.simulate_pair(entries, (3, 2)) == 0.0
        assert entries == [0, 1, 3, 2]

    def test_caller_state_is_the_only_side_effect(self, model):
        """Simulating on one list leaves another untouched."""
        entries = [0, 1, 2]
        other = list(entries)
        model.simulate_access(entries, 0)
        assert other == [0, 1, 2]

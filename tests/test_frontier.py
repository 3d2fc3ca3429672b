"""Tests for the priority frontier."""

import numpy as np
import pytest

from feedpair_search.core.cache_model import CacheModel, entry_size_for_l1_entries
from feedpair_search.search.frontier import PartialPaths, prioritize
from feedpair_search.search.partial_path import PartialPath


class FixedDraws:
    """Random source replaying a fixed sequence of draws."""

    def __init__(self, *draws):
        self.draws = list(draws)
        self.calls = []

    def integers(self, low, high):
        self.calls.append((low, high))
        return self.draws.pop(0)


def make_path(length, cost):
    steps = tuple((0, y) for y in range(length))
    return PartialPath(steps, [], cost)


class TestPriority:
    """Test priority computation."""

    def test_priority_formula(self):
        """Priority is round(1.3 * length - cost)."""
        assert prioritize(make_path(1, 0.0)) == 1
        assert prioritize(make_path(10, 0.0)) == 13
        assert prioritize(make_path(10, 5.0)) == 8
        assert prioritize(make_path(1, 5.0)) == -4

    def test_halves_round_away_from_zero(self):
        """A .5 score goes to the bucket further from zero."""
        assert prioritize(make_path(5, 0.0)) == 7
        assert prioritize(make_path(15, 0.0)) == 20
        assert prioritize(make_path(5, 10.0)) == -4

    def test_length_weight(self):
        """The length weight trades completion against cheapness."""
        assert prioritize(make_path(10, 2.0), length_weight=2.0) == 18
        assert prioritize(make_path(10, 2.0), length_weight=0.0) == -2


class TestPartialPaths:
    """Test push and pop semantics."""

    def test_empty_pop(self):
        frontier = PartialPaths()
        assert frontier.pop(FixedDraws()) is None
        assert len(frontier) == 0
        assert not frontier

    def test_highest_priority_first(self):
        """Longer and cheaper paths come out first."""
        frontier = PartialPaths()
        short = make_path(1, 0.0)
        long = make_path(5, 0.0)
        expensive = make_path(5, 30.0)
        for path in [short, expensive, long]:
            frontier.push(path)

        rng = FixedDraws(0, 0, 0)
        assert frontier.pop(rng) is long
        assert frontier.pop(rng) is short
        assert frontier.pop(rng) is expensive
        assert frontier.pop(rng) is None

    def test_random_tiebreak(self):
        """Equal priorities are drawn uniformly from the whole bucket."""
        frontier = PartialPaths()
        first, second, third = make_path(3, 0.0), make_path(3, 0.0), make_path(3, 0.0)
        for path in [first, second, third]:
            frontier.push(path)

        rng = FixedDraws(2, 0, 0)
        assert frontier.pop(rng) is third
        assert frontier.pop(rng) is first
        assert frontier.pop(rng) is second
        assert rng.calls == [(0, 3), (0, 2), (0, 1)]

    def test_empty_buckets_are_dropped(self):
        """Exhausting a bucket moves on to the next priority."""
        frontier = PartialPaths()
        frontier.push(make_path(4, 0.0))
        frontier.push(make_path(2, 0.0))

        assert frontier.highest_priority() == 5
        frontier.pop(FixedDraws(0))
        assert frontier.highest_priority() == 3
        assert frontier.bucket_sizes() == {3: 1}
        frontier.pop(FixedDraws(0))
        assert frontier.highest_priority() is None
        assert frontier.bucket_sizes() == {}

    def test_length_tracking(self):
        frontier = PartialPaths()
        for length in range(1, 6):
            frontier.push(make_path(length, 0.0))
        assert len(frontier) == 5

        frontier.pop(FixedDraws(0))
        assert len(frontier) == 4

    def test_numpy_generator_is_a_random_source(self):
        """numpy generators can drive the frontier directly."""
        cache_model = CacheModel(entry_size_for_l1_entries(3))
        frontier = PartialPaths()
        starts = [(0, 0), (0, 1), (1, 1)]
        for start in starts:
            frontier.push(PartialPath.from_start(cache_model, start))

        rng = np.random.default_rng(0)
        popped = [frontier.pop(rng).last_step() for _ in starts]
        assert sorted(popped) == sorted(starts)

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_pop_order_is_reproducible(self, seed):
        """The same seed yields the same pop order."""
        def pop_all():
            frontier = PartialPaths()
            paths = [make_path(2, 0.0) for _ in range(6)]
            for path in paths:
                frontier.push(path)
            rng = np.random.default_rng(seed)
            return [paths.index(frontier.pop(rng)) for _ in paths]

        assert pop_all() == pop_all()

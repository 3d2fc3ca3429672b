"""Tests for partial path search nodes."""

import numpy as np
import pytest

from feedpair_search.core.cache_model import CacheModel, entry_size_for_l1_entries
from feedpair_search.core.data_models import domain_points
from feedpair_search.search.partial_path import PartialPath


@pytest.fixture
def cache_model():
    return CacheModel(entry_size_for_l1_entries(3))


class TestPartialPathCreation:
    """Test starting a path."""

    def test_start(self, cache_model):
        """A fresh path holds one step, free of cost."""
        path = PartialPath.from_start(cache_model, (1, 2))

        assert len(path) == 1
        assert path.last_step() == (1, 2)
        assert path.cost_so_far == 0.0
        assert path.cache_entries == [1, 2]

    def test_start_on_diagonal(self, cache_model):
        """Both accesses of a diagonal pair hit the same entry."""
        path = PartialPath.from_start(cache_model, (3, 3))
        assert path.cache_entries == [3]

    def test_contains(self, cache_model):
        path = PartialPath.from_start(cache_model, (0, 1))

        assert path.contains((0, 1))
        assert not path.contains((1, 1))


class TestPartialPathExtension:
    """Test evaluating and committing steps."""

    def test_evaluate_is_pure(self, cache_model):
        """Evaluating a step does not modify the node."""
        path = PartialPath.from_start(cache_model, (0, 0))
        next_cost, next_entries = path.evaluate_next_step(cache_model, (0, 1))

        assert next_cost == 0.0
        assert next_entries == [0, 1]
        assert len(path) == 1
        assert path.cache_entries == [0]

    def test_commit_creates_new_node(self, cache_model):
        """Committing returns a longer node and leaves the parent intact."""
        parent = PartialPath.from_start(cache_model, (0, 0))
        next_cost, next_entries = parent.evaluate_next_step(cache_model, (0, 1))
        child = parent.commit_next_step((0, 1), next_cost, next_entries)

        assert len(child) == 2
        assert child.last_step() == (0, 1)
        assert child.contains((0, 0))
        assert list(child.iter_rev()) == [(0, 1), (0, 0)]
        assert len(parent) == 1
        assert not parent.contains((0, 1))

    def test_siblings_are_independent(self, cache_model):
        """Branches from the same parent never share cache state."""
        parent = PartialPath.from_start(cache_model, (0, 1))
        left = parent.commit_next_step((1, 1), *parent.evaluate_next_step(cache_model, (1, 1)))
        right = parent.commit_next_step((0, 2), *parent.evaluate_next_step(cache_model, (0, 2)))

        assert left.cache_entries == [0, 1]
        assert right.cache_entries == [1, 0, 2]
        assert parent.cache_entries == [0, 1]

    def test_cost_accumulates(self, cache_model):
        """Extension costs add up along the path."""
        path = PartialPath.from_start(cache_model, (0, 0))
        for step in [(0, 1), (1, 2), (2, 3)]:
            path = path.commit_next_step(step, *path.evaluate_next_step(cache_model, step))
        assert path.cache_entries == [0, 1, 2, 3]

        next_cost, _ = path.evaluate_next_step(cache_model, (0, 0))
        assert next_cost == 1.0

    def test_monotonic_cost(self, cache_model):
        """Any extension costs at least as much as the path so far."""
        rng = np.random.default_rng(7)
        points = list(domain_points(5))
        for _ in range(20):
            order = [points[i] for i in rng.permutation(len(points))]
            path = PartialPath.from_start(cache_model, order[0])
            for step in order[1:]:
                next_cost, next_entries = path.evaluate_next_step(cache_model, step)
                assert next_cost >= path.cost_so_far
                path = path.commit_next_step(step, next_cost, next_entries)

    def test_finish_path(self, cache_model):
        """Finishing returns the full path without touching the node."""
        path = PartialPath.from_start(cache_model, (0, 0))
        final = path.finish_path((0, 1))

        assert final == [(0, 0), (0, 1)]
        assert len(path) == 1

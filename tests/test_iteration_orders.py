"""Tests for the fixed iteration orders."""

import pytest

from feedpair_search.core.cache_model import CacheModel, entry_size_for_l1_entries
from feedpair_search.core.data_models import domain_points
from feedpair_search.core.iteration_orders import (
    OrderScore, baseline_orders, best_baseline_cost, blocked_order, evaluate_order,
    morton_decode_2d, morton_order, naive_order
)


class TestOrders:
    """Every order is a permutation of the domain."""

    def test_naive_order(self):
        assert list(naive_order(3)) == [(0, 0), (0, 1), (0, 2), (1, 1), (1, 2), (2, 2)]

    def test_blocked_order(self):
        assert list(blocked_order(4, 2)) == [
            (0, 0), (0, 1), (1, 1),
            (0, 2), (0, 3), (1, 2), (1, 3),
            (2, 2), (2, 3), (3, 3),
        ]

    def test_morton_decode(self):
        assert [morton_decode_2d(idx) for idx in range(4)] == [(0, 0), (1, 0), (0, 1), (1, 1)]
        assert morton_decode_2d(0b1011) == (1, 3)

    def test_morton_order(self):
        assert list(morton_order(2)) == [(0, 0), (0, 1), (1, 1)]

    @pytest.mark.parametrize("num_feeds", [2, 3, 5, 6, 8])
    def test_orders_are_domain_permutations(self, num_feeds):
        """Uneven block sizes and non power-of-two feed counts stay in the domain."""
        expected = sorted(domain_points(num_feeds))
        for name, order in baseline_orders(num_feeds).items():
            assert sorted(order) == expected, name
            assert len(set(order)) == len(order), name

    def test_baseline_names(self):
        assert list(baseline_orders(8)) == ['Naive', '2x2 blocks', '4x4 blocks', 'Morton curve']
        assert list(baseline_orders(2)) == ['Naive', 'Morton curve']


class TestEvaluateOrder:
    """Test standalone scoring of orders."""

    @pytest.fixture
    def cache_model(self):
        return CacheModel(entry_size_for_l1_entries(3))

    def test_naive_four_feeds(self, cache_model):
        """Row-major order misses L1 twice with four feeds."""
        score = evaluate_order(cache_model, naive_order(4))

        assert isinstance(score, OrderScore)
        assert score.total_cost == 2.0
        assert score.pair_count == 10
        assert score.cost_per_pair == pytest.approx(0.2)

    def test_fits_in_cache(self, cache_model):
        """Three feeds fit in a three-entry L1."""
        assert evaluate_order(cache_model, naive_order(3)).total_cost == 0.0

    def test_empty_order(self, cache_model):
        score = evaluate_order(cache_model, [])
        assert score.to_dict() == {'total_cost': 0.0, 'pair_count': 0, 'cost_per_pair': 0.0}

    def test_best_baseline_cost(self, cache_model):
        best = best_baseline_cost(cache_model, 4)
        for order in baseline_orders(4).values():
            assert best <= evaluate_order(cache_model, order).total_cost

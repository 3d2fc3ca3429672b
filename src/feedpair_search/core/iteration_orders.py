"""Fixed feed pair iteration orders and their cache cost.

These are the state-of-the-art 2D iteration schemes that the path search is
meant to beat. Every generator yields a permutation of the triangular domain.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List

import numpy as np

from feedpair_search.core.cache_model import CacheModel
from feedpair_search.core.data_models import Cost, FeedPair

logger = logging.getLogger(__name__)


@dataclass
class OrderScore:
    """Cache cost of a feed pair iteration order."""
    total_cost: Cost
    pair_count: int
    cost_per_pair: float

    def to_dict(self) -> Dict[str, float]:
        return {
            'total_cost': self.total_cost,
            'pair_count': self.pair_count,
            'cost_per_pair': self.cost_per_pair,
        }


def naive_order(num_feeds: int) -> Iterator[FeedPair]:
    """Row-major iteration, the scheme currently in use."""
    for feed1 in range(num_feeds):
        for feed2 in range(feed1, num_feeds):
            yield (feed1, feed2)


def blocked_order(num_feeds: int, block_size: int) -> Iterator[FeedPair]:
    """Block-wise iteration over square tiles of block_size feeds."""
    assert block_size > 0, "Block size must be positive"
    for feed1_block in range(0, num_feeds, block_size):
        for feed2_block in range(feed1_block, num_feeds, block_size):
            for feed1 in range(feed1_block, min(feed1_block + block_size, num_feeds)):
                for feed2 in range(max(feed1, feed2_block),
                                   min(feed2_block + block_size, num_feeds)):
                    yield (feed1, feed2)


def morton_decode_2d(morton_idx: int) -> FeedPair:
    """Split a Morton code into its (even bits, odd bits) coordinates."""
    coords = [0, 0]
    bit = 0
    while morton_idx:
        coords[0] |= (morton_idx & 1) << bit
        coords[1] |= ((morton_idx >> 1) & 1) << bit
        morton_idx >>= 2
        bit += 1
    return (coords[0], coords[1])


def morton_order(num_feeds: int) -> Iterator[FeedPair]:
    """Morton curve ("Z order") iteration."""
    # The curve covers a power-of-two square, skip what lies outside the domain
    side = 1
    while side < num_feeds:
        side *= 2
    for morton_idx in range(side * side):
        feed1, feed2 = morton_decode_2d(morton_idx)
        if feed1 <= feed2 < num_feeds:
            yield (feed1, feed2)


def baseline_orders(num_feeds: int) -> Dict[str, List[FeedPair]]:
    """All fixed iteration orders worth comparing against for num_feeds feeds."""
    orders = {'Naive': list(naive_order(num_feeds))}
    block_size = 2
    while block_size < num_feeds:
        orders[f"{block_size}x{block_size} blocks"] = list(blocked_order(num_feeds, block_size))
        block_size *= 2
    orders['Morton curve'] = list(morton_order(num_feeds))
    return orders


def evaluate_order(cache_model: CacheModel, order: Iterable[FeedPair]) -> OrderScore:
    """Simulate an iteration order against a fresh cache.

    Args:
        cache_model: Cache cost model
        order: Feed pairs in access order

    Returns:
        OrderScore with the total cost and the mean cost per pair
    """
    entries = cache_model.start_simulation()
    pair_costs = []
    for feed_pair in order:
        pair_cost = cache_model.simulate_pair(entries, feed_pair)
        logger.debug(f"Accessed feed pair {feed_pair} for cache cost {pair_cost}")
        pair_costs.append(pair_cost)

    if not pair_costs:
        return OrderScore(total_cost=0.0, pair_count=0, cost_per_pair=0.0)

    costs = np.asarray(pair_costs, dtype=np.float64)
    return OrderScore(
        total_cost=float(costs.sum()),
        pair_count=len(pair_costs),
        cost_per_pair=float(costs.mean()),
    )


def best_baseline_cost(cache_model: CacheModel, num_feeds: int) -> Cost:
    """Lowest cache cost achieved by any baseline order."""
    scores = [evaluate_order(cache_model, order) for order in baseline_orders(num_feeds).values()]
    return min(score.total_cost for score in scores)

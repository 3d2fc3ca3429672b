"""Precomputed neighborhoods of the triangular feed pair domain."""

import logging
from typing import Iterator, List, Tuple

from feedpair_search.core.data_models import FeedPair

logger = logging.getLogger(__name__)


class NeighborTable:
    """Candidate next steps from every point of the [x, y] domain.

    Next points must lie within max_radius of the current point along both
    axes and remain inside the domain (y' >= x', both below num_feeds). The
    current point is part of its own neighborhood; callers filter revisits.

    For each point we only store the x coordinate of the first neighbor and,
    for that x and each subsequent one, the range of y coordinates of the
    neighbors sharing it. Neighbors are generated lazily from that record.
    """

    def __init__(self, num_feeds: int, max_radius: int):
        assert num_feeds > 0 and max_radius >= 1
        self.num_feeds = num_feeds
        self.max_radius = max_radius
        self._table: List[Tuple[int, Tuple[Tuple[int, int], ...]]] = [
            (0, ())
        ] * (num_feeds * num_feeds)

        for curr_x in range(num_feeds):
            for curr_y in range(curr_x, num_feeds):
                first_next_x = max(0, curr_x - max_radius)
                end_next_x = min(num_feeds, curr_x + max_radius + 1)

                next_y_ranges = []
                for next_x in range(first_next_x, end_next_x):
                    next_y_start = max(next_x, curr_y - max_radius)
                    next_y_end = min(num_feeds, curr_y + max_radius + 1)
                    assert next_y_start < next_y_end
                    next_y_ranges.append((next_y_start, next_y_end))

                self._table[self._linear_idx(curr_x, curr_y)] = (first_next_x, tuple(next_y_ranges))

        logger.debug(f"Neighbor table built for {num_feeds} feeds, radius {max_radius}")

    def _linear_idx(self, x: int, y: int) -> int:
        return y * self.num_feeds + x

    def neighbors(self, x: int, y: int) -> Iterator[FeedPair]:
        """Iterate over the neighbors of point (x, y)."""
        assert 0 <= x <= y < self.num_feeds, f"({x}, {y}) is outside of the domain"
        first_next_x, next_y_ranges = self._table[self._linear_idx(x, y)]
        for next_x_offset, (next_y_start, next_y_end) in enumerate(next_y_ranges):
            next_x = first_next_x + next_x_offset
            for next_y in range(next_y_start, next_y_end):
                yield (next_x, next_y)

    def __call__(self, pair: FeedPair) -> Iterator[FeedPair]:
        return self.neighbors(*pair)

    def neighbor_count(self, x: int, y: int) -> int:
        """Number of neighbors of point (x, y), itself included."""
        assert 0 <= x <= y < self.num_feeds
        _, next_y_ranges = self._table[self._linear_idx(x, y)]
        return sum(end - start for start, end in next_y_ranges)

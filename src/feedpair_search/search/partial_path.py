"""Partial paths through the feed pair domain.

The amount of possible paths is of the order of the factorial of the domain
size, so a search node only carries what is needed to extend it: the steps
taken so far, the cache state they lead to and their accumulated cost.
Extending a node never modifies it, since sibling branches share it.
"""

from typing import Iterator, Tuple

from feedpair_search.core.cache_model import CacheEntries, CacheModel
from feedpair_search.core.data_models import Cost, FeedPair, Path


class PartialPath:
    """Node in the path search tree."""

    __slots__ = ('_path', '_cache_entries', '_cost_so_far')

    def __init__(self, path: Tuple[FeedPair, ...], cache_entries: CacheEntries, cost_so_far: Cost):
        self._path = path
        self._cache_entries = cache_entries
        self._cost_so_far = cost_so_far

    @classmethod
    def from_start(cls, cache_model: CacheModel, start: FeedPair) -> 'PartialPath':
        """Start a path at a given feed pair."""
        cache_entries = cache_model.start_simulation()
        for feed in start:
            first_cost = cache_model.simulate_access(cache_entries, feed)
            assert first_cost == 0.0, "Accesses to an empty cache must be free"
        return cls((tuple(start),), cache_entries, 0.0)

    def __len__(self) -> int:
        return len(self._path)

    def __repr__(self) -> str:
        return f"PartialPath(len={len(self._path)}, cost={self._cost_so_far}, last={self.last_step()})"

    def last_step(self) -> FeedPair:
        return self._path[-1]

    def iter_rev(self) -> Iterator[FeedPair]:
        """Iterate over the path in reverse step order (for debug output)."""
        return reversed(self._path)

    def contains(self, pair: FeedPair) -> bool:
        """Tell whether the path already went through a certain feed pair."""
        return pair in self._path

    @property
    def cost_so_far(self) -> Cost:
        return self._cost_so_far

    @property
    def cache_entries(self) -> CacheEntries:
        """Copy of the cache state reached at the end of this path."""
        return list(self._cache_entries)

    def evaluate_next_step(self, cache_model: CacheModel,
                           next_step: FeedPair) -> Tuple[Cost, CacheEntries]:
        """Tell what the cost and cache state would become after one more step.

        The node itself is left untouched.
        """
        next_entries = list(self._cache_entries)
        next_cost = self._cost_so_far + cache_model.simulate_pair(next_entries, next_step)
        return next_cost, next_entries

    def commit_next_step(self, next_step: FeedPair, next_cost: Cost,
                         next_entries: CacheEntries) -> 'PartialPath':
        """Create the path extended by one step.

        next_cost and next_entries must come from evaluate_next_step().
        """
        return PartialPath(self._path + (tuple(next_step),), next_entries, next_cost)

    def finish_path(self, last_step: FeedPair) -> Path:
        """Complete this path with a final step."""
        return list(self._path) + [tuple(last_step)]

    def steps(self) -> Path:
        """Steps taken so far."""
        return list(self._path)

"""Priority frontier of partial paths.

The search needs to finish exploring paths quickly, which frees memory and
tightens the cost bound, while still exploring large areas of the path space
instead of staying in one region as depth-first search would. Paths are
therefore grouped by an integer priority and drawn at random among the most
important ones.
"""

import heapq
import math
from typing import Dict, List, Optional, Protocol

from feedpair_search.search.partial_path import PartialPath

DEFAULT_LENGTH_WEIGHT = 1.3


class RandomSource(Protocol):
    """Source of tie-breaking draws, e.g. numpy.random.Generator."""

    def integers(self, low: int, high: int) -> int:
        """Draw an integer uniformly from [low, high)."""
        ...


def prioritize(path: PartialPath, length_weight: float = DEFAULT_LENGTH_WEIGHT) -> int:
    """Priority of a path, higher is more important.

    Increasing the length weight puts the emphasis on seeing paths through to
    the end, decreasing it favors the paths that are cheapest so far (a more
    breadth-first approach, since the first steps of a path are free).
    """
    # Halves round away from zero, so a 5-step free path lands in bucket 7
    score = length_weight * len(path) - path.cost_so_far
    return int(math.copysign(math.floor(abs(score) + 0.5), score))


class PartialPaths:
    """Bucketed priority queue with random tie-breaking."""

    def __init__(self, length_weight: float = DEFAULT_LENGTH_WEIGHT):
        self.length_weight = length_weight
        self._buckets: Dict[int, List[PartialPath]] = {}
        # Negated bucket keys, kept in sync with _buckets
        self._keys: List[int] = []
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    def priority(self, path: PartialPath) -> int:
        return prioritize(path, self.length_weight)

    def push(self, path: PartialPath) -> None:
        """Record a new partial path."""
        key = self.priority(path)
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self._buckets[key] = []
            heapq.heappush(self._keys, -key)
        bucket.append(path)
        self._size += 1

    def pop(self, rng: RandomSource) -> Optional[PartialPath]:
        """Extract one of the highest-priority paths, chosen at random."""
        if not self._keys:
            return None

        key = -self._keys[0]
        bucket = self._buckets[key]
        path_idx = int(rng.integers(0, len(bucket)))

        # Swap-remove, bucket order carries no meaning
        bucket[path_idx], bucket[-1] = bucket[-1], bucket[path_idx]
        path = bucket.pop()
        self._size -= 1

        if not bucket:
            del self._buckets[key]
            heapq.heappop(self._keys)
        return path

    def highest_priority(self) -> Optional[int]:
        return -self._keys[0] if self._keys else None

    def bucket_sizes(self) -> Dict[int, int]:
        """Number of queued paths per priority (for diagnostics)."""
        return {key: len(bucket) for key, bucket in self._buckets.items()}

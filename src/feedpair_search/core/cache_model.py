"""Multi-tier cache cost model.

Simulates the cost of accessing feeds from a CPU cache hierarchy. The
recency history grows without eviction: an access is charged according to
how many other entries were touched since that entry was last accessed.
"""

from typing import List

from feedpair_search.core.data_models import Cost, FeedIdx, FeedPair

# Numbers taken from the latency plot of a recent desktop CPU review. Only the
# orders of magnitude matter: capacities are the abscissa of the half-plateau
# and costs are the height of each latency plateau.
L1_CAPACITY = 32 * 1024
L1_MISS_COST: Cost = 2.0
L2_CAPACITY = 512 * 1024
L2_MISS_COST: Cost = 10.0
L3_CAPACITY = 32 * 1024 * 1024
L3_MISS_COST: Cost = 60.0

# Entries ordered by access date, most recently accessed entry goes last
CacheEntries = List[FeedIdx]


def entry_size_for_l1_entries(l1_entries: int) -> int:
    """Entry size (bytes) for which the L1 cache holds exactly l1_entries."""
    assert l1_entries > 0, "L1 must hold at least one entry"
    return L1_CAPACITY // l1_entries


class CacheModel:
    """Stateless cost policy over a caller-owned recency list."""

    def __init__(self, entry_size: int):
        """Set up a cache model.

        Args:
            entry_size: Size of one cache entry (one feed) in bytes
        """
        assert entry_size > 0, f"entry_size must be positive, got {entry_size}"
        self.entry_size = entry_size
        self.l1_entries = L1_CAPACITY // entry_size
        self.l2_entries = L2_CAPACITY // entry_size
        self.l3_entries = L3_CAPACITY // entry_size

    def __repr__(self) -> str:
        return (f"CacheModel(entry_size={self.entry_size}, l1_entries={self.l1_entries}, "
                f"l2_entries={self.l2_entries}, l3_entries={self.l3_entries})")

    def start_simulation(self) -> CacheEntries:
        """Fresh, empty cache state."""
        return []

    def cost_model(self, age: int) -> Cost:
        """Cost of accessing an entry that was last accessed `age` accesses ago.

        Costs are expressed relative to an L1 miss.
        """
        if age < self.l1_entries:
            return 0.0
        elif age < self.l2_entries:
            return 1.0
        elif age < self.l3_entries:
            return L2_MISS_COST / L1_MISS_COST
        else:
            return L3_MISS_COST / L1_MISS_COST

    def simulate_access(self, entries: CacheEntries, entry: FeedIdx) -> Cost:
        """Simulate one access, updating the recency list in place.

        Args:
            entries: Recency list, modified to put `entry` last
            entry: Feed being accessed

        Returns:
            Cost of the access. The first access to an entry is free since it
            has to happen no matter how good the access pattern is.
        """
        last_pos = len(entries) - 1
        for age, item in enumerate(reversed(entries)):
            if item == entry:
                del entries[last_pos - age]
                entries.append(entry)
                return self.cost_model(age)

        entries.append(entry)
        return 0.0

    def simulate_pair(self, entries: CacheEntries, pair: FeedPair) -> Cost:
        """Simulate accessing both feeds of a pair, in order."""
        return sum(self.simulate_access(entries, feed) for feed in pair)

"""Path search for cache-friendly feed pair iteration orders.

This module implements the branch-and-bound search that explores traversals
of the triangular feed pair domain in priority order, pruning every partial
path whose simulated cache cost already reaches the best known cost.
"""

from .neighbors import NeighborTable
from .partial_path import PartialPath
from .frontier import PartialPaths, RandomSource, prioritize
from .brute_force import (
    BruteForceSearcher, SearchConfig, SearchResult, SearchStatistics, CostBound,
    create_brute_force_searcher, search_best_path, seed_starts
)
from .parallel import ParallelBruteForceSearcher, SharedCostBound

__all__ = [
    'NeighborTable',
    'PartialPath',
    'PartialPaths',
    'RandomSource',
    'prioritize',
    'BruteForceSearcher',
    'SearchConfig',
    'SearchResult',
    'SearchStatistics',
    'CostBound',
    'create_brute_force_searcher',
    'search_best_path',
    'seed_starts',
    'ParallelBruteForceSearcher',
    'SharedCostBound'
]

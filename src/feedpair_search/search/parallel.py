"""Parallel path search over partitioned seeds.

Seed branches are independent, so they can be split across workers that each
maintain their own frontier. Workers share a single best-cost bound: reading
a stale value only delays pruning, while records are only accepted through a
locked strict-improvement check.
"""

import concurrent.futures
import logging
import math
import threading
import time
from typing import List, Optional, Tuple

import numpy as np

from feedpair_search.core.cache_model import CacheModel
from feedpair_search.core.data_models import Cost, FeedPair
from feedpair_search.search.brute_force import (
    BruteForceSearcher, CostBound, Exploration, SearchResult, SearchStatistics,
    check_search_inputs, seed_starts
)
from feedpair_search.search.frontier import PartialPaths, RandomSource
from feedpair_search.search.neighbors import NeighborTable
from feedpair_search.search.partial_path import PartialPath

logger = logging.getLogger(__name__)


class SharedCostBound(CostBound):
    """Monotonically decreasing cost bound shared between workers."""

    def __init__(self, value: Cost):
        super().__init__(value)
        self._lock = threading.Lock()

    def try_improve(self, cost: Cost) -> bool:
        with self._lock:
            return super().try_improve(cost)


def partition_seeds(starts: List[FeedPair], num_workers: int) -> List[List[FeedPair]]:
    """Split seeds round-robin, dropping workers that would get none."""
    partitions = [starts[worker::num_workers] for worker in range(num_workers)]
    return [partition for partition in partitions if partition]


class ParallelBruteForceSearcher(BruteForceSearcher):
    """Path search running one frontier per worker thread."""

    def search(self, num_feeds: int, entry_size: int, max_radius: int,
               best_cost_bound: Cost = math.inf,
               rng: Optional[RandomSource] = None) -> SearchResult:
        check_search_inputs(num_feeds, entry_size, max_radius, best_cost_bound)
        start_time = time.perf_counter()
        self.statistics = SearchStatistics()

        cache_model, neighbors, path_length = self.prepare(num_feeds, entry_size, max_radius)
        starts = seed_starts(num_feeds)
        partitions = partition_seeds(starts, self.config.num_workers)
        logger.info(f"Searching paths of length {path_length} with {len(partitions)} workers "
                    f"and cost below {best_cost_bound}")

        # Independent tie-breaking streams, one per worker
        if rng is not None:
            seed_sequence = np.random.SeedSequence(int(rng.integers(0, 2**32)))
        else:
            seed_sequence = np.random.SeedSequence(self.config.random_seed)
        worker_rngs = [np.random.default_rng(child) for child in seed_sequence.spawn(len(partitions))]

        bound = SharedCostBound(best_cost_bound)
        deadline = None
        if self.config.max_computation_time is not None:
            deadline = start_time + self.config.max_computation_time

        with concurrent.futures.ThreadPoolExecutor(max_workers=len(partitions)) as executor:
            futures = [
                executor.submit(self._run_worker, partition, cache_model, neighbors,
                                path_length, bound, worker_rng, deadline)
                for partition, worker_rng in zip(partitions, worker_rngs)
            ]
            outcomes = [future.result() for future in futures]

        best_cost: Optional[Cost] = None
        best_path = None
        termination_reason = "search_exhausted"
        for exploration, worker_statistics in outcomes:
            self.statistics.merge(worker_statistics)
            if exploration.termination_reason != "search_exhausted":
                termination_reason = exploration.termination_reason
            if exploration.best_path is not None and (best_cost is None or exploration.best_cost < best_cost):
                best_cost, best_path = exploration.best_cost, exploration.best_path

        # Records go through the shared bound, so no two workers hold equal ones
        tied_paths = [
            path
            for exploration, _ in outcomes
            for cost, path in exploration.tied_paths
            if cost == best_cost
        ]

        computation_time = time.perf_counter() - start_time
        logger.info(f"Parallel search finished ({termination_reason}) after "
                    f"{self.statistics.nodes_expanded} expansions in {computation_time:.3f}s")

        return SearchResult(
            success=best_path is not None,
            cost=best_cost,
            path=best_path,
            tied_paths=tied_paths,
            num_seeds=len(starts),
            statistics=self.statistics,
            computation_time=computation_time,
            termination_reason=termination_reason,
        )

    def _run_worker(self, starts: List[FeedPair], cache_model: CacheModel,
                    neighbors: NeighborTable, path_length: int, bound: SharedCostBound,
                    rng: RandomSource, deadline: Optional[float]) -> Tuple[Exploration, SearchStatistics]:
        partial_paths = PartialPaths(self.config.priority_length_weight)
        for start in starts:
            partial_paths.push(PartialPath.from_start(cache_model, start))

        statistics = SearchStatistics()
        exploration = self.explore(partial_paths, cache_model, neighbors, path_length,
                                   bound, rng, statistics, deadline)
        logger.debug(f"Worker seeded with {starts} done, best cost {exploration.best_cost}")
        return exploration, statistics

"""Branch-and-bound search for a cache-friendly feed pair iteration order.

This module searches for a path through the 2D half-square of feed pairs that
is better than state-of-the-art iteration schemes according to the cache
simulation, by exploring every path that could beat the best known cost and
pruning the others as soon as their accumulated cost reaches that bound.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from feedpair_search.core.cache_model import CacheModel
from feedpair_search.core.data_models import Cost, FeedPair, Path, domain_size
from feedpair_search.search.frontier import DEFAULT_LENGTH_WEIGHT, PartialPaths, RandomSource
from feedpair_search.search.neighbors import NeighborTable
from feedpair_search.search.partial_path import PartialPath

logger = logging.getLogger(__name__)


@dataclass
class SearchConfig:
    """Configuration for the path search."""
    exhaustive: bool = False  # Also enumerate paths that tie the best cost
    priority_length_weight: float = DEFAULT_LENGTH_WEIGHT
    random_seed: Optional[int] = None  # Tie-breaking seed when no rng is given
    max_nodes_expanded: Optional[int] = None  # Optional budget, voids optimality
    max_computation_time: Optional[float] = None  # Optional budget in seconds
    num_workers: int = 1
    progress_interval: int = 100_000  # Expansions between progress logs


@dataclass
class SearchStatistics:
    """Counters describing one search run."""
    nodes_expanded: int = 0
    nodes_generated: int = 0
    nodes_pruned: int = 0
    candidates_pruned: int = 0
    revisits_skipped: int = 0
    paths_completed: int = 0
    bound_improvements: int = 0
    tied_paths_found: int = 0
    max_frontier_size: int = 0

    def merge(self, other: 'SearchStatistics') -> None:
        """Accumulate counters from another run (e.g. a parallel worker)."""
        self.nodes_expanded += other.nodes_expanded
        self.nodes_generated += other.nodes_generated
        self.nodes_pruned += other.nodes_pruned
        self.candidates_pruned += other.candidates_pruned
        self.revisits_skipped += other.revisits_skipped
        self.paths_completed += other.paths_completed
        self.bound_improvements += other.bound_improvements
        self.tied_paths_found += other.tied_paths_found
        self.max_frontier_size = max(self.max_frontier_size, other.max_frontier_size)

    def to_dict(self) -> Dict[str, int]:
        return {
            'nodes_expanded': self.nodes_expanded,
            'nodes_generated': self.nodes_generated,
            'nodes_pruned': self.nodes_pruned,
            'candidates_pruned': self.candidates_pruned,
            'revisits_skipped': self.revisits_skipped,
            'paths_completed': self.paths_completed,
            'bound_improvements': self.bound_improvements,
            'tied_paths_found': self.tied_paths_found,
            'max_frontier_size': self.max_frontier_size,
        }


@dataclass
class SearchResult:
    """Result from the path search."""
    success: bool
    cost: Optional[Cost] = None
    path: Optional[Path] = None
    tied_paths: List[Path] = field(default_factory=list)
    num_seeds: int = 0
    statistics: SearchStatistics = field(default_factory=SearchStatistics)
    computation_time: float = 0.0
    termination_reason: str = "unknown"

    @property
    def is_exhaustive(self) -> bool:
        """Whether the whole search space under the bound was explored."""
        return self.termination_reason == "search_exhausted"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'cost': self.cost,
            'path': [list(step) for step in self.path] if self.path else None,
            'tied_paths': [[list(step) for step in path] for path in self.tied_paths],
            'num_seeds': self.num_seeds,
            'statistics': self.statistics.to_dict(),
            'computation_time': self.computation_time,
            'termination_reason': self.termination_reason,
        }


class CostBound:
    """Best cost that a new path must strictly beat."""

    def __init__(self, value: Cost):
        self._value = value
        self._improved = False

    @property
    def value(self) -> Cost:
        return self._value

    @property
    def improved(self) -> bool:
        """Whether a complete path has beaten the initial bound."""
        return self._improved

    def try_improve(self, cost: Cost) -> bool:
        """Lower the bound to cost if that is a strict improvement."""
        if cost < self._value:
            self._value = cost
            self._improved = True
            return True
        return False


@dataclass
class Exploration:
    """Outcome of exploring one frontier until it empties or a budget runs out."""
    best_cost: Optional[Cost] = None
    best_path: Optional[Path] = None
    tied_paths: List[Tuple[Cost, Path]] = field(default_factory=list)
    termination_reason: str = "search_exhausted"


def check_search_inputs(num_feeds: int, entry_size: int, max_radius: int,
                        best_cost_bound: Cost) -> None:
    """Fail fast on inputs that indicate a caller bug."""
    assert num_feeds > 1, f"num_feeds must be greater than 1, got {num_feeds}"
    assert entry_size > 0, f"entry_size must be positive, got {entry_size}"
    assert max_radius >= 1, f"max_radius must be at least 1, got {max_radius}"
    assert best_cost_bound > 0.0, f"best_cost_bound must be positive, got {best_cost_bound}"


def seed_starts(num_feeds: int) -> List[FeedPair]:
    """Starting points of the search, up to symmetry.

    Starting from (x, y) is geometrically equivalent to starting from
    (num_feeds-1-y, num_feeds-1-x), so only one of the two is kept.
    """
    seeded = set()
    starts = []
    for start_y in range(num_feeds):
        for start_x in range(start_y + 1):
            mirror = (num_feeds - 1 - start_y, num_feeds - 1 - start_x)
            if mirror in seeded:
                continue
            seeded.add((start_x, start_y))
            starts.append((start_x, start_y))
    return starts


class BruteForceSearcher:
    """Branch-and-bound path search with a randomized priority frontier."""

    def __init__(self, config: Optional[SearchConfig] = None):
        """Initialize the searcher.

        Args:
            config: Search configuration parameters
        """
        self.config = config or SearchConfig()
        self.statistics = SearchStatistics()

    def make_rng(self) -> RandomSource:
        return np.random.default_rng(self.config.random_seed)

    def prepare(self, num_feeds: int, entry_size: int,
                max_radius: int) -> Tuple[CacheModel, NeighborTable, int]:
        """Build the per-search cache model and neighbor table."""
        cache_model = CacheModel(entry_size)
        assert cache_model.l1_entries >= 3, f"Cache is unreasonably small: {cache_model}"
        neighbors = NeighborTable(num_feeds, max_radius)
        return cache_model, neighbors, domain_size(num_feeds)

    def search(self, num_feeds: int, entry_size: int, max_radius: int,
               best_cost_bound: Cost = math.inf,
               rng: Optional[RandomSource] = None) -> SearchResult:
        """Search for a path strictly cheaper than best_cost_bound.

        Args:
            num_feeds: Number of feeds, the domain has num_feeds*(num_feeds+1)/2 pairs
            entry_size: Size of one feed in bytes, sets the cache capacities
            max_radius: Maximum step between consecutive pairs along each axis
            best_cost_bound: Best known cost; only strictly better paths are sought
            rng: Tie-breaking random source (defaults to a generator seeded
                from the configuration)

        Returns:
            SearchResult with the best path found, if any
        """
        check_search_inputs(num_feeds, entry_size, max_radius, best_cost_bound)
        start_time = time.perf_counter()
        self.statistics = SearchStatistics()

        cache_model, neighbors, path_length = self.prepare(num_feeds, entry_size, max_radius)
        logger.info(f"Searching paths of length {path_length} over {num_feeds} feeds with "
                    f"radius {max_radius} and cost below {best_cost_bound} ({cache_model})")

        starts = seed_starts(num_feeds)
        partial_paths = PartialPaths(self.config.priority_length_weight)
        for start in starts:
            partial_paths.push(PartialPath.from_start(cache_model, start))

        bound = CostBound(best_cost_bound)
        deadline = None
        if self.config.max_computation_time is not None:
            deadline = start_time + self.config.max_computation_time

        exploration = self.explore(partial_paths, cache_model, neighbors, path_length, bound,
                                   rng if rng is not None else self.make_rng(),
                                   self.statistics, deadline)

        computation_time = time.perf_counter() - start_time
        logger.info(f"Search finished ({exploration.termination_reason}) after "
                    f"{self.statistics.nodes_expanded} expansions in {computation_time:.3f}s")

        return SearchResult(
            success=exploration.best_path is not None,
            cost=exploration.best_cost,
            path=exploration.best_path,
            tied_paths=[path for cost, path in exploration.tied_paths
                        if cost == exploration.best_cost],
            num_seeds=len(starts),
            statistics=self.statistics,
            computation_time=computation_time,
            termination_reason=exploration.termination_reason,
        )

    def _out_of_bound(self, cost: Cost, bound: CostBound) -> bool:
        # Ties are only worth exploring when enumerating the paths that match
        # an actual record, not the caller's initial bound
        if self.config.exhaustive and bound.improved:
            return cost > bound.value
        return cost >= bound.value

    def explore(self, partial_paths: PartialPaths, cache_model: CacheModel,
                neighbors: NeighborTable, path_length: int, bound: CostBound,
                rng: RandomSource, statistics: SearchStatistics,
                deadline: Optional[float] = None) -> Exploration:
        """Run the branch-and-bound loop until the frontier is empty.

        Takes the most promising path so far, considers all the next steps
        that can be taken from it, and pushes the resulting incomplete paths
        back into the frontier.
        """
        exploration = Exploration()
        max_nodes = self.config.max_nodes_expanded
        progress_interval = self.config.progress_interval
        trace = logger.isEnabledFor(logging.DEBUG)

        while partial_paths:
            if max_nodes is not None and statistics.nodes_expanded >= max_nodes:
                exploration.termination_reason = "max_nodes_reached"
                break
            if deadline is not None and time.perf_counter() > deadline:
                exploration.termination_reason = "timeout"
                break

            statistics.max_frontier_size = max(statistics.max_frontier_size, len(partial_paths))
            partial_path = partial_paths.pop(rng)

            if trace:
                steps = " -> ".join(str(step) for step in partial_path.iter_rev())
                logger.debug(f"Currently on partial path {steps} -> END "
                             f"with cache cost {partial_path.cost_so_far}")

            # Cost never decreases along a path, so no extension can beat the bound
            if self._out_of_bound(partial_path.cost_so_far, bound):
                statistics.nodes_pruned += 1
                continue

            statistics.nodes_expanded += 1
            if progress_interval and statistics.nodes_expanded % progress_interval == 0:
                logger.info(f"Expanded {statistics.nodes_expanded} nodes, "
                            f"{len(partial_paths)} queued, best cost {bound.value}")

            next_path_len = len(partial_path) + 1
            for next_step in neighbors(partial_path.last_step()):
                if partial_path.contains(next_step):
                    statistics.revisits_skipped += 1
                    continue

                next_cost, next_entries = partial_path.evaluate_next_step(cache_model, next_step)
                if self._out_of_bound(next_cost, bound):
                    if trace:
                        logger.debug(f"Step {next_step} exceeds the cost goal with only "
                                     f"{next_path_len}/{path_length} steps")
                    statistics.candidates_pruned += 1
                    continue

                if next_path_len == path_length:
                    statistics.paths_completed += 1
                    if bound.try_improve(next_cost):
                        statistics.bound_improvements += 1
                        exploration.best_cost = next_cost
                        exploration.best_path = partial_path.finish_path(next_step)
                        logger.info(f"Reached new cache cost record {next_cost} "
                                    f"with path {exploration.best_path}")
                    elif self.config.exhaustive and next_cost == bound.value:
                        statistics.tied_paths_found += 1
                        tied_path = partial_path.finish_path(next_step)
                        exploration.tied_paths.append((next_cost, tied_path))
                        logger.debug(f"Found a path that matches cache cost {next_cost}: {tied_path}")
                    continue

                statistics.nodes_generated += 1
                partial_paths.push(partial_path.commit_next_step(next_step, next_cost, next_entries))

        return exploration

    def get_search_stats(self) -> Dict[str, Any]:
        """Statistics of the last search, with the configuration used."""
        return {
            **self.statistics.to_dict(),
            'config': {
                'exhaustive': self.config.exhaustive,
                'priority_length_weight': self.config.priority_length_weight,
                'max_nodes_expanded': self.config.max_nodes_expanded,
                'max_computation_time': self.config.max_computation_time,
                'num_workers': self.config.num_workers,
            }
        }


def create_brute_force_searcher(exhaustive: bool = False,
                                random_seed: Optional[int] = None,
                                num_workers: int = 1,
                                max_nodes_expanded: Optional[int] = None,
                                max_computation_time: Optional[float] = None) -> BruteForceSearcher:
    """Factory function to create a path searcher.

    Args:
        exhaustive: Enumerate every path tying the best cost
        random_seed: Seed for tie-breaking draws
        num_workers: Number of parallel workers (1 for a sequential search)
        max_nodes_expanded: Optional expansion budget
        max_computation_time: Optional time budget in seconds

    Returns:
        Configured searcher instance
    """
    config = SearchConfig(
        exhaustive=exhaustive,
        random_seed=random_seed,
        num_workers=num_workers,
        max_nodes_expanded=max_nodes_expanded,
        max_computation_time=max_computation_time,
    )
    return searcher_for_config(config)


def searcher_for_config(config: SearchConfig) -> BruteForceSearcher:
    """Pick the sequential or parallel searcher for a configuration."""
    if config.num_workers > 1:
        from feedpair_search.search.parallel import ParallelBruteForceSearcher
        return ParallelBruteForceSearcher(config)
    return BruteForceSearcher(config)


def search_best_path(num_feeds: int, entry_size: int, max_radius: int,
                     best_cost_bound: Cost, rng: Optional[RandomSource] = None,
                     config: Optional[SearchConfig] = None) -> Optional[Tuple[Cost, Path]]:
    """Find the cheapest path strictly below best_cost_bound.

    Returns:
        (cost, path) of the best path, or None if no path beats the bound
    """
    searcher = searcher_for_config(config or SearchConfig())
    result = searcher.search(num_feeds, entry_size, max_radius, best_cost_bound, rng=rng)
    if not result.success:
        return None
    return result.cost, result.path

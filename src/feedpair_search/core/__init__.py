"""Core data model and cache simulation for the feed pair search."""

from .data_models import (
    FeedIdx, FeedPair, Path, Cost, domain_size, domain_points, in_domain,
    validate_path, is_valid_path
)
from .cache_model import (
    CacheModel, CacheEntries, entry_size_for_l1_entries,
    L1_CAPACITY, L2_CAPACITY, L3_CAPACITY
)
from .iteration_orders import (
    OrderScore, naive_order, blocked_order, morton_order, baseline_orders,
    evaluate_order, best_baseline_cost
)

__all__ = [
    'FeedIdx',
    'FeedPair',
    'Path',
    'Cost',
    'domain_size',
    'domain_points',
    'in_domain',
    'validate_path',
    'is_valid_path',
    'CacheModel',
    'CacheEntries',
    'entry_size_for_l1_entries',
    'L1_CAPACITY',
    'L2_CAPACITY',
    'L3_CAPACITY',
    'OrderScore',
    'naive_order',
    'blocked_order',
    'morton_order',
    'baseline_orders',
    'evaluate_order',
    'best_baseline_cost'
]

"""Core data models for the feed pair search."""

from typing import Iterator, List, Sequence, Set, Tuple

# Index of a feed, in [0, num_feeds)
FeedIdx = int

# Pair of feeds (a, b) with a <= b, the atomic unit of work
FeedPair = Tuple[FeedIdx, FeedIdx]

# Ordered traversal of the triangular pair domain
Path = List[FeedPair]

# Accumulated cache cost
Cost = float


def domain_size(num_feeds: int) -> int:
    """Number of feed pairs (x, y) with 0 <= x <= y < num_feeds."""
    return num_feeds * (num_feeds + 1) // 2


def domain_points(num_feeds: int) -> Iterator[FeedPair]:
    """Enumerate the triangular domain in row order (y major, x minor)."""
    for y in range(num_feeds):
        for x in range(y + 1):
            yield (x, y)


def in_domain(pair: FeedPair, num_feeds: int) -> bool:
    """Tell whether a feed pair belongs to the domain of num_feeds feeds."""
    x, y = pair
    return 0 <= x <= y < num_feeds


def validate_path(path: Sequence[FeedPair], num_feeds: int, max_radius: int) -> List[str]:
    """Check that a path is a valid traversal of the whole domain.

    Args:
        path: Sequence of feed pairs
        num_feeds: Number of feeds defining the domain
        max_radius: Maximum step along each axis between consecutive pairs

    Returns:
        List of human-readable violations (empty if the path is valid)
    """
    errors = []

    expected_length = domain_size(num_feeds)
    if len(path) != expected_length:
        errors.append(f"path has {len(path)} steps, expected {expected_length}")

    seen: Set[FeedPair] = set()
    for step_idx, pair in enumerate(path):
        pair = tuple(pair)
        if not in_domain(pair, num_feeds):
            errors.append(f"step {step_idx} {pair} is outside of the domain")
        if pair in seen:
            errors.append(f"step {step_idx} {pair} was already visited")
        seen.add(pair)

    for step_idx in range(1, len(path)):
        (prev_x, prev_y), (next_x, next_y) = path[step_idx - 1], path[step_idx]
        if abs(prev_x - next_x) > max_radius or abs(prev_y - next_y) > max_radius:
            errors.append(
                f"step {step_idx} jumps from {tuple(path[step_idx - 1])} to "
                f"{tuple(path[step_idx])}, beyond radius {max_radius}"
            )

    return errors


def is_valid_path(path: Sequence[FeedPair], num_feeds: int, max_radius: int) -> bool:
    """Tell whether a path is a valid traversal of the whole domain."""
    return not validate_path(path, num_feeds, max_radius)

"""Configuration validation for the feed pair search."""

import logging
from omegaconf import DictConfig

from feedpair_search.core.cache_model import L1_CAPACITY

logger = logging.getLogger(__name__)

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigValidationError(Exception):
    """Exception raised when configuration validation fails."""
    pass


def validate_config(config: DictConfig) -> None:
    """Validate the complete configuration.

    Args:
        config: Configuration to validate

    Raises:
        ConfigValidationError: If validation fails
    """
    try:
        validate_search_config(config.get('search', {}))
        validate_cache_config(config.get('cache', {}))
        validate_logging_config(config.get('logging', {}))

        logger.debug("Configuration validation passed")

    except ConfigValidationError:
        raise
    except Exception as e:
        raise ConfigValidationError(f"Configuration validation failed: {e}")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_search_config(search_config: DictConfig) -> None:
    """Validate search configuration section."""
    if not search_config:
        return

    num_feeds = search_config.get('num_feeds', 4)
    if not isinstance(num_feeds, int) or num_feeds <= 1:
        raise ConfigValidationError(
            f"search.num_feeds must be an integer greater than 1, got {num_feeds}"
        )

    max_radius = search_config.get('max_radius', 1)
    if not isinstance(max_radius, int) or max_radius < 1:
        raise ConfigValidationError(
            f"search.max_radius must be a positive integer, got {max_radius}"
        )

    bound = search_config.get('best_cost_bound', 1.0e9)
    if not _is_number(bound) or bound <= 0:
        raise ConfigValidationError(
            f"search.best_cost_bound must be a positive number, got {bound}"
        )

    weight = search_config.get('priority_length_weight', 1.3)
    if not _is_number(weight) or weight < 0:
        raise ConfigValidationError(
            f"search.priority_length_weight must be a non-negative number, got {weight}"
        )

    num_workers = search_config.get('num_workers', 1)
    if not isinstance(num_workers, int) or num_workers < 1:
        raise ConfigValidationError(
            f"search.num_workers must be a positive integer, got {num_workers}"
        )

    for key in ['max_nodes_expanded', 'random_seed']:
        value = search_config.get(key)
        if value is not None and (not isinstance(value, int) or value < 0):
            raise ConfigValidationError(
                f"search.{key} must be a non-negative integer or null, got {value}"
            )

    max_time = search_config.get('max_computation_time')
    if max_time is not None and (not _is_number(max_time) or max_time <= 0):
        raise ConfigValidationError(
            f"search.max_computation_time must be a positive number or null, got {max_time}"
        )

    interval = search_config.get('progress_interval', 100000)
    if not isinstance(interval, int) or interval < 0:
        raise ConfigValidationError(
            f"search.progress_interval must be a non-negative integer, got {interval}"
        )

    if num_feeds > 8:
        logger.warning(f"Searching {num_feeds} feeds is exponential and may not terminate "
                       f"in reasonable time")


def validate_cache_config(cache_config: DictConfig) -> None:
    """Validate cache configuration section.

    The cache is sized either by entry_size (bytes) or by l1_entries, the
    number of entries the L1 cache holds.
    """
    if not cache_config:
        return

    entry_size = cache_config.get('entry_size')
    l1_entries = cache_config.get('l1_entries')

    if entry_size is not None:
        if not isinstance(entry_size, int) or entry_size <= 0:
            raise ConfigValidationError(
                f"cache.entry_size must be a positive integer, got {entry_size}"
            )
        if L1_CAPACITY // entry_size < 3:
            raise ConfigValidationError(
                f"cache.entry_size {entry_size} leaves fewer than 3 entries in L1"
            )
        if l1_entries is not None:
            logger.warning("cache.entry_size and cache.l1_entries both set, entry_size wins")

    elif l1_entries is not None:
        if not isinstance(l1_entries, int) or l1_entries < 3:
            raise ConfigValidationError(
                f"cache.l1_entries must be an integer of at least 3, got {l1_entries}"
            )


def validate_logging_config(logging_config: DictConfig) -> None:
    """Validate logging configuration section."""
    if not logging_config:
        return

    level = logging_config.get('level', 'WARNING')
    if str(level).upper() not in LOG_LEVELS:
        raise ConfigValidationError(
            f"logging.level must be one of {LOG_LEVELS}, got {level}"
        )

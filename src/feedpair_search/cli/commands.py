"""CLI command implementations."""

import logging
from dataclasses import replace
from typing import Any, Dict, Tuple

from omegaconf import DictConfig, OmegaConf

from feedpair_search.config import (
    load_config, validate_config, ConfigValidationError,
    search_config_from_dict, entry_size_from_config
)
from feedpair_search.core.cache_model import CacheModel, entry_size_for_l1_entries
from feedpair_search.core.data_models import Cost, validate_path
from feedpair_search.core.iteration_orders import baseline_orders, evaluate_order
from feedpair_search.search.brute_force import searcher_for_config

from .utils import save_results, format_duration, format_path

logger = logging.getLogger(__name__)


def _load_config(args) -> DictConfig:
    """Load the configuration named by the global CLI options."""
    overrides = args.config.split() if args.config else []
    config = load_config(overrides=overrides, config_dir=args.config_dir)

    # Without -v/-q, the configured level applies
    if not args.quiet and args.verbose == 0:
        level = str(config.get('logging', {}).get('level', 'WARNING')).upper()
        logging.getLogger().setLevel(level)

    return config


def _cache_settings(args, config: DictConfig) -> Tuple[int, int]:
    """Feed count and entry size, command line taking precedence over config."""
    num_feeds = args.num_feeds if args.num_feeds is not None else int(config.search.num_feeds)
    if args.entry_size is not None:
        entry_size = args.entry_size
    elif args.l1_entries is not None:
        entry_size = entry_size_for_l1_entries(args.l1_entries)
    else:
        entry_size = entry_size_from_config(config)
    return num_feeds, entry_size


def _resolve_bound(bound_arg, config: DictConfig, cache_model: CacheModel,
                   num_feeds: int) -> Cost:
    if bound_arg is None:
        return float(config.search.best_cost_bound)
    if bound_arg == 'baseline':
        scores = {name: evaluate_order(cache_model, order).total_cost
                  for name, order in baseline_orders(num_feeds).items()}
        best_name = min(scores, key=scores.get)
        logger.info(f"Using bound {scores[best_name]} from baseline order \"{best_name}\"")
        return scores[best_name]
    return float(bound_arg)


def search_command(args) -> int:
    """Handle search command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        config = _load_config(args)
        num_feeds, entry_size = _cache_settings(args, config)
        max_radius = args.max_radius if args.max_radius is not None else int(config.search.max_radius)

        search_config = search_config_from_dict(config)
        cli_overrides: Dict[str, Any] = {}
        if args.seed is not None:
            cli_overrides['random_seed'] = args.seed
        if args.exhaustive:
            cli_overrides['exhaustive'] = True
        if args.workers is not None:
            cli_overrides['num_workers'] = args.workers
        if args.max_nodes is not None:
            cli_overrides['max_nodes_expanded'] = args.max_nodes
        if args.timeout is not None:
            cli_overrides['max_computation_time'] = args.timeout
        search_config = replace(search_config, **cli_overrides)

        cache_model = CacheModel(entry_size)
        if cache_model.l1_entries < 3:
            print(f"Cache is unreasonably small: L1 holds {cache_model.l1_entries} feeds, need 3")
            return 1
        if num_feeds <= 1 or max_radius < 1:
            print("Need at least 2 feeds and a radius of at least 1")
            return 1
        best_cost_bound = _resolve_bound(args.bound, config, cache_model, num_feeds)
        if best_cost_bound <= 0:
            print(f"Nothing can beat a cost bound of {best_cost_bound}")
            return 1

        if not args.quiet:
            print(f"Searching {num_feeds} feeds, L1 capacity {cache_model.l1_entries} feeds, "
                  f"radius {max_radius}, cost below {best_cost_bound}")

        searcher = searcher_for_config(search_config)
        result = searcher.search(num_feeds, entry_size, max_radius, best_cost_bound)

        if result.success:
            errors = validate_path(result.path, num_feeds, max_radius)
            if errors:
                logger.error(f"Search returned an invalid path: {errors}")
                return 1
            print(f"Best cache cost: {result.cost}")
            print(f"Path: {format_path(result.path)}")
            if search_config.exhaustive:
                print(f"Other paths with the same cost: {len(result.tied_paths)}")
        else:
            print(f"No path beats cache cost {best_cost_bound}")

        if not result.is_exhaustive:
            print(f"Search stopped early ({result.termination_reason}), "
                  f"the result may not be optimal")
        if not args.quiet:
            stats = result.statistics
            print(f"Expanded {stats.nodes_expanded} nodes, pruned {stats.nodes_pruned} "
                  f"in {format_duration(result.computation_time)}")

        if args.output:
            output = result.to_dict()
            output.update({
                'num_feeds': num_feeds,
                'entry_size': entry_size,
                'max_radius': max_radius,
                'best_cost_bound': best_cost_bound,
            })
            save_results(output, args.output)
            logger.info(f"Results saved to {args.output}")

        return 0

    except Exception as e:
        logger.error(f"Search command failed: {e}")
        return 1


def score_command(args) -> int:
    """Handle score command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        config = _load_config(args)
        num_feeds, entry_size = _cache_settings(args, config)
        cache_model = CacheModel(entry_size)

        print(f"Scoring fixed orders for {num_feeds} feeds, "
              f"L1 capacity {cache_model.l1_entries} feeds")

        scores = {}
        for name, order in baseline_orders(num_feeds).items():
            score = evaluate_order(cache_model, order)
            scores[name] = score.to_dict()
            print(f"- {name}: total cache cost {score.total_cost} "
                  f"({score.cost_per_pair:.2f} per pair)")

        if args.output:
            save_results({'num_feeds': num_feeds, 'entry_size': entry_size, 'scores': scores},
                         args.output)

        return 0

    except Exception as e:
        logger.error(f"Score command failed: {e}")
        return 1


def config_command(args) -> int:
    """Handle config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    try:
        if args.config_action == 'show':
            config = _load_config(args)
            print("Current Configuration:")
            print("=" * 50)
            print(OmegaConf.to_yaml(config, resolve=True))
            return 0

        elif args.config_action == 'validate':
            overrides = args.config.split() if args.config else []
            try:
                config = load_config(overrides=overrides, config_dir=args.config_dir,
                                     validate=False)
                validate_config(config)
                print("Configuration is valid")
                return 0
            except ConfigValidationError as e:
                print(f"Configuration validation failed: {e}")
                return 1

        else:
            print("Unknown config action")
            return 1

    except Exception as e:
        logger.error(f"Config command failed: {e}")
        return 1

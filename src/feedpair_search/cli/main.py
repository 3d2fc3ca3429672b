"""Main CLI entry point for the feed pair search."""

import sys
import argparse
import logging
from typing import List, Optional

from . import commands
from .utils import setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog='feedpair-search',
        description='Search feed pair iteration orders that minimize simulated cache cost',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  feedpair-search search --num-feeds 4 --l1-entries 3      # Optimal path for 4 feeds
  feedpair-search search -n 5 --max-radius 1 --bound baseline
  feedpair-search score --num-feeds 8 --l1-entries 4       # Cost of fixed orders
  feedpair-search config show                              # Show current configuration
        """
    )

    # Global options
    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Space-separated configuration overrides (e.g., "search.num_workers=2")'
    )

    parser.add_argument(
        '--config-dir',
        type=str,
        help='Configuration directory (default: conf/ at the project root)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='count',
        default=0,
        help='Increase verbosity (use -v or -vv)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Suppress all output except results'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        help='Output file for results (JSON format)'
    )

    subparsers = parser.add_subparsers(
        dest='command',
        help='Available commands',
        metavar='COMMAND'
    )

    # Search command
    search_parser = subparsers.add_parser(
        'search',
        help='Search the cheapest path through the feed pair domain',
        description='Branch-and-bound search for the cheapest feed pair iteration order'
    )
    _add_cache_arguments(search_parser)

    search_parser.add_argument(
        '--max-radius', '-r',
        type=int,
        help='Maximum step between consecutive pairs along each axis'
    )

    search_parser.add_argument(
        '--bound', '-b',
        type=str,
        help='Cost to beat: a number, or "baseline" for the best fixed order'
    )

    search_parser.add_argument(
        '--seed',
        type=int,
        help='Random seed for tie-breaking'
    )

    search_parser.add_argument(
        '--exhaustive',
        action='store_true',
        help='Enumerate every path that ties the best cost'
    )

    search_parser.add_argument(
        '--workers', '-j',
        type=int,
        help='Number of parallel workers'
    )

    search_parser.add_argument(
        '--max-nodes',
        type=int,
        help='Stop after expanding this many nodes (result may be suboptimal)'
    )

    search_parser.add_argument(
        '--timeout', '-t',
        type=float,
        help='Stop after this many seconds (result may be suboptimal)'
    )

    # Score command
    score_parser = subparsers.add_parser(
        'score',
        help='Score fixed iteration orders',
        description='Simulate the cache cost of fixed feed pair iteration orders'
    )
    _add_cache_arguments(score_parser)

    # Config command
    config_parser = subparsers.add_parser(
        'config',
        help='Configuration management',
        description='Manage search configuration'
    )

    config_subparsers = config_parser.add_subparsers(
        dest='config_action',
        help='Configuration actions'
    )

    config_subparsers.add_parser(
        'show',
        help='Show current configuration'
    )

    config_subparsers.add_parser(
        'validate',
        help='Validate configuration'
    )

    return parser


def _add_cache_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--num-feeds', '-n',
        type=int,
        help='Number of feeds'
    )

    size_group = parser.add_mutually_exclusive_group()
    size_group.add_argument(
        '--l1-entries',
        type=int,
        help='Number of feeds that fit in the L1 cache (at least 3)'
    )
    size_group.add_argument(
        '--entry-size',
        type=int,
        help='Size of one feed in bytes'
    )


def main_cli(args: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Args:
        args: Command line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if parsed_args.quiet:
        log_level = logging.ERROR
    elif parsed_args.verbose == 0:
        log_level = logging.WARNING
    elif parsed_args.verbose == 1:
        log_level = logging.INFO
    else:
        log_level = logging.DEBUG

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    try:
        if not parsed_args.command:
            parser.print_help()
            return 1

        if parsed_args.command == 'search':
            return commands.search_command(parsed_args)
        if parsed_args.command == 'score':
            return commands.score_command(parsed_args)
        if parsed_args.command == 'config':
            return commands.config_command(parsed_args)

        logger.error(f"Unknown command: {parsed_args.command}")
        return 1

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


def main() -> None:
    """Entry point for console script."""
    sys.exit(main_cli())


if __name__ == '__main__':
    main()

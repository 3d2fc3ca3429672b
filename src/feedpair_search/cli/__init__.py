"""Command-line interface for the feed pair search.

This module provides CLI commands for running the path search and scoring
fixed iteration orders.
"""

from .main import main_cli
from .commands import search_command, score_command, config_command
from .utils import setup_logging, save_results

__all__ = [
    'main_cli',
    'search_command',
    'score_command',
    'config_command',
    'setup_logging',
    'save_results'
]

"""Configuration manager using Hydra for hierarchical configuration."""

import logging
from typing import Optional, Union
from pathlib import Path
from omegaconf import DictConfig
from hydra import compose, initialize_config_dir
from hydra.core.global_hydra import GlobalHydra

from feedpair_search.core.cache_model import entry_size_for_l1_entries
from feedpair_search.search.brute_force import SearchConfig
from .validators import validate_config

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manages configuration loading and validation using Hydra."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """Initialize configuration manager.

        Args:
            config_dir: Path to configuration directory. If None, uses the
                conf directory at the project root.
        """
        if config_dir is None:
            project_root = Path(__file__).parent.parent.parent.parent
            config_dir = project_root / "conf"

        self.config_dir = Path(config_dir).resolve()
        self.config: Optional[DictConfig] = None

        if not self.config_dir.exists():
            raise FileNotFoundError(f"Configuration directory not found: {self.config_dir}")

        logger.debug(f"Configuration manager initialized with config_dir: {self.config_dir}")

    def load_config(self,
                    config_name: str = "config",
                    overrides: Optional[list] = None,
                    validate: bool = True) -> DictConfig:
        """Load configuration with optional overrides.

        Args:
            config_name: Name of the main config file (without .yaml)
            overrides: List of configuration overrides (e.g. search.num_feeds=5)
            validate: Whether to validate the configuration

        Returns:
            Loaded and validated configuration
        """
        GlobalHydra.instance().clear()

        try:
            with initialize_config_dir(config_dir=str(self.config_dir), version_base=None):
                cfg = compose(config_name=config_name, overrides=overrides or [])

                if validate:
                    validate_config(cfg)

                self.config = cfg

                logger.info(f"Configuration loaded successfully: {config_name}")
                if overrides:
                    logger.info(f"Applied overrides: {overrides}")

                return cfg

        except Exception as e:
            logger.error(f"Failed to load configuration: {e}")
            raise


def load_config(config_name: str = "config",
                overrides: Optional[list] = None,
                config_dir: Optional[Union[str, Path]] = None,
                validate: bool = True) -> DictConfig:
    """Load configuration using a fresh config manager.

    Args:
        config_name: Name of the main config file
        overrides: List of configuration overrides
        config_dir: Path to configuration directory
        validate: Whether to validate the configuration

    Returns:
        Loaded configuration
    """
    manager = ConfigManager(config_dir)
    return manager.load_config(config_name, overrides, validate)


def search_config_from_dict(config: DictConfig) -> SearchConfig:
    """Build the search configuration from the `search` section."""
    search_cfg = config.get('search', {}) or {}
    defaults = SearchConfig()
    max_nodes = search_cfg.get('max_nodes_expanded', defaults.max_nodes_expanded)
    max_time = search_cfg.get('max_computation_time', defaults.max_computation_time)
    random_seed = search_cfg.get('random_seed', defaults.random_seed)

    return SearchConfig(
        exhaustive=bool(search_cfg.get('exhaustive', defaults.exhaustive)),
        priority_length_weight=float(search_cfg.get('priority_length_weight',
                                                    defaults.priority_length_weight)),
        random_seed=int(random_seed) if random_seed is not None else None,
        max_nodes_expanded=int(max_nodes) if max_nodes is not None else None,
        max_computation_time=float(max_time) if max_time is not None else None,
        num_workers=int(search_cfg.get('num_workers', defaults.num_workers)),
        progress_interval=int(search_cfg.get('progress_interval', defaults.progress_interval)),
    )


def entry_size_from_config(config: DictConfig) -> int:
    """Entry size in bytes, given directly or through the L1 capacity in entries."""
    cache_cfg = config.get('cache', {}) or {}
    entry_size = cache_cfg.get('entry_size')
    if entry_size is not None:
        return int(entry_size)
    return entry_size_for_l1_entries(int(cache_cfg.get('l1_entries', 3)))

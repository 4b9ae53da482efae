"""
Configuration management for the Button Men engine.

Provides centralized configuration loading from environment variables
with sensible defaults for all settings.
"""

import os
from pathlib import Path
from typing import Optional
import logging

from dotenv import load_dotenv

from .logging_config import LEVEL_NAMES, parse_levels

logger = logging.getLogger(__name__)


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ('true', '1', 'yes')


class Config:
    """
    Centralized configuration management for the engine.

    Loads configuration from environment variables with fallback defaults.
    Supports .env files via python-dotenv.

    Example:
        config = Config()
        print(config.search_roster_limit)  # 20
        print(config.port)                 # 5000
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            env_file: Optional path to .env file. If None, auto-discovers .env
                     in project root or skips if not found.
        """
        if env_file:
            load_dotenv(env_file)
            logger.info(f"Loaded configuration from {env_file}")
        else:
            project_root = Path(__file__).parent.parent.parent
            env_path = project_root / '.env'
            if env_path.exists():
                load_dotenv(env_path)
                logger.info(f"Loaded configuration from {env_path}")
            else:
                logger.debug("No .env file found, using environment variables and defaults")

        # === Server Settings ===
        self.host = os.getenv('HOST', '127.0.0.1')
        self.port = int(os.getenv('PORT', '5000'))
        self.debug = _env_bool('DEBUG', 'False')

        # === Logging ===
        self.log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.log_file = os.getenv('LOG_FILE', None)
        # e.g. LOG_LEVELS=buttonmen.core.hooks=WARNING
        self.log_levels_error: Optional[str] = None
        try:
            self.log_levels = parse_levels(os.getenv('LOG_LEVELS'))
        except ValueError as e:
            self.log_levels = {}
            self.log_levels_error = str(e)

        # === Dice ===
        seed = os.getenv('RNG_SEED', '')
        self.rng_seed: Optional[int] = int(seed) if seed else None

        # === Attack search ===
        # Rosters larger than this are refused by the subset-sum search
        self.search_roster_limit = int(os.getenv('SEARCH_ROSTER_LIMIT', '20'))
        # Up to this many dice the search simply tries every combination
        self.powerset_threshold = int(os.getenv('POWERSET_THRESHOLD', '6'))

    def validate(self) -> bool:
        """
        Validate configuration and log warnings for questionable values.

        Returns:
            True if config is valid, False if critical values are wrong
        """
        valid = True

        if self.log_level not in LEVEL_NAMES:
            logger.error(f"Invalid LOG_LEVEL: {self.log_level}")
            valid = False

        if self.log_levels_error:
            logger.error(f"Invalid LOG_LEVELS: {self.log_levels_error}")
            valid = False

        if self.search_roster_limit < 1:
            logger.error(f"SEARCH_ROSTER_LIMIT must be positive, got {self.search_roster_limit}")
            valid = False

        if self.powerset_threshold < 0:
            logger.error(f"POWERSET_THRESHOLD must not be negative, got {self.powerset_threshold}")
            valid = False
        elif self.powerset_threshold > self.search_roster_limit:
            logger.warning(
                "POWERSET_THRESHOLD is above SEARCH_ROSTER_LIMIT; "
                "the pruned search will never be used"
            )

        return valid

    def __repr__(self) -> str:
        return (
            f"Config("
            f"host={self.host}, "
            f"port={self.port}, "
            f"debug={self.debug}, "
            f"log_level={self.log_level}, "
            f"search_roster_limit={self.search_roster_limit}, "
            f"powerset_threshold={self.powerset_threshold})"
        )


# Global config instance (lazy-loaded)
_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global config instance (singleton pattern).

    Returns:
        Global Config instance
    """
    global _config
    if _config is None:
        _config = Config()
        _config.validate()
    return _config


def reset_config() -> None:
    """Drop the cached config so the next get_config() re-reads the environment."""
    global _config
    _config = None


__all__ = ['Config', 'get_config', 'reset_config']

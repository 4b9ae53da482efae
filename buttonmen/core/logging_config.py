"""
Logging configuration for the Button Men engine.

One call to setup_logging() at process start (CLI or web server) configures
the root logger; library code only ever does
``logger = logging.getLogger(__name__)``.

Hook dispatch and attack search log at DEBUG and get noisy on large rosters,
so individual loggers can be given their own level (see parse_levels).
"""

import logging
import sys
from typing import Dict, Optional
from colorama import Fore, Back, Style, init

# Initialize colorama for cross-platform color support
init(autoreset=True)

LEVEL_NAMES = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors the level name.

    Colors:
    - DEBUG: Cyan
    - INFO: Green
    - WARNING: Yellow
    - ERROR: Red
    - CRITICAL: Red on white background (rolled-back attacks end up here)
    """

    COLORS = {
        'DEBUG': Fore.CYAN,
        'INFO': Fore.GREEN,
        'WARNING': Fore.YELLOW,
        'ERROR': Fore.RED,
        'CRITICAL': Fore.RED + Back.WHITE + Style.BRIGHT,
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, '')

        # Other handlers share the record
        plain = record.levelname
        record.levelname = f"{color}{plain}{Style.RESET_ALL}"
        try:
            return super().format(record)
        finally:
            record.levelname = plain


def parse_levels(text: Optional[str]) -> Dict[str, str]:
    """
    Parse per-logger levels.

    Args:
        text: Comma separated 'logger=LEVEL' pairs, e.g.
            'buttonmen.core.hooks=WARNING,buttonmen.modules.attacks.search=DEBUG'

    Returns:
        Map of logger name to level name

    Raises:
        ValueError: If a pair is malformed or names an unknown level
    """
    levels: Dict[str, str] = {}
    if not text:
        return levels

    for pair in text.split(','):
        pair = pair.strip()
        if not pair:
            continue
        name, sep, level = pair.partition('=')
        level = level.strip().upper()
        if not sep or not name.strip() or level not in LEVEL_NAMES:
            raise ValueError(f"Invalid logger level '{pair}'; expected name=LEVEL")
        levels[name.strip()] = level
    return levels


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    use_colors: bool = True,
    levels: Optional[Dict[str, str]] = None,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        level: Root logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file that receives every record, uncolored
        format_string: Optional custom format string
        use_colors: Whether console output is colored
        levels: Per-logger overrides, e.g. {'buttonmen.core.hooks': 'WARNING'}

    Returns:
        Configured root logger

    Example:
        setup_logging(level='DEBUG', levels={'buttonmen.core.hooks': 'INFO'})
    """
    if format_string is None:
        format_string = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))
    formatter_class = ColoredFormatter if use_colors else logging.Formatter
    console_handler.setFormatter(formatter_class(format_string))
    root.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(format_string))
        root.addHandler(file_handler)

    for name, logger_level in (levels or {}).items():
        logging.getLogger(name).setLevel(getattr(logging, logger_level.upper()))

    return root


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a specific module (usually ``__name__``)."""
    return logging.getLogger(name)


# Default logger for direct imports
logger = get_logger('buttonmen')


__all__ = ['setup_logging', 'parse_levels', 'get_logger', 'logger', 'ColoredFormatter']

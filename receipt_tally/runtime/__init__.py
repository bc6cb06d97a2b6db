"""Runtime infrastructure for receipt-tally.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Tally options via load_tally_config()

Usage:
    from receipt_tally.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.tally_config)
"""

from receipt_tally.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    parse_log_level,
    set_log_level,
)
from receipt_tally.runtime.paths import (
    ProjectPaths,
    get_paths,
    reset_paths,
)
from receipt_tally.runtime.tally_config import build_tally_config, load_tally_config

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "parse_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Config
    "build_tally_config",
    "load_tally_config",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]

"""Utility functions for tenexlog"""

import logging
import os


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_int_env(key: str, default: int = 0) -> int:
    """Get integer value from environment variable, return default if not set or invalid."""
    val = os.getenv(key)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        return default


def get_float_env(key: str, default: float) -> float:
    """Get float value from environment variable, return default if not set or invalid."""
    val = os.getenv(key)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        return default


def get_str_env(key: str, default: str) -> str:
    """
    Get string from environment variable, return default if not set.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        String value or default
    """
    return os.getenv(key, default)


def get_list_env(key: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """
    Get a comma-separated list from environment variable.

    Empty items are dropped. An unset or blank variable yields the default.

    Args:
        key: Environment variable name
        default: Default items if not set

    Returns:
        Tuple of stripped, non-empty items
    """
    val = os.getenv(key)
    if val is None:
        return default
    items = tuple(item.strip() for item in val.split(',') if item.strip())
    return items or default


def setup_logging(verbose: bool = False) -> None:
    """
    Configure root logging for CLI usage.

    Level comes from TENEXLOG_LOG_LEVEL (default WARNING so machine-readable
    output on stdout is not interleaved with log noise). Logs go to stderr.
    """
    if verbose:
        level = logging.DEBUG
    else:
        level_name = get_str_env('TENEXLOG_LOG_LEVEL', 'WARNING').upper()
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)

"""
Roster Shell — line-oriented text interface for the Roster Kernel.
"""

from .config import ConfigError, ShellConfig, load_config
from .dates import InvalidDateError, format_date_us, parse_date_us
from .shell import HELP_ENTRIES, TextShell

__all__ = [
    "ConfigError",
    "ShellConfig",
    "load_config",
    "InvalidDateError",
    "format_date_us",
    "parse_date_us",
    "HELP_ENTRIES",
    "TextShell",
]

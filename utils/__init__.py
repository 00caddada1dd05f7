"""
Utilities Package

Common utilities and helper functions for the frontend service.
"""

from .errors import ConfigError, FrontendError
from .logging import get_logger, setup_logging
from .url import build_full_url

__all__ = [
    "ConfigError",
    "FrontendError",
    "build_full_url",
    "get_logger",
    "setup_logging",
]

"""
Test Factories Module

Centralized factory functions for creating test configuration files.
"""

from .config_factories import (
    make_config,
    make_minimal_config,
    make_special_media,
    temp_config_file,
)

__all__ = [
    "make_config",
    "make_minimal_config",
    "make_special_media",
    "temp_config_file",
]

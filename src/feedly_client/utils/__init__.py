"""Utility functions for the Feedly client."""

from .paths import (
    get_config_dir,
    get_config_file_path,
)

__all__ = [
    "get_config_dir",
    "get_config_file_path",
]

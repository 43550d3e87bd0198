"""Path utilities for the Feedly client."""

from pathlib import Path

APP_DIR_NAME = "feedly-client"


def get_config_dir() -> Path:
    """
    Get the directory holding the configuration file.

    Returns:
        Path to ``~/.config/feedly-client``
    """
    return Path.home() / ".config" / APP_DIR_NAME


def get_config_file_path() -> Path:
    """Get the path to the configuration file."""
    # Look for config.yaml in the working directory first
    local_path = Path.cwd() / "config.yaml"
    if local_path.exists():
        return local_path

    return get_config_dir() / "config.yaml"

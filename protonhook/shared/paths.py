"""
Well-known locations used by protonhook.
"""

from pathlib import Path
from typing import Optional, Union

CONFIG_DIR_NAME = ".config/protonhook"
CONFIG_FILE_NAME = "config.json"
CACHE_FILE_NAME = ".protonhook_steam_cache.json"
DATA_DIR_NAME = "ProtonHook"


def get_config_file() -> Path:
    """Path of the JSON settings file (~/.config/protonhook/config.json)."""
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def get_default_cache_file() -> Path:
    """Path of the persisted name -> app id cache."""
    return Path.home() / CACHE_FILE_NAME


def get_protonhook_data_dir(data_dir: Optional[Union[str, Path]] = None) -> Path:
    """Data directory, ~/ProtonHook unless configured otherwise."""
    if data_dir:
        return Path(data_dir).expanduser()
    return Path.home() / DATA_DIR_NAME


def get_protonhook_logs_dir(data_dir: Optional[Union[str, Path]] = None) -> Path:
    """Log directory inside the data directory."""
    return get_protonhook_data_dir(data_dir) / "logs"

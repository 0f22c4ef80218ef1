#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration Handler Module
Handles application settings and configuration
"""

import os
import json
import logging
from pathlib import Path
from typing import Optional, List

from protonhook.shared.paths import get_config_file, get_default_cache_file
from protonhook.shared.steam_utils import find_steam_root

# Initialize logger
logger = logging.getLogger(__name__)

CONFIG_VERSION = "0.2.0"

# Relative locations of a wine binary inside a Proton directory, tried in order
DEFAULT_WINE_BINARY_SUBPATHS = [
    "dist/bin/wine64",
    "files/bin/wine64",
    "dist/bin/wine",
    "files/bin/wine",
    "bin/wine64",
    "bin/wine",
]

DEFAULT_OVERRIDE_TIMEOUT_MS = 5000


class ConfigHandler:
    """
    Handles application configuration and settings.

    Values are merged over in-code defaults. Components never read this
    object directly; services pull the values they need and pass them on.
    """

    def __init__(self, config_file: Optional[Path] = None, detect_steam: bool = True):
        """Initialize configuration handler with default settings"""
        self.config_file = Path(config_file) if config_file else get_config_file()
        self.config_dir = self.config_file.parent
        self.settings = {
            "version": CONFIG_VERSION,
            "steam_path": None,
            "reference_appid": None,  # None: use the target app's own compatdata
            "wine_binary_subpaths": list(DEFAULT_WINE_BINARY_SUBPATHS),
            "override_timeout_ms": DEFAULT_OVERRIDE_TIMEOUT_MS,
            "cache_file": None,  # None: ~/.protonhook_steam_cache.json
            "data_dir": None,  # None: ~/ProtonHook
        }

        # Load configuration if exists
        self._load_config()

        # If steam_path is not set, detect it
        if detect_steam and not self.settings["steam_path"]:
            steam_root = find_steam_root()
            self.settings["steam_path"] = str(steam_root) if steam_root else None

    def _load_config(self):
        """Load configuration from file and update in-memory settings."""
        try:
            if self.config_file.exists():
                with open(self.config_file, 'r') as f:
                    saved_config = json.load(f)
                if not isinstance(saved_config, dict):
                    logger.error(f"Ignoring configuration file {self.config_file}: not a JSON object")
                    return
                # Update settings with saved values while preserving defaults
                self.settings.update(saved_config)
                logger.debug("Loaded configuration from file")
            else:
                logger.debug("No configuration file found, using defaults")
        except Exception as e:
            logger.error(f"Error loading configuration: {e}")

    def reload_config(self):
        """Reload configuration from disk to pick up external changes"""
        self._load_config()

    def _create_config_dir(self):
        """Create configuration directory if it doesn't exist"""
        try:
            os.makedirs(self.config_dir, exist_ok=True)
            logger.debug(f"Created configuration directory: {self.config_dir}")
        except Exception as e:
            logger.error(f"Error creating configuration directory: {e}")

    def save_config(self):
        """Save current configuration to file"""
        try:
            self._create_config_dir()
            with open(self.config_file, 'w') as f:
                json.dump(self.settings, f, indent=2)
            logger.debug("Saved configuration to file")
            return True
        except Exception as e:
            logger.error(f"Error saving configuration: {e}")
            return False

    def get(self, key, default=None):
        """Get a configuration value by key."""
        return self.settings.get(key, default)

    def set(self, key, value):
        """Set a configuration value"""
        self.settings[key] = value
        return True

    def update(self, settings_dict):
        """Update multiple configuration values"""
        self.settings.update(settings_dict)
        return True

    def get_steam_path(self) -> Optional[Path]:
        """Primary Steam root, or None if none was configured or detected."""
        steam_path = self.settings.get("steam_path")
        return Path(steam_path).expanduser() if steam_path else None

    def get_cache_file(self) -> Path:
        """Location of the app id cache file."""
        cache_file = self.settings.get("cache_file")
        return Path(cache_file).expanduser() if cache_file else get_default_cache_file()

    def get_wine_binary_subpaths(self) -> List[str]:
        """Ordered wine binary locations relative to a Proton directory."""
        subpaths = self.settings.get("wine_binary_subpaths")
        if not subpaths or not isinstance(subpaths, list):
            return list(DEFAULT_WINE_BINARY_SUBPATHS)
        return [str(p) for p in subpaths]

    def get_override_timeout(self) -> float:
        """Registry import timeout in seconds."""
        try:
            timeout_ms = int(self.settings.get("override_timeout_ms", DEFAULT_OVERRIDE_TIMEOUT_MS))
        except (TypeError, ValueError):
            logger.warning("Invalid override_timeout_ms in configuration, using default")
            timeout_ms = DEFAULT_OVERRIDE_TIMEOUT_MS
        if timeout_ms <= 0:
            timeout_ms = DEFAULT_OVERRIDE_TIMEOUT_MS
        return timeout_ms / 1000.0

    def get_reference_appid(self) -> Optional[str]:
        """App id whose compatdata version file names the Proton in use."""
        reference = self.settings.get("reference_appid")
        return str(reference) if reference else None

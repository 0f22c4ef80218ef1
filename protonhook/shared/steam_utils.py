"""
Steam Utilities Module

Locates the primary Steam installation root.
"""

import logging
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)


def get_steam_root_candidates() -> List[Path]:
    """Known primary Steam roots, most common first (native, then Flatpak)."""
    home = Path.home()
    return [
        home / ".steam" / "steam",
        home / ".local" / "share" / "Steam",
        home / ".steam" / "root",
        home / ".var" / "app" / "com.valvesoftware.Steam" / ".local" / "share" / "Steam",
    ]


def find_steam_root(candidates: Optional[List[Path]] = None) -> Optional[Path]:
    """
    Detect the primary Steam root.

    Returns:
        Path to the first candidate that holds a steamapps directory, else the
        first candidate that exists at all, else None.
    """
    if candidates is None:
        candidates = get_steam_root_candidates()

    for path in candidates:
        if (path / "steamapps").is_dir():
            logger.debug(f"Steam root detected at: {path}")
            return path

    for path in candidates:
        if path.is_dir():
            logger.debug(f"Steam root without steamapps detected at: {path}")
            return path

    logger.warning("No Steam installation found in standard locations")
    return None

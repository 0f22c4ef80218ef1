#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Library Handler Module
Enumerates the Steam library roots known to a Steam installation
"""

import logging
from pathlib import Path
from typing import List, Optional

from .vdf_handler import extract_values, normalize_library_path, read_text
from protonhook.backend.models.errors import ManifestParseError

# Initialize logger
logger = logging.getLogger(__name__)

# Locations of the library descriptor relative to the primary root, in lookup order
LIBRARY_DESCRIPTOR_PATHS = [
    Path("steamapps") / "libraryfolders.vdf",
    Path("config") / "libraryfolders.vdf",
]


class LibraryHandler:
    """
    Finds every Steam library root: the primary root first, then each library
    listed in libraryfolders.vdf, in file order.
    """

    def __init__(self, primary_root: Path):
        self.primary_root = Path(primary_root).expanduser()

    def find_descriptor(self) -> Optional[Path]:
        """First libraryfolders.vdf found under the primary root."""
        for relative in LIBRARY_DESCRIPTOR_PATHS:
            candidate = self.primary_root / relative
            if candidate.is_file():
                return candidate
        return None

    def get_library_paths(self) -> List[Path]:
        """
        Ordered, de-duplicated list of existing library roots.

        A missing descriptor is normal (single library). An unreadable one is
        logged and only the primary root is returned.
        """
        library_paths: List[Path] = []
        if self.primary_root.is_dir():
            library_paths.append(self.primary_root)
        else:
            logger.warning(f"Primary Steam root does not exist: {self.primary_root}")
            return library_paths

        descriptor = self.find_descriptor()
        if descriptor is None:
            logger.debug(f"No libraryfolders.vdf under {self.primary_root}")
            return library_paths

        try:
            content = read_text(descriptor)
        except ManifestParseError as e:
            logger.warning(f"Could not parse libraryfolders.vdf: {e.reason}")
            return library_paths

        # ~/.steam/steam is usually a symlink to a library that is also listed in the descriptor
        seen = {self.primary_root.resolve()}
        for value in extract_values(content, 'path'):
            path = Path(normalize_library_path(value))
            if not path.is_dir():
                logger.debug(f"Skipping missing Steam library: {path}")
                continue
            resolved = path.resolve()
            if resolved in seen:
                continue
            seen.add(resolved)
            library_paths.append(path)
            logger.debug(f"Found Steam library: {path}")

        logger.info(f"Searching in {len(library_paths)} Steam library location(s)")
        return library_paths

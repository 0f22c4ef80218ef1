#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Proton Locator Module
Finds the Proton installation (and its wine binary) to drive a game's prefix with
"""

import os
import re
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config_handler import DEFAULT_WINE_BINARY_SUBPATHS
from protonhook.backend.models.steam import RuntimeInstallation

# Initialize logger
logger = logging.getLogger(__name__)

PROTON_MARKER = "proton"
EXPERIMENTAL_MARKER = "experimental"
# Sorts "Proton - Experimental" above every numbered release
EXPERIMENTAL_SORT_KEY = 9999

_MAJOR_MINOR_RE = re.compile(r'(\d+)\.(\d+)')
_DIGITS_RE = re.compile(r'\d+')


def version_sort_key(name: str) -> int:
    """Sort key for a Proton directory name: experimental, else first number, else 0."""
    if EXPERIMENTAL_MARKER in name.lower():
        return EXPERIMENTAL_SORT_KEY
    match = _DIGITS_RE.search(name)
    return int(match.group(0)) if match else 0


def sort_runtime_names(names: List[str]) -> List[str]:
    """Newest first. Names with equal keys keep their original order."""
    return sorted(names, key=version_sort_key, reverse=True)


def _major_minor(version: str) -> Optional[Tuple[int, int]]:
    match = _MAJOR_MINOR_RE.search(version)
    if not match:
        return None
    return int(match.group(1)), int(match.group(2))


def are_versions_compatible(version_a: str, version_b: str) -> bool:
    """
    Same major.minor, or, when either side has no major.minor, both experimental.
    """
    a = _major_minor(version_a)
    b = _major_minor(version_b)
    if a is not None and b is not None:
        return a == b
    return EXPERIMENTAL_MARKER in version_a.lower() and EXPERIMENTAL_MARKER in version_b.lower()


def is_executable(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


def read_version_file(path: Path) -> Optional[str]:
    """Trimmed contents of a Proton/compatdata version file, or None."""
    if not path.is_file():
        return None
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            content = f.read().strip()
    except OSError as e:
        logger.warning(f"Error reading version file {path}: {e}")
        return None
    return content or None


class ProtonLocator:
    """
    Locates a usable wine binary inside one of the Proton installations of a
    set of Steam libraries.

    Two strategies, first success wins:
      1. the Proton named by a reference app's compatdata/<id>/version file
      2. the newest Proton directory that ships an executable wine binary
    """

    def __init__(self, library_paths: List[Path], wine_binary_subpaths: Optional[List[str]] = None,
                 reference_appid: Optional[str] = None):
        self.library_paths = [Path(p) for p in library_paths]
        self.wine_binary_subpaths = list(wine_binary_subpaths or DEFAULT_WINE_BINARY_SUBPATHS)
        self.reference_appid = str(reference_appid) if reference_appid else None

    def list_installations(self) -> List[RuntimeInstallation]:
        """Every Proton directory across all libraries, in discovery order."""
        installations = []
        for library_path in self.library_paths:
            common = library_path / "steamapps" / "common"
            if not common.is_dir():
                continue
            try:
                entries = sorted(common.iterdir())
            except OSError as e:
                logger.warning(f"Could not list {common}: {e}")
                continue
            for entry in entries:
                if PROTON_MARKER in entry.name.lower() and entry.is_dir():
                    installations.append(RuntimeInstallation(
                        name=entry.name,
                        path=entry,
                        library=library_path,
                        version=read_version_file(entry / "version"),
                    ))
        return installations

    def find_binary_in(self, proton_path: Path) -> Optional[Path]:
        """First executable wine binary under a Proton directory."""
        for subpath in self.wine_binary_subpaths:
            wine_path = proton_path / subpath
            if is_executable(wine_path):
                return wine_path
        return None

    def read_used_versions(self) -> List[str]:
        """Version strings from the reference app's compatdata, one per library that has one."""
        if not self.reference_appid:
            return []
        versions = []
        for library_path in self.library_paths:
            version_file = library_path / "steamapps" / "compatdata" / self.reference_appid / "version"
            version = read_version_file(version_file)
            if version:
                logger.info(f"Found Proton version file: {version}")
                versions.append(version)
        if not versions:
            logger.info(f"No Proton version file found for app {self.reference_appid} in any Steam library")
        return versions

    def map_version_to_directory(self, version: str, installations: Optional[List[RuntimeInstallation]] = None) -> Optional[str]:
        """
        Map a compatdata version string to a Proton directory name.

        Tried in order: exact match against each directory's own version file,
        compatible major.minor, version contained in the directory name,
        experimental to experimental, bare major.minor in the directory name.
        """
        if installations is None:
            installations = self.list_installations()

        # Unique names in discovery order, with every version file seen for that name
        versions_by_name: Dict[str, List[str]] = {}
        for installation in installations:
            seen = versions_by_name.setdefault(installation.name, [])
            if installation.version:
                seen.append(installation.version)

        if not versions_by_name:
            logger.info("No Proton directories found in any Steam library")
            return None

        logger.debug(f"Available Proton directories: {', '.join(versions_by_name)}")
        version_lower = version.lower()

        for name, proton_versions in versions_by_name.items():
            if any(v.lower() == version_lower for v in proton_versions):
                logger.info(f"Exact version match found: {version} -> {name}")
                return name

        for name, proton_versions in versions_by_name.items():
            if any(are_versions_compatible(v, version) for v in proton_versions):
                logger.info(f"Compatible version found: {version} -> {name}")
                return name

        for name in versions_by_name:
            if version_lower in name.lower():
                logger.info(f"Direct name match found: {version} -> {name}")
                return name

        if EXPERIMENTAL_MARKER in version_lower:
            for name in versions_by_name:
                if EXPERIMENTAL_MARKER in name.lower():
                    logger.info(f"Experimental match: {version} -> {name}")
                    return name

        match = _MAJOR_MINOR_RE.search(version)
        if match:
            major_minor = f"{match.group(1)}.{match.group(2)}"
            for name in versions_by_name:
                if major_minor in name:
                    logger.info(f"Version match: {version} -> {name}")
                    return name

        logger.info(f"Could not map version '{version}' to any Proton directory")
        return None

    def find_used_wine_binary(self) -> Optional[Path]:
        """Wine binary of the Proton version the reference app runs with."""
        versions = self.read_used_versions()
        if not versions:
            return None

        installations = self.list_installations()
        # A version that maps to nothing installed defers to the next library's version file
        for version in versions:
            proton_name = self.map_version_to_directory(version, installations)
            if not proton_name:
                continue

            for installation in installations:
                if installation.name != proton_name:
                    continue
                wine_path = self.find_binary_in(installation.path)
                if wine_path:
                    logger.info(f"Found wine binary in used Proton version {proton_name}: {wine_path}")
                    return wine_path
                logger.warning(f"Used Proton {installation.path} has no executable wine binary")
                # First library holding the directory decides
                return None
        return None

    def find_newest_wine_binary(self) -> Optional[Path]:
        """Wine binary of the newest Proton installation that has one."""
        installations = self.list_installations()
        if not installations:
            logger.info("No Proton installations found in any Steam library")
            return None

        for installation in sorted(installations, key=lambda i: version_sort_key(i.name), reverse=True):
            wine_path = self.find_binary_in(installation.path)
            if wine_path:
                logger.info(f"Found wine binary in {installation.name} (library: {installation.library}): {wine_path}")
                return wine_path

        logger.warning("No wine binary found in any Proton installation across all Steam libraries")
        for installation in installations:
            logger.debug(f"Checked {installation.name} at {installation.path}")
        return None

    def find_wine_binary(self) -> Optional[Path]:
        """Used-runtime strategy first, then newest available."""
        wine_path = self.find_used_wine_binary()
        if wine_path:
            return wine_path
        return self.find_newest_wine_binary()

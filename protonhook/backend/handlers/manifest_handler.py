#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Manifest Handler Module
Maps game names to Steam app ids and app ids to install directories
"""

import logging
from pathlib import Path
from typing import List, Optional

from .cache_handler import AppIdCache, normalize_name
from .vdf_handler import MANIFEST_GLOB, manifest_filename, parse_app_manifest, read_install_dir
from protonhook.backend.models.errors import ManifestParseError
from protonhook.backend.models.results import ScanReport, SkippedEntry

# Initialize logger
logger = logging.getLogger(__name__)


def names_match(manifest_name: str, query: str) -> bool:
    """Either normalized name contains the other."""
    a = normalize_name(manifest_name)
    b = normalize_name(query)
    if not a or not b:
        return False
    return b in a or a in b


class ManifestHandler:
    """
    Index over the appmanifest files of a set of Steam libraries.

    Lookups by name go through the injected cache first; a miss triggers a
    scan that records every manifest it reads, so later lookups of other
    names can hit the cache too.
    """

    def __init__(self, library_paths: List[Path], cache: AppIdCache):
        self.library_paths = [Path(p) for p in library_paths]
        self.cache = cache

    def resolve_id(self, name: str) -> Optional[int]:
        """App id for a game name, or None."""
        return self.scan(name).app_id

    def scan(self, name: str) -> ScanReport:
        """Resolve a name, reporting what was scanned and skipped along the way."""
        report = ScanReport(query=name)
        query = normalize_name(name or "")
        if not query:
            logger.error("Game name is required")
            return report

        if not self.cache.loaded:
            self.cache.load()

        cached_id = self.cache.get(query)
        if cached_id is not None:
            logger.info(f"Found '{name}' in cache with App ID: {cached_id}")
            report.app_id = cached_id
            report.from_cache = True
            return report

        try:
            for library_path in self.library_paths:
                steamapps = library_path / "steamapps"
                if not steamapps.is_dir():
                    logger.debug(f"No steamapps directory in {library_path}")
                    continue

                for manifest_file in sorted(steamapps.glob(MANIFEST_GLOB)):
                    report.scanned += 1
                    try:
                        manifest = parse_app_manifest(manifest_file)
                    except ManifestParseError as e:
                        logger.warning(f"Failed to parse {manifest_file.name}: {e.reason}")
                        report.skipped.append(SkippedEntry(path=manifest_file, reason=e.reason))
                        continue

                    self.cache.set(manifest.normalized_name, manifest.app_id)

                    if names_match(manifest.name, query):
                        logger.info(f"Found match: '{manifest.name}' (App ID: {manifest.app_id})")
                        # Partial queries are cached too so repeating them skips the scan
                        self.cache.set(query, manifest.app_id)
                        report.app_id = manifest.app_id
                        report.manifest = manifest
                        return report
        finally:
            # Saved whether or not the name was found
            self.cache.save()

        logger.info(f"Game '{name}' not found in any Steam library")
        return report

    def resolve_install_dir(self, app_id: int) -> Optional[Path]:
        """
        Install directory for an app id: <library>/steamapps/common/<installdir>
        from the first library whose manifest names an existing directory.
        """
        if not isinstance(app_id, int) or isinstance(app_id, bool) or app_id <= 0:
            logger.error(f"Invalid App ID: {app_id!r}")
            return None

        for library_path in self.library_paths:
            steamapps = library_path / "steamapps"
            manifest_file = steamapps / manifest_filename(app_id)
            if not manifest_file.is_file():
                continue

            try:
                install_dir = read_install_dir(manifest_file)
            except ManifestParseError as e:
                logger.warning(f"Error reading manifest for App ID {app_id}: {e.reason}")
                continue

            if not install_dir:
                logger.debug(f"No installdir entry in {manifest_file}")
                continue

            full_path = steamapps / "common" / install_dir
            if full_path.is_dir():
                logger.info(f"Found game installation at: {full_path}")
                return full_path
            logger.debug(f"Install directory from {manifest_file} does not exist: {full_path}")

        logger.info(f"Could not find installation directory for App ID {app_id}")
        return None

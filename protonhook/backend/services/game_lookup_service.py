#!/usr/bin/env python3
"""
Game Lookup Service

Resolves a game name to its Steam app id and install directory.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..handlers.cache_handler import AppIdCache
from ..handlers.config_handler import ConfigHandler
from ..handlers.library_handler import LibraryHandler
from ..handlers.manifest_handler import ManifestHandler
from ..models.errors import InvalidAppIdError
from ..models.results import FailureKind, LookupOutcome
from ..models.steam import parse_app_id

logger = logging.getLogger(__name__)


class GameLookupService:
    """
    Finds installed Steam games by name.
    """

    def __init__(self, config: Optional[ConfigHandler] = None, steam_path: Optional[Path] = None,
                 cache: Optional[AppIdCache] = None):
        self.config = config or ConfigHandler()
        self.steam_path = Path(steam_path) if steam_path else self.config.get_steam_path()
        self.cache = cache or AppIdCache(self.config.get_cache_file())

    def get_library_paths(self) -> List[Path]:
        if not self.steam_path:
            logger.error("Steam installation not found")
            return []
        return LibraryHandler(self.steam_path).get_library_paths()

    def _manifest_handler(self, library_paths: Optional[List[Path]] = None) -> ManifestHandler:
        if library_paths is None:
            library_paths = self.get_library_paths()
        return ManifestHandler(library_paths, self.cache)

    def resolve_install_dir(self, app_id: Union[int, str]) -> Optional[Path]:
        try:
            value = parse_app_id(app_id)
        except InvalidAppIdError as e:
            logger.error(str(e))
            return None
        return self._manifest_handler().resolve_install_dir(value)

    def lookup(self, game_name: str) -> LookupOutcome:
        """Name -> app id -> install directory, with everything learned on the way."""
        outcome = LookupOutcome(game_name=game_name)
        outcome.libraries = self.get_library_paths()
        if not outcome.libraries:
            outcome.failure = FailureKind.NOT_FOUND
            outcome.message = "No Steam library found"
            return outcome

        handler = self._manifest_handler(outcome.libraries)
        report = handler.scan(game_name)
        outcome.skipped = report.skipped
        if not report.found:
            outcome.failure = FailureKind.NOT_FOUND
            outcome.message = f"Could not find App ID for '{game_name}'"
            return outcome

        outcome.app_id = report.app_id
        outcome.install_dir = handler.resolve_install_dir(report.app_id)
        if outcome.install_dir is None:
            outcome.failure = FailureKind.NOT_FOUND
            outcome.message = f"Could not find installation directory for App ID {report.app_id}"
        return outcome


def resolve_game_install_directory(game_name: str, config: Optional[ConfigHandler] = None) -> Optional[Path]:
    """Install directory of a Steam game found by (partial) name, or None."""
    return GameLookupService(config).lookup(game_name).install_dir

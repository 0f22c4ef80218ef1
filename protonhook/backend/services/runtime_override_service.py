#!/usr/bin/env python3
"""
Runtime Override Service

Applies a DLL override inside the Proton prefix of a Steam app so that a mod
loader shipped as that DLL (winhttp.dll for BepInEx) is loaded instead of
Wine's builtin.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..handlers.config_handler import ConfigHandler
from ..handlers.library_handler import LibraryHandler
from ..handlers.proton_locator import ProtonLocator
from ..handlers.registry_handler import RegistryHandler, SUPPORTED_OVERRIDES
from ..models.errors import InvalidAppIdError
from ..models.results import FailureKind, OverrideOutcome
from ..models.steam import parse_app_id

logger = logging.getLogger(__name__)


class RuntimeOverrideService:
    """
    Resolves an app's Wine prefix and a Proton wine binary, then imports the
    override into that prefix.
    """

    def __init__(self, config: Optional[ConfigHandler] = None, steam_path: Optional[Path] = None):
        self.config = config or ConfigHandler()
        self.steam_path = Path(steam_path) if steam_path else self.config.get_steam_path()

    def get_library_paths(self) -> List[Path]:
        if not self.steam_path:
            logger.error("Steam installation not found")
            return []
        return LibraryHandler(self.steam_path).get_library_paths()

    @staticmethod
    def find_compatdata(app_id: str, library_paths: List[Path]) -> Tuple[Optional[Path], List[Path]]:
        """First steamapps/compatdata/<app_id> directory, plus every location checked."""
        searched = []
        for library_path in library_paths:
            compatdata = library_path / "steamapps" / "compatdata" / app_id
            searched.append(compatdata)
            if compatdata.is_dir():
                logger.info(f"Found compatdata for app {app_id} at: {compatdata}")
                return compatdata, searched
        return None, searched

    def find_prefix(self, app_id: Union[int, str]) -> Optional[Path]:
        """The app's Wine prefix (compatdata/<id>/pfx), or None."""
        compatdata, _ = self.find_compatdata(str(app_id), self.get_library_paths())
        if compatdata is None or not (compatdata / "pfx").is_dir():
            return None
        return compatdata / "pfx"

    def get_locator(self, library_paths: List[Path], reference_appid: Optional[str] = None) -> ProtonLocator:
        return ProtonLocator(
            library_paths,
            wine_binary_subpaths=self.config.get_wine_binary_subpaths(),
            reference_appid=reference_appid,
        )

    def apply(self, app_id: Union[int, str], override_name: str = "winhttp",
              reference_appid: Optional[Union[int, str]] = None, timeout: Optional[float] = None) -> OverrideOutcome:
        """
        Set override_name in app_id's prefix.

        The Proton in use is read from reference_appid's compatdata; when not
        given, the configured reference app, or else app_id itself, is used.
        """
        outcome = OverrideOutcome(app_id=str(app_id), override_name=override_name)

        try:
            app_id_str = str(parse_app_id(app_id))
        except InvalidAppIdError as e:
            outcome.failure = FailureKind.NOT_FOUND
            outcome.message = str(e)
            return outcome
        outcome.app_id = app_id_str

        if override_name not in SUPPORTED_OVERRIDES:
            outcome.failure = FailureKind.UNSUPPORTED
            outcome.message = f"Unsupported override '{override_name}' (supported: {', '.join(SUPPORTED_OVERRIDES)})"
            return outcome

        library_paths = self.get_library_paths()
        compatdata, outcome.searched = self.find_compatdata(app_id_str, library_paths)
        if compatdata is None:
            outcome.failure = FailureKind.NOT_FOUND
            outcome.message = f"Could not find compatdata for app {app_id_str}"
            return outcome

        prefix_path = compatdata / "pfx"
        if not prefix_path.is_dir():
            outcome.failure = FailureKind.NOT_FOUND
            outcome.message = f"Wine prefix not found at {prefix_path}"
            return outcome
        outcome.prefix_path = prefix_path

        reference = str(reference_appid) if reference_appid else (self.config.get_reference_appid() or app_id_str)
        wine_binary = self.get_locator(library_paths, reference).find_wine_binary()
        if wine_binary is None:
            outcome.failure = FailureKind.NOT_FOUND
            outcome.message = "Could not find wine binary in any Proton installation"
            return outcome
        outcome.wine_binary = wine_binary

        logger.info(f"Setting {override_name} override for app {app_id_str}...")
        handler = RegistryHandler(
            wine_binary,
            prefix_path,
            timeout=timeout if timeout else self.config.get_override_timeout(),
        )
        outcome.result = handler.set_dll_override(override_name)

        if outcome.result.timed_out:
            outcome.failure = FailureKind.TIMEOUT
            outcome.message = "Wine regedit timed out"
        elif not outcome.result.succeeded:
            outcome.failure = FailureKind.PROCESS_FAILURE
            if outcome.result.error:
                outcome.message = outcome.result.error
            else:
                outcome.message = f"Wine regedit failed (exit code: {outcome.result.exit_code})"
        else:
            outcome.message = f"{override_name} override set to {SUPPORTED_OVERRIDES[override_name]}"
        return outcome


def apply_runtime_override(app_id: Union[int, str], override_name: str = "winhttp",
                           config: Optional[ConfigHandler] = None) -> int:
    """Apply a DLL override to an app's Proton prefix. Returns 0 on success, 1 on any failure."""
    outcome = RuntimeOverrideService(config).apply(app_id, override_name)
    if outcome.failure is not None:
        logger.error(outcome.message)
    return outcome.exit_code

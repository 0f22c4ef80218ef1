#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
protonhook CLI Frontend - Main Entry Point

Command-line interface over the backend services. The backend returns
structured outcomes; everything printed to the terminal is rendered here.
"""

import sys
import argparse
import logging

from protonhook import __version__ as protonhook_version
from protonhook.backend.handlers.cache_handler import AppIdCache
from protonhook.backend.handlers.config_handler import ConfigHandler
from protonhook.backend.handlers.logging_handler import LoggingHandler
from protonhook.backend.services.game_lookup_service import GameLookupService
from protonhook.backend.services.runtime_override_service import RuntimeOverrideService
from protonhook.shared.colors import COLOR_INFO, COLOR_ERROR, COLOR_SUCCESS, COLOR_WARNING, COLOR_RESET

logger = logging.getLogger(__name__)

CLI_LOG_FILE = "protonhook-cli.log"


class ProtonHookCLI:
    """Main application class for the protonhook CLI frontend"""

    def __init__(self, config=None):
        self.config = config
        self.parser = self._build_parser()
        self.args = None

    def _build_parser(self):
        parser = argparse.ArgumentParser(
            prog="protonhook",
            description="Find Steam games and set Proton DLL overrides for mod loaders.",
        )
        parser.add_argument('--version', action='version', version=f"protonhook {protonhook_version}")
        parser.add_argument('--steam-path', help="Primary Steam root (default: auto-detect)")
        parser.add_argument('--debug', '-d', action='store_true', help="Enable debug logging")
        parser.add_argument('--verbose', '-v', action='store_true', help="Enable verbose logging")

        subparsers = parser.add_subparsers(dest='command')

        find_parser = subparsers.add_parser('find', help="Find a game's install directory by name")
        find_parser.add_argument('name', help="Game name (case-insensitive, partial names allowed)")

        install_parser = subparsers.add_parser('install-dir', help="Find a game's install directory by App ID")
        install_parser.add_argument('appid', help="Steam App ID")

        subparsers.add_parser('libraries', help="List Steam library folders")

        proton_parser = subparsers.add_parser('proton', help="Show the wine binary that would be used")
        proton_parser.add_argument('--reference-appid', help="App whose compatdata names the Proton version")

        override_parser = subparsers.add_parser('override', help="Set a DLL override in a game's Proton prefix")
        override_parser.add_argument('appid', help="Steam App ID")
        override_parser.add_argument('--dll', default='winhttp', help="DLL to override (default: winhttp)")
        override_parser.add_argument('--reference-appid', help="App whose compatdata names the Proton version")
        override_parser.add_argument('--timeout-ms', type=int, help="Registry import timeout in milliseconds")

        cache_parser = subparsers.add_parser('cache', help="Inspect or clear the App ID cache")
        cache_parser.add_argument('action', choices=['show', 'clear'])

        return parser

    def _configure_logging(self):
        """Log to file under the data dir; console shows errors unless --debug/--verbose"""
        logging_handler = LoggingHandler(self.config.get('data_dir'))
        logging_handler.rotate_log_for_logger(CLI_LOG_FILE)
        app_logger = logging_handler.setup_logger('protonhook', CLI_LOG_FILE)

        if self.args.debug:
            level = logging.DEBUG
        elif self.args.verbose:
            level = logging.INFO
        else:
            level = None
        if level is not None:
            for handler in app_logger.handlers:
                if type(handler) is logging.StreamHandler:
                    handler.setLevel(level)

    def run(self, argv=None) -> int:
        self.args = self.parser.parse_args(argv)
        if not self.args.command:
            self.parser.print_help()
            return 1

        if self.config is None:
            self.config = ConfigHandler()
        if self.args.steam_path:
            self.config.set('steam_path', self.args.steam_path)
        self._configure_logging()

        handlers = {
            'find': self._cmd_find,
            'install-dir': self._cmd_install_dir,
            'libraries': self._cmd_libraries,
            'proton': self._cmd_proton,
            'override': self._cmd_override,
            'cache': self._cmd_cache,
        }
        return handlers[self.args.command]()

    def _cmd_find(self) -> int:
        print(f"{COLOR_INFO}Searching for game: {self.args.name}{COLOR_RESET}")
        outcome = GameLookupService(self.config).lookup(self.args.name)
        for skipped in outcome.skipped:
            print(f"{COLOR_WARNING}Skipped {skipped.path.name}: {skipped.reason}{COLOR_RESET}")
        if outcome.app_id is not None:
            print(f"Found App ID: {outcome.app_id}")
        if not outcome.succeeded:
            print(f"{COLOR_ERROR}{outcome.message}{COLOR_RESET}")
            return 1
        print(f"{COLOR_SUCCESS}Found game at: {outcome.install_dir}{COLOR_RESET}")
        return 0

    def _cmd_install_dir(self) -> int:
        install_dir = GameLookupService(self.config).resolve_install_dir(self.args.appid)
        if install_dir is None:
            print(f"{COLOR_ERROR}Could not find installation directory for App ID {self.args.appid}{COLOR_RESET}")
            return 1
        print(install_dir)
        return 0

    def _cmd_libraries(self) -> int:
        libraries = GameLookupService(self.config).get_library_paths()
        if not libraries:
            print(f"{COLOR_ERROR}No Steam library found{COLOR_RESET}")
            return 1
        for library in libraries:
            print(library)
        return 0

    def _cmd_proton(self) -> int:
        service = RuntimeOverrideService(self.config)
        libraries = service.get_library_paths()
        reference = self.args.reference_appid or self.config.get_reference_appid()
        locator = service.get_locator(libraries, reference)
        installations = locator.list_installations()
        if installations:
            print(f"{COLOR_INFO}Proton installations:{COLOR_RESET}")
            for installation in installations:
                version = f" ({installation.version})" if installation.version else ""
                print(f"  - {installation.name}{version} at {installation.path}")
        wine_binary = locator.find_wine_binary()
        if wine_binary is None:
            print(f"{COLOR_ERROR}Could not find wine binary in any Proton installation{COLOR_RESET}")
            return 1
        print(f"{COLOR_SUCCESS}Wine binary: {wine_binary}{COLOR_RESET}")
        return 0

    def _cmd_override(self) -> int:
        timeout = self.args.timeout_ms / 1000.0 if self.args.timeout_ms and self.args.timeout_ms > 0 else None
        print(f"{COLOR_INFO}Configuring Proton for Steam App ID {self.args.appid}...{COLOR_RESET}")
        outcome = RuntimeOverrideService(self.config).apply(
            self.args.appid,
            self.args.dll,
            reference_appid=self.args.reference_appid,
            timeout=timeout,
        )
        if outcome.exit_code == 0:
            print(f"{COLOR_SUCCESS}{outcome.message}{COLOR_RESET}")
            return 0

        print(f"{COLOR_ERROR}{outcome.message}{COLOR_RESET}")
        if outcome.searched and outcome.prefix_path is None:
            print("Searched in Steam libraries:")
            for path in outcome.searched:
                print(f"  - {path}")
        if outcome.result is not None:
            if outcome.result.stderr:
                print(f"stderr: {outcome.result.stderr.strip()}")
            if outcome.result.stdout:
                print(f"stdout: {outcome.result.stdout.strip()}")
        print("Proton configuration failed. You may need to configure it manually.")
        return outcome.exit_code

    def _cmd_cache(self) -> int:
        cache = AppIdCache(self.config.get_cache_file())
        if self.args.action == 'clear':
            cache.clear()
            if not cache.save():
                print(f"{COLOR_ERROR}Failed to write {cache.cache_file}{COLOR_RESET}")
                return 1
            print(f"Cleared {cache.cache_file}")
            return 0

        entries = cache.load()
        if not entries:
            print("Cache is empty")
            return 0
        for name, app_id in sorted(entries.items()):
            print(f"{app_id:>10}  {name}")
        return 0


def main(argv=None) -> int:
    return ProtonHookCLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Registry Handler Module
Imports a DLL override into a Proton prefix's Wine registry via `wine regedit`
"""

import os
import logging
import subprocess
import tempfile
from pathlib import Path
from typing import Dict, Union

from .config_handler import DEFAULT_OVERRIDE_TIMEOUT_MS
from .subprocess_utils import ProcessManager, get_clean_subprocess_env
from protonhook.backend.models.results import OverrideResult

# Initialize logger
logger = logging.getLogger(__name__)

DLL_OVERRIDES_KEY = r"HKEY_CURRENT_USER\Software\Wine\DllOverrides"

# DLLs this tool knows how to override, and the load order to set
SUPPORTED_OVERRIDES: Dict[str, str] = {
    "winhttp": "native,builtin",
}


def build_override_payload(dll_name: str, load_order: str) -> str:
    """Registry file body setting one DLL override."""
    return (
        "Windows Registry Editor Version 5.00\n"
        "\n"
        f"[{DLL_OVERRIDES_KEY}]\n"
        f"\"{dll_name}\"=\"{load_order}\"\n"
    )


def build_wine_env(prefix_path: Union[str, Path]) -> Dict[str, str]:
    """Environment for running wine against one prefix without prompts or debug spew."""
    return get_clean_subprocess_env({
        'WINEPREFIX': str(prefix_path),
        'WINEDLLOVERRIDES': 'mscoree,mshtml=',  # Disable Wine Gecko/Mono install prompts
        'WINEARCH': 'win64',
        'WINEDEBUG': '-all',
    })


class RegistryHandler:
    """Applies DLL overrides to a Wine prefix using a Proton wine binary."""

    def __init__(self, wine_binary: Union[str, Path], prefix_path: Union[str, Path],
                 timeout: float = DEFAULT_OVERRIDE_TIMEOUT_MS / 1000.0):
        self.wine_binary = Path(wine_binary)
        self.prefix_path = Path(prefix_path)
        self.timeout = timeout

    def set_dll_override(self, dll_name: str = "winhttp") -> OverrideResult:
        """Set dll_name to its supported load order (winhttp -> native,builtin)."""
        load_order = SUPPORTED_OVERRIDES.get(dll_name)
        if load_order is None:
            logger.error(f"Unsupported DLL override: {dll_name}")
            return OverrideResult(error=f"unsupported override '{dll_name}'")
        return self.import_registry(build_override_payload(dll_name, load_order))

    def import_registry(self, payload: str) -> OverrideResult:
        """
        Write payload to a temporary .reg file and import it with
        `wine regedit /S`, killing wine if it has not finished within the timeout.
        The temporary file is removed in every case.
        """
        if not self.wine_binary.is_file():
            logger.error(f"Wine binary not found at: {self.wine_binary}")
            return OverrideResult(error=f"wine binary not found: {self.wine_binary}")

        fd, reg_file = tempfile.mkstemp(prefix="protonhook-", suffix=".reg")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(payload)
            return self._run_regedit(reg_file)
        finally:
            try:
                os.remove(reg_file)
            except OSError as e:
                logger.debug(f"Could not remove temporary registry file {reg_file}: {e}")

    def _run_regedit(self, reg_file: str) -> OverrideResult:
        cmd = [str(self.wine_binary), "regedit", "/S", reg_file]
        logger.info(f"Importing registry with command: {' '.join(cmd)}")

        try:
            process = ProcessManager(cmd, env=build_wine_env(self.prefix_path), cwd=str(self.wine_binary.parent))
        except OSError as e:
            logger.error(f"Failed to start wine regedit: {e}")
            return OverrideResult(error=f"spawn failed: {e}")

        timed_out = False
        try:
            process.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired:
            timed_out = True
            logger.error(f"Wine regedit timed out after {self.timeout:g}s, killing it")
            process.cancel()

        stdout, stderr = process.collect_output()
        result = OverrideResult(
            exit_code=process.returncode,
            stdout=stdout,
            stderr=stderr,
            timed_out=timed_out,
        )

        if timed_out:
            return result
        if result.exit_code == 0:
            logger.info("Registry import completed successfully")
        else:
            logger.error(f"Registry import failed (exit code: {result.exit_code})")
            if stderr:
                logger.error(f"stderr: {stderr.strip()[:500]}")
            if stdout:
                logger.error(f"stdout: {stdout.strip()[:500]}")
        return result

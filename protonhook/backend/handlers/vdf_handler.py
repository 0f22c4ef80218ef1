#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
VDF Handler Module
Reads values out of Steam's text KeyValues files (libraryfolders.vdf, appmanifest_*.acf).

These files have no schema guarantees, so every lookup has a loose
`"key" "value"` scan behind it.
"""

import re
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import vdf

from protonhook.backend.models.errors import ManifestParseError
from protonhook.backend.models.steam import Manifest

# Initialize logger
logger = logging.getLogger(__name__)

MANIFEST_GLOB = "appmanifest_*.acf"
MANIFEST_NAME_RE = re.compile(r'^appmanifest_(\d+)\.acf$', re.IGNORECASE)


def manifest_filename(app_id: int) -> str:
    """File name Steam uses for an app's manifest."""
    return f"appmanifest_{app_id}.acf"


def _key_value_pattern(key: str):
    return re.compile(r'"' + re.escape(key) + r'"\s*"([^"]+)"', re.IGNORECASE)


def extract_values(text: str, key: str) -> List[str]:
    """Every value stored under key, in file order, without duplicates."""
    values = []
    seen = set()
    for match in _key_value_pattern(key).finditer(text):
        value = match.group(1)
        if value not in seen:
            seen.add(value)
            values.append(value)
    return values


def extract_value(text: str, key: str) -> Optional[str]:
    """First value stored under key, or None."""
    match = _key_value_pattern(key).search(text)
    return match.group(1) if match else None


def normalize_library_path(value: str) -> str:
    """Collapse escaped Windows separators (a doubled backslash) to '/'."""
    return value.replace('\\\\', '/')


def read_text(path: Path) -> str:
    """Read a VDF/ACF file, raising ManifestParseError if it cannot be read."""
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return f.read()
    except OSError as e:
        raise ManifestParseError(path, f"unreadable: {e}") from e


def _find_key(data: Dict[str, Any], key: str) -> Any:
    """Case-insensitive dict lookup; Steam is not consistent about key casing."""
    key_lower = key.lower()
    for k, v in data.items():
        if k.lower() == key_lower:
            return v
    return None


def _parse_app_state(text: str) -> Dict[str, Any]:
    """Structured parse of the AppState block. Empty dict when the file is not well-formed."""
    try:
        data = vdf.loads(text)
    except (SyntaxError, ValueError, TypeError) as e:
        logger.debug(f"Structured VDF parse failed, falling back to key scan: {e}")
        return {}
    app_state = _find_key(data, 'AppState') if isinstance(data, dict) else None
    return app_state if isinstance(app_state, dict) else {}


def app_id_from_filename(path: Path) -> Optional[int]:
    match = MANIFEST_NAME_RE.match(path.name)
    if not match:
        return None
    return int(match.group(1))


def parse_app_manifest(path: Path) -> Manifest:
    """
    Parse one appmanifest file.

    The app id comes from the file name; name and installdir come from the
    AppState block, or from a loose key scan if the block cannot be parsed.

    Raises:
        ManifestParseError: unreadable file, or no usable id or name.
    """
    app_id = app_id_from_filename(path)
    if app_id is None or app_id <= 0:
        raise ManifestParseError(path, "file name does not carry an app id")

    text = read_text(path)
    app_state = _parse_app_state(text)

    name = _find_key(app_state, 'name')
    if not isinstance(name, str) or not name.strip():
        name = extract_value(text, 'name')
    install_dir = _find_key(app_state, 'installdir')
    if not isinstance(install_dir, str) or not install_dir.strip():
        install_dir = extract_value(text, 'installdir')

    if not name or not name.strip():
        raise ManifestParseError(path, "no name entry")

    return Manifest(app_id=app_id, name=name, path=path, install_dir=install_dir)


def read_install_dir(path: Path) -> Optional[str]:
    """installdir value of a manifest, or None if absent. Raises ManifestParseError if unreadable."""
    text = read_text(path)
    install_dir = _find_key(_parse_app_state(text), 'installdir')
    if isinstance(install_dir, str) and install_dir.strip():
        return install_dir
    return extract_value(text, 'installdir')

"""
App id cache.

A flat JSON object mapping normalized game names to Steam app ids, kept so a
name only has to be found by scanning manifests once. The whole file is
rewritten on every save.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from protonhook.shared.paths import get_default_cache_file

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    return name.lower().strip()


class AppIdCache:
    """In-memory name -> app id mapping with explicit load/save."""

    def __init__(self, cache_file: Optional[Path] = None):
        self.cache_file = Path(cache_file) if cache_file else get_default_cache_file()
        self._entries: Dict[str, int] = {}
        self.loaded = False

    def load(self) -> Dict[str, int]:
        """
        Read the cache file. A missing file gives an empty cache; a malformed
        one is logged and treated as empty. Entries that are not positive
        integers are dropped.
        """
        self._entries = {}
        self.loaded = True
        if not self.cache_file.exists():
            logger.debug(f"No cache file at {self.cache_file}")
            return dict(self._entries)

        try:
            with open(self.cache_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load cache {self.cache_file}: {e}")
            return dict(self._entries)

        if not isinstance(data, dict):
            logger.warning(f"Ignoring cache {self.cache_file}: expected a JSON object")
            return dict(self._entries)

        for name, app_id in data.items():
            if isinstance(app_id, bool) or not isinstance(app_id, int) or app_id <= 0:
                logger.debug(f"Dropping invalid cache entry {name!r}: {app_id!r}")
                continue
            self._entries[normalize_name(name)] = app_id

        logger.debug(f"Loaded {len(self._entries)} cached app ids")
        return dict(self._entries)

    def get(self, name: str) -> Optional[int]:
        return self._entries.get(normalize_name(name))

    def set(self, name: str, app_id: int) -> None:
        """Record an entry; last write wins."""
        self._entries[normalize_name(name)] = int(app_id)

    def clear(self) -> None:
        self._entries = {}

    def entries(self) -> Dict[str, int]:
        return dict(self._entries)

    def __len__(self):
        return len(self._entries)

    def save(self) -> bool:
        """Rewrite the cache file with the current entries."""
        try:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.cache_file, 'w', encoding='utf-8') as f:
                json.dump(self._entries, f, indent=2, sort_keys=True)
            logger.debug(f"Cache updated with {len(self._entries)} games")
            return True
        except OSError as e:
            logger.warning(f"Failed to save cache {self.cache_file}: {e}")
            return False

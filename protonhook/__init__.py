"""
protonhook - find Steam games and prepare their Proton prefixes for mod loaders.
"""

__version__ = "0.2.0"

from protonhook.backend.services.game_lookup_service import resolve_game_install_directory
from protonhook.backend.services.runtime_override_service import apply_runtime_override

__all__ = [
    '__version__',
    'resolve_game_install_directory',
    'apply_runtime_override',
]

"""
Steam Data Models

Records parsed from a Steam library tree.
"""

from pathlib import Path
from typing import Optional, Union
from dataclasses import dataclass

from .errors import InvalidAppIdError


def parse_app_id(app_id: Union[int, str]) -> int:
    """
    Validate a Steam app id given as an int or a string of digits.

    Raises:
        InvalidAppIdError: not a positive integer.
    """
    if isinstance(app_id, bool):
        raise InvalidAppIdError(f"Invalid App ID: {app_id!r}")
    if isinstance(app_id, int):
        value = app_id
    else:
        text = str(app_id).strip()
        if not text.isdigit():
            raise InvalidAppIdError(f"Invalid App ID: {app_id!r}")
        value = int(text)
    if value <= 0:
        raise InvalidAppIdError(f"Invalid App ID: {app_id!r}")
    return value


@dataclass
class Manifest:
    """One appmanifest_<id>.acf entry."""
    app_id: int
    name: str
    path: Path
    install_dir: Optional[str] = None

    @property
    def normalized_name(self) -> str:
        return self.name.lower().strip()


@dataclass
class RuntimeInstallation:
    """A Proton directory under a library's steamapps/common."""
    name: str
    path: Path
    library: Path
    version: Optional[str] = None

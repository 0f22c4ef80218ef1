"""
Result Data Models

Structured outcomes handed from the backend to whichever frontend renders them.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, List
from dataclasses import dataclass, field

from .steam import Manifest


class FailureKind(Enum):
    """Why an operation did not produce a result."""
    NOT_FOUND = "not_found"
    PARSE_FAILURE = "parse_failure"
    PROCESS_FAILURE = "process_failure"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"


@dataclass
class SkippedEntry:
    """A file the index could not use, and why."""
    path: Path
    reason: str
    kind: FailureKind = FailureKind.PARSE_FAILURE


@dataclass
class OverrideResult:
    """Outcome of one wine regedit invocation."""
    exit_code: Optional[int] = None
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return not self.timed_out and self.error is None and self.exit_code == 0


@dataclass
class ScanReport:
    """What a manifest scan for one name found."""
    query: str
    app_id: Optional[int] = None
    manifest: Optional[Manifest] = None
    from_cache: bool = False
    scanned: int = 0
    skipped: List[SkippedEntry] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.app_id is not None


@dataclass
class LookupOutcome:
    """Result of resolving a game name to its install directory."""
    game_name: str
    libraries: List[Path] = field(default_factory=list)
    app_id: Optional[int] = None
    install_dir: Optional[Path] = None
    skipped: List[SkippedEntry] = field(default_factory=list)
    failure: Optional[FailureKind] = None
    message: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.failure is None and self.install_dir is not None


@dataclass
class OverrideOutcome:
    """Result of applying a DLL override to one app's Proton prefix."""
    app_id: str
    override_name: str
    prefix_path: Optional[Path] = None
    wine_binary: Optional[Path] = None
    result: Optional[OverrideResult] = None
    failure: Optional[FailureKind] = None
    message: Optional[str] = None
    searched: List[Path] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return 0 if self.failure is None and self.result is not None and self.result.succeeded else 1

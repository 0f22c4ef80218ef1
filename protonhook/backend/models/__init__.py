"""
Data models shared between the protonhook backend and its frontends.
"""

from .errors import ProtonHookError, ManifestParseError, InvalidAppIdError
from .results import FailureKind, SkippedEntry, OverrideResult, ScanReport, LookupOutcome, OverrideOutcome
from .steam import Manifest, RuntimeInstallation

__all__ = [
    'ProtonHookError',
    'ManifestParseError',
    'InvalidAppIdError',
    'FailureKind',
    'SkippedEntry',
    'OverrideResult',
    'ScanReport',
    'LookupOutcome',
    'OverrideOutcome',
    'Manifest',
    'RuntimeInstallation',
]

"""
Exception types raised inside the protonhook backend.

These never cross a file boundary during a scan: handlers catch them per item
and record a SkippedEntry instead.
"""


class ProtonHookError(Exception):
    """Base class for protonhook errors."""


class ManifestParseError(ProtonHookError):
    """A manifest or descriptor file could not be read or understood."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class InvalidAppIdError(ProtonHookError, ValueError):
    """An app id was not a positive integer."""

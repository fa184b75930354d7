"""
Error types for the Eunoia application.

None of these reach the user: each is caught where it happens, logged,
and the affected feature degrades (silent audio, no haptics, in-memory
data for the run).
"""


class EunoiaError(Exception):
    """Base class for application errors."""


class AssetMissing(EunoiaError):
    """A theme's sound file could not be found or opened."""

    def __init__(self, asset_id: str, reason: str = "not found"):
        super().__init__(f"Sound asset '{asset_id}' {reason}")
        self.asset_id = asset_id


class HardwareUnsupported(EunoiaError):
    """The haptics engine is not available on this machine."""


class PersistenceUnavailable(EunoiaError):
    """The backing store could not be read or written."""

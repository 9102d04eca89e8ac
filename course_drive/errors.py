"""Error taxonomy for the drive mirror."""


class DriveSyncError(Exception):
    """Base class for failures surfaced by the drive mirror."""


class ConfigError(DriveSyncError):
    """A required identifier or credential is missing at call time."""


class UpstreamError(DriveSyncError):
    """The remote listing call failed (network, auth, rate limit, not found)."""

    def __init__(self, message, *, folder_id='', status=None):
        super().__init__(message)
        self.folder_id = folder_id
        self.status = status

"""Exception hierarchy for hostsnap.

Probe failures never escape ``SnapshotBuilder.build``; these exceptions are
raised between components and caught at the component boundary.
"""


class HostSnapError(Exception):
    """Base exception for hostsnap errors."""


class NetworkProbeError(HostSnapError):
    """A network identity attempt failed."""


class HttpProtocolError(NetworkProbeError):
    """The diagnostic endpoint sent a malformed or unexpected response.

    Parameters
    ----------
    message : str
        Human-readable description of the violation
    status_code : int | None
        HTTP status code when the status line was parsed successfully
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

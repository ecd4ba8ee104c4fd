"""
ITSM Client Errors

Two families:
- ValidationError: bad local input, raised before anything goes on the wire
- RemoteFault: the remote side said no (or could not be understood)

Remote status strings are carried verbatim. No classification of remote
error codes happens here.
"""

from typing import Optional


class ItsmClientError(Exception):
    """Base class for all client errors."""
    pass


class ValidationError(ItsmClientError, ValueError):
    """Raised when a query, command or call argument is malformed."""
    pass


class RemoteFault(ItsmClientError):
    """
    Raised when the remote service reports a non-success status.

    `status` and `message` are exactly what the remote returned
    (`status` / `exceptionReason`).
    """

    def __init__(self, status: str, message: Optional[str] = None):
        self.status = status
        self.message = message
        text = f"Remote call failed with status {status!r}"
        if message:
            text = f"{text}: {message}"
        super().__init__(text)


class RemoteTransportError(RemoteFault):
    """Connection failure or non-2xx HTTP reply."""
    pass


class RemoteTimeout(RemoteFault):
    """The transport gave up waiting for the remote service."""

    def __init__(self, message: Optional[str] = None):
        super().__init__("Timeout", message)


class MalformedResponse(RemoteFault):
    """Response payload does not have the expected shape."""

    def __init__(self, message: str, status: str = "Malformed"):
        super().__init__(status, message)

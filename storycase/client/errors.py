"""Client-side failure types."""


class ClientError(Exception):
    """Base class for client-side errors."""


class ValidationError(ClientError):
    """A required field is empty. Raised before any network call."""


class NetworkError(ClientError):
    """The /generate call failed or answered with a non-2xx status."""


class TrackerError(ClientError):
    """An issue tracker listing call failed."""

"""
Exceptions raised by the endpoint monitoring core.

None of these is fatal: validation errors are reported back to the user,
persistence errors degrade to defaults (load) or a logged error (save).
"""


class EndpointMonitorError(Exception):
    """Base class for all errors raised by the monitor."""


class ValidationError(EndpointMonitorError):
    """
    Raised when user input for a new endpoint is rejected.

    Attributes:
        field: The name of the offending input field.
    """

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field: str = field


class PersistenceError(EndpointMonitorError):
    """Raised when the configuration file cannot be read or written."""


class ConfigParseError(PersistenceError):
    """Raised when the configuration file is not valid JSON or has the wrong shape."""

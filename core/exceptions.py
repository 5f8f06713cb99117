"""
Core domain exceptions.

These exceptions are transport-agnostic and should be caught by the server
layer to convert into appropriate HTTP responses.
"""


class CoreError(Exception):
    """Base exception for all core errors."""

    pass


class NotFoundError(CoreError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class InvalidOperationError(CoreError):
    """Raised when an operation cannot be performed in the current state."""

    pass


class MalformedEventError(CoreError):
    """Raised when a stream frame has an unexpected shape."""

    def __init__(self, frame_type: str, reason: str):
        self.frame_type = frame_type
        self.reason = reason
        super().__init__(f"Malformed {frame_type} frame: {reason}")


class TransportError(CoreError):
    """Raised when a call to an external service fails or returns non-2xx."""

    def __init__(self, message: str, status_code: int | None = None, body: object = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class UsageLimitError(TransportError):
    """Raised when the completion service reports the account is over its limit."""

    code = "USAGE_LIMIT_EXCEEDED"

"""
Custom exceptions for the Anon Relay runtime.

These exceptions are intentionally simple and descriptive.
They are used across:

  - runtime/store/
  - runtime/relay/
  - runtime/api/

Placing them at the project root (exceptions/) avoids circular imports
and keeps exception types consistent across modules. Each one carries the
HTTP status code the API layer reports it with.
"""


class RelayException(Exception):
    """Base class for request-level failures reported to HTTP callers."""

    status_code = 400

    def __init__(self, reason):
        self.reason = reason
        super().__init__(reason)


class MalformedRequestException(RelayException):
    """
    Raised when a required request field is missing or empty, or when
    a field cannot be used as given (e.g. a session id containing the
    token delimiter).

    Example:
        MalformedRequestException("sessionId")  ->  "Missing sessionId"
    """

    status_code = 400

    def __init__(self, field, details=None):
        self.field = field
        super().__init__(details or f"Missing {field}")


class MessageValidationException(RelayException):
    """
    Raised when the submitted message text is empty after trimming or
    longer than the maximum allowed length.
    """

    status_code = 400


class SessionInvalidException(RelayException):
    """
    Raised when a token fails the signature, ended-set or expiry check,
    or the session it names is no longer active.

    The reason is deliberately generic so callers cannot tell which
    check failed.
    """

    status_code = 403

    def __init__(self, reason="Session has ended or expired"):
        super().__init__(reason)

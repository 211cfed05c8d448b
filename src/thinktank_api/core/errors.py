"""Error taxonomy shared by services, collaborator clients and the HTTP layer.

- ``AuthError``: sign-in rejected or session expired.
- ``AuthorizationError``: the role gate denied access.
- ``ValidationError``: bad input caught before any network call.
- ``RemoteError``: the data store, auth provider or object storage failed.
  The collaborator's message is kept verbatim.
- ``NotFoundError``: a targeted row does not exist (a ``RemoteError``).
"""


class ThinkTankError(Exception):
    """Base class for application errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthError(ThinkTankError):
    """Raised when sign-in fails or a session is no longer valid."""


class AuthorizationError(ThinkTankError):
    """Raised when an identity is not allowed on a surface."""


class ValidationError(ThinkTankError):
    """Raised for missing fields, oversized files and disallowed MIME types.

    Args:
        message: Human-readable description.
        field: Optional name of the offending field.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class RemoteError(ThinkTankError):
    """Raised when an external collaborator call fails.

    Args:
        message: The collaborator's error message, passed through unchanged.
        status_code: Optional HTTP status code returned by the collaborator.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(RemoteError):
    """Raised when an update or delete matches no row."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=404)

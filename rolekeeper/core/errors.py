"""Domain errors raised by the store, security and directory layers.

Each error carries the HTTP status it maps to; the API layer turns any of them
into the ``{"success": false, "error": ...}`` envelope.
"""


class ServiceError(Exception):
    """Base class for errors that map to a client-visible response."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(ServiceError):
    """Request payload is malformed, incomplete or carries extra fields."""

    status_code = 400


class MissingCredential(ServiceError):
    """No Authorization header, or one without the 'Bearer ' scheme."""

    status_code = 403


class Unauthorized(ServiceError):
    """Credential could not be verified, or sign-in failed."""

    status_code = 401


class InvalidCredential(Unauthorized):
    """Token is malformed or its signature does not verify."""


class CredentialExpired(Unauthorized):
    """Token signature is valid but its expiry has passed."""


class Forbidden(ServiceError):
    """Actor is authenticated but not permitted to perform the action."""

    status_code = 403


class NotFound(ServiceError):
    status_code = 404


class Conflict(ServiceError):
    """Uniqueness or referential constraint would be violated."""

    status_code = 409


class StorageUnavailable(ServiceError):
    """Backing files cannot be read or written."""

    status_code = 500


class CorruptData(ServiceError):
    """Backing file content is not a JSON array of objects."""

    status_code = 500

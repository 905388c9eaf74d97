"""Error taxonomy shared by services and controllers.

Every error carries a user-visible message and the HTTP status the
controllers answer with. None of them are retried.
"""


class LibraryError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LibraryError):
    status_code = 400


class AuthenticationError(LibraryError):
    status_code = 401


class Forbidden(LibraryError):
    status_code = 403


class NotFound(LibraryError):
    status_code = 404


class OutOfStock(LibraryError):
    status_code = 409


class DuplicateRequest(LibraryError):
    status_code = 409


class InvalidTransition(LibraryError):
    status_code = 409


class BookInUse(LibraryError):
    status_code = 409


class InvariantViolation(LibraryError):
    """Copy accounting would leave [0, total_copies]. Aborts the operation."""
    status_code = 500


class BackendUnavailable(LibraryError):
    status_code = 503


class AlreadyExists(LibraryError):
    status_code = 409

"""Failure kinds surfaced by the library. Each maps to one HTTP status."""


class LibraryError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(LibraryError):
    status_code = 404
    default_message = "Not found"


class Unauthenticated(LibraryError):
    status_code = 401
    default_message = "Authentication required"


class Forbidden(LibraryError):
    status_code = 403
    default_message = "Not authorized"


class InvalidInput(LibraryError):
    status_code = 400
    default_message = "Invalid input"


class Conflict(LibraryError):
    status_code = 409
    default_message = "Already exists"


class RangeNotSatisfiable(LibraryError):
    status_code = 416
    default_message = "Requested range not satisfiable"

    def __init__(self, total_length: int, message: str | None = None):
        self.total_length = total_length
        super().__init__(message)

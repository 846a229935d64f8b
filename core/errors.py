from __future__ import annotations


class ODError(Exception):
    """Base class for errors that translate directly into an HTTP response."""

    status_code = 500
    code = "error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message or self.code


class Unauthenticated(ODError):
    status_code = 401
    code = "unauthenticated"


class Forbidden(ODError):
    status_code = 403
    code = "forbidden"


class NotFound(ODError):
    status_code = 404
    code = "not_found"


class ValidationFailed(ODError):
    status_code = 400
    code = "validation_failed"


class Conflict(ODError):
    status_code = 409
    code = "conflict"


class StoreFailure(ODError):
    status_code = 500
    code = "store_failure"

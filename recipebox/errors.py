"""Exceptions raised by the service layer.

The HTTP layer maps each of these onto a status code; see ``app.py``.
"""


class RecipeBoxError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RecipeBoxError):
    """Malformed request input. Aborts the whole request."""

    status_code = 400


class AuthorizationError(RecipeBoxError):
    status_code = 401


class NotFoundError(RecipeBoxError):
    status_code = 404


class StorageError(RecipeBoxError):
    """Persistence failed in a way the caller cannot work around."""

    status_code = 500

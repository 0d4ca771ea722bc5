"""Error taxonomy shared by the directory services and the HTTP layer."""


class DirectoryError(Exception):
    """Base for errors whose message is safe to show to API clients."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DirectoryError):
    """Missing or invalid input."""

    status_code = 400


class NotFoundError(DirectoryError):
    status_code = 404


class ConflictError(DirectoryError):
    """A uniqueness constraint rejected the write."""

    status_code = 409

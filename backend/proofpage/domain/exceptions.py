class DomainError(Exception):
    """Base class for errors surfaced to the dashboard as an error toast."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DomainError):
    status_code = 400


class NotFound(DomainError):
    status_code = 404


class EdgeOfList(DomainError):
    status_code = 409


class StorageError(DomainError):
    status_code = 502


class PersistenceError(DomainError):
    status_code = 500

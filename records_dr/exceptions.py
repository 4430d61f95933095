"""Error taxonomy for backup and recovery operations."""

from http import HTTPStatus


class BackupError(Exception):
    """Base exception for backup engine errors.

    Carries an HTTP-style status code so an admin surface can map it directly.
    """

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BadRequestError(BackupError):
    status_code = HTTPStatus.BAD_REQUEST


class NotFoundError(BackupError):
    status_code = HTTPStatus.NOT_FOUND


class DatabaseError(BackupError):
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

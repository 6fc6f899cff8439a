from fastapi import status

from app.core.constants import ErrorKind


class ConfigurationError(Exception):
    pass


class UploadError(Exception):
    kind: ErrorKind
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class BadRequest(UploadError):
    kind = ErrorKind.BAD_REQUEST
    status_code = status.HTTP_400_BAD_REQUEST


class UnsupportedFormat(UploadError):
    kind = ErrorKind.UNSUPPORTED_FORMAT
    status_code = status.HTTP_400_BAD_REQUEST


class RemoteUnavailable(UploadError):
    kind = ErrorKind.REMOTE_UNAVAILABLE


class NamespaceCreateFailed(UploadError):
    kind = ErrorKind.NAMESPACE_CREATE_FAILED


class RemoteWriteFailed(UploadError):
    kind = ErrorKind.REMOTE_WRITE_FAILED

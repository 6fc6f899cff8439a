from enum import StrEnum


class ErrorKind(StrEnum):
    BAD_REQUEST = "bad_request"
    UNSUPPORTED_FORMAT = "unsupported_format"
    REMOTE_UNAVAILABLE = "remote_unavailable"
    NAMESPACE_CREATE_FAILED = "namespace_create_failed"
    REMOTE_WRITE_FAILED = "remote_write_failed"


class UploadStage(StrEnum):
    RECEIVED = "received"
    NORMALIZED = "normalized"
    PATH_RESOLVED = "path_resolved"
    NAMESPACE_READY = "namespace_ready"
    WRITTEN = "written"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


SENTINEL_FILE_NAME = "README.md"
SENTINEL_CONTENT = "# Images Directory\nThis directory contains uploaded images.\n"
FALLBACK_FILE_NAME = "image"

NO_IMAGE_MESSAGE = "No image file provided"
TOO_LARGE_MESSAGE = "Image file too large"

"""Custom exceptions for the call recording pipeline."""


class DownloadError(Exception):
    """Raised when fetching recording media from the telephony provider fails."""

    def __init__(
        self,
        recording_id: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.recording_id = recording_id
        self.status_code = status_code
        self.cause = cause
        if status_code is not None:
            message = f"Failed to download recording '{recording_id}': HTTP {status_code}"
        else:
            message = f"Failed to download recording '{recording_id}'"
        super().__init__(message)


class StorageError(Exception):
    """Base class for object storage failures."""

    def __init__(self, object_name: str, message: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(message)


class StorageUploadError(StorageError):
    """Raised when uploading a file to storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        super().__init__(
            object_name, f"Failed to upload '{object_name}' to storage", cause
        )


class StorageDownloadError(StorageError):
    """Raised when downloading a file from storage fails."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        super().__init__(
            object_name, f"Failed to download '{object_name}' from storage", cause
        )


class TranscriptionProviderError(Exception):
    """Raised when the speech-to-text provider call fails."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)


class MetadataWriteError(Exception):
    """Raised when persisting recording lifecycle state fails."""

    def __init__(self, recording_id: str, operation: str, cause: Exception | None = None):
        self.recording_id = recording_id
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation} for recording '{recording_id}'")


class RecordingNotFoundError(Exception):
    """Raised when a requested recording does not exist."""

    def __init__(self, recording_id: str):
        self.recording_id = recording_id
        super().__init__(f"Recording {recording_id} not found")


class RecordingNotInStorageError(Exception):
    """Raised when a recording has no stored audio file yet."""

    def __init__(self, recording_id: str):
        self.recording_id = recording_id
        super().__init__(f"Recording {recording_id} is not available in storage")
